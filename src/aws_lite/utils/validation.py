"""Flat parameter validation for operation descriptors."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from aws_lite.domain.operations import ParamRule, Schema
from aws_lite.errors import InvalidParameters, MissingParameter

_logger = logging.getLogger(__name__)

_KIND_CHECKS: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "number": (int, float, Decimal),
    "boolean": (bool,),
    "object": (dict, Mapping),
    "array": (list, tuple),
}


def validate(schema: Schema | None, params: Any) -> None:
    """Check ``params`` against a flat ``schema``.

    Only presence of required fields is enforced. Type mismatches are logged,
    not raised, and unknown fields are accepted: callers still pass legacy and
    loosely-typed nested structures through here.
    """
    if params is None:
        params = {}
    if not isinstance(params, Mapping):
        raise InvalidParameters(
            f"Parameters must be a mapping, got {type(params).__name__}"
        )
    if not schema:
        return

    for name, rule in schema.items():
        if name not in params or params[name] is None:
            if rule.required:
                raise MissingParameter(name)
            continue
        if not kind_matches(rule, params[name]):
            _logger.warning(
                "Parameter '%s' should be %s, got %s",
                name,
                rule.kind,
                type(params[name]).__name__,
            )


def kind_matches(rule: ParamRule, value: Any) -> bool:
    expected = _KIND_CHECKS.get(rule.kind)
    if expected is None:
        return True
    if rule.kind == "number" and isinstance(value, bool):
        return False
    return isinstance(value, expected)
