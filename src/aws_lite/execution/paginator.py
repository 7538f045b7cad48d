"""Pagination engine.

Drives one request/response cycle per page until the service runs out of
results or stops advancing its continuation token, and returns every page's
items under the accumulator name.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from aws_lite.domain.envelope import ApiResponse
from aws_lite.domain.operations import PaginatorSpec, RequestIntent
from aws_lite.errors import PaginationConfigError, PaginationResponseError

_logger = logging.getLogger(__name__)

VALID_PAGINATION_TYPES = ("payload", "query")

SendFn = Callable[[RequestIntent], Awaitable[ApiResponse]]


@dataclass(frozen=True)
class PaginationPlan:
    cursor: str
    token: str
    accumulator: str
    type: str


def should_paginate(paginator: PaginatorSpec | None, paginate: bool | None) -> bool:
    if paginator is None:
        return False
    if paginator.default == "enabled" and paginate is not False:
        return True
    return paginate is True


def plan_pagination(paginator: PaginatorSpec | None) -> PaginationPlan:
    """Validate a paginator contract before any request is sent."""
    if paginator is None:
        raise PaginationConfigError("Paginator is not configured")
    for name in ("cursor", "token", "accumulator"):
        value = getattr(paginator, name)
        if not value or not isinstance(value, str):
            raise PaginationConfigError(f"Paginator requires a {name} property name (string)")
    if paginator.type is not None and paginator.type not in VALID_PAGINATION_TYPES:
        raise PaginationConfigError(
            f"Paginator type must be one of: {', '.join(VALID_PAGINATION_TYPES)}"
        )
    return PaginationPlan(
        cursor=paginator.cursor,
        token=paginator.token,
        accumulator=paginator.accumulator,
        type=paginator.type or "payload",
    )


def resolve_path(value: Any, path: str) -> Any:
    current = value
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def extract_items(payload: Mapping[str, Any], accumulator: str) -> list[Any]:
    """Pull a page's items out of the response.

    A missing accumulator means an empty page (services omit empty lists). A
    single non-list value is wrapped in a list: XML responses with one child
    element don't come back as lists. A genuine single-object accumulator is
    wrapped the same way.
    """
    found = resolve_path(payload, accumulator)
    if found is None:
        return []
    if not isinstance(found, list):
        return [found]
    return found


def renest(accumulator: str, items: list[Any]) -> dict[str, Any]:
    nested: Any = items
    for part in reversed(accumulator.split(".")):
        nested = {part: nested}
    return nested


def _content_field(intent: RequestIntent) -> str:
    for name in ("payload", "body", "data"):
        if getattr(intent, name) is not None:
            return name
    return "payload"


def _sent_cursor(intent: RequestIntent, plan: PaginationPlan) -> Any:
    if plan.type == "query":
        source = intent.query
    else:
        source = getattr(intent, _content_field(intent))
    if isinstance(source, Mapping):
        return source.get(plan.cursor)
    return None


def _advance(intent: RequestIntent, plan: PaginationPlan, token: Any) -> RequestIntent:
    """Build the next page's request; the previous intent is not modified."""
    if plan.type == "query":
        query = dict(intent.query) if isinstance(intent.query, Mapping) else {}
        query[plan.cursor] = token
        return replace(intent, query=query)
    name = _content_field(intent)
    current = getattr(intent, name)
    content = dict(current) if isinstance(current, Mapping) else {}
    content[plan.cursor] = token
    return replace(intent, **{name: content})


async def paginate(
    intent: RequestIntent,
    send: SendFn,
    *,
    debug: bool = False,
    logger: logging.Logger | None = None,
) -> ApiResponse:
    """Fetch every page for ``intent`` and return the accumulated items.

    A non-2xx page ends the run and is returned untouched; exceptions from
    ``send`` propagate and discard whatever was accumulated.
    """
    log = logger or _logger
    plan = plan_pagination(intent.paginator)

    original_headers = copy.deepcopy(intent.headers)
    current = replace(intent, paginator=None)
    items: list[Any] = []
    page = 1
    last: ApiResponse | None = None

    while True:
        result = await send(replace(current, headers=copy.deepcopy(original_headers)))
        if not result.ok:
            return result
        if result.payload is None or result.payload in (b"", ""):
            raise PaginationResponseError("Pagination error: missing API response")
        if not isinstance(result.payload, Mapping):
            raise PaginationResponseError(
                "Pagination error: response must be valid JSON or XML"
            )
        last = result

        accumulated = extract_items(result.payload, plan.accumulator)
        if not accumulated:
            break

        # Some services re-send their final page with the same token
        next_token = resolve_path(result.payload, plan.token)
        if next_token and next_token == _sent_cursor(current, plan):
            break

        items.extend(accumulated)
        if not next_token:
            break

        current = _advance(current, plan, next_token)
        page += 1
        if debug:
            log.debug("Paginator: getting page %d", page)

    return ApiResponse(
        status_code=last.status_code,
        headers=last.headers,
        payload=renest(plan.accumulator, items),
    )
