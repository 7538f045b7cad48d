"""Operation descriptors built from catalog entries."""

from __future__ import annotations

import inspect
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from typing import Any
from urllib.parse import quote

from aws_lite.catalog.models import OperationModel, ServiceModel
from aws_lite.domain.operations import ParamRule, RequestIntent, ResponseResult
from aws_lite.errors import InvalidParameters, MissingParameter

_PATH_PARAM_RE = re.compile(r"\{([A-Za-z0-9_]+)(\+?)\}")

Hook = Callable[..., Any]


@dataclass(frozen=True)
class Hooks:
    """Python hooks attached to a catalog operation via ``hooks: module:attribute``."""

    request: Hook | None = None
    response: Hook | None = None


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def expand_path(template: str, params: dict[str, Any]) -> str:
    """Fill ``{Name}`` / ``{Name+}`` placeholders, consuming those params."""

    def _replace(match: re.Match[str]) -> str:
        name, greedy = match.group(1), match.group(2)
        if params.get(name) is None:
            raise MissingParameter(name)
        value = str(params.pop(name))
        return quote(value, safe="/~" if greedy else "~")

    return _PATH_PARAM_RE.sub(_replace, template)


def flatten_query_params(params: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Flatten nested params the way AWS query-protocol services expect.

    ``{"Tags": [{"Key": "a"}]}`` becomes ``{"Tags.member.1.Key": "a"}``.
    """
    flat: dict[str, str] = {}
    for key, value in params.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if value is None:
            continue
        if isinstance(value, Mapping):
            flat.update(flatten_query_params(value, name))
        elif isinstance(value, (list, tuple)):
            for index, item in enumerate(value, start=1):
                member = f"{name}.member.{index}"
                if isinstance(item, Mapping):
                    flat.update(flatten_query_params(item, member))
                else:
                    flat[member] = _query_scalar(item)
        else:
            flat[name] = _query_scalar(value)
    return flat


def _query_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class DeclarativeDescriptor:
    """Descriptor for one catalog operation.

    Builds the request from the service protocol and the operation's
    declared path/query/header bindings, then lets optional Python hooks
    replace or extend it.
    """

    def __init__(
        self,
        service: ServiceModel,
        name: str,
        model: OperationModel,
        hooks: Hooks | None = None,
    ) -> None:
        self.service = service
        self.name = name
        self.model = model
        self.hooks = hooks or Hooks()
        self.validate: dict[str, ParamRule] = {
            param: rule.to_rule() for param, rule in model.params.items()
        }

    def _base_intent(self, params: dict[str, Any]) -> dict[str, Any]:
        model = self.model
        remaining = dict(params)
        intent: dict[str, Any] = {"headers": {}}

        if model.path:
            intent["path"] = expand_path(model.path, remaining)

        query: dict[str, Any] = dict(model.query)
        for param, key in model.query_params.items():
            if param in remaining:
                query[key] = remaining.pop(param)

        for param, header in model.header_params.items():
            if param in remaining and remaining[param] is not None:
                intent["headers"][header] = str(remaining.pop(param))

        protocol = self.service.protocol
        if protocol == "query":
            query = {
                "Action": self.name,
                "Version": self.service.api_version,
                **query,
                **flatten_query_params(remaining),
            }
            remaining = {}
        elif model.payload_param:
            value = remaining.pop(model.payload_param, None)
            if isinstance(value, Mapping) and protocol == "rest-xml":
                value = {model.payload_param: value}
            intent["payload"] = value
        elif protocol in ("json", "rest-json") and (protocol == "json" or remaining):
            intent["payload"] = remaining

        if query:
            intent["query"] = query
        if (
            self.service.content_type
            and isinstance(intent.get("payload"), Mapping)
            and not any(h.lower() == "content-type" for h in intent["headers"])
        ):
            intent["headers"]["content-type"] = self.service.content_type
            # The dialect header alone must not encode the whole payload
            intent["awsjson"] = False
        if model.method:
            intent["method"] = model.method
        if model.awsjson is not None:
            intent["awsjson"] = model.awsjson
        if model.paginator is not None:
            intent["paginator"] = model.paginator.to_spec()
        return intent

    async def request(self, params: dict[str, Any], codecs: Any) -> RequestIntent:
        intent = self._base_intent(params)
        if self.hooks.request is not None:
            custom = _hook_fields(await maybe_await(self.hooks.request(params, codecs)))
            if custom:
                headers = {**intent["headers"], **dict(custom.get("headers") or {})}
                intent = {**intent, **custom, "headers": headers}
        return RequestIntent.coerce(intent)

    async def response(self, payload: Any, codecs: Any) -> ResponseResult:
        if self.hooks.response is not None:
            return ResponseResult.coerce(await maybe_await(self.hooks.response(payload, codecs)))
        return ResponseResult(response=payload, awsjson=self.model.response_awsjson or None)


def _hook_fields(custom: Any) -> dict[str, Any]:
    """Fields a request hook set, ready to merge over the declared request."""
    if custom is None:
        return {}
    if isinstance(custom, RequestIntent):
        set_fields = {f.name: getattr(custom, f.name) for f in fields(custom)}
        return {
            name: value
            for name, value in set_fields.items()
            if value is not None and not (name == "headers" and not value)
        }
    if isinstance(custom, Mapping):
        return dict(custom)
    raise InvalidParameters(
        f"request() must return a mapping or RequestIntent, got {type(custom).__name__}"
    )
