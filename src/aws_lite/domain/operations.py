"""Domain objects for operations and the data flowing through a call."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any, Literal, Protocol, runtime_checkable

from aws_lite.errors import InvalidParameters

ParamKind = Literal["string", "number", "boolean", "object", "array"]
PaginationType = Literal["payload", "query"]


@dataclass(frozen=True)
class OperationRef:
    service: str
    operation: str

    @property
    def key(self) -> str:
        return f"{self.service}.{self.operation}"


@dataclass(frozen=True)
class ParamRule:
    kind: ParamKind
    required: bool = False


Schema = Mapping[str, ParamRule]


@dataclass(frozen=True)
class PaginatorSpec:
    """Pagination contract declared by an operation.

    Values are not checked here: the pagination engine validates them right
    before the first request so hooks can return loosely-built specs.
    """

    cursor: Any = None
    token: Any = None
    accumulator: Any = None
    type: Any = None
    default: str | None = None

    @classmethod
    def coerce(cls, value: PaginatorSpec | Mapping[str, Any] | None) -> PaginatorSpec | None:
        if value is None or isinstance(value, PaginatorSpec):
            return value
        if not isinstance(value, Mapping):
            raise InvalidParameters("Paginator must be a mapping")
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in value.items() if k in known})


@dataclass
class RequestIntent:
    """What an operation's ``request()`` hook asks the engine to send."""

    headers: dict[str, str] = field(default_factory=dict)
    payload: Any = None
    body: Any = None
    data: Any = None
    awsjson: bool | list[str] | None = None
    method: str | None = None
    path: str | None = None
    query: Any = None
    protocol: str | None = None
    host: str | None = None
    port: int | None = None
    path_prefix: str | None = None
    endpoint: str | None = None
    paginator: PaginatorSpec | None = None

    @property
    def content(self) -> Any:
        for candidate in (self.payload, self.body, self.data):
            if candidate is not None:
                return candidate
        return None

    @classmethod
    def coerce(cls, value: RequestIntent | Mapping[str, Any] | None) -> RequestIntent:
        if value is None:
            return cls()
        if isinstance(value, RequestIntent):
            return value
        if not isinstance(value, Mapping):
            raise InvalidParameters(
                f"request() must return a mapping, got {type(value).__name__}"
            )
        data = dict(value)
        if "pathPrefix" in data and "path_prefix" not in data:
            data["path_prefix"] = data.pop("pathPrefix")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidParameters(f"Unknown request fields: {', '.join(unknown)}")
        data["headers"] = dict(data.get("headers") or {})
        data["paginator"] = PaginatorSpec.coerce(data.get("paginator"))
        return cls(**data)


@dataclass
class ResponseResult:
    response: Any
    awsjson: list[str] | None = None

    @classmethod
    def coerce(cls, value: ResponseResult | Mapping[str, Any]) -> ResponseResult:
        if isinstance(value, ResponseResult):
            return value
        if isinstance(value, Mapping) and "response" in value:
            return cls(response=value["response"], awsjson=value.get("awsjson"))
        raise InvalidParameters("response() must return a mapping with a 'response' key")


@runtime_checkable
class OperationDescriptor(Protocol):
    """Capability every catalog entry offers.

    ``validate`` may be ``None``; ``request``/``response`` may be sync or async.
    """

    validate: Schema | None

    def request(self, params: dict[str, Any], codecs: Any) -> Any: ...

    def response(self, payload: Any, codecs: Any) -> Any: ...
