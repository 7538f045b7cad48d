"""Wire-level request and response objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class EmptyBody:
    pass


@dataclass(frozen=True)
class RawBody:
    data: bytes | str


@dataclass(frozen=True)
class StreamBody:
    stream: Any


@dataclass(frozen=True)
class StructuredBody:
    value: Any


Body = EmptyBody | RawBody | StreamBody | StructuredBody

_RAW_TYPES = (bytes, bytearray, memoryview, str)


def is_stream(value: object) -> bool:
    if isinstance(value, _RAW_TYPES):
        return False
    if hasattr(value, "read") and callable(value.read):
        return True
    return hasattr(value, "__aiter__")


def classify_body(value: Any) -> Body:
    """Decide the body kind once, when the request is built."""
    if value is None:
        return EmptyBody()
    if isinstance(value, (bytearray, memoryview)):
        return RawBody(bytes(value))
    if isinstance(value, (bytes, str)):
        return RawBody(value)
    if is_stream(value):
        return StreamBody(value)
    return StructuredBody(value)


@dataclass
class RequestEnvelope:
    """A fully resolved, sign-ready request. One per HTTP attempt."""

    service: str
    operation: str | None
    method: str
    protocol: str
    host: str
    port: int | None
    path: str
    headers: dict[str, str]
    body: bytes | str | None = None
    stream: Any = None
    region: str | None = None
    signing_name: str = ""

    @property
    def url(self) -> str:
        netloc = self.host if self.port is None else f"{self.host}:{self.port}"
        return f"{self.protocol}://{netloc}{self.path}"


@dataclass
class ApiResponse:
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    payload: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
