"""HTTP transport and response decoding."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import Any, Protocol

import httpx

from aws_lite.codecs.xml import is_xml_content_type, parse_xml
from aws_lite.domain.envelope import ApiResponse, RequestEnvelope

_logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class Transport(Protocol):
    async def send(self, envelope: RequestEnvelope) -> ApiResponse: ...

    async def aclose(self) -> None: ...


def _is_json_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return (
        media_type == "application/json"
        or media_type.startswith("application/x-amz-json-")
        or media_type.endswith("+json")
    )


def decode_body(content_type: str, content: bytes) -> Any:
    """Decode a response body by content type; unknown types come back as bytes."""
    if not content:
        return None
    if _is_json_content_type(content_type):
        try:
            return json.loads(content)
        except ValueError:
            _logger.warning("Response declared %s but is not valid JSON", content_type)
            return content
    if is_xml_content_type(content_type):
        return parse_xml(content)
    return content


class HttpxTransport:
    """Sends envelopes with ``httpx.AsyncClient``.

    Non-2xx responses are returned like any other; timeouts and connection
    failures raise ``httpx`` exceptions straight to the caller.
    """

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)
        self._owns_client = client is None

    async def send(self, envelope: RequestEnvelope) -> ApiResponse:
        content = envelope.body
        if envelope.stream is not None:
            content = _as_async_stream(envelope.stream)
        response = await self._client.request(
            envelope.method,
            envelope.url,
            headers=envelope.headers,
            content=content,
        )
        headers = {k.lower(): v for k, v in response.headers.items()}
        payload = decode_body(headers.get("content-type", ""), response.content)
        return ApiResponse(status_code=response.status_code, headers=headers, payload=payload)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _as_async_stream(stream: Any) -> Any:
    if hasattr(stream, "__aiter__"):
        return stream

    async def _chunks() -> AsyncIterator[bytes]:
        while True:
            chunk = stream.read(_CHUNK_SIZE)
            if not chunk:
                break
            yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk

    return _chunks()
