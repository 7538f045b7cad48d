"""In-memory transport and signer for exercising clients without AWS."""

from __future__ import annotations

import copy
from collections import defaultdict, deque
from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from aws_lite.domain.envelope import ApiResponse, RequestEnvelope

FAKE_AUTHORIZATION = "AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/fake, Signature=fake"


class StaticSigner:
    """Adds a fixed ``Authorization`` header; records the envelopes it saw."""

    def __init__(self, authorization: str = FAKE_AUTHORIZATION) -> None:
        self.authorization = authorization
        self.signed: list[RequestEnvelope] = []

    def sign(self, envelope: RequestEnvelope) -> None:
        envelope.headers["Authorization"] = self.authorization
        self.signed.append(envelope)


class MockTransport:
    """Replays queued responses keyed by ``Service.Operation``.

    Each queued item is an ``ApiResponse``, an exception instance (raised on
    send), or any other value, which becomes the payload of a 200 response.
    Once a key's queue is down to its last item that item is replayed for
    every further request.
    """

    def __init__(self) -> None:
        self._queues: dict[str, deque[Any]] = defaultdict(deque)
        self.requests: list[RequestEnvelope] = []
        self.closed = False

    def mock(self, key: str, responses: Any) -> None:
        queue = self._queues[key]
        queue.clear()
        if isinstance(responses, list):
            queue.extend(responses)
        else:
            queue.append(responses)

    def reset(self) -> None:
        self._queues.clear()
        self.requests.clear()

    def requests_for(self, key: str) -> list[RequestEnvelope]:
        return [r for r in self.requests if _key(r) == key]

    async def send(self, envelope: RequestEnvelope) -> ApiResponse:
        self.requests.append(replace(envelope, headers=dict(envelope.headers)))
        key = _key(envelope)
        queue = self._queues.get(key)
        if not queue:
            raise LookupError(f"No mocked response for {key}")
        item = queue.popleft() if len(queue) > 1 else queue[0]
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, ApiResponse):
            return ApiResponse(
                status_code=item.status_code,
                headers=dict(item.headers),
                payload=copy.deepcopy(item.payload),
            )
        return ApiResponse(status_code=200, payload=copy.deepcopy(item))

    async def aclose(self) -> None:
        self.closed = True


def _key(envelope: RequestEnvelope) -> str:
    return f"{envelope.service}.{envelope.operation}"


def pages(payloads: Iterable[Any]) -> list[ApiResponse]:
    """Wrap payloads as successive 200 responses for ``MockTransport.mock``."""
    return [ApiResponse(status_code=200, payload=p) for p in payloads]
