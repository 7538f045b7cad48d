"""Single request/response cycle and pagination dispatch."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from aws_lite.domain.envelope import ApiResponse, RequestEnvelope
from aws_lite.domain.operations import RequestIntent
from aws_lite.execution.assembler import assemble
from aws_lite.execution.endpoint import EndpointConfig, resolve_endpoint
from aws_lite.execution.paginator import paginate, should_paginate
from aws_lite.execution.signer import Signer
from aws_lite.execution.transport import Transport

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallContext:
    service: str
    signing_name: str
    operation: str | None
    region: str | None
    endpoint: EndpointConfig
    signer: Signer
    transport: Transport
    target_prefix: str | None = None
    debug: bool = False


def build_envelope(intent: RequestIntent, ctx: CallContext) -> RequestEnvelope:
    """Resolve endpoint and body for one attempt. Raises before anything is sent."""
    resolved = resolve_endpoint(
        intent,
        ctx.endpoint,
        signing_name=ctx.signing_name,
        region=ctx.region,
    )
    assembled = assemble(intent, operation=ctx.operation, target_prefix=ctx.target_prefix)
    return RequestEnvelope(
        service=ctx.service,
        operation=ctx.operation,
        method=assembled.method,
        protocol=resolved.protocol,
        host=resolved.host,
        port=resolved.port,
        path=resolved.path,
        headers=assembled.headers,
        body=assembled.body,
        stream=assembled.stream,
        region=resolved.region,
        signing_name=ctx.signing_name,
    )


async def send_once(intent: RequestIntent, ctx: CallContext) -> ApiResponse:
    envelope = build_envelope(intent, ctx)
    ctx.signer.sign(envelope)
    if ctx.debug:
        _logger.debug(
            "%s %s %s (region=%s)",
            ctx.service,
            envelope.method,
            envelope.url,
            envelope.region or "<omitted>",
        )
    response = await ctx.transport.send(envelope)
    if ctx.debug:
        _logger.debug("%s responded %d", ctx.service, response.status_code)
    return response


async def execute(
    intent: RequestIntent,
    ctx: CallContext,
    *,
    paginate_override: bool | None = None,
) -> ApiResponse:
    if should_paginate(intent.paginator, paginate_override):

        async def _send(page_intent: RequestIntent) -> ApiResponse:
            return await send_once(page_intent, ctx)

        return await paginate(intent, _send, debug=ctx.debug, logger=_logger)
    return await send_once(intent, ctx)
