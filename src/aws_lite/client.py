"""Client entrypoint: runs catalog operations through the request pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from botocore.credentials import Credentials

from aws_lite.catalog.descriptor import maybe_await
from aws_lite.catalog.loader import load_catalog
from aws_lite.catalog.registry import ServiceCatalog
from aws_lite.codecs import CODECS, Codecs
from aws_lite.codecs.awsjson import unmarshall
from aws_lite.config import Settings, load_settings
from aws_lite.domain.envelope import ApiResponse
from aws_lite.domain.operations import RequestIntent, ResponseResult
from aws_lite.execution.endpoint import EndpointConfig, parse_endpoint_url
from aws_lite.execution.pipeline import CallContext, execute
from aws_lite.execution.services import DEFAULT_REGION
from aws_lite.execution.signer import SigV4Signer, Signer
from aws_lite.execution.transport import HttpxTransport, Transport
from aws_lite.logging_utils import get_logger
from aws_lite.utils.validation import validate

_ENDPOINT_OVERRIDES = frozenset({"protocol", "host", "port", "path_prefix", "endpoint"})


class AwsLiteClient:
    """Invoke catalog operations against AWS-style endpoints.

    ``config`` keyword arguments (``protocol``, ``host``, ``port``,
    ``path_prefix``, ``endpoint``, ``debug``) override the loaded settings for
    every call made through this client; the same endpoint names can also be
    overridden per call.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        region: str | None = None,
        profile: str | None = None,
        credentials: Credentials | None = None,
        catalog: ServiceCatalog | None = None,
        signer: Signer | None = None,
        transport: Transport | None = None,
        codecs: Codecs = CODECS,
        **config: Any,
    ) -> None:
        unknown = set(config) - _ENDPOINT_OVERRIDES - {"debug"}
        if unknown:
            raise TypeError(f"Unknown client options: {', '.join(sorted(unknown))}")

        self.settings = settings or load_settings()
        self.debug = bool(config.get("debug", self.settings.debug))
        self.region = region or self.settings.aws.default_region or DEFAULT_REGION
        self.endpoint = EndpointConfig.from_settings(self.settings.endpoint).overlay(
            _endpoint_overrides(config)
        )
        self.catalog = catalog or load_catalog(self.settings.catalog.paths)
        self.signer = signer or SigV4Signer(
            credentials=credentials,
            profile=profile or self.settings.aws.default_profile,
        )
        self.transport = transport or HttpxTransport(self.settings.transport.timeout_seconds)
        self.codecs = codecs
        self._logger = get_logger(__name__, debug=self.debug)

    async def __aenter__(self) -> AwsLiteClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.transport.aclose()

    def __getattr__(self, name: str) -> _ServiceProxy:
        if name.startswith("_"):
            raise AttributeError(name)
        catalog = self.__dict__.get("catalog")
        service = catalog.find_service(name) if catalog is not None else None
        if service is None:
            raise AttributeError(f"Unknown service: {name}")
        return _ServiceProxy(self, service.service)

    def _context(
        self,
        service: str,
        signing_name: str,
        operation: str | None,
        region: str | None,
        target_prefix: str | None,
        overrides: Mapping[str, Any],
    ) -> CallContext:
        return CallContext(
            service=service,
            signing_name=signing_name,
            operation=operation,
            region=region or self.region,
            endpoint=self.endpoint.overlay(_endpoint_overrides(overrides)),
            signer=self.signer,
            transport=self.transport,
            target_prefix=target_prefix,
            debug=self.debug,
        )

    async def call(
        self,
        service: str,
        operation: str,
        params: Mapping[str, Any] | None = None,
        *,
        region: str | None = None,
        paginate: bool | None = None,
        **overrides: Any,
    ) -> ApiResponse:
        """Validate, build, send and decode one catalog operation."""
        unknown = set(overrides) - _ENDPOINT_OVERRIDES
        if unknown:
            raise TypeError(f"Unknown call options: {', '.join(sorted(unknown))}")

        entry = self.catalog.find_operation(service, operation)
        descriptor = entry.descriptor
        params = dict(params or {})

        validate(getattr(descriptor, "validate", None), params)

        request_hook = getattr(descriptor, "request", None)
        if request_hook is not None:
            intent = RequestIntent.coerce(await maybe_await(request_hook(params, self.codecs)))
        else:
            intent = RequestIntent(payload=params)

        ctx = self._context(
            entry.service.service,
            entry.service.signing_name,
            entry.ref.operation,
            region,
            entry.service.target_prefix,
            overrides,
        )
        self._logger.debug("Calling %s", entry.ref.key)
        response = await execute(intent, ctx, paginate_override=paginate)
        if not response.ok:
            self._logger.debug("%s returned HTTP %d", entry.ref.key, response.status_code)
            return response

        response_hook = getattr(descriptor, "response", None)
        if response_hook is not None:
            result = ResponseResult.coerce(
                await maybe_await(response_hook(response.payload, self.codecs))
            )
        else:
            result = ResponseResult(response=response.payload)
        return ApiResponse(
            status_code=response.status_code,
            headers=response.headers,
            payload=_decode_fields(result),
        )

    async def request(
        self,
        service: str,
        intent: RequestIntent | Mapping[str, Any],
        *,
        region: str | None = None,
        paginate: bool | None = None,
        signing_name: str | None = None,
        operation: str | None = None,
    ) -> ApiResponse:
        """Send a hand-built request with no catalog descriptor."""
        intent = RequestIntent.coerce(intent)
        known = self.catalog.find_service(service)
        ctx = self._context(
            known.service if known else service,
            signing_name or (known.signing_name if known else service.lower()),
            operation,
            region,
            known.target_prefix if known and operation else None,
            {},
        )
        return await execute(intent, ctx, paginate_override=paginate)


class _ServiceProxy:
    """``client.DynamoDB.GetItem(params)`` sugar over :meth:`AwsLiteClient.call`."""

    def __init__(self, client: AwsLiteClient, service: str) -> None:
        self._client = client
        self._service = service

    def __getattr__(self, operation: str) -> Any:
        if operation.startswith("_"):
            raise AttributeError(operation)
        entry = self._client.catalog.find_operation(self._service, operation)

        async def _invoke(params: Mapping[str, Any] | None = None, **options: Any) -> Any:
            response = await self._client.call(
                self._service, entry.ref.operation, params, **options
            )
            return response.payload if response.ok else response

        _invoke.__name__ = entry.ref.operation
        return _invoke


def _endpoint_overrides(values: Mapping[str, Any]) -> EndpointConfig:
    base = parse_endpoint_url(values["endpoint"]) if values.get("endpoint") else EndpointConfig()
    return base.overlay(
        EndpointConfig(
            protocol=values.get("protocol"),
            host=values.get("host"),
            port=values.get("port"),
            path_prefix=values.get("path_prefix"),
        )
    )


def _decode_fields(result: ResponseResult) -> Any:
    if not result.awsjson or not isinstance(result.response, Mapping):
        return result.response
    decoded = dict(result.response)
    for name in result.awsjson:
        if decoded.get(name) is not None:
            decoded[name] = unmarshall(decoded[name])
    return decoded


__all__ = ["AwsLiteClient"]
