"""Endpoint and signing-region resolution."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote, urlencode, urlparse

from aws_lite.config import EndpointSettings
from aws_lite.domain.operations import RequestIntent
from aws_lite.errors import InvalidProtocol, InvalidQuery
from aws_lite.execution.services import signing_region

VALID_PROTOCOLS = ("http", "https")

_SLASH_RUN_RE = re.compile(r"/{2,}")


@dataclass(frozen=True)
class EndpointConfig:
    protocol: str | None = None
    host: str | None = None
    port: int | None = None
    path_prefix: str | None = None

    def overlay(self, overrides: EndpointConfig) -> EndpointConfig:
        """Return a config where every field set in ``overrides`` wins."""
        return EndpointConfig(
            protocol=overrides.protocol or self.protocol,
            host=overrides.host or self.host,
            port=overrides.port or self.port,
            path_prefix=overrides.path_prefix or self.path_prefix,
        )

    @classmethod
    def from_settings(cls, settings: EndpointSettings) -> EndpointConfig:
        fields = cls(
            protocol=settings.protocol,
            host=settings.host,
            port=settings.port,
            path_prefix=settings.path_prefix,
        )
        if settings.endpoint:
            return fields.overlay(parse_endpoint_url(settings.endpoint))
        return fields

    @classmethod
    def from_intent(cls, intent: RequestIntent) -> EndpointConfig:
        explicit = cls(
            protocol=intent.protocol,
            host=intent.host,
            port=intent.port,
            path_prefix=intent.path_prefix,
        )
        if intent.endpoint:
            return parse_endpoint_url(intent.endpoint).overlay(explicit)
        return explicit


@dataclass(frozen=True)
class ResolvedEndpoint:
    protocol: str
    host: str
    port: int | None
    path: str
    region: str | None


def parse_endpoint_url(url: str) -> EndpointConfig:
    """Split ``http://localhost:4566/prefix`` into endpoint fields."""
    parsed = urlparse(url if "://" in url else f"https://{url}")
    if not parsed.hostname:
        raise InvalidProtocol(f"Endpoint has no hostname: {url}")
    path_prefix = parsed.path.rstrip("/") or None
    return EndpointConfig(
        protocol=parsed.scheme.lower() or None,
        host=parsed.hostname,
        port=parsed.port,
        path_prefix=path_prefix,
    )


def validate_protocol(protocol: str | None) -> str:
    if not protocol or protocol.lower() not in VALID_PROTOCOLS:
        raise InvalidProtocol(
            f"Protocol must be one of: {', '.join(VALID_PROTOCOLS)} (got {protocol!r})"
        )
    return protocol.lower()


def normalize_path(path: str | None, path_prefix: str | None) -> str:
    path = path or ""
    if path and not path.startswith("/"):
        path = "/" + path
    if path_prefix:
        path = path_prefix + path
    return _SLASH_RUN_RE.sub("/", path or "/")


def tidy_query(query: Any) -> str:
    """Serialize a query mapping, dropping ``None`` values and repeating list keys."""
    if not isinstance(query, Mapping):
        raise InvalidQuery("Query property must be an object")
    pairs: list[tuple[str, str]] = []
    for key, value in query.items():
        if value is None:
            continue
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            if isinstance(item, bool):
                item = "true" if item else "false"
            pairs.append((str(key), str(item)))
    return urlencode(pairs, quote_via=quote, safe="~")


def default_host(signing_name: str, region: str | None) -> str:
    if region is None:
        return f"{signing_name}.amazonaws.com"
    return f"{signing_name}.{region}.amazonaws.com"


def resolve_endpoint(
    intent: RequestIntent,
    base: EndpointConfig,
    *,
    signing_name: str,
    region: str | None,
) -> ResolvedEndpoint:
    """Compute protocol/host/port/path for one request.

    The query string (if any) is appended to the returned path. Global services
    come back with ``region=None`` unless the semi-global rule keeps it.
    """
    resolved = base.overlay(EndpointConfig.from_intent(intent))
    protocol = validate_protocol(resolved.protocol)

    path = normalize_path(intent.path, resolved.path_prefix)
    if intent.query is not None:
        query = tidy_query(intent.query)
        if query:
            path += "?" + query

    sign_region = signing_region(signing_name, region)
    host = resolved.host or default_host(signing_name, sign_region)
    return ResolvedEndpoint(
        protocol=protocol,
        host=host,
        port=resolved.port,
        path=path,
        region=sign_region,
    )
