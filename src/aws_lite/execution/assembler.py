"""Request assembly: headers, content-type and body encoding."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any

from aws_lite.codecs.awsjson import marshall
from aws_lite.codecs.xml import build_xml, is_xml_content_type
from aws_lite.domain.envelope import (
    Body,
    EmptyBody,
    RawBody,
    StreamBody,
    StructuredBody,
    classify_body,
)
from aws_lite.domain.operations import RequestIntent
from aws_lite.utils.serialization import dumps

JSON_CONTENT_TYPE = "application/json"
AWS_JSON_CONTENT_TYPE = "application/x-amz-json-1.0"
BINARY_CONTENT_TYPE = "application/octet-stream"
TARGET_HEADER = "X-Amz-Target"


def is_aws_json_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type in {"application/x-amz-json-1.0", "application/x-amz-json-1.1"}


@dataclass
class AssembledRequest:
    method: str
    headers: dict[str, str]
    body: bytes | str | None
    stream: Any
    kind: Body


def _pop_header(headers: dict[str, str], name: str) -> str | None:
    """Remove every casing of ``name`` and return the last value seen."""
    found = None
    for key in [k for k in headers if k.lower() == name.lower()]:
        found = headers.pop(key)
    return found


def _has_header(headers: dict[str, str], name: str) -> bool:
    return any(k.lower() == name.lower() for k in headers)


def _encode_structured(value: Any, content_type: str, awsjson: Any) -> tuple[str, str]:
    if not content_type:
        content_type = JSON_CONTENT_TYPE

    if is_xml_content_type(content_type):
        return build_xml(value), content_type

    # awsjson=False with the dialect header means the values are already encoded
    encode = bool(awsjson) or (is_aws_json_content_type(content_type) and awsjson is not False)
    if encode:
        if not is_aws_json_content_type(content_type):
            content_type = AWS_JSON_CONTENT_TYPE
        selector = awsjson if isinstance(awsjson, (list, tuple)) else True
        value = marshall(value, selector)
    return dumps(value), content_type


def assemble(
    intent: RequestIntent,
    *,
    operation: str | None = None,
    target_prefix: str | None = None,
) -> AssembledRequest:
    """Resolve final headers and body for one request.

    The returned headers are a new dict; ``intent.headers`` is left untouched.
    """
    headers = copy.deepcopy(intent.headers)
    content_type = _pop_header(headers, "content-type") or ""

    if target_prefix and operation and not _has_header(headers, TARGET_HEADER):
        headers[TARGET_HEADER] = f"{target_prefix}.{operation}"

    kind = classify_body(intent.content)
    body: bytes | str | None = None
    stream = None

    if isinstance(kind, StructuredBody):
        body, content_type = _encode_structured(kind.value, content_type, intent.awsjson)
    elif isinstance(kind, RawBody):
        body = kind.data
    elif isinstance(kind, StreamBody):
        # Streams never get a backfilled content-type
        stream = kind.stream

    if content_type:
        headers["content-type"] = content_type
    elif body:
        headers["content-type"] = BINARY_CONTENT_TYPE

    method = (intent.method or ("GET" if isinstance(kind, EmptyBody) else "POST")).upper()
    return AssembledRequest(method=method, headers=headers, body=body, stream=stream, kind=kind)
