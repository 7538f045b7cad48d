"""XML body builder and response parser."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any
from xml.parsers.expat import ExpatError

import xmltodict

from aws_lite.errors import MarkupError

_XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>'


def is_xml_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type.endswith("/xml") or media_type.endswith("+xml")


def build_xml(value: Any) -> str:
    """Render a structured value as an XML document.

    The value must be a mapping with exactly one key: the root element.
    Nested mappings become child elements and lists become repeated siblings.
    """
    if not isinstance(value, Mapping) or len(value) != 1:
        raise MarkupError("XML payload must be a mapping with exactly one root element")
    prepared = _prepare(value)
    body = xmltodict.unparse(prepared, full_document=False)
    return _XML_HEADER + body


def _prepare(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): _prepare(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_prepare(v) for v in value]
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def parse_xml(text: str | bytes) -> Any:
    """Parse an XML response body, dropping the document root and namespaces."""
    try:
        parsed = xmltodict.parse(text)
    except ExpatError as exc:
        raise MarkupError(f"Invalid XML response: {exc}") from exc
    if isinstance(parsed, Mapping) and len(parsed) == 1:
        parsed = next(iter(parsed.values()))
    return _strip_namespaces(parsed)


def _strip_namespaces(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            k: _strip_namespaces(v)
            for k, v in value.items()
            if not (k == "@xmlns" or k.startswith("@xmlns:"))
        }
    if isinstance(value, list):
        return [_strip_namespaces(v) for v in value]
    return value
