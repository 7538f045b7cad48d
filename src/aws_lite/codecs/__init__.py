"""Payload codecs exposed to operation hooks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from aws_lite.codecs.awsjson import marshall, marshall_value, unmarshall, unmarshall_value
from aws_lite.codecs.xml import build_xml, parse_xml

__all__ = [
    "CODECS",
    "Codecs",
    "build_xml",
    "marshall",
    "marshall_value",
    "parse_xml",
    "unmarshall",
    "unmarshall_value",
]


@dataclass(frozen=True)
class Codecs:
    """Standalone codecs handed to ``request()``/``response()`` hooks."""

    marshall: Callable[..., Any] = marshall
    unmarshall: Callable[[Any], Any] = unmarshall
    marshall_value: Callable[[Any], Any] = marshall_value
    unmarshall_value: Callable[[Any], Any] = unmarshall_value
    build_xml: Callable[[Any], str] = build_xml


CODECS = Codecs()
