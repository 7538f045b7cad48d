"""JSON serialization utilities for request bodies."""

from __future__ import annotations

import base64
import datetime
import decimal
import json
from typing import Any


def json_default(obj: object) -> object:
    """Encode the non-JSON types AWS JSON protocols still accept.

    - ``Decimal``: int when integral, else float (string if float would lose precision)
    - ``datetime``/``date``: epoch seconds, the AWS JSON timestamp format
    - ``bytes``: base64, the AWS JSON blob format
    - ``set``/``frozenset``: list
    """
    if isinstance(obj, decimal.Decimal):
        if obj == obj.to_integral_value():
            return int(obj)
        f = float(obj)
        if decimal.Decimal(str(f)) != obj:
            return str(obj)
        return f
    if isinstance(obj, datetime.datetime):
        if obj.tzinfo is None:
            obj = obj.replace(tzinfo=datetime.timezone.utc)
        return obj.timestamp()
    if isinstance(obj, datetime.date):
        midnight = datetime.datetime(obj.year, obj.month, obj.day, tzinfo=datetime.timezone.utc)
        return midnight.timestamp()
    if isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(bytes(obj)).decode("ascii")
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=repr)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def dumps(value: Any) -> str:
    return json.dumps(value, default=json_default, separators=(",", ":"))
