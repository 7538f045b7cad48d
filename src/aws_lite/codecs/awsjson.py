"""Typed-attribute ("AWS-flavored") JSON codec.

Converts between plain Python values and the tagged envelope used by
DynamoDB-style APIs::

    {"S": "text"}  {"N": "12.5"}  {"BOOL": True}  {"NULL": True}
    {"B": "<base64>"}  {"M": {...}}  {"L": [...]}  {"SS": [...]}  ...

The tagging itself is boto3's ``TypeSerializer``/``TypeDeserializer``. Around
them this module accepts ``float`` input (sent as its shortest decimal text),
keeps binaries base64 text so encoded values stay JSON-serializable, sorts
set members, and decodes numbers to ``int`` when the text is a plain integer
and to ``float`` otherwise.

Sets are only produced from Python ``set``/``frozenset`` input: lists are
always encoded as ``L``, even when homogeneous.
"""

from __future__ import annotations

import base64
import binascii
import math
from collections.abc import Mapping
from decimal import Decimal, DecimalException, InvalidOperation
from typing import Any

from boto3.dynamodb.types import Binary, TypeDeserializer, TypeSerializer

from aws_lite.errors import MarshallError

_MAX_DEPTH = 32

_TAG_PAYLOAD_TYPES: dict[str, tuple[type, ...]] = {
    "S": (str,),
    "N": (str,),
    "B": (str, bytes),
    "BOOL": (bool,),
    "NULL": (bool,),
    "M": (dict,),
    "L": (list,),
    "SS": (list,),
    "NS": (list,),
    "BS": (list,),
}

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def marshall(value: Any, selector: bool | list[str] | tuple[str, ...] | None = True) -> Any:
    """Encode ``value`` according to ``selector``.

    - ``True``: a mapping becomes an attribute map, anything else one typed value.
    - a list of names: only those top-level keys of a mapping are encoded.
    - ``False``/``None``: the value is returned as-is.
    """
    if selector is None or selector is False:
        return value
    if selector is True:
        if isinstance(value, Mapping):
            return {str(k): _serialize(v, str(k)) for k, v in value.items()}
        return marshall_value(value)
    if isinstance(selector, (list, tuple)):
        if not isinstance(value, Mapping):
            raise MarshallError("Field-selective encoding requires a mapping payload")
        result = dict(value)
        for key in selector:
            if result.get(key) is not None:
                result[key] = marshall(result[key], True)
        return result
    raise MarshallError(f"Invalid awsjson selector: {selector!r}")


def marshall_value(value: Any) -> dict[str, Any]:
    """Encode a single value as one typed attribute."""
    return _serialize(value, "")


def unmarshall(value: Any) -> Any:
    """Decode an attribute map to a dict, or a single typed value to its plain value."""
    if isinstance(value, Mapping) and all(is_typed_value(v) for v in value.values()):
        return {k: _deserialize(v, k) for k, v in value.items()}
    if is_typed_value(value):
        return _deserialize(value, "")
    raise MarshallError("Value is neither a typed attribute nor an attribute map")


def unmarshall_value(value: Mapping[str, Any]) -> Any:
    """Decode exactly one typed attribute."""
    return _deserialize(value, "")


def is_typed_value(value: Any) -> bool:
    if not isinstance(value, Mapping) or len(value) != 1:
        return False
    tag, payload = next(iter(value.items()))
    expected = _TAG_PAYLOAD_TYPES.get(tag)
    return expected is not None and isinstance(payload, expected)


def _where(path: str) -> str:
    return f"'{path or 'root'}'"


def _child(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)


def _serialize(value: Any, path: str) -> dict[str, Any]:
    prepared = _prepare(value, path, 0)
    try:
        attr = _serializer.serialize(prepared)
    except (TypeError, DecimalException) as exc:
        raise MarshallError(f"Cannot encode value at {_where(path)}: {exc}") from exc
    return _to_wire(attr)


def _prepare(value: Any, path: str, depth: int) -> Any:
    """Reshape ``value`` into what ``TypeSerializer`` accepts, rejecting the rest."""
    if depth >= _MAX_DEPTH:
        raise MarshallError(f"Value nested too deeply at {_where(path)}")

    if value is None or isinstance(value, (bool, str, int, Decimal, bytes)):
        return value
    if isinstance(value, float):
        return _float_to_decimal(value, path)
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, (set, frozenset)):
        return _prepare_set(value, path)
    if isinstance(value, Mapping):
        return {
            str(k): _prepare(v, _child(path, k), depth + 1) for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_prepare(v, f"{path}[{i}]", depth + 1) for i, v in enumerate(value)]

    raise MarshallError(f"Unsupported type {type(value).__name__} at {_where(path)}")


def _float_to_decimal(value: float, path: str) -> Decimal:
    if not math.isfinite(value):
        raise MarshallError(f"Cannot encode non-finite number at {_where(path)}")
    return Decimal(str(value))


def _prepare_set(value: set[Any] | frozenset[Any], path: str) -> set[Any]:
    if not value:
        raise MarshallError(f"Empty sets are not supported at {_where(path)}")
    members = list(value)
    if all(isinstance(m, str) for m in members):
        return set(members)
    if all(isinstance(m, (int, float, Decimal)) and not isinstance(m, bool) for m in members):
        return {_float_to_decimal(m, path) if isinstance(m, float) else m for m in members}
    if all(isinstance(m, (bytes, bytearray)) for m in members):
        return {bytes(m) for m in members}
    raise MarshallError(f"Sets must hold only strings, numbers or bytes at {_where(path)}")


def _b64(data: bytes | Binary) -> str:
    raw = data.value if isinstance(data, Binary) else data
    return base64.b64encode(bytes(raw)).decode("ascii")


def _to_wire(attr: dict[str, Any]) -> dict[str, Any]:
    """Base64 binaries and order set members in serializer output."""
    tag, payload = next(iter(attr.items()))
    if tag == "B":
        return {"B": _b64(payload)}
    if tag == "BS":
        return {"BS": [_b64(b) for b in sorted(payload, key=bytes)]}
    if tag == "SS":
        return {"SS": sorted(payload)}
    if tag == "NS":
        return {"NS": sorted(payload, key=Decimal)}
    if tag == "M":
        return {"M": {k: _to_wire(v) for k, v in payload.items()}}
    if tag == "L":
        return {"L": [_to_wire(v) for v in payload]}
    return attr


def _deserialize(value: Any, path: str) -> Any:
    prepared = _from_wire(value, path, 0)
    try:
        decoded = _deserializer.deserialize(prepared)
    except (TypeError, DecimalException) as exc:
        raise MarshallError(f"Cannot decode value at {_where(path)}: {exc}") from exc
    return _to_python(decoded)


def _check_number(text: str, path: str) -> str:
    try:
        number = Decimal(text)
    except InvalidOperation:
        raise MarshallError(f"Invalid number {text!r} at {_where(path)}") from None
    if not number.is_finite():
        raise MarshallError(f"Invalid number {text!r} at {_where(path)}")
    return text


def _decode_binary(data: str | bytes, path: str) -> bytes:
    if isinstance(data, bytes):
        return data
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MarshallError(f"Invalid base64 binary at {_where(path)}: {exc}") from exc


def _from_wire(value: Any, path: str, depth: int) -> dict[str, Any]:
    """Validate typed input and turn base64 text back into bytes for the deserializer."""
    if depth >= _MAX_DEPTH:
        raise MarshallError(f"Value nested too deeply at {_where(path)}")
    if not is_typed_value(value):
        raise MarshallError(f"Not a typed attribute at {_where(path)}: {value!r}")

    tag, payload = next(iter(value.items()))
    if tag == "N":
        return {"N": _check_number(payload, path)}
    if tag == "NS":
        return {"NS": [_check_number(n, path) for n in payload]}
    if tag == "B":
        return {"B": _decode_binary(payload, path)}
    if tag == "BS":
        return {"BS": [_decode_binary(b, path) for b in payload]}
    if tag == "M":
        return {
            "M": {k: _from_wire(v, _child(path, k), depth + 1) for k, v in payload.items()}
        }
    if tag == "L":
        return {"L": [_from_wire(v, f"{path}[{i}]", depth + 1) for i, v in enumerate(payload)]}
    return dict(value)


def _number(value: Decimal) -> int | float:
    if value.as_tuple().exponent == 0:
        return int(value)
    return float(value)


def _to_python(value: Any) -> Any:
    if isinstance(value, Decimal):
        return _number(value)
    if isinstance(value, Binary):
        return value.value
    if isinstance(value, dict):
        return {k: _to_python(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_python(v) for v in value]
    if isinstance(value, set):
        return {_to_python(v) for v in value}
    return value
