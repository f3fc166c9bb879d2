# xmlrpcparser/coercion.py
import math
import re
from typing import Callable, Dict

from xmlrpcparser.dates import decode_iso8601
from xmlrpcparser.errors import TypeCoercionError, UnknownScalarType
from xmlrpcparser.schemas import (
    I64_MAX,
    I64_MIN,
    Boolean,
    DateTime,
    Double,
    Integer,
    Nil,
    String,
    XmlRpcValue,
)

_INTEGER = re.compile(r"^[+-]?\d+$", re.ASCII)
_DOUBLE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)


def _to_boolean(text: str) -> Boolean:
    return Boolean(value=text.strip() == "1")


def _to_integer(text: str) -> Integer:
    raw = text.strip()
    if not _INTEGER.match(raw):
        raise TypeCoercionError(f"invalid integer value: {text!r}", data={"text": text})
    number = int(raw, 10)
    if not I64_MIN <= number <= I64_MAX:
        raise TypeCoercionError(f"integer out of range: {raw}", data={"text": text})
    return Integer(value=number)


def _to_double(text: str) -> Double:
    raw = text.strip()
    if not _DOUBLE.match(raw):
        raise TypeCoercionError(f"invalid double value: {text!r}", data={"text": text})
    number = float(raw)
    if not math.isfinite(number):
        raise TypeCoercionError(f"double out of range: {raw}", data={"text": text})
    return Double(value=number)


def _to_string(text: str) -> String:
    return String(value=text)


def _to_datetime(text: str) -> DateTime:
    return DateTime(value=decode_iso8601(text))


def _to_nil(text: str) -> Nil:
    if text:
        raise TypeCoercionError(f"<nil> must be empty, got {text!r}", data={"text": text})
    return Nil()


SCALAR_COERCIONS: Dict[str, Callable[[str], XmlRpcValue]] = {
    "boolean": _to_boolean,
    "int": _to_integer,
    "i4": _to_integer,
    "double": _to_double,
    "string": _to_string,
    "dateTime.iso8601": _to_datetime,
    "nil": _to_nil,
}

SCALAR_TAGS = frozenset(SCALAR_COERCIONS)


def coerce_scalar(tag: str, text: str) -> XmlRpcValue:
    """Convert the accumulated text of a scalar element into its value."""
    try:
        coerce = SCALAR_COERCIONS[tag]
    except KeyError:
        raise UnknownScalarType(f"unknown scalar type <{tag}>", data={"tag": tag})
    return coerce(text)
