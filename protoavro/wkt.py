"""
This module decodes the protobuf well-known types, which are carried in Avro
as logical types or as nullable primitives rather than as records.

Every decoder takes the union-encoded dict that the Avro reader produces (for
example {"long.timestamp-micros": 1600000000000000}) and returns the fields of
the message.
"""
from typing import Any, Callable, Dict
import datetime
import re

from protoavro.errors import DecodeError, TypeMismatchError
from protoavro.runtime import coerce
from protoavro.schema import MessageSchema

EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
EPOCH_DATE = datetime.date(1970, 1, 1)
NANOS_PER_SECOND = 1_000_000_000

_DURATION_RE = re.compile(r"^(-)?(\d+)(?:\.(\d{1,9}))?s$")


def _decode_timestamp(data: Dict[str, Any]) -> Dict[str, Any]:
    if coerce.is_union_branch(data, "long.timestamp-micros"):
        value = data["long.timestamp-micros"]
        units_per_second = 1_000_000
    elif coerce.is_union_branch(data, "long.timestamp-millis"):
        value = data["long.timestamp-millis"]
        units_per_second = 1_000
    else:
        raise TypeMismatchError("long.timestamp-micros", data)

    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=datetime.timezone.utc)
        delta = value - EPOCH
        value = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
        units_per_second = 1_000_000
    else:
        value = coerce.decode_int_like(value, "long")

    # Floor division keeps nanos non-negative for instants before the epoch.
    seconds, remainder = divmod(value, units_per_second)
    return {
        "seconds": seconds,
        "nanos": remainder * (NANOS_PER_SECOND // units_per_second),
    }


def _decode_duration(data: Dict[str, Any]) -> Dict[str, Any]:
    text = coerce.decode_string_like(data, "string")
    match = _DURATION_RE.match(text)
    if match is None:
        raise DecodeError(f"invalid duration {text!r}")
    sign, whole, fraction = match.groups()
    seconds = int(whole)
    nanos = int(fraction.ljust(9, "0")) if fraction else 0
    if sign:
        seconds, nanos = -seconds, -nanos
    return {"seconds": seconds, "nanos": nanos}


def _decode_date(data: Dict[str, Any]) -> Dict[str, Any]:
    if not coerce.is_union_branch(data, "int.date"):
        raise TypeMismatchError("int.date", data)
    value = data["int.date"]
    if isinstance(value, datetime.datetime):
        value = value.date()
    elif not isinstance(value, datetime.date):
        days = coerce.decode_int_like(value, "int")
        value = EPOCH_DATE + datetime.timedelta(days=days)
    return {"year": value.year, "month": value.month, "day": value.day}


def _wrapper(decode: Callable[[Any, str], Any], role: str, narrow=None):
    def decode_wrapper(data: Dict[str, Any]) -> Dict[str, Any]:
        value = decode(data, role)
        if narrow is not None:
            value = narrow(value)
        return {"value": value}

    return decode_wrapper


_DECODERS: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    "google.protobuf.Timestamp": _decode_timestamp,
    "google.protobuf.Duration": _decode_duration,
    "google.type.Date": _decode_date,
    "google.protobuf.DoubleValue": _wrapper(coerce.decode_float_like, "double"),
    "google.protobuf.FloatValue": _wrapper(
        coerce.decode_float_like, "float", coerce.to_float32
    ),
    "google.protobuf.Int64Value": _wrapper(
        coerce.decode_int_like, "long", coerce.to_int64
    ),
    "google.protobuf.UInt64Value": _wrapper(
        coerce.decode_int_like, "long", coerce.to_uint64
    ),
    "google.protobuf.Int32Value": _wrapper(
        coerce.decode_int_like, "int", coerce.to_int32
    ),
    "google.protobuf.UInt32Value": _wrapper(
        coerce.decode_int_like, "int", coerce.to_uint32
    ),
    "google.protobuf.BoolValue": _wrapper(coerce.decode_bool_like, "boolean"),
    "google.protobuf.StringValue": _wrapper(coerce.decode_string_like, "string"),
    "google.protobuf.BytesValue": _wrapper(coerce.decode_bytes_like, "bytes"),
}


def is_well_known_type(full_name: str) -> bool:
    return full_name in _DECODERS


def decode_well_known_type(data: Dict[str, Any], schema: MessageSchema) -> Dict[str, Any]:
    decoder = _DECODERS.get(schema.full_name)
    if decoder is None:
        raise DecodeError(f"{schema.full_name} is not a well-known type")
    return decoder(data)
