"""
Decoding of generic Avro values into protobuf field values.

The input is the "native" form of an Avro value: dicts, lists and scalars, with
union branches encoded as single-key dicts keyed by the branch's type name.
The output is a field-value map: a dict keyed by declared field name, holding
native scalars, enum numbers, lists, dicts, and nested field-value maps for
message fields. Fields absent from the map are unset.

Nothing is written to a protobuf message here; see protoavro.messages.
"""
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging
import re

from protoavro import wkt
from protoavro.errors import (
    DecodeError,
    FieldError,
    NestingDepthError,
    TypeMismatchError,
    UnknownFieldError,
    UnsupportedKindError,
)
from protoavro.options import DEFAULT_OPTIONS, UnmarshalOptions
from protoavro.runtime import coerce
from protoavro.schema import FieldKind, FieldSchema, MessageSchema

_log = logging.getLogger(__name__)

Fields = Dict[str, Any]

MESSAGE_KINDS = {FieldKind.MESSAGE, FieldKind.GROUP}

_INTEGER_KEY = re.compile(r"[+-]?[0-9]+")


def decode_message(
    data: Any,
    schema: MessageSchema,
    options: UnmarshalOptions = DEFAULT_OPTIONS,
    depth: int = 0,
) -> Fields:
    """
    Decode an Avro record, given as a dict, into the fields of a message of
    the given schema. None decodes to no fields at all.
    """
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeMismatchError("message encoded as map", data)
    if depth > options.max_depth:
        raise NestingDepthError(options.max_depth)

    if wkt.is_well_known_type(schema.full_name):
        return wkt.decode_well_known_type(data, schema)

    # A union branch holding this message: {"pkg.Msg": {...}}.
    if len(data) == 1 and schema.full_name in data:
        return decode_message(data[schema.full_name], schema, options, depth + 1)

    fields: Fields = {}
    for name, value in data.items():
        field, known = resolve_field(schema, name, options)
        if not known:
            raise UnknownFieldError(name)
        if field is None:
            _log.debug("dropping extra field %s of %s", name, schema.full_name)
            continue
        if value is None:
            continue
        fields[field.name] = decode_field(value, field, options, depth)
    return fields


def resolve_field(
    schema: MessageSchema, name: str, options: UnmarshalOptions = DEFAULT_OPTIONS
) -> Tuple[Optional[FieldSchema], bool]:
    """
    Find the field an input key refers to. Returns (field, True) on a match,
    (None, True) for a configured extra field whose value should be dropped,
    and (None, False) if the name is unknown.
    """
    field = schema.field_by_json_name(name)
    if field is not None:
        return field, True
    field = schema.field_by_name(name)
    if field is not None:
        return field, True
    if options.is_extra_field(name):
        return None, True
    return None, False


def decode_field(
    data: Any,
    field: FieldSchema,
    options: UnmarshalOptions = DEFAULT_OPTIONS,
    depth: int = 0,
) -> Any:
    if field.is_map:
        return decode_map(data, field, options, depth)
    if field.is_list:
        return decode_list(data, field, options, depth)
    return decode_scalar(data, field, options, depth)


def decode_list(
    data: Any,
    field: FieldSchema,
    options: UnmarshalOptions = DEFAULT_OPTIONS,
    depth: int = 0,
) -> List[Any]:
    try:
        items = coerce.decode_list_like(data, "array")
    except DecodeError as e:
        raise FieldError(field.name, e) from e

    result = []
    for item in items:
        if item is None:
            # Keep the slot, so that positions line up with the input.
            result.append(zero_value(field))
        else:
            result.append(decode_scalar(item, field, options, depth))
    return result


def decode_map(
    data: Any,
    field: FieldSchema,
    options: UnmarshalOptions = DEFAULT_OPTIONS,
    depth: int = 0,
) -> Dict[Any, Any]:
    """
    Decode a map field. Avro maps only have string keys, so protobuf maps may
    arrive either as a dict or as an array of {"key": ..., "value": ...}
    records.
    """
    result: Dict[Any, Any] = {}
    if isinstance(data, (list, tuple)) or coerce.is_union_branch(data, "array"):
        try:
            records = coerce.decode_list_like(data, "array")
        except DecodeError as e:
            raise FieldError(field.name, e) from e
        for record in records:
            key, value = _map_entry(record, field)
            result[_map_key(key, field, options, depth)] = _map_value(
                value, field, options, depth
            )
        return result

    try:
        mapping = coerce.decode_map_like(data, "map")
    except DecodeError as e:
        raise FieldError(field.name, e) from e
    for key, value in mapping.items():
        result[_map_string_key(key, field, options, depth)] = _map_value(
            value, field, options, depth
        )
    return result


def _map_entry(record: Any, field: FieldSchema) -> Tuple[Any, Any]:
    if not isinstance(record, dict):
        raise FieldError(field.name, TypeMismatchError("map entry record", record))
    for name in record:
        if name not in ("key", "value"):
            raise FieldError(field.name, UnknownFieldError(name))
    return record.get("key"), record.get("value")


def _map_key(key: Any, field: FieldSchema, options: UnmarshalOptions, depth: int) -> Any:
    if key is None:
        return zero_value(field.map_key)
    return _decode_kind(key, field.map_key, field.name, options, depth)


def _map_string_key(
    key: Any, field: FieldSchema, options: UnmarshalOptions, depth: int
) -> Any:
    key_field = field.map_key
    if key_field.kind == FieldKind.STRING:
        return _decode_kind(key, key_field, field.name, options, depth)
    if key_field.kind == FieldKind.BOOL:
        if key == "true":
            return True
        if key == "false":
            return False
        raise FieldError(field.name, TypeMismatchError("boolean map key", key))
    if not isinstance(key, str) or not _INTEGER_KEY.fullmatch(key):
        raise FieldError(field.name, TypeMismatchError("integer map key", key))
    return _decode_kind(int(key), key_field, field.name, options, depth)


def _map_value(value: Any, field: FieldSchema, options: UnmarshalOptions, depth: int) -> Any:
    if value is None:
        return zero_value(field.map_value)
    return _decode_kind(value, field.map_value, field.name, options, depth)


def decode_scalar(
    data: Any,
    field: FieldSchema,
    options: UnmarshalOptions = DEFAULT_OPTIONS,
    depth: int = 0,
) -> Any:
    """
    Decode a single value of the field's kind: the value of a singular field,
    or one element of a list field.
    """
    return _decode_kind(data, field, field.name, options, depth)


def _decode_kind(
    data: Any,
    field: FieldSchema,
    owner: str,
    options: UnmarshalOptions,
    depth: int,
) -> Any:
    if field.kind in MESSAGE_KINDS:
        if not isinstance(data, dict):
            raise FieldError(owner, TypeMismatchError("message encoded as map", data))
        # Errors from inside the message already name the failing field.
        return decode_message(data, field.message, options, depth + 1)

    decoder = _SCALAR_DECODERS.get(field.kind)
    if decoder is None:
        raise UnsupportedKindError(field.kind)
    try:
        return decoder(data, field)
    except DecodeError as e:
        raise FieldError(owner, e) from e


def _decode_string(data: Any, field: FieldSchema) -> str:
    return coerce.decode_string_like(data, "string")


def _decode_bool(data: Any, field: FieldSchema) -> bool:
    return coerce.decode_bool_like(data, "boolean")


def _decode_int32(data: Any, field: FieldSchema) -> int:
    return coerce.to_int32(coerce.decode_int_like(data, "int"))


def _decode_int64(data: Any, field: FieldSchema) -> int:
    return coerce.to_int64(coerce.decode_int_like(data, "long"))


def _decode_uint32(data: Any, field: FieldSchema) -> int:
    return coerce.to_uint32(coerce.decode_int_like(data, "int"))


def _decode_uint64(data: Any, field: FieldSchema) -> int:
    return coerce.to_uint64(coerce.decode_int_like(data, "long"))


def _decode_bytes(data: Any, field: FieldSchema) -> bytes:
    return coerce.decode_bytes_like(data, "bytes")


def _decode_enum(data: Any, field: FieldSchema) -> int:
    name = coerce.decode_string_like(data, field.enum.full_name)
    number = field.enum.number_by_name(name)
    if number is None:
        _log.debug(
            "unknown value %s of %s in field %s, using %d",
            name,
            field.enum.full_name,
            field.name,
            field.enum.default,
        )
        return field.enum.default
    return number


def _decode_double(data: Any, field: FieldSchema) -> float:
    if not isinstance(data, float):
        raise TypeMismatchError("double", data)
    return data


def _decode_float(data: Any, field: FieldSchema) -> float:
    if not isinstance(data, float):
        raise TypeMismatchError("float", data)
    return coerce.to_float32(data)


_SCALAR_DECODERS: Dict[Any, Callable[[Any, FieldSchema], Any]] = {
    FieldKind.STRING: _decode_string,
    FieldKind.BOOL: _decode_bool,
    FieldKind.INT32: _decode_int32,
    FieldKind.SFIXED32: _decode_int32,
    FieldKind.SINT32: _decode_int32,
    FieldKind.INT64: _decode_int64,
    FieldKind.SFIXED64: _decode_int64,
    FieldKind.SINT64: _decode_int64,
    FieldKind.UINT32: _decode_uint32,
    FieldKind.FIXED32: _decode_uint32,
    FieldKind.UINT64: _decode_uint64,
    FieldKind.FIXED64: _decode_uint64,
    FieldKind.BYTES: _decode_bytes,
    FieldKind.ENUM: _decode_enum,
    FieldKind.DOUBLE: _decode_double,
    FieldKind.FLOAT: _decode_float,
}

_ZERO_VALUES = {
    FieldKind.STRING: "",
    FieldKind.BOOL: False,
    FieldKind.INT32: 0,
    FieldKind.SFIXED32: 0,
    FieldKind.SINT32: 0,
    FieldKind.INT64: 0,
    FieldKind.SFIXED64: 0,
    FieldKind.SINT64: 0,
    FieldKind.UINT32: 0,
    FieldKind.FIXED32: 0,
    FieldKind.UINT64: 0,
    FieldKind.FIXED64: 0,
    FieldKind.BYTES: b"",
    FieldKind.DOUBLE: 0.0,
    FieldKind.FLOAT: 0.0,
}


def zero_value(field: FieldSchema) -> Any:
    if field.kind in MESSAGE_KINDS:
        return {}
    if field.kind == FieldKind.ENUM:
        return field.enum.default
    if field.kind not in _ZERO_VALUES:
        raise UnsupportedKindError(field.kind)
    return _ZERO_VALUES[field.kind]
