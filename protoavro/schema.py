"""
Read-only descriptions of protobuf message types, as consumed by the decoder.

Schemas can be built by hand or converted from google.protobuf descriptors
with from_descriptor.
"""
from typing import Any, Dict, Iterable, List, Optional
import enum

from google.protobuf.descriptor import Descriptor, EnumDescriptor, FieldDescriptor

from protoavro.util import to_json_name


class FieldKind(enum.Enum):
    DOUBLE = "double"
    FLOAT = "float"
    INT64 = "int64"
    UINT64 = "uint64"
    INT32 = "int32"
    FIXED64 = "fixed64"
    FIXED32 = "fixed32"
    BOOL = "bool"
    STRING = "string"
    GROUP = "group"
    MESSAGE = "message"
    BYTES = "bytes"
    UINT32 = "uint32"
    ENUM = "enum"
    SFIXED32 = "sfixed32"
    SFIXED64 = "sfixed64"
    SINT32 = "sint32"
    SINT64 = "sint64"

    def __str__(self):
        return self.value


class EnumSchema:
    """
    An enum's symbols and their numbers. default is the number used for
    unknown symbols and null slots: 0 when the enum declares it, otherwise the
    first declared value, which is what proto2 uses.
    """

    def __init__(self, full_name: str, values: Dict[str, int], default: Optional[int] = None):
        self.full_name = full_name
        self.values = dict(values)
        if default is None:
            numbers = list(self.values.values())
            default = 0 if 0 in numbers or not numbers else numbers[0]
        self.default = default

    def number_by_name(self, name: str) -> Optional[int]:
        return self.values.get(name)

    def __repr__(self):
        return f"EnumSchema({self.full_name!r})"


class FieldSchema:
    """
    A single field of a message. List fields set repeated. Map fields set both
    map_key and map_value, which describe the key and value of each entry.
    """

    def __init__(
        self,
        name: str,
        kind: Any,
        json_name: Optional[str] = None,
        repeated: bool = False,
        enum: Optional[EnumSchema] = None,
        message: Optional["MessageSchema"] = None,
        map_key: Optional["FieldSchema"] = None,
        map_value: Optional["FieldSchema"] = None,
    ):
        self.name = name
        self.kind = kind
        self.json_name = json_name if json_name is not None else to_json_name(name)
        self.repeated = repeated
        self.enum = enum
        self.message = message
        self.map_key = map_key
        self.map_value = map_value

    @property
    def is_map(self) -> bool:
        return self.map_key is not None and self.map_value is not None

    @property
    def is_list(self) -> bool:
        return self.repeated and not self.is_map

    def __repr__(self):
        return f"FieldSchema({self.name!r}, {self.kind})"


class MessageSchema:
    def __init__(self, full_name: str, fields: Iterable[FieldSchema] = ()):
        self.full_name = full_name
        self._fields: List[FieldSchema] = []
        self._by_name: Dict[str, FieldSchema] = {}
        self._by_json_name: Dict[str, FieldSchema] = {}
        for f in fields:
            self.add_field(f)

    def add_field(self, field: FieldSchema) -> None:
        # Fields are added after construction when a message refers to itself.
        self._fields.append(field)
        self._by_name[field.name] = field
        self._by_json_name[field.json_name] = field

    @property
    def fields(self) -> List[FieldSchema]:
        return list(self._fields)

    def field_by_name(self, name: str) -> Optional[FieldSchema]:
        return self._by_name.get(name)

    def field_by_json_name(self, name: str) -> Optional[FieldSchema]:
        return self._by_json_name.get(name)

    def __repr__(self):
        return f"MessageSchema({self.full_name!r})"


_PROTO_KINDS = {
    FieldDescriptor.TYPE_DOUBLE: FieldKind.DOUBLE,
    FieldDescriptor.TYPE_FLOAT: FieldKind.FLOAT,
    FieldDescriptor.TYPE_INT64: FieldKind.INT64,
    FieldDescriptor.TYPE_UINT64: FieldKind.UINT64,
    FieldDescriptor.TYPE_INT32: FieldKind.INT32,
    FieldDescriptor.TYPE_FIXED64: FieldKind.FIXED64,
    FieldDescriptor.TYPE_FIXED32: FieldKind.FIXED32,
    FieldDescriptor.TYPE_BOOL: FieldKind.BOOL,
    FieldDescriptor.TYPE_STRING: FieldKind.STRING,
    FieldDescriptor.TYPE_GROUP: FieldKind.GROUP,
    FieldDescriptor.TYPE_MESSAGE: FieldKind.MESSAGE,
    FieldDescriptor.TYPE_BYTES: FieldKind.BYTES,
    FieldDescriptor.TYPE_UINT32: FieldKind.UINT32,
    FieldDescriptor.TYPE_ENUM: FieldKind.ENUM,
    FieldDescriptor.TYPE_SFIXED32: FieldKind.SFIXED32,
    FieldDescriptor.TYPE_SFIXED64: FieldKind.SFIXED64,
    FieldDescriptor.TYPE_SINT32: FieldKind.SINT32,
    FieldDescriptor.TYPE_SINT64: FieldKind.SINT64,
}


def from_descriptor(descriptor: Descriptor) -> MessageSchema:
    """
    Convert a protobuf message descriptor, and every message type reachable
    from it, into a MessageSchema.
    """
    return _convert_message(descriptor, {})


def _convert_message(
    descriptor: Descriptor, seen: Dict[str, MessageSchema]
) -> MessageSchema:
    existing = seen.get(descriptor.full_name)
    if existing is not None:
        return existing
    schema = MessageSchema(descriptor.full_name)
    seen[descriptor.full_name] = schema
    for fd in descriptor.fields:
        schema.add_field(_convert_field(fd, seen))
    return schema


def _convert_field(fd: FieldDescriptor, seen: Dict[str, MessageSchema]) -> FieldSchema:
    # Unknown type numbers are carried through as-is; the decoder rejects them.
    kind = _PROTO_KINDS.get(fd.type, fd.type)
    repeated = is_repeated(fd)
    field = FieldSchema(
        name=fd.name,
        kind=kind,
        json_name=fd.json_name or to_json_name(fd.name),
        repeated=repeated,
    )
    if fd.type == FieldDescriptor.TYPE_ENUM:
        field.enum = _convert_enum(fd.enum_type)
    elif fd.type in (FieldDescriptor.TYPE_MESSAGE, FieldDescriptor.TYPE_GROUP):
        msg = fd.message_type
        if repeated and msg.GetOptions().map_entry:
            field.map_key = _convert_field(msg.fields_by_name["key"], seen)
            field.map_value = _convert_field(msg.fields_by_name["value"], seen)
        else:
            field.message = _convert_message(msg, seen)
    return field


def _convert_enum(descriptor: EnumDescriptor) -> EnumSchema:
    values = descriptor.values
    return EnumSchema(
        descriptor.full_name,
        {v.name: v.number for v in values},
        default=values[0].number if values else 0,
    )


def is_repeated(fd: FieldDescriptor) -> bool:
    # Newer protobuf releases deprecate FieldDescriptor.label.
    repeated = getattr(fd, "is_repeated", None)
    if repeated is not None:
        return bool(repeated)
    return fd.label == FieldDescriptor.LABEL_REPEATED
