from typing import Any, Callable, Dict, Optional, Type, Union

from google.protobuf.descriptor import Descriptor, FieldDescriptor
from google.protobuf.message import Message

from protoavro.decode import decode_message
from protoavro.options import DEFAULT_OPTIONS, UnmarshalOptions
from protoavro.schema import MessageSchema, from_descriptor, is_repeated

_MESSAGE_TYPES = (FieldDescriptor.TYPE_MESSAGE, FieldDescriptor.TYPE_GROUP)


def decode_fields(
    data: Any,
    schema: Union[MessageSchema, Descriptor],
    options: Optional[UnmarshalOptions] = None,
) -> Dict[str, Any]:
    """
    Decode an Avro value into a field-value map for the given message type,
    without building a message.
    """
    if isinstance(schema, Descriptor):
        schema = from_descriptor(schema)
    return decode_message(data, schema, options or DEFAULT_OPTIONS)


def unmarshal(
    data: Any, message: Message, options: Optional[UnmarshalOptions] = None
) -> None:
    """
    Decode an Avro value into message. The message is only modified once the
    whole value has been decoded, so on error it is left as it was.
    """
    schema = from_descriptor(message.DESCRIPTOR)
    fields = decode_message(data, schema, options or DEFAULT_OPTIONS)
    apply_fields(message, fields)


def compile_decoder(
    message_class: Type[Message], options: Optional[UnmarshalOptions] = None
) -> Callable[[Any], Message]:
    """
    Returns a function which decodes Avro values into new instances of
    message_class. The message's schema is converted once, up front.
    """
    schema = from_descriptor(message_class.DESCRIPTOR)
    options = options or DEFAULT_OPTIONS

    def decoder(data: Any) -> Message:
        message = message_class()
        apply_fields(message, decode_message(data, schema, options))
        return message

    return decoder


def apply_fields(message: Message, fields: Dict[str, Any]) -> None:
    """
    Write a field-value map, as produced by protoavro.decode, into a message.
    """
    descriptor = message.DESCRIPTOR
    for name, value in fields.items():
        fd = descriptor.fields_by_name[name]
        if _is_map(fd):
            _apply_map(getattr(message, name), fd, value)
        elif fd.type in _MESSAGE_TYPES:
            if is_repeated(fd):
                container = getattr(message, name)
                for item in value:
                    apply_fields(container.add(), item)
            else:
                nested = getattr(message, name)
                nested.SetInParent()
                apply_fields(nested, value)
        elif is_repeated(fd):
            getattr(message, name).extend(value)
        else:
            setattr(message, name, value)


def _apply_map(container: Any, fd: FieldDescriptor, value: Dict[Any, Any]) -> None:
    value_fd = fd.message_type.fields_by_name["value"]
    for k, v in value.items():
        if value_fd.type in _MESSAGE_TYPES:
            apply_fields(container[k], v)
        else:
            container[k] = v


def _is_map(fd: FieldDescriptor) -> bool:
    return (
        fd.type == FieldDescriptor.TYPE_MESSAGE
        and is_repeated(fd)
        and fd.message_type.GetOptions().map_entry
    )

