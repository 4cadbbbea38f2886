import argparse
import json
import sys

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory, text_format

from protoavro.errors import DecodeError
from protoavro.messages import unmarshal
from protoavro.options import DEFAULT_MAX_DEPTH, ExtraField, UnmarshalOptions


def load_message_class(descriptor_set_path: str, message_type: str):
    """
    Load a message class from a serialized FileDescriptorSet, as written by
    `protoc --include_imports --descriptor_set_out`.
    """
    with open(descriptor_set_path, "rb") as fo:
        file_set = descriptor_pb2.FileDescriptorSet.FromString(fo.read())
    pool = descriptor_pool.DescriptorPool()
    for file_proto in file_set.file:
        pool.AddSerializedFile(file_proto.SerializeToString())
    return message_factory.GetMessageClass(pool.FindMessageTypeByName(message_type))


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Decode an Avro JSON value into a protobuf message."
    )
    parser.add_argument(
        "descriptor_set", type=str, help="a serialized FileDescriptorSet"
    )
    parser.add_argument(
        "message_type", type=str, help="fully-qualified name of the message type"
    )
    parser.add_argument(
        "value",
        type=str,
        nargs="?",
        default="-",
        help="the Avro JSON value to decode, or - to read it from stdin",
    )
    parser.add_argument(
        "--extra-field",
        action="append",
        default=[],
        dest="extra_fields",
        help="an input field to drop rather than reject; may be repeated",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help="maximum message nesting depth",
    )

    args = parser.parse_args(argv)

    message_class = load_message_class(args.descriptor_set, args.message_type)
    text = sys.stdin.read() if args.value == "-" else args.value
    data = json.loads(text)

    options = UnmarshalOptions(
        extra_fields=[ExtraField(name) for name in args.extra_fields],
        max_depth=args.max_depth,
    )
    message = message_class()
    try:
        unmarshal(data, message, options)
    except DecodeError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(text_format.MessageToString(message), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
