import pytest

from google.protobuf import (
    descriptor_pb2,
    descriptor_pool,
    message_factory,
    timestamp_pb2,
    wrappers_pb2,
)

from protoavro.util import to_json_name

FDP = descriptor_pb2.FieldDescriptorProto


def add_field(message, name, number, field_type, label=FDP.LABEL_OPTIONAL, type_name=None):
    field = message.field.add(
        name=name,
        number=number,
        type=field_type,
        label=label,
        json_name=to_json_name(name),
    )
    if type_name is not None:
        field.type_name = type_name
    return field


def add_map_field(message, name, number, entry_name, key_type, value_type, value_type_name=None):
    entry = message.nested_type.add(name=entry_name)
    entry.options.map_entry = True
    add_field(entry, "key", 1, key_type)
    add_field(entry, "value", 2, value_type, type_name=value_type_name)
    return add_field(
        message,
        name,
        number,
        FDP.TYPE_MESSAGE,
        label=FDP.LABEL_REPEATED,
        type_name=f".test.v1.{message.name}.{entry_name}",
    )


def build_test_file():
    fdp = descriptor_pb2.FileDescriptorProto(
        name="protoavro/test/v1/test.proto", package="test.v1", syntax="proto3"
    )
    fdp.dependency.append("google/protobuf/timestamp.proto")
    fdp.dependency.append("google/protobuf/wrappers.proto")

    color = fdp.enum_type.add(name="Color")
    color.value.add(name="COLOR_UNSPECIFIED", number=0)
    color.value.add(name="COLOR_RED", number=1)
    color.value.add(name="COLOR_BLUE", number=2)

    inner = fdp.message_type.add(name="Inner")
    add_field(inner, "name", 1, FDP.TYPE_STRING)

    record = fdp.message_type.add(name="Record")
    add_field(record, "name", 1, FDP.TYPE_STRING)
    add_field(record, "display_name", 2, FDP.TYPE_STRING)
    add_field(record, "active", 3, FDP.TYPE_BOOL)
    add_field(record, "count", 4, FDP.TYPE_INT32)
    add_field(record, "total", 5, FDP.TYPE_INT64)
    add_field(record, "small", 6, FDP.TYPE_UINT32)
    add_field(record, "big", 7, FDP.TYPE_UINT64)
    add_field(record, "ratio", 8, FDP.TYPE_DOUBLE)
    add_field(record, "approx", 9, FDP.TYPE_FLOAT)
    add_field(record, "payload", 10, FDP.TYPE_BYTES)
    add_field(record, "color", 11, FDP.TYPE_ENUM, type_name=".test.v1.Color")
    add_field(record, "inner", 12, FDP.TYPE_MESSAGE, type_name=".test.v1.Inner")
    add_field(record, "tags", 13, FDP.TYPE_STRING, label=FDP.LABEL_REPEATED)
    add_field(record, "scores", 14, FDP.TYPE_INT32, label=FDP.LABEL_REPEATED)
    add_field(
        record,
        "inners",
        15,
        FDP.TYPE_MESSAGE,
        label=FDP.LABEL_REPEATED,
        type_name=".test.v1.Inner",
    )
    add_map_field(record, "counts", 16, "CountsEntry", FDP.TYPE_STRING, FDP.TYPE_INT64)
    add_map_field(
        record,
        "by_id",
        17,
        "ByIdEntry",
        FDP.TYPE_INT32,
        FDP.TYPE_MESSAGE,
        value_type_name=".test.v1.Inner",
    )
    add_field(
        record, "created_at", 18, FDP.TYPE_MESSAGE, type_name=".google.protobuf.Timestamp"
    )
    add_field(
        record, "nickname", 19, FDP.TYPE_MESSAGE, type_name=".google.protobuf.StringValue"
    )
    add_field(record, "child", 20, FDP.TYPE_MESSAGE, type_name=".test.v1.Record")
    add_field(
        record,
        "colors",
        21,
        FDP.TYPE_ENUM,
        label=FDP.LABEL_REPEATED,
        type_name=".test.v1.Color",
    )
    add_field(record, "zig", 22, FDP.TYPE_SINT32)
    add_field(record, "fixed", 23, FDP.TYPE_FIXED64)
    add_field(record, "sfixed", 24, FDP.TYPE_SFIXED32)
    return fdp


def build_legacy_file():
    fdp = descriptor_pb2.FileDescriptorProto(
        name="protoavro/test/v1/legacy.proto", package="test.v1", syntax="proto2"
    )

    # Closed enum without a zero value; its default is LOW.
    level = fdp.enum_type.add(name="Level")
    level.value.add(name="LOW", number=1)
    level.value.add(name="HIGH", number=2)

    legacy = fdp.message_type.add(name="Legacy")
    add_field(legacy, "level", 1, FDP.TYPE_ENUM, type_name=".test.v1.Level")
    add_field(
        legacy, "levels", 2, FDP.TYPE_ENUM, label=FDP.LABEL_REPEATED, type_name=".test.v1.Level"
    )
    add_map_field(
        legacy,
        "level_by_name",
        3,
        "LevelByNameEntry",
        FDP.TYPE_STRING,
        FDP.TYPE_ENUM,
        value_type_name=".test.v1.Level",
    )
    return fdp


@pytest.fixture(scope="session")
def file_descriptor_set():
    file_set = descriptor_pb2.FileDescriptorSet()
    for serialized in (
        timestamp_pb2.DESCRIPTOR.serialized_pb,
        wrappers_pb2.DESCRIPTOR.serialized_pb,
    ):
        file_set.file.add().ParseFromString(serialized)
    file_set.file.add().CopyFrom(build_test_file())
    file_set.file.add().CopyFrom(build_legacy_file())
    return file_set


@pytest.fixture(scope="session")
def pool(file_descriptor_set):
    pool = descriptor_pool.DescriptorPool()
    for file_proto in file_descriptor_set.file:
        pool.AddSerializedFile(file_proto.SerializeToString())
    return pool


@pytest.fixture(scope="session")
def record_class(pool):
    return message_factory.GetMessageClass(pool.FindMessageTypeByName("test.v1.Record"))


@pytest.fixture(scope="session")
def legacy_class(pool):
    return message_factory.GetMessageClass(pool.FindMessageTypeByName("test.v1.Legacy"))
