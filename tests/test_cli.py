import io
import sys

import pytest

from protoavro.bin import protoavro_cli


@pytest.fixture
def descriptor_set_path(tmp_path, file_descriptor_set):
    path = tmp_path / "descriptors.pb"
    path.write_bytes(file_descriptor_set.SerializeToString())
    return str(path)


def test_load_message_class(descriptor_set_path):
    cls = protoavro_cli.load_message_class(descriptor_set_path, "test.v1.Record")
    assert cls.DESCRIPTOR.full_name == "test.v1.Record"


def test_decode_argument(descriptor_set_path, capsys):
    status = protoavro_cli.main(
        [descriptor_set_path, "test.v1.Record", '{"name": "a", "count": {"int": 3}}']
    )
    assert status == 0
    out = capsys.readouterr().out
    assert 'name: "a"' in out
    assert "count: 3" in out


def test_decode_stdin(descriptor_set_path, capsys, monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.StringIO('{"test.v1.Record": {"tags": ["x"]}}'))
    status = protoavro_cli.main([descriptor_set_path, "test.v1.Record"])
    assert status == 0
    assert 'tags: "x"' in capsys.readouterr().out


def test_decode_error(descriptor_set_path, capsys):
    status = protoavro_cli.main([descriptor_set_path, "test.v1.Record", '{"bogus": 1}'])
    assert status == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "error: unexpected field bogus" in captured.err


def test_extra_field(descriptor_set_path, capsys):
    status = protoavro_cli.main(
        [
            descriptor_set_path,
            "test.v1.Record",
            '{"name": "a", "bogus": 1}',
            "--extra-field",
            "bogus",
        ]
    )
    assert status == 0
    assert 'name: "a"' in capsys.readouterr().out


def test_max_depth(descriptor_set_path, capsys):
    status = protoavro_cli.main(
        [
            descriptor_set_path,
            "test.v1.Record",
            '{"child": {"child": {"child": {}}}}',
            "--max-depth",
            "1",
        ]
    )
    assert status == 1
    assert "maximum depth of 1" in capsys.readouterr().err


def test_closed_enum_fallback(descriptor_set_path, capsys):
    status = protoavro_cli.main(
        [descriptor_set_path, "test.v1.Legacy", '{"level": "MEDIUM", "levels": ["HIGH", null]}']
    )
    assert status == 0
    out = capsys.readouterr().out
    assert "level: LOW" in out
    assert "levels: HIGH" in out
    assert "levels: LOW" in out
