"""
This module contains functions which coerce generic Avro values into native
scalars.

Each decode_*_like function accepts either the bare value or the value wrapped
in a single-key dict, which is how Avro encodes a union branch. The role names
the union branch to look for ("string", "int", a fully-qualified enum name,
...), and appears in the error when the value has the wrong shape.
"""
from typing import Any, Dict, List
import math
import struct

from protoavro.errors import TypeMismatchError


def is_union_branch(value: Any, role: str) -> bool:
    return isinstance(value, dict) and len(value) == 1 and role in value


def _unwrap(value: Any, role: str) -> Any:
    if is_union_branch(value, role):
        return value[role]
    return value


def decode_string_like(value: Any, role: str) -> str:
    value = _unwrap(value, role)
    if isinstance(value, str):
        return value
    raise TypeMismatchError(f"{role}-like", value)


def decode_bool_like(value: Any, role: str) -> bool:
    value = _unwrap(value, role)
    if isinstance(value, bool):
        return value
    raise TypeMismatchError(f"{role}-like", value)


def decode_int_like(value: Any, role: str) -> int:
    value = _unwrap(value, role)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise TypeMismatchError(f"{role}-like", value)


def decode_float_like(value: Any, role: str) -> float:
    value = _unwrap(value, role)
    if isinstance(value, float):
        return value
    raise TypeMismatchError(f"{role}-like", value)


def decode_bytes_like(value: Any, role: str) -> bytes:
    value = _unwrap(value, role)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise TypeMismatchError(f"{role}-like", value)


def decode_list_like(value: Any, role: str) -> List[Any]:
    value = _unwrap(value, role)
    if isinstance(value, (list, tuple)):
        return list(value)
    raise TypeMismatchError(f"{role}-like", value)


def decode_map_like(value: Any, role: str) -> Dict[str, Any]:
    if is_union_branch(value, role) and isinstance(value[role], dict):
        value = value[role]
    if isinstance(value, dict):
        return value
    raise TypeMismatchError(f"{role}-like", value)


# Fixed-width narrowing. No range checks: the low bits are kept, the same way a
# C cast would.
def to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    if value >= 1 << 31:
        value -= 1 << 32
    return value


def to_int64(value: int) -> int:
    value &= 0xFFFFFFFFFFFFFFFF
    if value >= 1 << 63:
        value -= 1 << 64
    return value


def to_uint32(value: int) -> int:
    return value & 0xFFFFFFFF


def to_uint64(value: int) -> int:
    return value & 0xFFFFFFFFFFFFFFFF


def to_float32(value: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)
