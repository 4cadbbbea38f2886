from typing import Iterable, FrozenSet


DEFAULT_MAX_DEPTH = 100


class ExtraField:
    """
    An Avro field that is present in the written records but has no
    counterpart in the protobuf message. Readers drop its value instead of
    failing on it.
    """

    def __init__(self, field_name: str):
        self.field_name = field_name

    def __repr__(self):
        return f"ExtraField({self.field_name!r})"


class UnmarshalOptions:
    def __init__(
        self,
        extra_fields: Iterable[ExtraField] = (),
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.extra_fields = tuple(extra_fields)
        self.max_depth = max_depth
        self._extra_field_names: FrozenSet[str] = frozenset(
            f.field_name for f in self.extra_fields
        )

    def is_extra_field(self, name: str) -> bool:
        return name in self._extra_field_names


DEFAULT_OPTIONS = UnmarshalOptions()
