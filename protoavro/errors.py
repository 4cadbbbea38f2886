from typing import Any


def type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


class DecodeError(ValueError):
    pass


class TypeMismatchError(DecodeError):
    def __init__(self, expected: str, actual: Any):
        self.expected = expected
        self.actual = actual
        super(TypeMismatchError, self).__init__(expected, actual)

    def __str__(self):
        return f"expected {self.expected}, got {type_name(self.actual)}"

    def __repr__(self):
        return f"TypeMismatchError({self.expected!r}, {type_name(self.actual)!r})"


class UnknownFieldError(DecodeError):
    def __init__(self, field_name: str):
        self.field_name = field_name
        super(UnknownFieldError, self).__init__(field_name)

    def __str__(self):
        return f"unexpected field {self.field_name}"


class UnsupportedKindError(DecodeError):
    def __init__(self, kind: Any):
        self.kind = kind
        super(UnsupportedKindError, self).__init__(kind)

    def __str__(self):
        return f"unexpected kind {self.kind}"


class FieldError(DecodeError):
    """
    Wraps an error raised while decoding the value of a single field, naming
    the field. Only the immediately enclosing field is named; nested message
    errors are not re-wrapped by their parents.
    """

    def __init__(self, field_name: str, cause: Exception):
        self.field_name = field_name
        self.cause = cause
        super(FieldError, self).__init__(field_name, cause)

    def __str__(self):
        return f"field {self.field_name}: {self.cause}"

    def __repr__(self):
        return f"FieldError({self.field_name!r}, {self.cause!r})"


class NestingDepthError(DecodeError):
    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super(NestingDepthError, self).__init__(max_depth)

    def __str__(self):
        return f"message nesting exceeds maximum depth of {self.max_depth}"
