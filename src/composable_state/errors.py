"""
Error types raised by the update engine.

Every engine failure derives from ComposableStateError so callers can
catch the whole family at once. Each subclass also derives from the
closest builtin exception, so code written against TypeError, ValueError,
KeyError or IndexError keeps working.
"""

from typing import Any, Union

from .values import ValueKind


class ComposableStateError(Exception):
    """Base class for all engine errors."""


class ShapeMismatchError(ComposableStateError, TypeError):
    """
    A combinator was applied to a value of the wrong kind.

    Attributes:
        combinator: Name of the combinator that rejected the value
        expected: The kinds the combinator accepts
        actual: The kind that was encountered
        role: Which value was rejected ("context" or "update")
    """

    def __init__(
        self,
        combinator: str,
        expected: Union[ValueKind, tuple[ValueKind, ...]],
        actual: ValueKind,
        role: str = "context"
    ):
        if isinstance(expected, ValueKind):
            expected = (expected,)
        self.combinator = combinator
        self.expected = expected
        self.actual = actual
        self.role = role
        wanted = " or ".join(kind.value for kind in expected)
        super().__init__(
            f"{combinator}() requires a {wanted} {role}, got {actual.value}"
        )


class PathSyntaxError(ComposableStateError, ValueError):
    """A path string could not be tokenized into at least one segment."""

    def __init__(self, path: str, reason: str = "no path segments found"):
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed path {path!r}: {reason}")


class InvalidKeyError(ComposableStateError, KeyError):
    """A sequence was addressed with something other than an integer index."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Sequence index must be an integer, got {self.key!r}"


class SequenceIndexError(ComposableStateError, IndexError):
    """A sequence index fell outside the range the combinator accepts."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(
            f"Index {index} out of range for sequence of length {length}"
        )
