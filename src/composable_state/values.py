"""Value kind classification for state trees."""

from collections.abc import Mapping
from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    """
    The three kinds of value a state tree is built from.

    Records are mappings, sequences are lists or tuples, and everything
    else (strings included) is a scalar.
    """

    RECORD = "record"
    SEQUENCE = "sequence"
    SCALAR = "scalar"


SEQUENCE_TYPES = (list, tuple)


def kind_of(value: Any) -> ValueKind:
    """Classify a value as a record, sequence or scalar."""
    if isinstance(value, Mapping):
        return ValueKind.RECORD
    if isinstance(value, SEQUENCE_TYPES):
        return ValueKind.SEQUENCE
    return ValueKind.SCALAR


def rebuild_sequence(template: Any, items: list[Any]) -> Any:
    """Build a sequence of the same container type as ``template``."""
    if isinstance(template, tuple):
        return tuple(items)
    return list(items)
