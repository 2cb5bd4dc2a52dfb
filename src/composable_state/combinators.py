"""
Combinators for building immutable updates.

Each combinator is a pure function that takes parameters (paths, keys,
sub-actions, literal values) and returns a Transform. Applying the
Transform to a state value returns a new value and never mutates the
input. Only the containers along the updated path are copied; every
sibling keeps its identity.

Example:
    >>> state = {"cart": {"total": 800, "items": [1, 2]}}
    >>> apply(state, collect([
    ...     select("cart.total", replace(lambda v: v + 100)),
    ...     select("cart.items", concat([3])),
    ... ]))
    {'cart': {'total': 900, 'items': [1, 2, 3]}}
"""

import inspect
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Union

from .actions import Action, Literal, Transform, apply, to_action
from .errors import InvalidKeyError, SequenceIndexError, ShapeMismatchError
from .paths import BRACKET, path_split
from .values import ValueKind, kind_of, rebuild_sequence

Key = Union[str, int]


def _require(
    value: Any,
    expected: ValueKind,
    combinator: str,
    role: str = "context"
) -> None:
    actual = kind_of(value)
    if actual is not expected:
        raise ShapeMismatchError(combinator, expected, actual, role)


# --- Leaf combinators ---

def replace(update: Any) -> Transform:
    """
    Replace the value at the current context.

    A plain value overwrites the context. A callable receives the old
    value and returns the new one. This is the only combinator that can
    change the kind of a value.

    Example:
        >>> apply(1, replace(999))
        999
        >>> apply(1, replace(lambda old: old + 1))
        2
    """
    update = to_action(update)
    return Transform(lambda context: apply(context, update))


def merge(update: Any) -> Transform:
    """
    Overlay the keys of a record onto the current record context.

    Keys from the evaluated update win on collision. Keys only present in
    the context are kept as-is.

    Raises:
        ShapeMismatchError: If the context or the evaluated update is not
            a record
    """
    update = to_action(update)

    def _merge(context: Any) -> dict:
        _require(context, ValueKind.RECORD, "merge")
        overlay = apply(context, update)
        _require(overlay, ValueKind.RECORD, "merge", role="update")
        result = dict(context)
        result.update(overlay)
        return result

    return Transform(_merge)


def concat(update: Any) -> Transform:
    """
    Append the elements of a sequence to the current sequence context.

    Raises:
        ShapeMismatchError: If the context or the evaluated update is not
            a sequence
    """
    update = to_action(update)

    def _concat(context: Any) -> Any:
        _require(context, ValueKind.SEQUENCE, "concat")
        tail = apply(context, update)
        _require(tail, ValueKind.SEQUENCE, "concat", role="update")
        return rebuild_sequence(context, [*context, *tail])

    return Transform(_concat)


# --- Path navigation ---

def _sequence_index(key: Any, length: int, extend: bool) -> int:
    """Resolve a key into a non-negative index for a sequence of ``length``."""
    if isinstance(key, bool) or not isinstance(key, (int, str)):
        raise InvalidKeyError(key)
    if isinstance(key, str):
        digits = key[1:] if key.startswith("-") else key
        if not (digits.isascii() and digits.isdecimal()):
            raise InvalidKeyError(key)
        key = int(key)

    if key < 0:
        if key < -length:
            raise SequenceIndexError(key, length)
        return key + length

    if key >= length and not extend:
        raise SequenceIndexError(key, length)
    return key


def set_in(key: Key, update: Any, extend: bool = True) -> Transform:
    """
    Update one child of the current context without changing the rest.

    The context is shallow-copied and ``copy[key]`` is replaced with the
    result of applying ``update`` to the old child.

    Records:
        A missing key is created; the update sees None as the old value.
        A None context is treated as an empty record.

    Sequences:
        ``key`` may be an int or a string of digits with an optional
        leading "-". Negative indexes count from the end. An index past the
        end extends the sequence, padding any gap with None, unless
        ``extend`` is False.

    Args:
        key: Record key or sequence index
        update: Action or literal for the child value
        extend: Allow writes past the end of a sequence

    Raises:
        ShapeMismatchError: If the context is a scalar
        InvalidKeyError: If a sequence is addressed with a non-integer key
        SequenceIndexError: If the index is out of range and cannot extend

    Example:
        >>> apply([10, 9, 8, 7], set_in(1, 999))
        [10, 999, 8, 7]
    """
    update = to_action(update)

    def _set_in(context: Any) -> Any:
        if context is None:
            context = {}
        kind = kind_of(context)

        if kind is ValueKind.RECORD:
            result = dict(context)
            result[key] = apply(result.get(key), update)
            return result

        if kind is ValueKind.SEQUENCE:
            items = list(context)
            index = _sequence_index(key, len(items), extend)
            if index >= len(items):
                items.extend([None] * (index + 1 - len(items)))
            items[index] = apply(items[index], update)
            return rebuild_sequence(context, items)

        raise ShapeMismatchError(
            "set_in", (ValueKind.RECORD, ValueKind.SEQUENCE), kind
        )

    return Transform(_set_in)


def select_array(path: Iterable[Key], update: Any) -> Action:
    """
    Apply an action at a nested location given as a list of keys.

    An empty path applies the action to the current context. Otherwise one
    set_in is nested per key, so only the containers along the path are
    copied.

    Example:
        >>> apply({"foo": {"bar": 123}}, select_array(["foo", "bar"], 456))
        {'foo': {'bar': 456}}
    """
    action = to_action(update)
    for key in reversed(list(path)):
        action = set_in(key, action)
    return action


def select(path: str, update: Any, syntax: str = BRACKET) -> Action:
    """
    Like select_array, but the path is given in string form.

    The path is parsed once, when the action is built, so a malformed path
    fails immediately.

    Raises:
        PathSyntaxError: If the path cannot be parsed
    """
    return select_array(path_split(path, syntax), update)


# --- Aggregate combinators ---

def collect(actions: Iterable[Any]) -> Transform:
    """
    Run a list of actions in order from the current context.

    Each action sees the result of the previous one.

    Example:
        >>> apply(1, collect([replace(lambda v: v * 5), replace(lambda v: v - 1)]))
        4
    """
    actions = [to_action(action) for action in actions]

    def _collect(context: Any) -> Any:
        for action in actions:
            context = apply(context, action)
        return context

    return Transform(_collect)


def select_all(
    paths_with_actions: Union[Mapping[str, Any], Iterable[tuple[str, Any]]],
    syntax: str = BRACKET
) -> Transform:
    """
    Apply actions at several paths, in order.

    Accepts an ordered iterable of (path, action) pairs, or a mapping which
    is read in insertion order. Later entries see the edits of earlier ones.

    Example:
        >>> apply({"foo": {"bar": 1}, "count": 1}, select_all([
        ...     ("foo.bar", 456),
        ...     ("count", replace(lambda n: n + 1)),
        ... ]))
        {'foo': {'bar': 456}, 'count': 2}
    """
    if isinstance(paths_with_actions, Mapping):
        entries = list(paths_with_actions.items())
    else:
        entries = [(path, action) for path, action in paths_with_actions]

    return collect(select(path, action, syntax) for path, action in entries)


# --- Sequence combinators ---

def _accepts_index(fn: Callable) -> bool:
    """Whether ``fn`` requires a second positional argument for the index."""
    try:
        parameters = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return False

    positional = 0
    for parameter in parameters:
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            if parameter.default is inspect.Parameter.empty:
                positional += 1
    return positional >= 2


def _element_action(fn: Any) -> Callable[[Any, int], Any]:
    if isinstance(fn, (Literal, Transform)) or not callable(fn):
        action = to_action(fn)
        return lambda value, index: action
    if _accepts_index(fn):
        return fn
    return lambda value, index: fn(value)


def map_(fn: Any) -> Transform:
    """
    Transform every element of the current sequence context.

    ``fn`` is called as ``fn(value, index)`` when it has two or more required
    positional parameters (or ``*args``), and as ``fn(value)`` otherwise, so
    optional parameters such as ``round``'s ``ndigits`` never receive the
    index. It may return a plain value or an action, which is
    then applied to the element. ``fn`` may also be an action itself, in
    which case it is applied to every element. The length never changes;
    use range_ or concat for that.

    Example:
        >>> apply([1, 2, 3], map_(lambda v: v * 10))
        [10, 20, 30]
        >>> apply([1, 2, 3], map_(lambda v, i: v + i))
        [1, 3, 5]

    Raises:
        ShapeMismatchError: If the context is not a sequence
    """
    producer = _element_action(fn)

    def _map(sequence: Any) -> Any:
        _require(sequence, ValueKind.SEQUENCE, "map")
        return rebuild_sequence(sequence, [
            apply(value, producer(value, index))
            for index, value in enumerate(sequence)
        ])

    return replace(_map)


def range_(start: int, length: int, update: Any) -> Transform:
    """
    Apply an action to a contiguous window of the current sequence.

    The window ``[start, start + length)`` is passed to ``update``, which
    must produce a sequence of any length; the result replaces the window.
    This covers insertion (longer result) and deletion (shorter or empty
    result). A start or length past the end is clamped like slicing.

    Example:
        >>> apply([1, 2, 99, 100, 3, 4], range_(2, 2, replace([])))
        [1, 2, 3, 4]
        >>> apply([1, 2, 5, 6], range_(2, 0, [3, 4]))
        [1, 2, 3, 4, 5, 6]

    Raises:
        ValueError: If start or length is not a non-negative integer
        ShapeMismatchError: If the context or evaluated window is not a
            sequence
    """
    for name, bound in (("start", start), ("length", length)):
        if isinstance(bound, bool) or not isinstance(bound, int) or bound < 0:
            raise ValueError(
                f"range_() {name} must be a non-negative integer, got {bound!r}"
            )
    update = to_action(update)
    end = start + length

    def _range(context: Any) -> Any:
        _require(context, ValueKind.SEQUENCE, "range")
        window = apply(context[start:end], update)
        _require(window, ValueKind.SEQUENCE, "range", role="update")
        return rebuild_sequence(
            context, [*context[:start], *window, *context[end:]]
        )

    return Transform(_range)
