"""
Actions and the evaluator.

An action is either a Literal (replace the context with a fixed value) or
a Transform (compute a new value from the context). Combinators accept
plain values and plain callables wherever an action is expected and
normalize them with to_action, so apply only ever has to distinguish the
two members of this closed union.
"""

from dataclasses import dataclass
from typing import Any, Callable, Union


@dataclass(frozen=True)
class Literal:
    """Replace the context with ``value`` verbatim."""

    value: Any


@dataclass(frozen=True)
class Transform:
    """Compute a new value from the current context."""

    fn: Callable[[Any], Any]

    def __call__(self, context: Any) -> Any:
        return self.fn(context)


Action = Union[Literal, Transform]


def to_action(value: Any) -> Action:
    """
    Normalize an action-or-literal into an Action.

    Args:
        value: A Literal, a Transform, any callable or any plain value

    Returns:
        The value itself if already an Action, a Transform wrapping a
        callable, or a Literal wrapping anything else
    """
    if isinstance(value, (Literal, Transform)):
        return value
    if callable(value):
        return Transform(value)
    return Literal(value)


def apply(context: Any, action: Any) -> Any:
    """
    Evaluate an action against a context.

    Example:
        >>> apply({"count": 1}, select("count", replace(lambda n: n + 1)))
        {'count': 2}
    """
    action = to_action(action)
    if isinstance(action, Transform):
        return action.fn(context)
    return action.value
