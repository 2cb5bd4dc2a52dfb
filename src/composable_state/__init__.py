"""
Composable State

Composable, declarative descriptions of deep updates to immutable state
trees (nested records and sequences). Every update returns a new value;
the input is never mutated.
"""

__version__ = "0.1.0"

from .actions import (
    Action,
    Literal,
    Transform,
    apply,
    to_action,
)
from .combinators import (
    collect,
    concat,
    map_,
    merge,
    range_,
    replace,
    select,
    select_all,
    select_array,
    set_in,
)
from .errors import (
    ComposableStateError,
    InvalidKeyError,
    PathSyntaxError,
    SequenceIndexError,
    ShapeMismatchError,
)
from .models import (
    ActionDocument,
    UpdateError,
    UpdateResult,
    parse_action_document,
)
from .paths import path_split
from .service import (
    apply_update,
    apply_updates,
    compile_action,
)
from .values import ValueKind, kind_of

__all__ = [
    "__version__",
    "Action",
    "Literal",
    "Transform",
    "apply",
    "to_action",
    "replace",
    "merge",
    "concat",
    "set_in",
    "select",
    "select_array",
    "select_all",
    "collect",
    "map_",
    "range_",
    "path_split",
    "ValueKind",
    "kind_of",
    "ComposableStateError",
    "ShapeMismatchError",
    "PathSyntaxError",
    "InvalidKeyError",
    "SequenceIndexError",
    "ActionDocument",
    "UpdateError",
    "UpdateResult",
    "parse_action_document",
    "compile_action",
    "apply_update",
    "apply_updates",
]
