"""
Update service.

Entry point for applying serializable action documents to state values.
Documents are compiled into engine actions and applied without mutating
the input state. Engine failures are reported in the result rather than
raised.
"""

import logging
from typing import Any, Callable, Iterable, Optional, Union

from pydantic import BaseModel, ValidationError

from .actions import Action, Literal, apply
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
from .errors import ComposableStateError
from .models import (
    CollectDocument,
    ConcatDocument,
    MapDocument,
    MergeDocument,
    RangeDocument,
    ReplaceDocument,
    SelectAllDocument,
    SelectArrayDocument,
    SelectDocument,
    SetInDocument,
    UpdateError,
    UpdateResult,
    parse_action_document,
)

logger = logging.getLogger(__name__)


# --- Document compilers ---

def _compile_replace(document: ReplaceDocument) -> Action:
    return replace(Literal(document.value))


def _compile_merge(document: MergeDocument) -> Action:
    return merge(Literal(document.value))


def _compile_concat(document: ConcatDocument) -> Action:
    return concat(Literal(document.value))


def _compile_set_in(document: SetInDocument) -> Action:
    return set_in(
        document.key,
        compile_action(document.action),
        extend=document.extend
    )


def _compile_select(document: SelectDocument) -> Action:
    return select(
        document.path,
        compile_action(document.action),
        syntax=document.syntax
    )


def _compile_select_array(document: SelectArrayDocument) -> Action:
    return select_array(document.path, compile_action(document.action))


def _compile_select_all(document: SelectAllDocument) -> Action:
    return select_all(
        [(entry.path, compile_action(entry.action)) for entry in document.entries],
        syntax=document.syntax
    )


def _compile_collect(document: CollectDocument) -> Action:
    return collect([compile_action(action) for action in document.actions])


def _compile_map(document: MapDocument) -> Action:
    return map_(compile_action(document.action))


def _compile_range(document: RangeDocument) -> Action:
    return range_(
        document.start,
        document.length,
        compile_action(document.action)
    )


DOCUMENT_COMPILERS: dict[type, Callable[[Any], Action]] = {
    ReplaceDocument: _compile_replace,
    MergeDocument: _compile_merge,
    ConcatDocument: _compile_concat,
    SetInDocument: _compile_set_in,
    SelectDocument: _compile_select,
    SelectArrayDocument: _compile_select_array,
    SelectAllDocument: _compile_select_all,
    CollectDocument: _compile_collect,
    MapDocument: _compile_map,
    RangeDocument: _compile_range,
}


def compile_action(document: Any) -> Action:
    """
    Compile an action document into an engine action.

    Args:
        document: An action document model, or raw data to validate into one

    Returns:
        The equivalent Action

    Raises:
        pydantic.ValidationError: If raw data is not a valid document
        PathSyntaxError: If a select path is malformed
    """
    if not isinstance(document, BaseModel):
        document = parse_action_document(document)

    compiler = DOCUMENT_COMPILERS.get(type(document))
    if compiler is None:
        raise ValueError(f"Unsupported action document: {type(document).__name__}")

    return compiler(document)


def _error_for(
    exc: Union[ComposableStateError, ValidationError],
    index: Optional[int] = None
) -> UpdateError:
    return UpdateError(error=type(exc).__name__, message=str(exc), index=index)


# --- Service entry points ---

def apply_update(state: Any, document: Any) -> UpdateResult:
    """
    Apply a single action document to a state value.

    The input state is never modified.

    Args:
        state: The current state
        document: The action document (model or raw data)

    Returns:
        UpdateResult with the new state, or the error if the update failed

    Example:
        >>> result = apply_update(
        ...     {"volume": 800},
        ...     {"op": "merge", "value": {"volume": 1200}},
        ... )
        >>> result.state
        {'volume': 1200}
    """
    if not isinstance(document, BaseModel):
        document = parse_action_document(document)

    try:
        new_state = apply(state, compile_action(document))
    except ComposableStateError as e:
        logger.warning("Update failed | error=%s message=%s", type(e).__name__, e)
        return UpdateResult(success=False, errors=[_error_for(e)])

    logger.info("Update applied | op=%s", document.op)
    return UpdateResult(success=True, updates_applied=1, state=new_state)


def apply_updates(
    state: Any,
    documents: Iterable[Any]
) -> UpdateResult:
    """
    Apply a batch of action documents in order.

    The batch is atomic: if any document fails, no new state is returned
    and ``updates_applied`` reports how many succeeded before the failure.
    Every document is validated before any is applied, so an invalid
    document is reported with its index and nothing is applied.

    Args:
        state: The current state
        documents: Ordered action documents

    Returns:
        UpdateResult with the final state, or the first error
    """
    parsed = []
    for index, document in enumerate(documents):
        if isinstance(document, BaseModel):
            parsed.append(document)
            continue
        try:
            parsed.append(parse_action_document(document))
        except ValidationError as e:
            logger.warning("Batch validation failed | index=%d", index)
            return UpdateResult(success=False, errors=[_error_for(e, index)])

    current = state
    applied = 0

    for index, document in enumerate(parsed):
        try:
            current = apply(current, compile_action(document))
        except ComposableStateError as e:
            logger.warning(
                "Batch update failed | index=%d error=%s message=%s",
                index,
                type(e).__name__,
                e,
            )
            return UpdateResult(
                success=False,
                updates_applied=applied,
                errors=[_error_for(e, index)]
            )
        applied += 1

    logger.info("Batch update applied | updates=%d", applied)
    return UpdateResult(success=True, updates_applied=applied, state=current)
