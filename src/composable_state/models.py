"""
Pydantic models for serializable action documents.

Closures cannot be sent over the wire, so an update can also be described
as a JSON document that mirrors the combinator tree. Each document is
tagged by its ``op`` field.

Examples:
    Replace a nested value:
        {"op": "select", "path": "signal.cycle", "action":
            {"op": "replace", "value": 120}}

    Delete two items from a list:
        {"op": "select", "path": "items", "action":
            {"op": "range", "start": 2, "length": 2,
             "action": {"op": "replace", "value": []}}}
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

PathSyntax = Literal["bracket", "dot"]


class ReplaceDocument(BaseModel):
    """Replace the context with a fixed value."""

    op: Literal["replace"] = "replace"
    value: Any = Field(
        default=None,
        description="The new value"
    )


class MergeDocument(BaseModel):
    """Overlay keys onto the record context."""

    op: Literal["merge"] = "merge"
    value: dict[str, Any] = Field(
        ...,
        description="Keys to overlay onto the record"
    )


class ConcatDocument(BaseModel):
    """Append items to the sequence context."""

    op: Literal["concat"] = "concat"
    value: list[Any] = Field(
        ...,
        description="Items to append"
    )


class SetInDocument(BaseModel):
    """Update one child of the context."""

    op: Literal["set_in"] = "set_in"
    key: Union[int, str] = Field(
        ...,
        description="Record key or sequence index"
    )
    action: "ActionDocument"
    extend: bool = Field(
        default=True,
        description="Allow writes past the end of a sequence"
    )


class SelectDocument(BaseModel):
    """Apply an action at a string path."""

    op: Literal["select"] = "select"
    path: str = Field(
        ...,
        description="Path string (e.g., 'lanes[0].name' or 'lanes.0.name')"
    )
    action: "ActionDocument"
    syntax: PathSyntax = "bracket"


class SelectArrayDocument(BaseModel):
    """Apply an action at a path given as a list of keys."""

    op: Literal["select_array"] = "select_array"
    path: list[Union[int, str]] = Field(
        default_factory=list,
        description="Ordered list of keys"
    )
    action: "ActionDocument"


class SelectEntry(BaseModel):
    """One (path, action) pair of a select_all document."""

    path: str
    action: "ActionDocument"


class SelectAllDocument(BaseModel):
    """Apply actions at several paths, in order."""

    op: Literal["select_all"] = "select_all"
    entries: list[SelectEntry] = Field(
        default_factory=list,
        description="Ordered (path, action) pairs"
    )
    syntax: PathSyntax = "bracket"


class CollectDocument(BaseModel):
    """Run actions in order from the current context."""

    op: Literal["collect"] = "collect"
    actions: list["ActionDocument"] = Field(default_factory=list)


class MapDocument(BaseModel):
    """Apply an action to every element of the sequence context."""

    op: Literal["map"] = "map"
    action: "ActionDocument"


class RangeDocument(BaseModel):
    """Apply an action to a window of the sequence context."""

    op: Literal["range"] = "range"
    start: int = Field(..., ge=0, description="Index of the first item")
    length: int = Field(..., ge=0, description="Number of items in the window")
    action: "ActionDocument"


ActionDocument = Annotated[
    Union[
        ReplaceDocument,
        MergeDocument,
        ConcatDocument,
        SetInDocument,
        SelectDocument,
        SelectArrayDocument,
        SelectAllDocument,
        CollectDocument,
        MapDocument,
        RangeDocument,
    ],
    Field(discriminator="op"),
]

for _model in (
    SetInDocument,
    SelectDocument,
    SelectArrayDocument,
    SelectEntry,
    SelectAllDocument,
    CollectDocument,
    MapDocument,
    RangeDocument,
):
    _model.model_rebuild()

_document_adapter = TypeAdapter(ActionDocument)


def parse_action_document(data: Any) -> ActionDocument:
    """
    Validate raw data (e.g. decoded JSON) into an action document.

    Raises:
        pydantic.ValidationError: If the data is not a valid document
    """
    return _document_adapter.validate_python(data)


class UpdateError(BaseModel):
    """Details of a failed update."""

    error: str = Field(description="Error type")
    message: str = Field(description="Error message")
    index: Optional[int] = Field(
        default=None,
        description="Index of the failing document (batch updates only)"
    )


class UpdateResult(BaseModel):
    """Result of applying one or more action documents."""

    success: bool = Field(description="Whether every update was applied")
    updates_applied: int = Field(
        default=0,
        description="Number of documents applied"
    )
    state: Any = Field(
        default=None,
        description="The new state (if successful)"
    )
    errors: list[UpdateError] = Field(
        default_factory=list,
        description="Errors (if any)"
    )
