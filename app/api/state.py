"""
State update endpoints.

These endpoints apply action documents to a caller-supplied state.
Nothing is stored: the new state is returned to the caller.
"""

import logging
from typing import Any, Literal, Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from app.config import settings
from composable_state import (
    ActionDocument,
    PathSyntaxError,
    UpdateResult,
    __version__ as engine_version,
    apply_update,
    path_split,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Request/Response Models ---

class ApplyRequest(BaseModel):
    """Request body for applying an action document to a state."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "state": {"a": {"b": {"c": True}}, "items": [1, 2, 99, 100, 3]},
                "action": {
                    "op": "collect",
                    "actions": [
                        {
                            "op": "select",
                            "path": "a.b.c",
                            "action": {"op": "replace", "value": False}
                        },
                        {
                            "op": "select",
                            "path": "items",
                            "action": {
                                "op": "range",
                                "start": 2,
                                "length": 2,
                                "action": {"op": "replace", "value": []}
                            }
                        }
                    ]
                }
            }
        }
    )

    state: Any = Field(
        default=None,
        description="The current state (any JSON value)"
    )
    action: ActionDocument = Field(
        ...,
        description="Action document to apply"
    )


class PathRequest(BaseModel):
    """Request body for path parsing."""

    path: str = Field(..., description="Path string to parse")
    syntax: Optional[Literal["bracket", "dot"]] = Field(
        default=None,
        description="Path syntax (defaults to the configured syntax)"
    )


class PathResponse(BaseModel):
    """Parsed path segments."""

    segments: list[str]


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(description="Error type")
    message: str = Field(description="Error message")


# --- Endpoints ---

@router.post(
    "/apply",
    response_model=UpdateResult,
    responses={
        200: {"description": "Update applied"},
        422: {"model": ErrorResponse, "description": "Update could not be applied"},
    },
    summary="Apply an action document to a state",
)
async def apply_state_update(request: ApplyRequest) -> UpdateResult:
    """
    Apply an action document to the given state.

    Returns the new state. The update fails with 422 when the action does
    not fit the shape of the state (e.g. merging into a list).
    """
    logger.info(
        "Applying update | engine=%s op=%s",
        engine_version,
        request.action.op,
    )

    result = apply_update(request.state, request.action)

    if not result.success:
        error = result.errors[0]
        logger.error("Update error: %s", error.message)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": error.error, "message": error.message},
        )

    return result


@router.post(
    "/paths",
    response_model=PathResponse,
    responses={
        422: {"model": ErrorResponse, "description": "Malformed path"},
    },
    summary="Parse a path string into segments",
)
async def parse_path(request: PathRequest) -> PathResponse:
    """Split a path string into its key segments."""
    syntax = request.syntax or settings.path_syntax

    try:
        segments = path_split(request.path, syntax)
    except PathSyntaxError as e:
        logger.error("Path error: %s", str(e))
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": type(e).__name__, "message": str(e)},
        )

    return PathResponse(segments=segments)
