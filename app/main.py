"""FastAPI application entry point."""

import logging

from fastapi import FastAPI

from app import __version__
from app.api import health, state
from app.config import settings

logging.basicConfig(level=settings.log_level.upper())

app = FastAPI(
    title="Composable State",
    description="Immutable, composable updates for nested state trees",
    version=__version__,
    debug=settings.debug,
)

app.include_router(health.router, tags=["health"])
app.include_router(state.router, prefix="/state", tags=["state"])
