"""
FastAPI application factory.

    uvicorn src.main:create_app --factory --host 0.0.0.0 --port 8080

Static files are mounted LAST: route registration is first-match, so the API routes must be registered before the catch-all.
"""

import logging
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from src.api.routes import (
    chess_error_handler,
    request_validation_error_handler,
    router,
)
from src.core.config import SETTINGS, Settings
from src.core.exceptions import ChessError
from src.core.logging import configure_logging
from src.db.database import build_session_factory
from src.db.repository import GameRepository
from src.db.sql_repository import SQLGameRepository
from src.services.chess_service import ChessService

_log = logging.getLogger(__name__)


def create_app(
    settings: Settings = SETTINGS, repository: Optional[GameRepository] = None
) -> FastAPI:
    """Wire up the layers. Pass a `repository` to swap out the default (SQLAlchemy on in-memory SQLite)."""
    configure_logging(settings.log_level)

    if repository is None:
        repository = SQLGameRepository(build_session_factory(settings.database_url))

    app = FastAPI(title="Chess engine", version="0.1.0")
    app.state.chess_service = ChessService(repository, search_depth=settings.search_depth)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=3600,
    )
    app.add_exception_handler(ChessError, chess_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.include_router(router)

    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        _log.info("No static directory at %s. Serving the API only.", static_dir)

    _log.info("Chess engine API ready (search depth %d)", settings.search_depth)
    return app


def run() -> None:
    """Console entrypoint. Nothing is built at import time: uvicorn calls the factory."""
    uvicorn.run("src.main:create_app", factory=True, host=SETTINGS.host, port=SETTINGS.port)
