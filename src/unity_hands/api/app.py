from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from unity_hands.api.auth import router as auth_router
from unity_hands.api.routes import router as api_router
from unity_hands.config import get_settings
from unity_hands.core.errors import InvalidIdentifierError
from unity_hands.db.init import init_database
from unity_hands.logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging()

    app = FastAPI(title=settings.app_name)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    def _startup() -> None:
        init_database()

    @app.exception_handler(InvalidIdentifierError)
    def _invalid_identifier(request: Request, exc: InvalidIdentifierError) -> JSONResponse:
        return JSONResponse({"detail": "Invalid id"}, status_code=400)

    @app.exception_handler(SQLAlchemyError)
    def _database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse({"detail": "Internal Server Error"}, status_code=500)

    @app.get("/", response_class=PlainTextResponse)
    def index() -> str:
        return "Unity Hands server is running"

    @app.get("/health")
    def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(auth_router)
    app.include_router(api_router)
    return app
