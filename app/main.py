from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.database.database import build_engine, build_session_factory
from app.routers.prompt_router import router as prompt_router
from app.services.errors import PersistenceError

logger = logging.getLogger(__name__)


app = FastAPI(title="Prompt Store API", version="1.0.0")


# Exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "status_code": exc.status_code},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle malformed path parameters and request bodies."""
    logger.warning(f"Validation error: {exc}")
    return JSONResponse(
        status_code=422,
        content={
            "error": "Validation error",
            "details": jsonable_encoder(exc.errors()),
            "status_code": 422,
        },
    )


@app.exception_handler(PersistenceError)
async def persistence_exception_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    """Handle storage failures; the raw error text is passed through unless disabled."""
    logger.error(f"Database error: {exc}")
    message = str(exc) if settings.expose_storage_errors else "Database error"
    return JSONResponse(
        status_code=500,
        content={"error": message, "status_code": 500},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "status_code": 500},
    )


@app.on_event("startup")
async def on_startup() -> None:
    engine = build_engine(settings)
    # Refuse to start against an unreachable or misconfigured database
    try:
        async with engine.connect():
            pass
    except (SQLAlchemyError, OSError) as exc:
        logger.error(f"Cannot connect to database: {exc}")
        await engine.dispose()
        raise
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    logger.info("Connection pool ready")


@app.on_event("shutdown")
async def on_shutdown() -> None:
    engine = getattr(app.state, "engine", None)
    if engine is not None:
        await engine.dispose()


app.include_router(prompt_router)
