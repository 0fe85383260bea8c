"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from acta_admin.api.admin import router as admin_router
from acta_admin.app_logging import configure_logging
from acta_admin.containers import AppContainer
from acta_admin.domain.errors import (
    AdminConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

_STATUS_BY_ERROR: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AdminConflictError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
}


def _failure(status_code: int, message: object) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.verify_connection()
        except Exception:
            logger.critical("Could not connect to the database; refusing to start")
            raise
        logger.info("Database connected for admin panel")
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    async def handle_expected(request: Request, exc: Exception) -> JSONResponse:
        return _failure(_STATUS_BY_ERROR[type(exc)], str(exc))

    for error_type in _STATUS_BY_ERROR:
        app.add_exception_handler(error_type, handle_expected)

    @app.exception_handler(PersistenceError)
    async def handle_persistence(
        request: Request, exc: PersistenceError
    ) -> JSONResponse:
        logger.error("Persistence failure on %s: %s", request.url.path, exc)
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))

    @app.exception_handler(RequestValidationError)
    async def handle_bad_body(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _failure(status.HTTP_400_BAD_REQUEST, "Solicitud inválida")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _failure(exc.status_code, exc.detail)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
