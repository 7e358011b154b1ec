"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from coaching_scheduler.api.admin import router as admin_router
from coaching_scheduler.api.sessions import router as sessions_router
from coaching_scheduler.api.staff import router as staff_router
from coaching_scheduler.app_logging import configure_logging
from coaching_scheduler.containers import AppContainer
from coaching_scheduler.domain.errors import (
    BookingError,
    ConflictError,
    DependencyUnavailableError,
    InvalidInputError,
    NotFoundError,
    ProvisioningFailedError,
)

_STATUS_BY_ERROR: dict[type[BookingError], int] = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    ProvisioningFailedError: status.HTTP_502_BAD_GATEWAY,
    DependencyUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(sessions_router)
    app.include_router(staff_router)
    app.include_router(admin_router)

    @app.exception_handler(BookingError)
    async def booking_error_handler(
        request: Request, exc: BookingError
    ) -> JSONResponse:
        status_code = status_code_for(exc)
        logger.info(
            "Booking request rejected: %s",
            exc.message,
            extra={"path": request.url.path, "status_code": status_code},
        )
        return JSONResponse(status_code=status_code, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception(
            "Unhandled error", exc_info=exc, extra={"path": request.url.path}
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error."},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def status_code_for(exc: BookingError) -> int:
    """Map a booking error to its HTTP status code."""
    for error_type in type(exc).__mro__:
        if error_type in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[error_type]
    return status.HTTP_400_BAD_REQUEST
