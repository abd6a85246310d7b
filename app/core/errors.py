# app/core/errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class MarketplaceError(Exception):
    """Base for errors raised by the marketplace core."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(MarketplaceError):
    status_code = 404

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ValidationFailure(MarketplaceError):
    """Malformed input rejected before the store is touched."""

    status_code = 422


class ConflictError(ValidationFailure):
    """Input is well-formed but clashes with stored state (duplicate review etc.)."""

    status_code = 400


class PermissionDenied(MarketplaceError):
    status_code = 403


class TransactionFailure(MarketplaceError):
    """A multi-step write failed and was rolled back as a whole."""

    status_code = 500


def register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(MarketplaceError)
    async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
        if isinstance(exc, TransactionFailure):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
