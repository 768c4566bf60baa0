"""HTTP mapping for storefront failures.

Business failures render as ``{"error": {"kind", "code", "message",
"entity_id"}}`` with a status chosen by kind. Storage outages surface as
503 Unavailable and are never retried here.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers
from sqlalchemy.exc import OperationalError

from storefront.errors import StorefrontError, UnavailableError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_KIND = {
    "NotFound": 404,
    "NotOwner": 403,
    "ValidationError": 400,
    "StateConflict": 409,
    "InsufficientFunds": 402,
    "Unavailable": 503,
}

INFRASTRUCTURE_ERRORS = (ConnectionError, TimeoutError, OperationalError)


def error_response(exc: StorefrontError) -> JSONResponse:
    return JSONResponse(
        status_code=STATUS_BY_KIND.get(exc.kind, 500),
        content={"error": exc.to_dict()},
    )


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    logger.warning(
        "request_rejected",
        path=request.url.path,
        kind=exc.kind,
        code=exc.code,
        entity_id=exc.entity_id,
    )
    return error_response(exc)


async def infrastructure_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("storage_unavailable", path=request.url.path, error=str(exc), exc_type=type(exc).__name__)
    return error_response(UnavailableError.from_exception(exc))


def register_error_handlers(app: FastAPI) -> None:
    """Install storefront and Protean exception handlers on ``app``."""
    register_exception_handlers(app)
    app.add_exception_handler(StorefrontError, storefront_error_handler)
    for exc_type in INFRASTRUCTURE_ERRORS:
        app.add_exception_handler(exc_type, infrastructure_error_handler)
