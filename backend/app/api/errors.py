"""
Failure envelope and application exception handlers.

Every failure leaves the API as {"status": "failed", "message", "error"?}:
- UpstreamRejectedError   -> its own status (400, or the aggregator's status)
- ProviderTransportError  -> 500 with the exception text
- RequestValidationError  -> 400 instead of FastAPI's default 422
"""
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from backend.app.logging_config import get_logger
from backend.app.schemas.common import ErrorResponse
from backend.app.services.provider_http import ProviderTransportError, UpstreamRejectedError

logger = get_logger(__name__)


def failed_response(status_code: int, message: str, error: Any = None) -> JSONResponse:
    """Build the failure envelope; `error` is omitted when None."""
    body = ErrorResponse(message=message, error=error).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def upstream_rejected_handler(request: Request, exc: UpstreamRejectedError) -> JSONResponse:
    return failed_response(exc.status_code, exc.message, exc.error)


async def provider_transport_handler(request: Request, exc: ProviderTransportError) -> JSONResponse:
    logger.error("Provider unreachable", path=request.url.path, provider=exc.provider, error=str(exc))
    return failed_response(500, "Error contacting provider", str(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # ctx may hold exception instances, which are not JSON serializable
    errors = [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()]
    logger.info("Rejected invalid request", path=request.url.path, errors=len(errors))
    return failed_response(400, "Invalid request", errors)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(UpstreamRejectedError, upstream_rejected_handler)
    app.add_exception_handler(ProviderTransportError, provider_transport_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
