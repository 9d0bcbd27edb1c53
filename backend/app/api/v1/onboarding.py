"""
Onboarding API endpoint.
Creates and configures one Moov business account per submitted operator.
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from backend.app.api.dependencies import get_onboarding_orchestrator
from backend.app.api.errors import failed_response
from backend.app.logging_config import get_logger
from backend.app.schemas.common import ErrorResponse
from backend.app.schemas.onboarding import CreateAccountRequest, CreateAccountResponse
from backend.app.services.onboarding import OnboardingOrchestrator
from backend.app.services.provider_http import ProviderTimeoutError, ProviderTransportError

logger = get_logger(__name__)
onboarding_router = APIRouter(tags=["Onboarding"])

EMPTY_OPERATORS_MESSAGE = "operators array is required and must not be empty"
BOOTSTRAP_TIMEOUT_MESSAGE = "Timed out getting Moov access token"


@onboarding_router.post(
    "/create-account",
    status_code=201,
    responses={
        201: {"model": CreateAccountResponse},
        400: {"model": CreateAccountResponse, "description": "No account created, or invalid input"},
        500: {"model": ErrorResponse},
        },
    )
async def create_accounts(
    payload: Optional[CreateAccountRequest] = Body(None),
    orchestrator: OnboardingOrchestrator = Depends(get_onboarding_orchestrator),
    ):
    """
    Onboard a batch of operators.

    Operators are processed in order. Each failed step is reported in
    `errors`; the batch succeeds (201) as soon as one account was created,
    otherwise it answers 400.
    """
    if payload is None or not payload.operators:
        return failed_response(400, EMPTY_OPERATORS_MESSAGE)

    try:
        result = await orchestrator.run(payload.operators)
    except ProviderTimeoutError as e:
        logger.error("Bootstrap token request timed out", error=str(e))
        return failed_response(500, BOOTSTRAP_TIMEOUT_MESSAGE, str(e))
    except ProviderTransportError as e:
        logger.error("Onboarding batch aborted by transport error", error=str(e))
        return failed_response(500, "Error creating Moov accounts", str(e))

    return JSONResponse(status_code=result.status_code, content=result.to_response())
