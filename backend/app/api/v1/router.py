"""
API v1 router.
Aggregates all v1 endpoints.
"""
from fastapi import APIRouter

from backend.app.api.v1 import accounts, onboarding, plaid, tokens
from backend.app.logging_config import get_logger
from backend.app.schemas.common import HealthResponse

logger = get_logger(__name__)

router = APIRouter()

# Include sub-routers
router.include_router(tokens.token_router)
router.include_router(accounts.account_router)
router.include_router(onboarding.onboarding_router)
router.include_router(plaid.plaid_router)


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.
    Returns service status.

    Returns:
        HealthResponse: Status message
    """
    logger.debug("Health check requested")
    return HealthResponse()
