"""
Plaid API endpoints.
Link token creation and public-token to Moov processor-token exchange.
"""
from fastapi import APIRouter, Depends

from backend.app.api.dependencies import get_bank_link_bridge
from backend.app.api.errors import failed_response
from backend.app.schemas.accounts import LinkTokenResponse, ProcessorTokenRequest, ProcessorTokenResponse
from backend.app.schemas.common import ErrorResponse
from backend.app.services.bank_link import BankLinkBridge
from backend.app.services.provider_http import ProviderTransportError

plaid_router = APIRouter(prefix="/plaid", tags=["Plaid"])


@plaid_router.post("/create-token", response_model=LinkTokenResponse, responses={400: {"model": ErrorResponse}})
async def create_link_token(bridge: BankLinkBridge = Depends(get_bank_link_bridge)):
    """
    Start a Plaid Link session.

    Returns:
        {link_token}
    """
    try:
        return await bridge.create_link_token()
    except ProviderTransportError as e:
        return failed_response(500, "Error creating PLAID token", str(e))


@plaid_router.post(
    "/moov-processor-token",
    response_model=ProcessorTokenResponse,
    responses={400: {"model": ErrorResponse}},
    )
async def create_processor_token(
    request: ProcessorTokenRequest,
    bridge: BankLinkBridge = Depends(get_bank_link_bridge),
    ):
    """Exchange a Link public token for a Moov processor token."""
    try:
        return await bridge.create_processor_token(request.public_token, request.account_id)
    except ProviderTransportError as e:
        return failed_response(500, "Error creating processor token", str(e))
