"""
Token API endpoints.
Mint Moov access tokens for the browser client.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from backend.app.api.dependencies import get_token_service
from backend.app.api.errors import failed_response
from backend.app.schemas.accounts import RefreshTokenRequest
from backend.app.schemas.common import ErrorResponse
from backend.app.services.provider_http import ProviderTransportError
from backend.app.services.token_service import TokenService

token_router = APIRouter(tags=["Tokens"])


@token_router.get("/accessToken", responses={400: {"model": ErrorResponse}})
async def get_access_token(
    account_id: Optional[str] = Query(None, alias="accountID", description="Entity to scope the token to"),
    service: TokenService = Depends(get_token_service),
    ):
    """
    Issue a Moov access token.

    With `accountID` the token carries the full entity scopes of that account;
    without it, organization-level scopes of the platform account.

    Returns:
        Moov token payload (access_token, expires_in, scope, ...)
    """
    try:
        return await service.issue_token(account_id)
    except ProviderTransportError as e:
        return failed_response(500, "Error fetching moov accessToken", str(e))


@token_router.post("/refreshAccessToken", responses={400: {"model": ErrorResponse}})
async def refresh_access_token(
    request: RefreshTokenRequest,
    service: TokenService = Depends(get_token_service),
    ):
    """Issue a fresh entity-scoped token for `accountID` (refreshToken is ignored)."""
    try:
        return await service.refresh_token(request.account_id)
    except ProviderTransportError as e:
        return failed_response(500, "Error fetching refreshed accessToken", str(e))
