"""
Moov access-token issuance.

Tokens are minted with the client-credentials grant. The scope string decides
what the token may touch:
- without an account id: organization-level (partial) scopes templated with
  the platform's own account id
- with an account id: entity-scoped (full) scopes for that account
"""
from __future__ import annotations

from typing import Any, Optional

from backend.app.config import Settings
from backend.app.logging_config import get_logger
from backend.app.services.moov_client import MoovClient
from backend.app.services.provider_http import UpstreamRejectedError
from backend.app.services.scopes import ScopeResolver

logger = get_logger(__name__)

ACCESS_TOKEN_FAILED = "Failed to get access token"


async def fetch_access_token(moov: MoovClient, scope: str, failure_message: str = ACCESS_TOKEN_FAILED) -> str:
    """
    Request a token and return only its access_token.

    Raises:
        UpstreamRejectedError: Moov refused the grant (status 400)
    """
    response = await moov.request_token(scope)
    token = response.get("access_token") if response.ok else None
    if not token:
        raise UpstreamRejectedError(failure_message, error=response.payload, status_code=400)
    return token


class TokenService:
    """Issues tokens for the browser client."""

    def __init__(self, moov: MoovClient, resolver: ScopeResolver, settings: Settings):
        self.moov = moov
        self.resolver = resolver
        self.settings = settings

    async def _issue(self, scope: str, failure_message: str) -> Any:
        response = await self.moov.request_token(scope)
        if not response.ok:
            raise UpstreamRejectedError(failure_message, error=response.payload, status_code=400)
        return response.payload

    async def issue_token(self, account_id: Optional[str] = None) -> Any:
        """
        Token for the browser client.

        Args:
            account_id: Entity to scope the token to; None for an organization-level token

        Returns:
            Moov's token payload, unchanged
        """
        if account_id:
            scope = self.resolver.resolve(account_id, full=True)
        else:
            scope = self.resolver.resolve(self.settings.MOOV_ACCOUNT_ID, full=False)
        payload = await self._issue(scope, "Error fetching moov accessToken")
        logger.info("Access token issued", account_id=account_id, entity_scoped=bool(account_id))
        return payload

    async def refresh_token(self, account_id: str) -> Any:
        """
        Fresh entity-scoped token.

        Moov has no refresh grant for client credentials, so this mints a new
        token with the full scope set of the account.
        """
        payload = await self._issue(
            self.resolver.resolve(account_id, full=True), "Error fetching refreshed accessToken"
            )
        logger.info("Access token refreshed", account_id=account_id)
        return payload
