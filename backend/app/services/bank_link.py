"""
Bank-link bridge between Plaid and Moov.

Flow driven by the browser client:
1. create_link_token          -> Plaid Link session
2. create_processor_token     -> public token exchanged for an item access
                                 token, then a Moov processor token
3. attach_processor_token     -> bank account linked to a Moov account

Every hop short-circuits on failure. Plaid rejections keep Plaid's HTTP status;
Moov rejections are answered with 400.
"""
from __future__ import annotations

from typing import Any

from backend.app.logging_config import get_logger
from backend.app.schemas.accounts import LinkTokenResponse, ProcessorTokenResponse
from backend.app.services.moov_client import MoovClient
from backend.app.services.plaid_client import PlaidClient
from backend.app.services.provider_http import UpstreamRejectedError
from backend.app.services.scopes import ScopeResolver
from backend.app.services.token_service import fetch_access_token

logger = get_logger(__name__)


class BankLinkBridge:
    """Links externally verified bank accounts to Moov accounts."""

    def __init__(self, plaid: PlaidClient, moov: MoovClient, resolver: ScopeResolver):
        self.plaid = plaid
        self.moov = moov
        self.resolver = resolver

    async def create_link_token(self) -> LinkTokenResponse:
        response = await self.plaid.create_link_token()
        if not response.ok:
            raise UpstreamRejectedError(
                "Error creating PLAID token", error=response.payload, status_code=response.status_code
                )
        logger.info("Plaid link token created")
        return LinkTokenResponse(link_token=response.get("link_token"))

    async def create_processor_token(self, public_token: str, account_id: str) -> ProcessorTokenResponse:
        """
        Turn a Link public token into a Moov processor token.

        Args:
            public_token: Token returned by Plaid Link on success
            account_id: Plaid account picked by the user in Link

        Raises:
            UpstreamRejectedError: with Plaid's status, on either hop
        """
        exchanged = await self.plaid.exchange_public_token(public_token)
        if not exchanged.ok:
            raise UpstreamRejectedError(
                "Error exchanging public token", error=exchanged.payload, status_code=exchanged.status_code
                )

        processor = await self.plaid.create_processor_token(exchanged.get("access_token"), account_id)
        if not processor.ok:
            raise UpstreamRejectedError(
                "Error creating processor token", error=processor.payload, status_code=processor.status_code
                )

        logger.info("Plaid processor token created", plaid_account_id=account_id)
        return ProcessorTokenResponse(processor_token=processor.get("processor_token"))

    async def attach_processor_token(self, account_id: str, processor_token: str) -> Any:
        """
        Link the bank account behind a processor token to a Moov account.

        Returns:
            Moov's bank-account payload, unchanged
        """
        token = await fetch_access_token(self.moov, self.resolver.resolve(account_id, full=True))

        response = await self.moov.add_bank_account(account_id, {"plaid": {"token": processor_token}}, token)
        if not response.ok:
            raise UpstreamRejectedError("Failed to add Plaid bank account", error=response.payload)

        logger.info("Plaid bank account attached", account_id=account_id)
        return response.payload
