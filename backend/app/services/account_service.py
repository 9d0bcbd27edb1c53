"""
Read-only account queries: platform accounts, linked bank accounts, wallets.
"""
from __future__ import annotations

from backend.app.config import Settings
from backend.app.logging_config import get_logger
from backend.app.schemas.accounts import AccountsResponse, PaymentMethodsResponse, WalletResponse
from backend.app.services.moov_client import MoovClient
from backend.app.services.provider_http import UpstreamRejectedError, payload_length
from backend.app.services.scopes import ScopeResolver
from backend.app.services.token_service import fetch_access_token

logger = get_logger(__name__)


class AccountService:
    """Account reads backed by Moov."""

    def __init__(self, moov: MoovClient, resolver: ScopeResolver, settings: Settings):
        self.moov = moov
        self.resolver = resolver
        self.settings = settings

    async def list_accounts(self) -> AccountsResponse:
        """Every account of the platform (listed with HTTP Basic credentials)."""
        # An organization-level token proves the credentials before the listing
        await fetch_access_token(self.moov, self.resolver.resolve(self.settings.MOOV_ACCOUNT_ID, full=False))

        response = await self.moov.list_accounts()
        if not response.ok:
            raise UpstreamRejectedError("Failed to fetch Moov accounts", error=response.payload)

        count = payload_length(response.payload)
        logger.info("Fetched Moov accounts", count=count)
        return AccountsResponse(status="success", count=count, accounts=response.payload)

    async def list_payment_methods(self, account_id: str) -> PaymentMethodsResponse:
        """Bank accounts linked to one account."""
        token = await fetch_access_token(self.moov, self.resolver.resolve(account_id, full=True))

        response = await self.moov.list_bank_accounts(account_id, token)
        if not response.ok:
            raise UpstreamRejectedError("Failed to fetch payment methods", error=response.payload)

        count = payload_length(response.payload)
        logger.info("Fetched payment methods", account_id=account_id, count=count)
        return PaymentMethodsResponse(
            status="success",
            account_id=account_id,
            count=count,
            payment_methods=response.payload,
            )

    async def get_wallet(self, account_id: str) -> WalletResponse:
        token = await fetch_access_token(self.moov, self.resolver.resolve(account_id, full=True))

        response = await self.moov.list_wallets(account_id, token)
        if not response.ok:
            raise UpstreamRejectedError("Failed to fetch wallet", error=response.payload)

        logger.info("Fetched wallet", account_id=account_id)
        return WalletResponse(status="success", account_id=account_id, wallet=response.payload)
