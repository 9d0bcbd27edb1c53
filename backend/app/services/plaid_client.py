"""
Plaid bank-link aggregator client.

Covers the three Link endpoints the bridge needs: link token creation,
public token exchange and processor token creation. Credentials travel in
the JSON body, as Plaid expects.

API Documentation: https://plaid.com/docs/api/
"""
from __future__ import annotations

from typing import Any

import httpx

from backend.app.config import Settings
from backend.app.services.provider_http import ProviderClient, ProviderResponse

# Link session defaults
LINK_PRODUCTS = ["transactions"]
LINK_COUNTRY_CODES = ["US"]
LINK_LANGUAGE = "en"
TRANSACTIONS_DAYS_REQUESTED = 730
ACCOUNT_FILTERS = {
    "depository": {"account_subtypes": ["checking", "savings"]},
    "credit": {"account_subtypes": ["credit card"]},
    }


class PlaidClient(ProviderClient):
    """Plaid REST client bound to one Settings instance."""

    PROVIDER = "plaid"

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        super().__init__(
            base_url=settings.plaid_base_url,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            transport=transport,
            )

    def _credentials(self) -> dict[str, str]:
        return {"client_id": self.settings.PLAID_CLIENT_ID, "secret": self.settings.PLAID_API_KEY}

    async def create_link_token(self) -> ProviderResponse:
        """Start a Link session for the configured client user."""
        body: dict[str, Any] = {
            **self._credentials(),
            "user": {
                "client_user_id": self.settings.PLAID_CLIENT_USER_ID,
                "phone_number": self.settings.PLAID_USER_PHONE,
                },
            "client_name": self.settings.PLAID_CLIENT_NAME,
            "products": LINK_PRODUCTS,
            "transactions": {"days_requested": TRANSACTIONS_DAYS_REQUESTED},
            "country_codes": LINK_COUNTRY_CODES,
            "language": LINK_LANGUAGE,
            "account_filters": ACCOUNT_FILTERS,
            }
        return await self._send("POST", "/link/token/create", "create_link_token", json_body=body)

    async def exchange_public_token(self, public_token: str) -> ProviderResponse:
        """Swap the Link public token for a long-lived item access token."""
        return await self._send(
            "POST",
            "/item/public_token/exchange",
            "exchange_public_token",
            json_body={**self._credentials(), "public_token": public_token},
            )

    async def create_processor_token(self, access_token: str, account_id: str) -> ProviderResponse:
        """Mint a processor token for one account of the item."""
        return await self._send(
            "POST",
            "/processor/token/create",
            "create_processor_token",
            json_body={
                **self._credentials(),
                "access_token": access_token,
                "account_id": account_id,
                "processor": self.settings.PLAID_PROCESSOR,
                },
            )
