"""
Moov banking platform client.

Thin async wrapper over the Moov REST API. Every method performs exactly one
exchange and returns the ProviderResponse unchanged; interpreting rejections
is left to the calling service.

API Documentation: https://docs.moov.io/api/
"""
from __future__ import annotations

from typing import Any

import httpx

from backend.app.config import Settings
from backend.app.services.provider_http import ProviderClient, ProviderResponse


class MoovClient(ProviderClient):
    """Moov REST client bound to one Settings instance."""

    PROVIDER = "moov"

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        super().__init__(
            base_url=settings.MOOV_API_BASE_URL,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            headers={
                "x-moov-version": settings.MOOV_API_VERSION,
                "Origin": settings.MOOV_ORIGIN,
                "Referer": settings.MOOV_ORIGIN,
                },
            transport=transport,
            )

    @staticmethod
    def _bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    # =========================================================================
    # AUTH
    # =========================================================================

    async def request_token(self, scope: str) -> ProviderResponse:
        """Client-credentials grant for the given scope string."""
        return await self._send(
            "POST",
            "/oauth2/token",
            "request_token",
            json_body={
                "grant_type": "client_credentials",
                "client_id": self.settings.MOOV_PUBLIC_KEY,
                "client_secret": self.settings.MOOV_SECRET,
                "scope": scope,
                },
            )

    async def get_tos_token(self, token: str) -> ProviderResponse:
        """One-time terms-of-service disclosure token."""
        return await self._send("GET", "/tos-token", "get_tos_token", headers=self._bearer(token))

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    async def list_accounts(self) -> ProviderResponse:
        """List every account visible to the platform (HTTP Basic auth)."""
        return await self._send(
            "GET",
            "/accounts",
            "list_accounts",
            auth=(self.settings.MOOV_PUBLIC_KEY, self.settings.MOOV_SECRET),
            )

    async def create_account(self, payload: dict[str, Any], token: str) -> ProviderResponse:
        return await self._send("POST", "/accounts", "create_account", json_body=payload, headers=self._bearer(token))

    async def patch_account(self, account_id: str, payload: dict[str, Any], token: str) -> ProviderResponse:
        return await self._send(
            "PATCH", f"/accounts/{account_id}", "patch_account", json_body=payload, headers=self._bearer(token)
            )

    async def add_representative(self, account_id: str, payload: dict[str, Any], token: str) -> ProviderResponse:
        return await self._send(
            "POST",
            f"/accounts/{account_id}/representatives",
            "add_representative",
            json_body=payload,
            headers=self._bearer(token),
            )

    async def update_underwriting(self, account_id: str, payload: dict[str, Any], token: str) -> ProviderResponse:
        return await self._send(
            "PUT",
            f"/accounts/{account_id}/underwriting",
            "update_underwriting",
            json_body=payload,
            headers=self._bearer(token),
            )

    # =========================================================================
    # BANK ACCOUNTS / WALLETS
    # =========================================================================

    async def add_bank_account(self, account_id: str, payload: dict[str, Any], token: str) -> ProviderResponse:
        """Link a bank account, either manual ({"account": ...}) or via Plaid ({"plaid": ...})."""
        return await self._send(
            "POST",
            f"/accounts/{account_id}/bank-accounts",
            "add_bank_account",
            json_body=payload,
            headers=self._bearer(token),
            )

    async def list_bank_accounts(self, account_id: str, token: str) -> ProviderResponse:
        return await self._send(
            "GET", f"/accounts/{account_id}/bank-accounts", "list_bank_accounts", headers=self._bearer(token)
            )

    async def list_wallets(self, account_id: str, token: str) -> ProviderResponse:
        return await self._send("GET", f"/accounts/{account_id}/wallets", "list_wallets", headers=self._bearer(token))
