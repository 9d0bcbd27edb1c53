"""
Account, token and bank-link schemas.

DTOs for the token endpoints, the account read endpoints and the Plaid
bank-link bridge. Provider payloads are echoed untouched (typed as Any).
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from backend.app.schemas.common import CamelModel, ResponseStatus


# =============================================================================
# TOKENS
# =============================================================================

class RefreshTokenRequest(CamelModel):
    """Body of POST /refreshAccessToken."""

    refresh_token: Optional[str] = Field(None, description="Accepted for compatibility, not used")
    account_id: str = Field(..., min_length=1, alias="accountID")


# =============================================================================
# ACCOUNT READS
# =============================================================================

class AccountsResponse(BaseModel):
    status: ResponseStatus = "success"
    count: int = Field(..., ge=0)
    accounts: Any


class PaymentMethodsResponse(CamelModel):
    status: ResponseStatus = "success"
    account_id: str = Field(..., alias="accountID")
    count: int = Field(..., ge=0)
    payment_methods: Any


class WalletResponse(CamelModel):
    status: ResponseStatus = "success"
    account_id: str = Field(..., alias="accountID")
    wallet: Any


# =============================================================================
# PLAID BRIDGE (snake_case on the wire, as Plaid Link returns it)
# =============================================================================

class AddPlaidLinkRequest(BaseModel):
    """Body of POST /accounts/{accountID}/add-plaid-link."""

    processor_token: str = Field(..., min_length=1)


class LinkTokenResponse(BaseModel):
    link_token: Optional[str] = None


class ProcessorTokenRequest(BaseModel):
    """Body of POST /plaid/moov-processor-token."""

    public_token: str = Field(..., min_length=1)
    account_id: str = Field(..., min_length=1, description="Plaid account chosen in Link")


class ProcessorTokenResponse(BaseModel):
    processor_token: Optional[str] = None
