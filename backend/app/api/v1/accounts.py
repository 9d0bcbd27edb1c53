"""
Account API endpoints.
Read-only views of Moov accounts, their payment methods and wallets, plus
attaching a Plaid-verified bank account.
"""
from fastapi import APIRouter, Depends, Path

from backend.app.api.dependencies import get_account_service, get_bank_link_bridge
from backend.app.api.errors import failed_response
from backend.app.schemas.accounts import (
    AccountsResponse,
    AddPlaidLinkRequest,
    PaymentMethodsResponse,
    WalletResponse,
    )
from backend.app.schemas.common import ErrorResponse
from backend.app.services.account_service import AccountService
from backend.app.services.bank_link import BankLinkBridge
from backend.app.services.provider_http import ProviderTransportError

account_router = APIRouter(prefix="/accounts", tags=["Accounts"])


# ============================================================================
# ENDPOINTS
# ============================================================================

@account_router.get("", response_model=AccountsResponse, responses={400: {"model": ErrorResponse}})
async def list_accounts(service: AccountService = Depends(get_account_service)):
    """
    List every account of the platform.

    Returns:
        {status, count, accounts}
    """
    try:
        return await service.list_accounts()
    except ProviderTransportError as e:
        return failed_response(500, "Error fetching Moov accounts", str(e))


@account_router.get(
    "/{accountID}/payment-methods",
    response_model=PaymentMethodsResponse,
    responses={400: {"model": ErrorResponse}},
    )
async def list_payment_methods(
    account_id: str = Path(..., alias="accountID", min_length=1, description="Moov account id"),
    service: AccountService = Depends(get_account_service),
    ):
    """Bank accounts linked to `accountID`."""
    try:
        return await service.list_payment_methods(account_id)
    except ProviderTransportError as e:
        return failed_response(500, "Error fetching payment methods", str(e))


@account_router.get(
    "/{accountID}/wallet",
    response_model=WalletResponse,
    responses={400: {"model": ErrorResponse}},
    )
async def get_wallet(
    account_id: str = Path(..., alias="accountID", min_length=1, description="Moov account id"),
    service: AccountService = Depends(get_account_service),
    ):
    """Wallets of `accountID`."""
    try:
        return await service.get_wallet(account_id)
    except ProviderTransportError as e:
        return failed_response(500, "Error fetching wallet", str(e))


@account_router.post("/{accountID}/add-plaid-link", responses={400: {"model": ErrorResponse}})
async def add_plaid_link(
    request: AddPlaidLinkRequest,
    account_id: str = Path(..., alias="accountID", min_length=1, description="Moov account id"),
    bridge: BankLinkBridge = Depends(get_bank_link_bridge),
    ):
    """
    Attach the bank account behind a Plaid processor token to `accountID`.

    Returns:
        Moov bank-account payload
    """
    try:
        return await bridge.attach_processor_token(account_id, request.processor_token)
    except ProviderTransportError as e:
        return failed_response(500, f"Error Add Plaid information to Moov Account {account_id}", str(e))
