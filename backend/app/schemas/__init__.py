"""
Pydantic schemas for Fundbridge.

Used by the API and service layers to validate inbound payloads and to
standardize the JSON returned to the browser client.

**Organization by Domain**:
- common.py: Shared envelope (StatusResponse, ErrorResponse, HealthResponse, CamelModel)
- onboarding.py: Operator input records and the onboarding batch result
- accounts.py: Token, account read and Plaid bridge payloads

**Design Notes**:
- Browser-facing payloads are camelCase on the wire (CamelModel aliases)
- Plaid bridge payloads keep Plaid's snake_case names
- Provider responses are echoed untouched (typed as Any)
"""
from backend.app.schemas.accounts import (
    AccountsResponse,
    AddPlaidLinkRequest,
    LinkTokenResponse,
    PaymentMethodsResponse,
    ProcessorTokenRequest,
    ProcessorTokenResponse,
    RefreshTokenRequest,
    WalletResponse,
    )
from backend.app.schemas.common import (
    CamelModel,
    ErrorResponse,
    HealthResponse,
    StatusResponse,
    )
from backend.app.schemas.onboarding import (
    Address,
    BankAccountInput,
    BirthDate,
    BusinessInfo,
    Contact,
    CreateAccountRequest,
    CreateAccountResponse,
    CreatedAccount,
    Operator,
    PersonName,
    Phone,
    PipelineFailure,
    Responsibilities,
    )

__all__ = [
    # Common
    "CamelModel",
    "StatusResponse",
    "ErrorResponse",
    "HealthResponse",
    # Onboarding input
    "Address",
    "Phone",
    "PersonName",
    "BirthDate",
    "BusinessInfo",
    "Responsibilities",
    "Contact",
    "BankAccountInput",
    "Operator",
    "CreateAccountRequest",
    # Onboarding result
    "CreatedAccount",
    "PipelineFailure",
    "CreateAccountResponse",
    # Tokens & accounts
    "RefreshTokenRequest",
    "AccountsResponse",
    "PaymentMethodsResponse",
    "WalletResponse",
    # Plaid bridge
    "AddPlaidLinkRequest",
    "LinkTokenResponse",
    "ProcessorTokenRequest",
    "ProcessorTokenResponse",
    ]
