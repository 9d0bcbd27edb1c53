"""
Onboarding schemas.

DTOs for POST /create-account: the operator records supplied by the browser
client and the batch result returned by the onboarding orchestrator.

**Design Notes**:
- Nested provider shapes (address, phone, name, birth date) are modelled with
  the fields Moov documents; unknown keys are kept and forwarded
- Government ID and industry codes are forwarded untouched (dict)
- Only legalBusinessName is mandatory; every other default is applied once
  by services.operator_profile.normalize_operator
"""
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from backend.app.schemas.common import CamelModel, ResponseStatus


class PassthroughModel(CamelModel):
    """Provider-shaped object: documented fields typed, extra keys forwarded."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


# =============================================================================
# NESTED VALUE OBJECTS
# =============================================================================

class Address(PassthroughModel):
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state_or_province: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class Phone(PassthroughModel):
    number: Optional[str] = None
    country_code: Optional[str] = None


class PersonName(PassthroughModel):
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    suffix: Optional[str] = None


class BirthDate(PassthroughModel):
    day: Optional[int] = Field(None, ge=1, le=31)
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = None


# =============================================================================
# OPERATOR INPUT
# =============================================================================

class BusinessInfo(CamelModel):
    """Business profile of one operator."""

    legal_business_name: str = Field(..., min_length=1, description="Registered legal name")
    business_type: Optional[str] = Field(None, description="Free text, normalized to a platform business type")
    website: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[Phone] = None
    address: Optional[Address] = None
    doing_business_as: Optional[str] = None
    description: Optional[str] = None
    tax_id: Optional[str] = Field(None, alias="taxID", description="EIN")
    industry_codes: Optional[dict[str, Any]] = None

    # Underwriting hints
    average_transaction_size: Optional[int] = Field(None, ge=0)
    max_transaction_size: Optional[int] = Field(None, ge=0)
    average_monthly_transaction_volume: Optional[int] = Field(None, ge=0)

    @field_validator('legal_business_name')
    @classmethod
    def validate_legal_business_name(cls, v):
        """Ensure the legal name is not just whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("legalBusinessName cannot be empty or whitespace")
        return v


class Responsibilities(CamelModel):
    is_controller: Optional[bool] = None
    is_owner: Optional[bool] = None
    ownership_percentage: Optional[int] = Field(None, ge=0, le=100)
    job_title: Optional[str] = None


class Contact(CamelModel):
    """Primary contact, registered as the controlling representative."""

    name: Optional[PersonName] = None
    phone: Optional[Phone] = None
    email: Optional[str] = None
    address: Optional[Address] = None
    birth_date: Optional[BirthDate] = None
    government_id: Optional[dict[str, Any]] = Field(None, alias="governmentID")
    responsibilities: Optional[Responsibilities] = None


class BankAccountInput(CamelModel):
    """Manually entered bank account."""

    account_number: str = Field(..., min_length=1)
    routing_number: str = Field(..., min_length=1)
    bank_account_type: Optional[str] = Field(None, description="checking (default) or savings")
    holder_name: Optional[str] = None
    holder_type: Optional[str] = Field(None, description="business (default) or individual")


class Operator(CamelModel):
    """One business to onboard."""

    business_info: BusinessInfo
    contact: Optional[Contact] = None
    bank_account: Optional[BankAccountInput] = None


class CreateAccountRequest(CamelModel):
    """
    Body of POST /create-account.

    `operators` is optional at the schema level so that a missing or empty
    list is answered with the dedicated 400 message by the router.
    """
    operators: Optional[List[Operator]] = None


# =============================================================================
# BATCH RESULT
# =============================================================================

class CreatedAccount(CamelModel):
    """Success record for one operator."""

    operator_name: str
    account_id: str = Field(..., alias="accountID")
    moov_account: Any = Field(None, description="Raw create-account response")
    access_token: str = Field(..., description="Entity-scoped token (bootstrap token on fallback)")


class PipelineFailure(CamelModel):
    """Step-tagged failure for one operator."""

    operator: str
    account_id: Optional[str] = Field(None, alias="accountID")
    step: str
    error: Any = Field(None, description="Provider error body or exception text")


class CreateAccountResponse(CamelModel):
    """Body of POST /create-account."""

    status: ResponseStatus
    message: str
    accounts: List[CreatedAccount] = Field(default_factory=list)
    errors: Optional[List[PipelineFailure]] = None
