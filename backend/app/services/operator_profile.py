"""
Operator normalization.

Turns one caller-supplied Operator into an OnboardingProfile holding the
fully-defaulted Moov payload of every onboarding step. Normalization runs once
per operator before the pipeline starts; pipeline steps only read the profile.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel

from backend.app.schemas.onboarding import BankAccountInput, BusinessInfo, Contact, Operator
from backend.app.utils.business_type import normalize_business_type

ACCOUNT_CAPABILITIES = ("transfers", "send-funds", "collect-funds", "wallet")

# Underwriting fallbacks (USD cents are not used by the platform here: plain units)
DEFAULT_AVERAGE_TRANSACTION_SIZE = 500
DEFAULT_MAX_TRANSACTION_SIZE = 5000
DEFAULT_AVERAGE_MONTHLY_VOLUME = 500000

# Representative fallbacks: the contact is registered as the sole controlling owner
DEFAULT_IS_CONTROLLER = True
DEFAULT_IS_OWNER = True
DEFAULT_OWNERSHIP_PERCENTAGE = 100
DEFAULT_JOB_TITLE = "Owner"

DEFAULT_BANK_ACCOUNT_TYPE = "checking"
DEFAULT_HOLDER_TYPE = "business"


@dataclass(frozen=True)
class OnboardingProfile:
    """
    Canonical onboarding record for one operator.

    Attributes:
        operator_name: Legal business name, used to tag results and failures
        account: Body of the create-account call
        underwriting: Body of the underwriting update
        representative: Body of the add-representative call (None without contact)
        bank_account: Body of the add-bank-account call (None without bank data)
    """
    operator_name: str
    account: dict[str, Any]
    underwriting: dict[str, Any]
    representative: Optional[dict[str, Any]] = None
    bank_account: Optional[dict[str, Any]] = None


def _dump(model: Optional[BaseModel]) -> Optional[dict[str, Any]]:
    if model is None:
        return None
    return model.model_dump(by_alias=True, exclude_none=True)


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value


def build_account_payload(info: BusinessInfo) -> dict[str, Any]:
    """Create-account body: business profile plus requested capabilities."""
    business = _drop_none({
        "legalBusinessName": info.legal_business_name,
        "businessType": normalize_business_type(info.business_type),
        "website": info.website,
        "email": info.email,
        "phone": _dump(info.phone),
        "address": _dump(info.address),
        "doingBusinessAs": info.doing_business_as or None,
        "description": info.description or None,
        "taxID": {"ein": {"number": info.tax_id}} if info.tax_id else None,
        "industryCodes": info.industry_codes or None,
        })
    return {
        "accountType": "business",
        "profile": {"business": business},
        "capabilities": list(ACCOUNT_CAPABILITIES),
        }


def build_underwriting_payload(info: BusinessInfo) -> dict[str, Any]:
    return {
        "averageTransactionSize": _or_default(info.average_transaction_size, DEFAULT_AVERAGE_TRANSACTION_SIZE),
        "maxTransactionSize": _or_default(info.max_transaction_size, DEFAULT_MAX_TRANSACTION_SIZE),
        "averageMonthlyTransactionVolume": _or_default(
            info.average_monthly_transaction_volume, DEFAULT_AVERAGE_MONTHLY_VOLUME
            ),
        }


def build_representative_payload(contact: Contact) -> dict[str, Any]:
    """Representative body with controlling-owner defaults."""
    responsibilities = contact.responsibilities
    return _drop_none({
        "name": _dump(contact.name),
        "phone": _dump(contact.phone),
        "email": contact.email,
        "address": _dump(contact.address),
        "birthDateProvided": True,
        "governmentIDProvided": True,
        "birthDate": _dump(contact.birth_date),
        "governmentID": contact.government_id,
        "responsibilities": {
            "isController": _or_default(responsibilities and responsibilities.is_controller, DEFAULT_IS_CONTROLLER),
            "isOwner": _or_default(responsibilities and responsibilities.is_owner, DEFAULT_IS_OWNER),
            "ownershipPercentage": _or_default(
                responsibilities and responsibilities.ownership_percentage, DEFAULT_OWNERSHIP_PERCENTAGE
                ),
            "jobTitle": (responsibilities and responsibilities.job_title) or DEFAULT_JOB_TITLE,
            },
        })


def build_bank_account_payload(bank: BankAccountInput, legal_business_name: str) -> dict[str, Any]:
    return {
        "account": {
            "accountNumber": bank.account_number,
            "routingNumber": bank.routing_number,
            "bankAccountType": bank.bank_account_type or DEFAULT_BANK_ACCOUNT_TYPE,
            "holderName": bank.holder_name or legal_business_name,
            "holderType": bank.holder_type or DEFAULT_HOLDER_TYPE,
            },
        }


def normalize_operator(operator: Operator) -> OnboardingProfile:
    """
    Build the canonical onboarding record of one operator.

    Args:
        operator: Validated operator input

    Returns:
        OnboardingProfile with every optional field defaulted
    """
    info = operator.business_info
    return OnboardingProfile(
        operator_name=info.legal_business_name,
        account=build_account_payload(info),
        underwriting=build_underwriting_payload(info),
        representative=build_representative_payload(operator.contact) if operator.contact else None,
        bank_account=(
            build_bank_account_payload(operator.bank_account, info.legal_business_name)
            if operator.bank_account else None
            ),
        )
