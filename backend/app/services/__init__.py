"""
Services package.
Business logic and provider integrations.

Service Layer:
- OnboardingOrchestrator: per-operator Moov onboarding pipeline
- TokenService / AccountService: token issuance and account reads
- BankLinkBridge: Plaid Link to Moov bank-account bridge
- ScopeResolver: OAuth scope strings for Moov tokens

Provider clients (MoovClient, PlaidClient) share the httpx layer in provider_http.
"""
from backend.app.services.account_service import AccountService
from backend.app.services.bank_link import BankLinkBridge
from backend.app.services.onboarding import OnboardingOrchestrator, OnboardingResult
from backend.app.services.provider_http import (
    ProviderError,
    ProviderTimeoutError,
    ProviderTransportError,
    UpstreamRejectedError,
    )
from backend.app.services.scopes import ScopeResolver, ScopeSet
from backend.app.services.token_service import TokenService

__all__ = [
    "OnboardingOrchestrator",
    "OnboardingResult",
    "TokenService",
    "AccountService",
    "BankLinkBridge",
    "ScopeResolver",
    "ScopeSet",
    "ProviderError",
    "ProviderTransportError",
    "ProviderTimeoutError",
    "UpstreamRejectedError",
    ]
