"""
FastAPI dependencies shared by the routers.

Each request gets its own provider clients, closed when the response is sent.
The Settings instance and the optional httpx transport come from app.state,
where create_app() stored them.
"""
from typing import AsyncGenerator

from fastapi import Depends, Request

from backend.app.config import Settings
from backend.app.services.account_service import AccountService
from backend.app.services.bank_link import BankLinkBridge
from backend.app.services.moov_client import MoovClient
from backend.app.services.onboarding import OnboardingOrchestrator
from backend.app.services.plaid_client import PlaidClient
from backend.app.services.scopes import ScopeResolver
from backend.app.services.token_service import TokenService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_scope_resolver(request: Request) -> ScopeResolver:
    return request.app.state.scope_resolver


async def get_moov_client(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    ) -> AsyncGenerator[MoovClient, None]:
    """
    Request-scoped Moov client.

    Usage in FastAPI:
        @router.get("/")
        async def endpoint(moov: MoovClient = Depends(get_moov_client)):
            response = await moov.list_accounts()

    Yields:
        MoovClient: closed after the response
    """
    async with MoovClient(settings, transport=request.app.state.http_transport) as client:
        yield client


async def get_plaid_client(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    ) -> AsyncGenerator[PlaidClient, None]:
    """Request-scoped Plaid client."""
    async with PlaidClient(settings, transport=request.app.state.http_transport) as client:
        yield client


# ============================================================================
# SERVICES
# ============================================================================

def get_token_service(
    moov: MoovClient = Depends(get_moov_client),
    resolver: ScopeResolver = Depends(get_scope_resolver),
    settings: Settings = Depends(get_app_settings),
    ) -> TokenService:
    return TokenService(moov, resolver, settings)


def get_account_service(
    moov: MoovClient = Depends(get_moov_client),
    resolver: ScopeResolver = Depends(get_scope_resolver),
    settings: Settings = Depends(get_app_settings),
    ) -> AccountService:
    return AccountService(moov, resolver, settings)


def get_onboarding_orchestrator(
    moov: MoovClient = Depends(get_moov_client),
    resolver: ScopeResolver = Depends(get_scope_resolver),
    ) -> OnboardingOrchestrator:
    return OnboardingOrchestrator(moov, resolver)


def get_bank_link_bridge(
    plaid: PlaidClient = Depends(get_plaid_client),
    moov: MoovClient = Depends(get_moov_client),
    resolver: ScopeResolver = Depends(get_scope_resolver),
    ) -> BankLinkBridge:
    return BankLinkBridge(plaid, moov, resolver)
