"""
Onboarding orchestrator.

Onboards a batch of operators on Moov. Each operator runs the same linear
pipeline:

1. create_account          (bootstrap token; failure skips the operator)
2. entity-scoped token     (failure falls back to the bootstrap token)
3. get_tos_token / accept_terms_of_service
4. add_representative / mark_owners_provided   (only with a contact)
5. update_underwriting
6. add_bank_account                            (only with bank data)

From step 3 on every rejection is recorded as a step-tagged failure and the
pipeline keeps going. A timeout is recorded as "<step>_timeout"; any other
transport fault ends the operator with a "processing" failure. Operators are
processed strictly one after the other.

The bootstrap token is requested once for the whole batch: if Moov refuses it
nothing is created and the batch reports a single top-level failure.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, List, Optional, Sequence

from backend.app.logging_config import get_logger
from backend.app.schemas.onboarding import CreatedAccount, Operator, PipelineFailure
from backend.app.services.moov_client import MoovClient
from backend.app.services.operator_profile import OnboardingProfile, normalize_operator
from backend.app.services.provider_http import ProviderResponse, ProviderTimeoutError, ProviderTransportError
from backend.app.services.scopes import ScopeResolver

logger = get_logger(__name__)

BOOTSTRAP_FAILED_MESSAGE = "Failed to get access token"
PROCESSING_STEP = "processing"
TIMEOUT_SUFFIX = "_timeout"


# ============================================================================
# RESULT
# ============================================================================

@dataclass(frozen=True)
class OnboardingResult:
    """
    Immutable outcome of one onboarding batch.

    Attributes:
        operator_count: Number of operators submitted
        accounts: One record per operator that obtained an account id
        errors: Step-tagged failures, possibly several per operator
        bootstrap_failed: True when the organization-level token was refused
        bootstrap_error: Moov's error body for the refused bootstrap token
    """
    operator_count: int
    accounts: tuple[CreatedAccount, ...] = ()
    errors: tuple[PipelineFailure, ...] = ()
    bootstrap_failed: bool = False
    bootstrap_error: Any = None

    @property
    def succeeded(self) -> bool:
        return not self.bootstrap_failed and len(self.accounts) > 0

    @property
    def status_code(self) -> int:
        return 201 if self.succeeded else 400

    @property
    def message(self) -> str:
        if self.bootstrap_failed:
            return BOOTSTRAP_FAILED_MESSAGE
        return f"Processed {self.operator_count} operators. Created {len(self.accounts)} accounts."

    def to_response(self) -> dict[str, Any]:
        """JSON body of POST /create-account."""
        status = "success" if self.succeeded else "failed"
        if self.bootstrap_failed:
            return {"status": status, "message": self.message, "error": self.bootstrap_error}

        body: dict[str, Any] = {
            "status": status,
            "message": self.message,
            "accounts": [a.model_dump(by_alias=True, mode="json") for a in self.accounts],
            }
        if self.errors:
            body["errors"] = [e.model_dump(by_alias=True, mode="json", exclude_none=True) for e in self.errors]
        return body


@dataclass
class _Accumulator:
    """Mutable success/failure lists threaded through one batch."""

    accounts: List[CreatedAccount] = field(default_factory=list)
    errors: List[PipelineFailure] = field(default_factory=list)

    def fail(self, operator: str, account_id: Optional[str], step: str, error: Any) -> None:
        logger.warning("Onboarding step failed", operator=operator, account_id=account_id, step=step, error=error)
        self.errors.append(PipelineFailure(operator=operator, account_id=account_id, step=step, error=error))


@dataclass
class _OperatorRun:
    """Per-operator state: the account id is fixed once create_account succeeds."""

    profile: OnboardingProfile
    account_id: Optional[str] = None

    @property
    def name(self) -> str:
        return self.profile.operator_name


# ============================================================================
# ORCHESTRATOR
# ============================================================================

class OnboardingOrchestrator:
    """Runs the onboarding pipeline for a batch of operators."""

    def __init__(self, moov: MoovClient, resolver: ScopeResolver):
        self.moov = moov
        self.resolver = resolver

    async def run(self, operators: Sequence[Operator]) -> OnboardingResult:
        """
        Onboard every operator, in order.

        Args:
            operators: Validated, non-empty operator list

        Returns:
            OnboardingResult (never raises for per-operator failures)

        Raises:
            ProviderTransportError: the bootstrap token exchange itself failed
        """
        profiles = [normalize_operator(op) for op in operators]
        logger.info("Onboarding batch started", operator_count=len(profiles))

        bootstrap = await self.moov.request_token(self.resolver.resolve("", full=False))
        bootstrap_token = bootstrap.get("access_token") if bootstrap.ok else None
        if not bootstrap_token:
            logger.error("Bootstrap token refused", status_code=bootstrap.status_code, error=bootstrap.payload)
            return OnboardingResult(
                operator_count=len(profiles),
                bootstrap_failed=True,
                bootstrap_error=bootstrap.payload,
                )

        acc = _Accumulator()
        for profile in profiles:
            run = _OperatorRun(profile=profile)
            try:
                await self._onboard(run, bootstrap_token, acc)
            except ProviderTransportError as e:
                acc.fail(run.name, run.account_id, PROCESSING_STEP, str(e))

        result = OnboardingResult(
            operator_count=len(profiles),
            accounts=tuple(acc.accounts),
            errors=tuple(acc.errors),
            )
        logger.info(
            "Onboarding batch finished",
            operator_count=result.operator_count,
            created=len(result.accounts),
            failures=len(result.errors),
            )
        return result

    async def _step(
        self,
        run: _OperatorRun,
        acc: _Accumulator,
        step: str,
        call: Awaitable[ProviderResponse],
        ) -> Optional[ProviderResponse]:
        """
        Await one provider call, recording a rejection or timeout as a failure.

        Returns:
            The response when Moov accepted the call, None otherwise
        """
        try:
            response = await call
        except ProviderTimeoutError as e:
            acc.fail(run.name, run.account_id, f"{step}{TIMEOUT_SUFFIX}", str(e))
            return None
        if not response.ok:
            acc.fail(run.name, run.account_id, step, response.payload)
            return None
        return response

    async def _entity_token(self, run: _OperatorRun, bootstrap_token: str) -> str:
        """Entity-scoped token for the new account; the bootstrap token if refused."""
        scope = self.resolver.resolve(run.account_id, full=True)
        try:
            response = await self.moov.request_token(scope)
        except ProviderTimeoutError as e:
            logger.warning(
                "Entity-scoped token timed out, falling back to bootstrap token",
                operator=run.name,
                account_id=run.account_id,
                error=str(e),
                )
            return bootstrap_token

        token = response.get("access_token") if response.ok else None
        if not token:
            logger.warning(
                "Entity-scoped token refused, falling back to bootstrap token",
                operator=run.name,
                account_id=run.account_id,
                status_code=response.status_code,
                error=response.payload,
                )
            return bootstrap_token
        return token

    async def _onboard(self, run: _OperatorRun, bootstrap_token: str, acc: _Accumulator) -> None:
        profile = run.profile

        created = await self._step(
            run, acc, "create_account", self.moov.create_account(profile.account, bootstrap_token)
            )
        if created is None:
            return
        account_id = created.get("accountID")
        if not account_id:
            acc.fail(run.name, None, "create_account", created.payload)
            return
        run.account_id = account_id
        logger.info("Moov account created", operator=run.name, account_id=account_id)

        token = await self._entity_token(run, bootstrap_token)

        # Terms of service
        tos = await self._step(run, acc, "get_tos_token", self.moov.get_tos_token(token))
        if tos is not None:
            await self._step(
                run,
                acc,
                "accept_terms_of_service",
                self.moov.patch_account(account_id, {"termsOfService": {"token": tos.get("token")}}, token),
                )

        # Representative
        if profile.representative is not None:
            representative = await self._step(
                run,
                acc,
                "add_representative",
                self.moov.add_representative(account_id, profile.representative, token),
                )
            if representative is not None:
                await self._step(
                    run,
                    acc,
                    "mark_owners_provided",
                    self.moov.patch_account(
                        account_id, {"profile": {"business": {"ownersProvided": True}}}, token
                        ),
                    )

        await self._step(
            run,
            acc,
            "update_underwriting",
            self.moov.update_underwriting(account_id, profile.underwriting, token),
            )

        # Bank account
        if profile.bank_account is not None:
            bank = await self._step(
                run,
                acc,
                "add_bank_account",
                self.moov.add_bank_account(account_id, profile.bank_account, token),
                )
            if bank is not None and bank.get("bankAccountID"):
                logger.info(
                    "Bank account added, may require micro-deposit verification",
                    account_id=account_id,
                    bank_account_id=bank.get("bankAccountID"),
                    )

        acc.accounts.append(CreatedAccount(
            operator_name=run.name,
            account_id=account_id,
            moov_account=created.payload,
            access_token=token,
            ))
