"""
Onboarding Orchestrator Tests

Tests the per-operator pipeline against a scripted Moov backend:
- happy path and outbound payloads
- create_account failure isolation across a batch
- failure accumulation when every later step is rejected
- bootstrap token refusal
- entity-token fallback
- timeouts and transport faults
"""
import logging

import httpx
import pytest

from backend.app.schemas.onboarding import Operator
from backend.app.services.moov_client import MoovClient
from backend.app.services.onboarding import OnboardingOrchestrator, OnboardingResult
from backend.app.services.provider_http import ProviderTransportError
from backend.app.services.scopes import ScopeResolver
from backend.test_scripts.test_server_helper import MockProvider, make_test_settings, script_onboarding, token_reply
from backend.test_scripts.test_utils import operator_payload, print_section, print_success


async def run_batch(provider: MockProvider, *operators: dict) -> OnboardingResult:
    async with MoovClient(make_test_settings(), transport=provider.transport) as moov:
        orchestrator = OnboardingOrchestrator(moov, ScopeResolver())
        return await orchestrator.run([Operator.model_validate(op) for op in operators])


def steps(result: OnboardingResult) -> list[str]:
    return [e.step for e in result.errors]


# ============================================================================
# HAPPY PATH
# ============================================================================

@pytest.mark.asyncio
async def test_single_operator_success():
    """OB-001: complete operator runs every step and yields one account."""
    print_section("OB-001: single operator, every step accepted")
    provider = script_onboarding(MockProvider(), "acc-1")

    result = await run_batch(provider, operator_payload())

    assert result.status_code == 201
    assert result.succeeded
    assert result.errors == ()
    assert len(result.accounts) == 1
    account = result.accounts[0]
    assert account.account_id == "acc-1"
    assert account.operator_name == "Acme Logistics LLC"
    assert account.access_token == "entity-token"
    assert account.moov_account == {"accountID": "acc-1", "accountType": "business"}

    assert provider.paths() == [
        "POST /oauth2/token",
        "POST /accounts",
        "POST /oauth2/token",
        "GET /tos-token",
        "PATCH /accounts/acc-1",
        "POST /accounts/acc-1/representatives",
        "PATCH /accounts/acc-1",
        "PUT /accounts/acc-1/underwriting",
        "POST /accounts/acc-1/bank-accounts",
        ]
    print_success("Pipeline order verified")


@pytest.mark.asyncio
async def test_token_scopes_per_phase():
    """OB-002: bootstrap token is organization-level, second token is entity-scoped."""
    provider = script_onboarding(MockProvider(), "acc-1")

    await run_batch(provider, operator_payload())

    bootstrap_scope, entity_scope = provider.token_scopes()
    assert "/accounts//profile.read" in bootstrap_scope
    assert "bank-accounts.write" not in bootstrap_scope
    assert "/accounts/acc-1/bank-accounts.write" in entity_scope


@pytest.mark.asyncio
async def test_outbound_payloads_are_normalized():
    """OB-003: provider payloads carry the normalized values and defaults."""
    provider = script_onboarding(MockProvider(), "acc-1")
    operator = operator_payload(businessType="  Corp ", taxID="12-3456789")

    await run_batch(provider, operator)

    created = MockProvider.body(provider.calls_to("POST", "/accounts")[0])
    business = created["profile"]["business"]
    assert created["accountType"] == "business"
    assert created["capabilities"] == ["transfers", "send-funds", "collect-funds", "wallet"]
    assert business["businessType"] == "privateCorporation"
    assert business["taxID"] == {"ein": {"number": "12-3456789"}}
    assert "doingBusinessAs" not in business

    tos_accept, owners = [MockProvider.body(c) for c in provider.calls_to("PATCH", "/accounts/acc-1")]
    assert tos_accept == {"termsOfService": {"token": "tos-abc"}}
    assert owners == {"profile": {"business": {"ownersProvided": True}}}

    representative = MockProvider.body(provider.calls_to("POST", "/accounts/acc-1/representatives")[0])
    assert representative["responsibilities"] == {
        "isController": True,
        "isOwner": True,
        "ownershipPercentage": 100,
        "jobTitle": "Owner",
        }
    assert representative["birthDateProvided"] is True
    assert representative["governmentIDProvided"] is True

    underwriting = MockProvider.body(provider.calls_to("PUT", "/accounts/acc-1/underwriting")[0])
    assert underwriting == {
        "averageTransactionSize": 500,
        "maxTransactionSize": 5000,
        "averageMonthlyTransactionVolume": 500000,
        }

    bank = MockProvider.body(provider.calls_to("POST", "/accounts/acc-1/bank-accounts")[0])
    assert bank["account"]["holderName"] == "Acme Logistics LLC"
    assert bank["account"]["bankAccountType"] == "checking"
    assert bank["account"]["holderType"] == "business"

    # Every authorized call after creation uses the entity token
    for call in provider.calls[3:]:
        assert call.headers["Authorization"] == "Bearer entity-token"


@pytest.mark.asyncio
async def test_optional_steps_skipped_without_data():
    """OB-004: no contact means no representative; no bank data means no bank account."""
    provider = script_onboarding(MockProvider(), "acc-1")

    result = await run_batch(provider, operator_payload(with_contact=False, with_bank=False))

    assert result.status_code == 201
    assert provider.calls_to("POST", "/accounts/acc-1/representatives") == []
    assert provider.calls_to("POST", "/accounts/acc-1/bank-accounts") == []
    # Only the terms-of-service PATCH, no ownersProvided PATCH
    assert len(provider.calls_to("PATCH", "/accounts/acc-1")) == 1


# ============================================================================
# FAILURE ACCUMULATION
# ============================================================================

@pytest.mark.asyncio
async def test_create_failure_isolated_to_operator():
    """OB-010: operator 2 of 3 fails creation; the other two are onboarded."""
    print_section("OB-010: create_account failure in the middle of a batch")
    provider = MockProvider()
    provider.add("POST", "/oauth2/token", token_reply)
    provider.reply("POST", "/accounts", 200, {"accountID": "acc-1"})
    provider.reply("POST", "/accounts", 422, {"error": "legalBusinessName rejected"})
    provider.reply("POST", "/accounts", 200, {"accountID": "acc-3"})
    provider.reply("GET", "/tos-token", 200, {"token": "tos"})
    for account_id in ("acc-1", "acc-3"):
        provider.reply("PATCH", f"/accounts/{account_id}", 200, {})
        provider.reply("POST", f"/accounts/{account_id}/representatives", 200, {})
        provider.reply("PUT", f"/accounts/{account_id}/underwriting", 200, {})
        provider.reply("POST", f"/accounts/{account_id}/bank-accounts", 200, {})

    result = await run_batch(
        provider,
        operator_payload("First Co"),
        operator_payload("Second Co"),
        operator_payload("Third Co"),
        )

    assert result.status_code == 201
    assert [a.account_id for a in result.accounts] == ["acc-1", "acc-3"]
    assert len(result.errors) == 1
    failure = result.errors[0]
    assert failure.step == "create_account"
    assert failure.operator == "Second Co"
    assert failure.account_id is None
    assert failure.error == {"error": "legalBusinessName rejected"}
    assert result.message == "Processed 3 operators. Created 2 accounts."
    print_success("Batch continued past the failed operator")


@pytest.mark.asyncio
async def test_every_later_step_rejected():
    """OB-011: creation succeeds, every later step fails; one failure per attempted step."""
    provider = MockProvider()
    provider.add("POST", "/oauth2/token", token_reply)
    provider.reply("POST", "/accounts", 200, {"accountID": "acc-1"})
    provider.reply("GET", "/tos-token", 500, {"error": "tos unavailable"})
    provider.reply("POST", "/accounts/acc-1/representatives", 400, {"error": "bad representative"})
    provider.reply("PUT", "/accounts/acc-1/underwriting", 400, {"error": "bad underwriting"})
    provider.reply("POST", "/accounts/acc-1/bank-accounts", 400, {"error": "bad routing number"})

    result = await run_batch(provider, operator_payload())

    assert result.status_code == 201
    assert steps(result) == ["get_tos_token", "add_representative", "update_underwriting", "add_bank_account"]
    assert all(e.account_id == "acc-1" for e in result.errors)
    assert len(result.accounts) == 1
    # Acceptance and ownersProvided never attempted
    assert provider.calls_to("PATCH", "/accounts/acc-1") == []


@pytest.mark.asyncio
async def test_patch_failures_recorded_separately():
    """OB-012: sub-steps are recorded when their preceding call succeeded."""
    provider = script_onboarding(MockProvider(), "acc-1")
    provider.routes[("PATCH", "/accounts/acc-1")] = [(400, {"error": "patch rejected"})]

    result = await run_batch(provider, operator_payload())

    assert steps(result) == ["accept_terms_of_service", "mark_owners_provided"]
    assert result.status_code == 201


@pytest.mark.asyncio
async def test_account_id_reused_by_every_step():
    """OB-013: every call after creation targets the id returned by create_account."""
    provider = script_onboarding(MockProvider(), "acc-xyz")

    await run_batch(provider, operator_payload())

    entity_paths = [c.url.path for c in provider.calls if c.url.path.startswith("/accounts/")]
    assert entity_paths
    assert all(path.startswith("/accounts/acc-xyz") for path in entity_paths)


# ============================================================================
# TOKENS
# ============================================================================

@pytest.mark.asyncio
async def test_bootstrap_token_refused():
    """OB-020: refused bootstrap token aborts the batch before any creation."""
    provider = MockProvider()
    provider.reply("POST", "/oauth2/token", 401, {"error": "invalid_client"})

    result = await run_batch(provider, operator_payload(), operator_payload("Other Co"))

    assert result.bootstrap_failed
    assert result.status_code == 400
    assert result.accounts == ()
    assert provider.calls_to("POST", "/accounts") == []
    assert result.to_response() == {
        "status": "failed",
        "message": "Failed to get access token",
        "error": {"error": "invalid_client"},
        }


@pytest.mark.asyncio
async def test_bootstrap_transport_error_propagates():
    """OB-021: a transport fault on the bootstrap token is raised to the caller."""
    provider = MockProvider().add("POST", "/oauth2/token", httpx.ConnectError)

    with pytest.raises(ProviderTransportError):
        await run_batch(provider, operator_payload())


@pytest.mark.asyncio
async def test_entity_token_fallback(caplog):
    """OB-022: refused entity token falls back to the bootstrap token, no failure recorded."""
    def refuse_entity(request: httpx.Request) -> httpx.Response:
        if "bank-accounts.write" in MockProvider.body(request)["scope"]:
            return httpx.Response(403, json={"error": "scope not allowed"})
        return token_reply(request)

    provider = script_onboarding(MockProvider(), "acc-1")
    provider.routes[("POST", "/oauth2/token")] = [refuse_entity]
    caplog.set_level(logging.WARNING)

    result = await run_batch(provider, operator_payload())

    assert result.errors == ()
    assert result.accounts[0].access_token == "bootstrap-token"
    assert provider.calls_to("GET", "/tos-token")[0].headers["Authorization"] == "Bearer bootstrap-token"
    fallback = [r for r in caplog.records if "refused, falling back to bootstrap token" in r.getMessage()]
    assert len(fallback) == 1
    assert fallback[0].levelno == logging.WARNING
    assert "acc-1" in fallback[0].getMessage()


@pytest.mark.asyncio
async def test_entity_token_timeout_fallback(caplog):
    """OB-023: entity token timeout falls back to the bootstrap token and logs the fallback."""
    def stall_entity(request: httpx.Request) -> httpx.Response:
        if "bank-accounts.write" in MockProvider.body(request)["scope"]:
            raise httpx.ReadTimeout("simulated timeout", request=request)
        return token_reply(request)

    provider = script_onboarding(MockProvider(), "acc-1")
    provider.routes[("POST", "/oauth2/token")] = [stall_entity]
    caplog.set_level(logging.WARNING)

    result = await run_batch(provider, operator_payload())

    assert result.errors == ()
    assert result.status_code == 201
    assert result.accounts[0].access_token == "bootstrap-token"
    assert provider.calls_to("PUT", "/accounts/acc-1/underwriting")[0].headers["Authorization"] == "Bearer bootstrap-token"
    fallback = [r for r in caplog.records if "timed out, falling back to bootstrap token" in r.getMessage()]
    assert len(fallback) == 1
    assert fallback[0].levelno == logging.WARNING
    assert "acc-1" in fallback[0].getMessage()


# ============================================================================
# TIMEOUTS & TRANSPORT FAULTS
# ============================================================================

@pytest.mark.asyncio
async def test_create_timeout_aborts_operator():
    """OB-030: a timeout on create_account is tagged and skips the operator."""
    provider = MockProvider()
    provider.add("POST", "/oauth2/token", token_reply)
    provider.add("POST", "/accounts", httpx.ReadTimeout)

    result = await run_batch(provider, operator_payload())

    assert steps(result) == ["create_account_timeout"]
    assert result.status_code == 400
    assert result.to_response()["status"] == "failed"
    assert provider.calls_to("GET", "/tos-token") == []


@pytest.mark.asyncio
async def test_step_timeout_recorded_and_pipeline_continues():
    """OB-031: a timeout on a later step is tagged and the pipeline goes on."""
    provider = script_onboarding(MockProvider(), "acc-1")
    provider.routes[("PUT", "/accounts/acc-1/underwriting")] = [httpx.ReadTimeout]

    result = await run_batch(provider, operator_payload())

    assert steps(result) == ["update_underwriting_timeout"]
    assert len(provider.calls_to("POST", "/accounts/acc-1/bank-accounts")) == 1
    assert result.status_code == 201


@pytest.mark.asyncio
async def test_transport_fault_recorded_as_processing():
    """OB-032: a connection error ends the operator with a processing failure; the batch goes on."""
    provider = script_onboarding(MockProvider(), "acc-1", "acc-2")
    provider.routes[("POST", "/accounts/acc-1/representatives")] = [httpx.ConnectError]

    result = await run_batch(provider, operator_payload("First Co"), operator_payload("Second Co"))

    assert [a.account_id for a in result.accounts] == ["acc-2"]
    assert len(result.errors) == 1
    failure = result.errors[0]
    assert failure.step == "processing"
    assert failure.operator == "First Co"
    assert failure.account_id == "acc-1"
    assert "simulated transport failure" in failure.error
    assert result.status_code == 201


# ============================================================================
# RESULT
# ============================================================================

def test_result_body_omits_empty_errors():
    """OB-040: errors key only appears when failures exist."""
    result = OnboardingResult(operator_count=0)
    body = result.to_response()
    assert body == {"status": "failed", "message": "Processed 0 operators. Created 0 accounts.", "accounts": []}
    assert result.status_code == 400
