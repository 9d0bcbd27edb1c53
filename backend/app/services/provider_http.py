"""
Shared outbound HTTP layer for provider clients.

Each provider call is a single exchange with a bounded timeout. The outcome is
classified three ways:
- 2xx / non-2xx responses come back as a ProviderResponse (never raised)
- timeouts raise ProviderTimeoutError
- any other transport fault raises ProviderTransportError

Services that run a single chain of calls turn a rejected ProviderResponse
into UpstreamRejectedError; the onboarding orchestrator records it instead.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import httpx

from backend.app.logging_config import get_logger

logger = get_logger(__name__)


# ============================================================================
# ERRORS
# ============================================================================

class ProviderError(Exception):
    """Base class for outbound provider failures."""


class ProviderTransportError(ProviderError):
    """The exchange itself failed (connection refused, protocol error, ...)."""

    def __init__(self, provider: str, operation: str, message: str):
        self.provider = provider
        self.operation = operation
        super().__init__(f"{provider} {operation} failed: {message}")


class ProviderTimeoutError(ProviderTransportError):
    """The provider did not answer within the configured timeout."""


class UpstreamRejectedError(ProviderError):
    """
    A provider answered with a non-2xx status.

    Carries the user-facing message, the HTTP status to answer with and the
    provider's raw error body.
    """

    def __init__(self, message: str, error: Any = None, status_code: int = 400):
        self.message = message
        self.error = error
        self.status_code = status_code
        super().__init__(message)


# ============================================================================
# RESPONSE
# ============================================================================

@dataclass(frozen=True)
class ProviderResponse:
    """Status and decoded body of one provider exchange."""

    status_code: int
    payload: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def get(self, key: str, default: Any = None) -> Any:
        """Read a top-level field of a JSON object payload."""
        if isinstance(self.payload, dict):
            return self.payload.get(key, default)
        return default


def decode_payload(response: httpx.Response) -> Any:
    """
    Decode a provider body.

    Empty bodies become "" and non-JSON bodies are kept as text, so a
    misbehaving provider never turns into a decoding exception.
    """
    if not response.content:
        return ""
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


def payload_length(payload: Any) -> int:
    """Item count of a list payload (or length of a text payload); 0 otherwise."""
    if isinstance(payload, (list, str)):
        return len(payload)
    return 0


# ============================================================================
# BASE CLIENT
# ============================================================================

class ProviderClient:
    """
    Async context manager owning one httpx.AsyncClient for a provider.

    Subclasses set PROVIDER and call self._send(). A transport can be injected
    (httpx.MockTransport in tests); otherwise httpx opens real connections.
    """

    PROVIDER = "provider"

    def __init__(
        self,
        base_url: str,
        timeout: float,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        ):
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers or {},
            transport=transport,
            )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _send(
        self,
        method: str,
        path: str,
        operation: str,
        *,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
        auth: httpx.Auth | tuple[str, str] | None = None,
        ) -> ProviderResponse:
        """
        Perform one exchange.

        Args:
            method: HTTP method
            path: Path relative to the provider base URL
            operation: Short operation name used in logs and errors
            json_body: Optional JSON request body
            headers: Extra headers for this call
            auth: Optional httpx auth (e.g. Basic credentials)

        Returns:
            ProviderResponse for any HTTP status

        Raises:
            ProviderTimeoutError: no answer within the timeout
            ProviderTransportError: any other transport failure
        """
        request_kwargs: dict[str, Any] = {"headers": headers}
        if json_body is not None:
            request_kwargs["json"] = json_body
        if auth is not None:
            request_kwargs["auth"] = auth

        try:
            response = await self._client.request(method, path, **request_kwargs)
        except httpx.TimeoutException as e:
            logger.error("Provider call timed out", provider=self.PROVIDER, operation=operation, path=path)
            raise ProviderTimeoutError(self.PROVIDER, operation, f"timed out ({e.__class__.__name__})") from e
        except httpx.HTTPError as e:
            logger.error("Provider call failed", provider=self.PROVIDER, operation=operation, path=path, error=str(e))
            raise ProviderTransportError(self.PROVIDER, operation, str(e) or e.__class__.__name__) from e

        result = ProviderResponse(status_code=response.status_code, payload=decode_payload(response))
        if not result.ok:
            logger.warning(
                "Provider rejected request",
                provider=self.PROVIDER,
                operation=operation,
                status_code=result.status_code,
                error=result.payload,
                )
        return result
