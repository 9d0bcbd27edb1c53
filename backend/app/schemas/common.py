"""
Common schemas shared across routers.

**Domain Coverage**:
- CamelModel: base for payloads exchanged with the browser client (camelCase JSON)
- StatusResponse / ErrorResponse: the {status, message, error} envelope
- HealthResponse: liveness probe payload

**Design Notes**:
- Every inbound response carries a `status` field ("success" | "failed")
- `error` echoes the provider's raw error body or the local exception text,
  so it is typed as Any
"""
# Postpones evaluation of type hints to improve imports and performance. Also avoid circular import issues.
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ResponseStatus = Literal["success", "failed"]


class CamelModel(BaseModel):
    """
    Base model for camelCase wire formats.

    Python attributes stay snake_case; aliases are generated (legal_business_name
    ↔ legalBusinessName). Fields whose wire name is not plain camelCase
    (taxID, accountID, ...) declare an explicit alias.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatusResponse(BaseModel):
    """Envelope base: every response reports success or failure."""
    status: ResponseStatus = Field(..., description="Outcome of the request")
    message: Optional[str] = Field(None, description="Human readable summary")


class ErrorResponse(StatusResponse):
    """
    Failure envelope.

    Examples:
        {"status": "failed", "message": "Failed to fetch wallet", "error": {"error": "not found"}}
        {"status": "failed", "message": "accountID is required"}
    """
    status: ResponseStatus = "failed"
    message: str = Field(..., description="What failed")
    error: Any = Field(None, description="Provider error body or exception text")


class HealthResponse(BaseModel):
    """Liveness probe payload."""
    status: Literal["ok"] = "ok"
    message: str = "Server is running"
