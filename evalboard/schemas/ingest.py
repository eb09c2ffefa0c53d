"""Ingestion request/response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Postgres INTEGER columns
INT32_MAX = 2_147_483_647


class IngestRequest(BaseModel):
    """POST /api/evals/ingest request."""

    interaction_id: str = Field(min_length=1)
    prompt: str = Field(min_length=1)
    response: str = Field(min_length=1)
    score: float
    latency_ms: int = Field(ge=0, le=INT32_MAX)
    flags: list[str] = Field(default_factory=list)
    pii_tokens_redacted: int = Field(default=0, ge=0, le=INT32_MAX)
    created_at: datetime | None = None

    @field_validator("score", "latency_ms", "pii_tokens_redacted", mode="before")
    @classmethod
    def must_be_number(cls, v: Any) -> Any:
        """Reject booleans and numeric strings."""
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("must be a number")
        return v

    @field_validator("flags", mode="after")
    @classmethod
    def dedupe_flags(cls, v: list[str]) -> list[str]:
        return list(dict.fromkeys(v))


class IngestResponse(BaseModel):
    """Body returned for every ingestion outcome."""

    outcome: str
    message: str
    evaluation_id: str | None = None
    skipped: bool = False
    pii_tokens_redacted: int | None = None
