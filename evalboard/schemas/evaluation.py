"""Evaluation read schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class EvaluationOut(BaseModel):
    """Stored evaluation record."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    interaction_id: str
    prompt: str
    response: str
    score: float
    latency_ms: int
    flags: list[str] = Field(default_factory=list)
    pii_tokens_redacted: int
    created_at: datetime


class DailyStats(BaseModel):
    date: str
    count: int
    avg_score: float
    avg_latency_ms: float


class ScoreBucket(BaseModel):
    range: str
    count: int


class EvaluationStats(BaseModel):
    """GET /v1/evaluations/stats response."""

    total: int
    avg_score: float
    avg_latency_ms: float
    pii_tokens_redacted: int
    flagged: int
    daily: list[DailyStats]
    distribution: list[ScoreBucket]
