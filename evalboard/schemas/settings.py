"""Settings request/response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UserConfigOut(BaseModel):
    """GET/PUT /v1/settings response."""

    model_config = ConfigDict(from_attributes=True)

    user_id: str
    run_policy: Literal["always", "sampled"]
    sample_rate_pct: int
    obfuscate_pii: bool
    max_eval_per_day: int
    updated_at: datetime


class UpdateUserConfigRequest(BaseModel):
    """PUT /v1/settings request - omitted fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    run_policy: Literal["always", "sampled"] | None = None
    sample_rate_pct: int | None = Field(default=None, ge=0, le=100)
    obfuscate_pii: bool | None = None
    max_eval_per_day: int | None = Field(default=None, ge=1)
