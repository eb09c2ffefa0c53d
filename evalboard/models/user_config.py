"""Per-user ingestion policy."""

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from evalboard.database import Base

RUN_POLICIES = ("always", "sampled")

DEFAULT_CONFIG = {
    "run_policy": "always",
    "sample_rate_pct": 100,
    "obfuscate_pii": True,
    "max_eval_per_day": 1000,
}


class UserConfig(Base):
    """One policy row per user, created lazily with DEFAULT_CONFIG."""

    __tablename__ = "user_configs"

    id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), unique=True, nullable=False)
    run_policy: Mapped[str] = mapped_column(String(16), nullable=False, default="always")
    sample_rate_pct: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    obfuscate_pii: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    max_eval_per_day: Mapped[int] = mapped_column(Integer, nullable=False, default=1000)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("run_policy IN ('always', 'sampled')", name="ck_user_configs_run_policy"),
        CheckConstraint(
            "sample_rate_pct >= 0 AND sample_rate_pct <= 100",
            name="ck_user_configs_sample_rate_pct",
        ),
        CheckConstraint("max_eval_per_day > 0", name="ck_user_configs_max_eval_per_day"),
    )
