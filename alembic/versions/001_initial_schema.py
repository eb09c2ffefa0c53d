"""Initial schema - users, user_configs, evaluations.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.UUID(), primary_key=True),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("api_key_hash", sa.String(255), unique=True, nullable=False),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )

    op.create_table(
        "user_configs",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("user_id", sa.UUID(), unique=True, nullable=False),
        sa.Column("run_policy", sa.String(16), nullable=False, server_default="always"),
        sa.Column("sample_rate_pct", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("obfuscate_pii", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("max_eval_per_day", sa.Integer(), nullable=False, server_default="1000"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.CheckConstraint("run_policy IN ('always', 'sampled')", name="ck_user_configs_run_policy"),
        sa.CheckConstraint(
            "sample_rate_pct >= 0 AND sample_rate_pct <= 100",
            name="ck_user_configs_sample_rate_pct",
        ),
        sa.CheckConstraint("max_eval_per_day > 0", name="ck_user_configs_max_eval_per_day"),
    )

    op.create_table(
        "evaluations",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("interaction_id", sa.Text(), nullable=False),
        sa.Column("prompt", sa.Text(), nullable=False),
        sa.Column("response", sa.Text(), nullable=False),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("latency_ms", sa.Integer(), nullable=False),
        sa.Column("flags", postgresql.ARRAY(sa.Text()), nullable=False, server_default="{}"),
        sa.Column("pii_tokens_redacted", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.CheckConstraint("score >= 0 AND score <= 1", name="ck_evaluations_score"),
        sa.CheckConstraint("latency_ms >= 0", name="ck_evaluations_latency_ms"),
    )
    # Quota counts scan one user's records for one day
    op.create_index("ix_evaluations_user_created", "evaluations", ["user_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_evaluations_user_created", table_name="evaluations")
    op.drop_table("evaluations")
    op.drop_table("user_configs")
    op.drop_table("users")
