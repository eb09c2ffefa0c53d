"""Repository functions for users, configs and evaluations."""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from evalboard.engine.pipeline import NewEvaluation
from evalboard.errors import StorageError
from evalboard.models import DEFAULT_CONFIG, Evaluation, User, UserConfig


def _now() -> datetime:
    return datetime.now(timezone.utc)


async def get_user_by_api_key_hash(db: AsyncSession, api_key_hash: str) -> User | None:
    result = await db.execute(select(User).where(User.api_key_hash == api_key_hash))
    return result.scalar_one_or_none()


async def get_user_config(db: AsyncSession, user_id: str) -> UserConfig | None:
    """Config row for user, or None if settings were never opened."""
    result = await db.execute(select(UserConfig).where(UserConfig.user_id == user_id))
    return result.scalar_one_or_none()


async def get_or_create_user_config(db: AsyncSession, user_id: str) -> UserConfig:
    """Return the user's config, inserting DEFAULT_CONFIG on first access."""
    config = await get_user_config(db, user_id)
    if config:
        return config
    now = _now()
    config = UserConfig(
        id=str(uuid4()),
        user_id=user_id,
        created_at=now,
        updated_at=now,
        **DEFAULT_CONFIG,
    )
    db.add(config)
    await db.flush()
    return config


async def update_user_config(db: AsyncSession, user_id: str, changes: dict[str, Any]) -> UserConfig:
    """Apply already-validated field changes."""
    config = await get_or_create_user_config(db, user_id)
    for key, value in changes.items():
        setattr(config, key, value)
    config.updated_at = _now()
    await db.flush()
    return config


async def count_evaluations_between(
    db: AsyncSession, user_id: str, start: datetime, end: datetime
) -> int:
    """Count user's evaluations with start <= created_at < end."""
    result = await db.execute(
        select(func.count())
        .select_from(Evaluation)
        .where(
            Evaluation.user_id == user_id,
            Evaluation.created_at >= start,
            Evaluation.created_at < end,
        )
    )
    return result.scalar_one()


async def create_evaluation(db: AsyncSession, record: NewEvaluation) -> Evaluation:
    """Create evaluation record."""
    ev = Evaluation(
        id=str(uuid4()),
        user_id=record.user_id,
        interaction_id=record.interaction_id,
        prompt=record.prompt,
        response=record.response,
        score=record.score,
        latency_ms=record.latency_ms,
        flags=list(record.flags),
        pii_tokens_redacted=record.pii_tokens_redacted,
        created_at=record.created_at,
    )
    db.add(ev)
    await db.flush()
    return ev


async def get_evaluation_by_id(db: AsyncSession, evaluation_id: str, user_id: str) -> Evaluation | None:
    """Get evaluation by ID (user-scoped)."""
    result = await db.execute(
        select(Evaluation).where(
            Evaluation.id == evaluation_id,
            Evaluation.user_id == user_id,
        )
    )
    return result.scalar_one_or_none()


async def list_evaluations(
    db: AsyncSession, user_id: str, limit: int = 20, offset: int = 0
) -> Sequence[Evaluation]:
    """Newest first."""
    result = await db.execute(
        select(Evaluation)
        .where(Evaluation.user_id == user_id)
        .order_by(Evaluation.created_at.desc())
        .limit(limit)
        .offset(offset)
    )
    return result.scalars().all()


async def evaluation_metrics(db: AsyncSession, user_id: str) -> Sequence[Any]:
    """Only the columns the dashboard aggregates over."""
    result = await db.execute(
        select(
            Evaluation.score,
            Evaluation.latency_ms,
            Evaluation.flags,
            Evaluation.pii_tokens_redacted,
            Evaluation.created_at,
        ).where(Evaluation.user_id == user_id)
    )
    return result.all()


class SqlEvaluationStore:
    """EvaluationStore backed by one request-scoped AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_config(self, user_id: str) -> UserConfig | None:
        try:
            return await get_user_config(self.db, user_id)
        except SQLAlchemyError as exc:
            raise StorageError("config lookup failed") from exc

    async def count_records(self, user_id: str, start: datetime, end: datetime) -> int:
        try:
            return await count_evaluations_between(self.db, user_id, start, end)
        except SQLAlchemyError as exc:
            raise StorageError("quota count failed") from exc

    async def insert_record(self, record: NewEvaluation) -> str:
        try:
            ev = await create_evaluation(self.db, record)
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise StorageError("insert failed") from exc
        return str(ev.id)
