"""Shared fixtures: in-memory store and resolver for the ingestion pipeline."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from evalboard.engine.pipeline import IngestionPipeline, NewEvaluation
from evalboard.errors import StorageError
from evalboard.models import DEFAULT_CONFIG, UserConfig

USER_ID = "0b6f7c1e-5d1a-4c7e-9a52-2f1f3c9d8e01"
TOKEN = "good-token"
NOW = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)


def make_config(**overrides) -> UserConfig:
    """UserConfig row for USER_ID with DEFAULT_CONFIG plus overrides."""
    values = {**DEFAULT_CONFIG, **overrides}
    return UserConfig(
        id="cfg-1",
        user_id=USER_ID,
        created_at=NOW,
        updated_at=NOW,
        **values,
    )


def make_payload(**overrides) -> dict:
    payload = {
        "interaction_id": "int-1",
        "prompt": "What is the capital of France?",
        "response": "Paris.",
        "score": 0.9,
        "latency_ms": 120,
    }
    payload.update(overrides)
    return payload


class FakeStore:
    """EvaluationStore kept in memory; records every call in order."""

    def __init__(self, config: UserConfig | None = None, fail_insert: bool = False):
        self.config = config
        self.fail_insert = fail_insert
        self.records: list[NewEvaluation] = []
        self.calls: list[str] = []

    async def get_config(self, user_id: str) -> UserConfig | None:
        self.calls.append("get_config")
        return self.config if self.config and self.config.user_id == user_id else None

    async def count_records(self, user_id: str, start: datetime, end: datetime) -> int:
        self.calls.append("count_records")
        return sum(1 for r in self.records if r.user_id == user_id and start <= r.created_at < end)

    async def insert_record(self, record: NewEvaluation) -> str:
        self.calls.append("insert_record")
        if self.fail_insert:
            raise StorageError("connection reset")
        self.records.append(record)
        return f"ev-{len(self.records)}"


class FakeResolver:
    def __init__(self, tokens: dict[str, str] | None = None):
        self.tokens = tokens if tokens is not None else {TOKEN: USER_ID}
        self.seen: list[str] = []

    async def resolve(self, credential: str) -> str | None:
        self.seen.append(credential)
        return self.tokens.get(credential)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore(config=make_config())


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver()


@pytest.fixture
def pipeline(store: FakeStore, resolver: FakeResolver) -> IngestionPipeline:
    return IngestionPipeline(store, resolver, clock=lambda: NOW)


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Mock AsyncSession; execute() returns a sync result object."""
    session = AsyncMock()
    result = MagicMock()
    result.scalar_one_or_none.return_value = None
    result.scalar_one.return_value = 0
    result.scalars.return_value.all.return_value = []
    result.all.return_value = []
    session.execute = AsyncMock(return_value=result)
    session.add = MagicMock()
    return session
