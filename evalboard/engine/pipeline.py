"""Ingestion pipeline - applies a user's policy to one evaluation event before storing it."""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Protocol

from pydantic import ValidationError

from evalboard.engine.quota import as_utc, count_today, quota_exhausted
from evalboard.engine.redactor import find_pii, redact
from evalboard.engine.sampling import should_persist
from evalboard.errors import StorageError
from evalboard.models import UserConfig
from evalboard.schemas.ingest import IngestRequest

logger = logging.getLogger(__name__)


class IngestOutcome(str, Enum):
    """Terminal disposition of one ingestion request."""

    STORED = "stored"
    SKIPPED = "skipped"
    UNAUTHORIZED = "unauthorized"
    INVALID_INPUT = "invalid_input"
    CONFIG_MISSING = "config_missing"
    QUOTA_EXCEEDED = "quota_exceeded"
    STORAGE_ERROR = "storage_error"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    IngestOutcome.STORED: 201,
    IngestOutcome.SKIPPED: 200,
    IngestOutcome.UNAUTHORIZED: 401,
    IngestOutcome.INVALID_INPUT: 400,
    IngestOutcome.CONFIG_MISSING: 404,
    IngestOutcome.QUOTA_EXCEEDED: 429,
    IngestOutcome.STORAGE_ERROR: 500,
}


@dataclass
class NewEvaluation:
    """Row handed to the store on the success path."""

    user_id: str
    interaction_id: str
    prompt: str
    response: str
    score: float
    latency_ms: int
    created_at: datetime
    flags: list[str] = field(default_factory=list)
    pii_tokens_redacted: int = 0


@dataclass
class IngestResult:
    outcome: IngestOutcome
    detail: str = ""
    evaluation_id: str | None = None
    pii_tokens_redacted: int | None = None


class EvaluationStore(Protocol):
    async def get_config(self, user_id: str) -> UserConfig | None: ...

    async def count_records(self, user_id: str, start: datetime, end: datetime) -> int: ...

    async def insert_record(self, record: NewEvaluation) -> str: ...


class IdentityResolver(Protocol):
    async def resolve(self, credential: str) -> str | None: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def describe_validation_error(exc: ValidationError) -> str:
    """One "field: message" entry per offending field."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "body"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class IngestionPipeline:
    """
    Runs the ingestion stages in a fixed order, stopping at the first one
    that does not pass:

    identity -> input validation -> score range -> config lookup -> daily quota
    -> sampling -> PII redaction -> insert

    The store and resolver are passed in per request.
    """

    def __init__(
        self,
        store: EvaluationStore,
        resolver: IdentityResolver,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.resolver = resolver
        self.rng = rng
        self.clock = clock

    async def ingest(self, credential: str | None, payload: Any) -> IngestResult:
        user_id = await self.resolver.resolve(credential) if credential else None
        if not user_id:
            return self._finish(None, None, IngestResult(IngestOutcome.UNAUTHORIZED, "Invalid token"))

        if not isinstance(payload, dict):
            return self._finish(
                user_id, None,
                IngestResult(IngestOutcome.INVALID_INPUT, "body: expected a JSON object"),
            )
        try:
            request = IngestRequest.model_validate(payload)
        except ValidationError as exc:
            return self._finish(
                user_id, payload.get("interaction_id"),
                IngestResult(IngestOutcome.INVALID_INPUT, describe_validation_error(exc)),
            )

        if not 0 <= request.score <= 1:  # NaN fails this too
            return self._finish(
                user_id, request.interaction_id,
                IngestResult(IngestOutcome.INVALID_INPUT, "score: must be between 0 and 1"),
            )

        config = await self.store.get_config(user_id)
        if config is None:
            return self._finish(
                user_id, request.interaction_id,
                IngestResult(IngestOutcome.CONFIG_MISSING, "User configuration not found"),
            )

        now = self.clock()
        used = await count_today(self.store, user_id, now)
        if quota_exhausted(used, config.max_eval_per_day):
            return self._finish(
                user_id, request.interaction_id,
                IngestResult(IngestOutcome.QUOTA_EXCEEDED, "Daily evaluation limit exceeded"),
            )

        if not should_persist(config.run_policy, config.sample_rate_pct, self.rng):
            return self._finish(
                user_id, request.interaction_id,
                IngestResult(IngestOutcome.SKIPPED, "Evaluation skipped due to sampling policy"),
            )

        prompt, response = request.prompt, request.response
        redacted = request.pii_tokens_redacted
        if config.obfuscate_pii:
            if logger.isEnabledFor(logging.DEBUG):
                kinds = sorted({kind for kind, _ in find_pii(prompt) + find_pii(response)})
                logger.debug("ingest user=%s pii kinds=%s", user_id, kinds)
            prompt, prompt_hits = redact(prompt)
            response, response_hits = redact(response)
            redacted = prompt_hits + response_hits

        record = NewEvaluation(
            user_id=user_id,
            interaction_id=request.interaction_id,
            prompt=prompt,
            response=response,
            score=request.score,
            latency_ms=request.latency_ms,
            flags=request.flags,
            pii_tokens_redacted=redacted,
            created_at=as_utc(request.created_at) if request.created_at else now,
        )
        try:
            evaluation_id = await self.store.insert_record(record)
        except StorageError:
            logger.exception("Failed to store evaluation for user %s", user_id)
            return self._finish(
                user_id, request.interaction_id,
                IngestResult(IngestOutcome.STORAGE_ERROR, "Failed to store evaluation"),
            )

        return self._finish(
            user_id, request.interaction_id,
            IngestResult(
                IngestOutcome.STORED,
                "Evaluation stored successfully",
                evaluation_id=evaluation_id,
                pii_tokens_redacted=redacted,
            ),
        )

    def _finish(self, user_id: str | None, interaction_id: Any, result: IngestResult) -> IngestResult:
        logger.info(
            "ingest user=%s interaction=%s outcome=%s",
            user_id, interaction_id, result.outcome.value,
        )
        return result
