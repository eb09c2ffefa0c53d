"""Evaluation ingestion endpoint."""

import json
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from evalboard.auth.middleware import API_KEY_HEADER, ResolverDep, bearer_token
from evalboard.database import get_db
from evalboard.engine.pipeline import EvaluationStore, IngestionPipeline, IngestOutcome
from evalboard.schemas.ingest import IngestResponse
from evalboard.storage.repositories import SqlEvaluationStore

router = APIRouter()


def get_store(db: Annotated[AsyncSession, Depends(get_db)]) -> EvaluationStore:
    return SqlEvaluationStore(db)


def get_pipeline(
    store: Annotated[EvaluationStore, Depends(get_store)],
    resolver: ResolverDep,
) -> IngestionPipeline:
    return IngestionPipeline(store, resolver)


@router.post("/evals/ingest", response_model=IngestResponse)
async def ingest_evaluation(
    request: Request,
    pipeline: Annotated[IngestionPipeline, Depends(get_pipeline)],
    auth_header: str | None = Depends(API_KEY_HEADER),
):
    """
    Apply the caller's quota, sampling and PII policy to one evaluation
    event and store it. Status code reflects the outcome; a sampled-out
    event is a 200 with "skipped": true.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        payload = None

    result = await pipeline.ingest(bearer_token(auth_header), payload)
    body = IngestResponse(
        outcome=result.outcome.value,
        message=result.detail,
        evaluation_id=result.evaluation_id,
        skipped=result.outcome is IngestOutcome.SKIPPED,
        pii_tokens_redacted=result.pii_tokens_redacted,
    )
    return JSONResponse(status_code=result.outcome.status_code, content=body.model_dump())
