"""Evaluation read endpoints."""

from datetime import datetime, timezone
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from evalboard.auth.middleware import CurrentUserDep
from evalboard.database import get_db
from evalboard.engine.stats import summarize
from evalboard.schemas.evaluation import EvaluationOut, EvaluationStats
from evalboard.storage.repositories import (
    evaluation_metrics,
    get_evaluation_by_id,
    list_evaluations,
)

router = APIRouter()


@router.get("/evaluations", response_model=list[EvaluationOut])
async def recent_evaluations(
    user_id: CurrentUserDep,
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    """Caller's evaluations, newest first."""
    rows = await list_evaluations(db, user_id, limit=limit, offset=offset)
    return [EvaluationOut.model_validate(r) for r in rows]


@router.get("/evaluations/stats", response_model=EvaluationStats)
async def evaluation_stats(
    user_id: CurrentUserDep,
    db: Annotated[AsyncSession, Depends(get_db)],
    days: int = Query(30, ge=1, le=90),
):
    """Dashboard totals, daily series over the last `days` UTC days and score distribution."""
    rows = await evaluation_metrics(db, user_id)
    today = datetime.now(timezone.utc).date()
    return summarize(rows, today, days=days)


@router.get("/evaluations/{evaluation_id}", response_model=EvaluationOut)
async def get_evaluation(
    evaluation_id: UUID,
    user_id: CurrentUserDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get evaluation record by ID (user-scoped)."""
    ev = await get_evaluation_by_id(db, str(evaluation_id), user_id)
    if not ev:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Evaluation not found",
        )
    return EvaluationOut.model_validate(ev)
