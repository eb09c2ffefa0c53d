"""Per-user settings endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from evalboard.auth.middleware import CurrentUserDep
from evalboard.database import get_db
from evalboard.schemas.settings import UpdateUserConfigRequest, UserConfigOut
from evalboard.storage.repositories import get_or_create_user_config, update_user_config

router = APIRouter()


@router.get("/settings", response_model=UserConfigOut)
async def read_settings(
    user_id: CurrentUserDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get the caller's ingestion policy, creating the default one on first access."""
    config = await get_or_create_user_config(db, user_id)
    return UserConfigOut.model_validate(config)


@router.put("/settings", response_model=UserConfigOut)
async def write_settings(
    body: UpdateUserConfigRequest,
    user_id: CurrentUserDep,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update the caller's ingestion policy. Omitted fields keep their value."""
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    config = await update_user_config(db, user_id, changes)
    return UserConfigOut.model_validate(config)
