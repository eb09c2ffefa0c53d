"""Bearer credential authentication."""

import hashlib
import logging
from typing import Annotated

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from evalboard.config import settings
from evalboard.database import get_db
from evalboard.engine.pipeline import IdentityResolver
from evalboard.errors import StorageError
from evalboard.storage.repositories import get_user_by_api_key_hash

logger = logging.getLogger(__name__)

API_KEY_HEADER = APIKeyHeader(name="Authorization", auto_error=False)


def hash_api_key(api_key: str) -> str:
    """Hash API key with salt for storage/lookup."""
    return hashlib.sha256(
        f"{settings.api_key_hash_salt}:{api_key}".encode()
    ).hexdigest()


def bearer_token(auth_header: str | None) -> str | None:
    """Extract the credential from "Bearer <credential>", or None."""
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header[7:].strip() or None


class ApiKeyResolver:
    """Resolves API keys through the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def resolve(self, credential: str) -> str | None:
        try:
            user = await get_user_by_api_key_hash(self.db, hash_api_key(credential))
        except SQLAlchemyError as exc:
            raise StorageError("api key lookup failed") from exc
        return str(user.user_id) if user else None


class SupabaseResolver:
    """Resolves Supabase access tokens via GET /auth/v1/user."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.transport = transport

    async def resolve(self, credential: str) -> str | None:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                resp = await client.get(
                    f"{self.base_url}/auth/v1/user",
                    headers={"apikey": self.anon_key, "Authorization": f"Bearer {credential}"},
                )
            except httpx.HTTPError:
                logger.warning("Supabase auth request failed", exc_info=True)
                return None
        if resp.status_code != 200:
            return None
        try:
            body = resp.json()
        except ValueError:
            logger.warning("Supabase auth returned a non-JSON body")
            return None
        user_id = body.get("id") if isinstance(body, dict) else None
        return user_id if isinstance(user_id, str) and user_id else None


def get_resolver(db: Annotated[AsyncSession, Depends(get_db)]) -> IdentityResolver:
    """Resolver selected by settings.auth_backend."""
    if settings.auth_backend == "supabase":
        return SupabaseResolver(
            settings.supabase_url,
            settings.supabase_anon_key,
            timeout=settings.auth_timeout_seconds,
        )
    return ApiKeyResolver(db)


ResolverDep = Annotated[IdentityResolver, Depends(get_resolver)]


async def get_current_user_id(
    resolver: ResolverDep,
    auth_header: str | None = Depends(API_KEY_HEADER),
) -> str:
    """User id behind the Bearer credential; 401 otherwise."""
    credential = bearer_token(auth_header)
    user_id = await resolver.resolve(credential) if credential else None
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid credentials",
        )
    return user_id


# Type alias for dependency injection
CurrentUserDep = Annotated[str, Depends(get_current_user_id)]
