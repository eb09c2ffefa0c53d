#!/usr/bin/env python3
"""
Create a user with an API key and the default ingestion policy.
Run after migrations: python scripts/create_user.py <email> [api_key]
"""

import asyncio
import secrets
import sys
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from evalboard.auth.middleware import hash_api_key
from evalboard.database import engine
from evalboard.models import DEFAULT_CONFIG


async def create_user(email: str, api_key: str) -> str:
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    now = datetime.now(timezone.utc)
    api_key_hash = hash_api_key(api_key)

    async with async_session() as session:
        result = await session.execute(
            text("SELECT user_id FROM users WHERE api_key_hash = :hash"),
            {"hash": api_key_hash},
        )
        row = result.fetchone()
        if row:
            user_id = str(row[0])
            print("User already exists for this key, using existing.")
        else:
            user_id = str(uuid4())
            await session.execute(
                text("""
                    INSERT INTO users (user_id, email, api_key_hash, created_at)
                    VALUES (:uid, :email, :hash, :now)
                """),
                {"uid": user_id, "email": email, "hash": api_key_hash, "now": now},
            )

        await session.execute(
            text("""
                INSERT INTO user_configs
                (id, user_id, run_policy, sample_rate_pct, obfuscate_pii, max_eval_per_day, created_at, updated_at)
                VALUES (:id, :uid, :run_policy, :sample_rate_pct, :obfuscate_pii, :max_eval_per_day, :now, :now)
                ON CONFLICT (user_id) DO NOTHING
            """),
            {"id": str(uuid4()), "uid": user_id, "now": now, **DEFAULT_CONFIG},
        )
        await session.commit()

    await engine.dispose()
    return user_id


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python scripts/create_user.py <email> [api_key]")
        sys.exit(1)
    email = sys.argv[1]
    api_key = sys.argv[2] if len(sys.argv) > 2 else f"sk_eval_{secrets.token_urlsafe(24)}"

    user_id = asyncio.run(create_user(email, api_key))
    print(f"User: {user_id}")
    print(f"API Key: {api_key}")
    print("Example: curl -X POST http://localhost:8000/api/evals/ingest \\")
    print('  -H "Authorization: Bearer ' + api_key + '" \\')
    print('  -H "Content-Type: application/json" \\')
    print('  -d \'{"interaction_id":"demo-1","prompt":"What is the capital of France?","response":"Paris.","score":0.9,"latency_ms":120}\'')


if __name__ == "__main__":
    main()
