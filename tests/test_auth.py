"""Tests for bearer parsing and identity resolvers."""

from types import SimpleNamespace

import httpx
import pytest
from sqlalchemy.exc import OperationalError

from evalboard.auth.middleware import ApiKeyResolver, SupabaseResolver, bearer_token, hash_api_key
from evalboard.errors import StorageError


def test_bearer_token_parsing():
    assert bearer_token("Bearer abc") == "abc"
    assert bearer_token("Bearer   abc  ") == "abc"
    assert bearer_token("Bearer ") is None
    assert bearer_token("Basic abc") is None
    assert bearer_token(None) is None


def test_hash_api_key_salted_and_stable():
    assert hash_api_key("sk_demo") == hash_api_key("sk_demo")
    assert hash_api_key("sk_demo") != hash_api_key("sk_other")
    assert len(hash_api_key("sk_demo")) == 64


async def test_api_key_resolver_found(mock_db_session):
    mock_db_session.execute.return_value.scalar_one_or_none.return_value = SimpleNamespace(user_id="u-1")
    assert await ApiKeyResolver(mock_db_session).resolve("sk_demo") == "u-1"


async def test_api_key_resolver_unknown(mock_db_session):
    assert await ApiKeyResolver(mock_db_session).resolve("sk_unknown") is None


def _supabase(handler) -> SupabaseResolver:
    return SupabaseResolver("https://proj.supabase.co/", "anon", transport=httpx.MockTransport(handler))


async def test_supabase_resolver_valid_token():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/auth/v1/user"
        assert request.headers["apikey"] == "anon"
        if request.headers["authorization"] == "Bearer jwt-ok":
            return httpx.Response(200, json={"id": "u-42", "email": "a@example.com"})
        return httpx.Response(401, json={"msg": "invalid JWT"})

    resolver = _supabase(handler)
    assert await resolver.resolve("jwt-ok") == "u-42"
    assert await resolver.resolve("jwt-bad") is None


async def test_supabase_resolver_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    assert await _supabase(handler).resolve("jwt-ok") is None


async def test_api_key_lookup_failure_is_storage_error(mock_db_session):
    mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))
    with pytest.raises(StorageError):
        await ApiKeyResolver(mock_db_session).resolve("sk_demo")


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>proxy</html>"),
        httpx.Response(200, json=[]),
        httpx.Response(200, json={"email": "a@example.com"}),
        httpx.Response(200, json={"id": 42}),
        httpx.Response(200, json={"id": ""}),
    ],
)
async def test_supabase_resolver_unusable_body(response):
    """A 200 without a string user id does not resolve."""
    assert await _supabase(lambda request: response).resolve("jwt-ok") is None
