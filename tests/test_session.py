from conftest import login

from todo_api.core.config import settings
from todo_api.core.security import sign_session_id, unsign_session_id


async def test_store_round_trip_and_ttl(session_store, redis):
    session_id = await session_store.create(42)

    session = await session_store.load(session_id)
    assert session.user_id == 42
    assert session.authenticated is True

    ttl = await redis.ttl(f"{settings.session_key_prefix}{session_id}")
    assert 0 < ttl <= settings.session_max_age_days * 24 * 60 * 60

    await session_store.destroy(session_id)
    assert await session_store.load(session_id) is None


async def test_load_refreshes_expiry(session_store, redis):
    session_id = await session_store.create(7)
    key = f"{settings.session_key_prefix}{session_id}"
    await redis.expire(key, 60)

    await session_store.load(session_id)

    assert await redis.ttl(key) > 60


async def test_unreadable_payload_is_discarded(session_store, redis):
    await redis.set(f"{settings.session_key_prefix}broken", "not json")

    assert await session_store.load("broken") is None
    assert await redis.get(f"{settings.session_key_prefix}broken") is None


def test_session_cookie_signature():
    signed = sign_session_id("abc123")

    assert unsign_session_id(signed) == "abc123"
    assert unsign_session_id(signed + "x") is None
    assert unsign_session_id("garbage") is None


async def test_gate_redirects_without_session(client):
    res = await client.get("/api/todos")

    assert res.status_code == 302
    assert res.headers["location"] == settings.unauthenticated_redirect_path
    assert res.content == b""


async def test_gate_redirects_on_tampered_cookie(client, session_store, user):
    await login(client, session_store, user)
    cookie = client.cookies.get(settings.session_cookie_name)
    client.cookies.clear()
    client.cookies.set(settings.session_cookie_name, cookie[:-2] + "xx")

    res = await client.get("/api/auth/me")

    assert res.status_code == 302


async def test_gate_redirects_when_session_expired(client, session_store, user):
    session_id = await login(client, session_store, user)
    await session_store.destroy(session_id)

    res = await client.get("/api/auth/me")

    assert res.status_code == 302


async def test_deleted_user_is_treated_as_unauthenticated(client, session_store, user, session_factory):
    await login(client, session_store, user)
    async with session_factory() as session:
        stored = await session.get(type(user), user.id)
        stored.soft_delete()
        await session.commit()

    res = await client.get("/api/auth/me")

    assert res.status_code == 302
    assert res.headers["location"] == settings.unauthenticated_redirect_path


async def test_authenticated_request_passes_gate(auth_client, user):
    res = await auth_client.get("/api/auth/me")

    assert res.status_code == 200
    assert res.json()["id"] == user.id
    assert res.json()["google_id"] == "google-alice"
