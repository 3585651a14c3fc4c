from todo_api.core import messages
from todo_api.core.errors import PersistenceError


async def test_health(client):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "healthy"}


async def test_landing_path(client):
    res = await client.get("/api")
    assert res.status_code == 200
    assert res.json() == {"message": "Todo API"}


async def test_unknown_route_returns_json_not_found(client):
    res = await client.get("/api/does-not-exist")

    assert res.status_code == 404
    assert res.json() == {"message": messages.NOT_FOUND, "error": None}


async def test_unhandled_error_returns_json(app, client):
    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    res = await client.get("/boom")

    assert res.status_code == 500
    assert res.json() == {"message": messages.INTERNAL_SERVER_ERROR, "error": "kaboom"}


async def test_persistence_error_includes_detail_outside_production(app, client):
    @app.get("/store-down")
    async def store_down():
        raise PersistenceError(detail="connection refused")

    res = await client.get("/store-down")

    assert res.status_code == 500
    assert res.json() == {"message": messages.INTERNAL_SERVER_ERROR, "error": "connection refused"}


async def test_persistence_error_hides_detail_in_production(app, client, monkeypatch):
    from todo_api.core.config import settings

    monkeypatch.setattr(settings, "environment", "production")

    @app.get("/store-down")
    async def store_down():
        raise PersistenceError(detail="connection refused")

    res = await client.get("/store-down")

    assert res.status_code == 500
    assert res.json()["error"] is None
