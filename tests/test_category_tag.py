from todo_api.core.config import settings


async def test_category_crud(auth_client):
    res = await auth_client.post("/api/categories", json={"name": "Home"})
    assert res.status_code == 201
    category = res.json()
    assert category["name"] == "Home"
    assert category["deleted_at"] is None

    res = await auth_client.get(f"/api/categories/{category['id']}")
    assert res.json()["name"] == "Home"

    res = await auth_client.get("/api/categories")
    assert [c["id"] for c in res.json()["categories"]] == [category["id"]]

    res = await auth_client.delete(f"/api/categories/{category['id']}")
    assert res.status_code == 200
    assert res.json()["deleted_at"] is not None

    assert (await auth_client.get("/api/categories")).json() == {"categories": []}
    assert (await auth_client.get(f"/api/categories/{category['id']}")).status_code == 404
    assert (await auth_client.delete(f"/api/categories/{category['id']}")).status_code == 404


async def test_deleting_category_clears_todo_reference(auth_client):
    category_id = (await auth_client.post("/api/categories", json={"name": "Work"})).json()["id"]
    todo_id = (await auth_client.post(
        "/api/todos", json={"title": "Report", "category_id": category_id}
    )).json()["id"]

    await auth_client.delete(f"/api/categories/{category_id}")

    res = await auth_client.get(f"/api/todos/{todo_id}")
    assert res.status_code == 200
    assert res.json()["category_id"] is None
    assert res.json()["deleted_at"] is None


async def test_tag_crud(auth_client):
    res = await auth_client.post("/api/tags", json={"name": "urgent"})
    assert res.status_code == 201
    tag_id = res.json()["id"]

    assert (await auth_client.get(f"/api/tags/{tag_id}")).json()["name"] == "urgent"
    assert [t["name"] for t in (await auth_client.get("/api/tags")).json()["tags"]] == ["urgent"]

    res = await auth_client.delete(f"/api/tags/{tag_id}")
    assert res.json()["deleted_at"] is not None
    assert (await auth_client.get("/api/tags")).json() == {"tags": []}


async def test_deleted_tag_drops_off_todos(auth_client):
    keep = (await auth_client.post("/api/tags", json={"name": "keep"})).json()["id"]
    drop = (await auth_client.post("/api/tags", json={"name": "drop"})).json()["id"]
    todo_id = (await auth_client.post(
        "/api/todos", json={"title": "T", "tag_ids": [keep, drop]}
    )).json()["id"]

    await auth_client.delete(f"/api/tags/{drop}")

    res = await auth_client.get(f"/api/todos/{todo_id}")
    assert [t["id"] for t in res.json()["tags"]] == [keep]


async def test_filtering_by_deleted_tag_returns_nothing(auth_client):
    tag_id = (await auth_client.post("/api/tags", json={"name": "gone"})).json()["id"]
    await auth_client.post("/api/todos", json={"title": "T", "tag_ids": [tag_id]})

    res = await auth_client.get("/api/todos", params={"tag_id": tag_id})
    assert res.json()["total"] == 1

    await auth_client.delete(f"/api/tags/{tag_id}")

    res = await auth_client.get("/api/todos", params={"tag_id": tag_id})
    assert res.status_code == 200
    assert res.json() == {"total": 0, "todos": []}

    res = await auth_client.get(
        "/api/todos", params={"tag_id": tag_id, "include_deleted": "true"}
    )
    assert res.json()["total"] == 1


async def test_category_and_tag_routes_are_gated(client):
    for path in ("/api/categories", "/api/tags"):
        res = await client.get(path)
        assert res.status_code == 302
        assert res.headers["location"] == settings.unauthenticated_redirect_path
