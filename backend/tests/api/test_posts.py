"""Tests for post endpoints."""
import httpx

from postvault.repositories import ExtractionStatusRepository

PARTNERSHIP_ENTITIES = [
    {"name": "Microsoft", "type": "company"},
    {"name": "Azure AI", "type": "technology"},
    {"name": "Jane Doe", "type": "person"},
]


async def test_create_post_schedules_extraction(client: httpx.AsyncClient, auth_headers, fake_extractor, session):
    """Test that saving a post runs entity extraction after the response."""
    fake_extractor.entities = PARTNERSHIP_ENTITIES

    response = await client.post(
        "/api/v1/posts",
        json={"content": "Partnership with Microsoft on Azure AI", "author_name": "Jane Doe"},
        headers=auth_headers(),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["userId"] == "user-1"
    assert body["content"] == "Partnership with Microsoft on Azure AI"
    assert body["platform"] == "linkedin"
    assert fake_extractor.calls == [("Partnership with Microsoft on Azure AI", "Jane Doe")]
    status = await ExtractionStatusRepository(session).get_by_id(body["id"])
    assert status.status == "completed"

    graph = await client.get("/api/v1/graph", headers=auth_headers())
    assert len(graph.json()["nodes"]) == 3


async def test_create_post_survives_extraction_failure(client: httpx.AsyncClient, auth_headers, fake_extractor, session):
    """Test that an LLM failure never reaches the request that saved the post."""
    fake_extractor.error = RuntimeError("LLM unreachable")

    response = await client.post("/api/v1/posts", json={"content": "hello"}, headers=auth_headers())

    assert response.status_code == 201
    status = await ExtractionStatusRepository(session).get_by_id(response.json()["id"])
    assert status.status == "failed"
    assert status.error == "LLM unreachable"


async def test_create_post_requires_content(client: httpx.AsyncClient, auth_headers):
    response = await client.post("/api/v1/posts", json={"content": ""}, headers=auth_headers())
    assert response.status_code == 422


async def test_list_posts_newest_first(client: httpx.AsyncClient, auth_headers):
    for content in ("first", "second"):
        await client.post("/api/v1/posts", json={"content": content}, headers=auth_headers())
    await client.post("/api/v1/posts", json={"content": "not mine"}, headers=auth_headers("user-2"))

    response = await client.get("/api/v1/posts", headers=auth_headers())

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert [p["content"] for p in body["posts"]] == ["second", "first"]


async def test_list_favorites(client: httpx.AsyncClient, auth_headers):
    await client.post("/api/v1/posts", json={"content": "keeper", "is_favorite": True}, headers=auth_headers())
    await client.post("/api/v1/posts", json={"content": "meh"}, headers=auth_headers())

    response = await client.get("/api/v1/posts", params={"favorites_only": True}, headers=auth_headers())

    assert [p["content"] for p in response.json()["posts"]] == ["keeper"]


async def test_get_post(client: httpx.AsyncClient, auth_headers):
    created = await client.post("/api/v1/posts", json={"content": "hello"}, headers=auth_headers())
    post_id = created.json()["id"]

    response = await client.get(f"/api/v1/posts/{post_id}", headers=auth_headers())
    assert response.status_code == 200
    assert response.json()["content"] == "hello"

    other_user = await client.get(f"/api/v1/posts/{post_id}", headers=auth_headers("user-2"))
    assert other_user.status_code == 404


async def test_delete_post_removes_links_and_status(client: httpx.AsyncClient, auth_headers, fake_extractor, session):
    fake_extractor.entities = PARTNERSHIP_ENTITIES
    created = await client.post("/api/v1/posts", json={"content": "hello"}, headers=auth_headers())
    post_id = created.json()["id"]

    response = await client.delete(f"/api/v1/posts/{post_id}", headers=auth_headers())

    assert response.status_code == 204
    assert await ExtractionStatusRepository(session).get_by_id(post_id) is None
    stats = (await client.get("/api/v1/graph/stats", headers=auth_headers())).json()
    # Entities and edges outlive the post
    assert stats["totalEntities"] == 3
    assert stats["totalPostsProcessed"] == 0


async def test_delete_missing_post(client: httpx.AsyncClient, auth_headers):
    response = await client.delete("/api/v1/posts/999", headers=auth_headers())
    assert response.status_code == 404


async def test_posts_require_auth(client: httpx.AsyncClient):
    response = await client.get("/api/v1/posts")
    assert response.status_code in (401, 403)

    bad_token = await client.get("/api/v1/posts", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad_token.status_code == 401
