"""User Routes — verifies the HTTP contract for users and the follow graph.

Invariants:
    - Success bodies are {success: true, data}; failures {success: false, error, message}
    - JSON fields are camelCase; no password material is ever returned
    - Malformed ids are 400, missing resources 404, duplicate keys 409
"""

from uuid import uuid4


async def test_create_user_returns_201_envelope(client):
    res = await client.post("/api/users", json={
        "username": "alice",
        "email": "Alice@Example.com",
        "password": "secret123",
        "profile": {"firstName": "Alice", "lastName": "Liddell"},
    })
    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    data = body["data"]
    assert data["username"] == "alice"
    assert data["email"] == "alice@example.com"
    assert data["profile"]["firstName"] == "Alice"
    assert data["followersCount"] == 0
    assert data["followingCount"] == 0
    assert "createdAt" in data and "updatedAt" in data
    assert "password" not in data and "passwordHash" not in data


async def test_create_user_with_short_username_is_400(client):
    res = await client.post("/api/users", json={
        "username": "ab", "email": "ab@example.com", "password": "secret123",
    })
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["error"] == "Validation error"
    assert "Username" in body["message"]


async def test_create_user_missing_field_is_400(client):
    res = await client.post("/api/users", json={"username": "alice"})
    assert res.status_code == 400
    assert res.json()["error"] == "Validation error"


async def test_duplicate_username_is_409(client, api_user):
    await api_user("alice")
    res = await client.post("/api/users", json={
        "username": "alice", "email": "other@example.com", "password": "secret123",
    })
    assert res.status_code == 409
    assert res.json() == {
        "success": False,
        "error": "Duplicate key error",
        "message": "Username 'alice' is already taken",
    }


async def test_get_user_by_id(client, api_user):
    alice = await api_user("alice")
    res = await client.get(f"/api/users/{alice['id']}")
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["id"] == alice["id"]
    assert data["followers"] == [] and data["following"] == []


async def test_get_user_with_malformed_id_is_400(client):
    res = await client.get("/api/users/not-a-uuid")
    assert res.status_code == 400
    assert res.json()["success"] is False


async def test_get_missing_user_is_404(client):
    res = await client.get(f"/api/users/{uuid4()}")
    assert res.status_code == 404
    assert res.json()["error"] == "Not found"


async def test_list_users_paginates(client, api_user):
    for _ in range(3):
        await api_user()
    res = await client.get("/api/users", params={"page": 2, "limit": 2})
    assert res.status_code == 200
    data = res.json()["data"]
    assert len(data["items"]) == 1
    assert data["meta"] == {"total": 3, "page": 2, "limit": 2, "totalPages": 2}


async def test_list_users_limit_over_max_is_400(client):
    res = await client.get("/api/users", params={"limit": 500})
    assert res.status_code == 400


async def test_put_updates_profile(client, api_user):
    alice = await api_user("alice")
    res = await client.put(f"/api/users/{alice['id']}", json={
        "profile": {"bio": "Down the rabbit hole"},
    })
    assert res.status_code == 200
    assert res.json()["data"]["profile"]["bio"] == "Down the rabbit hole"


async def test_empty_patch_is_400(client, api_user):
    alice = await api_user("alice")
    res = await client.patch(f"/api/users/{alice['id']}", json={})
    assert res.status_code == 400
    assert res.json()["message"] == "Request body cannot be empty"


async def test_patch_missing_user_is_404(client):
    res = await client.patch(f"/api/users/{uuid4()}", json={"username": "nobody"})
    assert res.status_code == 404


async def test_delete_user_is_204_then_404(client, api_user):
    alice = await api_user("alice")
    res = await client.delete(f"/api/users/{alice['id']}")
    assert res.status_code == 204
    assert res.content == b""
    assert (await client.get(f"/api/users/{alice['id']}")).status_code == 404


# ─── Follow graph ────────────────────────────────────────────────

async def test_follow_is_symmetric_and_idempotent(client, api_user):
    alice = await api_user("alice")
    bob = await api_user("bob")

    res = await client.post(
        f"/api/users/{bob['id']}/follow", json={"userId": alice["id"]},
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["followed"] is True
    assert data["follower"]["followingCount"] == 1
    assert data["target"]["followersCount"] == 1
    assert data["target"]["followers"][0]["id"] == alice["id"]

    again = await client.post(
        f"/api/users/{bob['id']}/follow", json={"userId": alice["id"]},
    )
    assert again.json()["data"]["followed"] is False
    assert again.json()["data"]["target"]["followersCount"] == 1

    bob_view = (await client.get(f"/api/users/{bob['id']}")).json()["data"]
    alice_view = (await client.get(f"/api/users/{alice['id']}")).json()["data"]
    assert [u["id"] for u in bob_view["followers"]] == [alice["id"]]
    assert [u["id"] for u in alice_view["following"]] == [bob["id"]]


async def test_unfollow_clears_both_sides(client, api_user):
    alice = await api_user("alice")
    bob = await api_user("bob")
    await client.post(f"/api/users/{bob['id']}/follow", json={"userId": alice["id"]})

    res = await client.post(
        f"/api/users/{bob['id']}/unfollow", json={"userId": alice["id"]},
    )
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["follower"]["following"] == []
    assert data["target"]["followers"] == []


async def test_self_follow_is_400(client, api_user):
    alice = await api_user("alice")
    res = await client.post(
        f"/api/users/{alice['id']}/follow", json={"userId": alice["id"]},
    )
    assert res.status_code == 400
    assert res.json()["message"] == "You cannot follow yourself"


async def test_follow_without_user_id_is_400(client, api_user):
    bob = await api_user("bob")
    res = await client.post(f"/api/users/{bob['id']}/follow", json={})
    assert res.status_code == 400
    assert res.json()["error"] == "Bad request"


async def test_follow_missing_target_is_404(client, api_user):
    alice = await api_user("alice")
    res = await client.post(
        f"/api/users/{uuid4()}/follow", json={"userId": alice["id"]},
    )
    assert res.status_code == 404


# ─── Posts by author ─────────────────────────────────────────────

async def test_user_posts_lists_only_that_author(client, api_user, api_post):
    alice = await api_user("alice")
    bob = await api_user("bob")
    await api_post(alice, title="By Alice")
    await api_post(bob, title="By Bob")

    res = await client.get(f"/api/users/{alice['id']}/posts")
    assert res.status_code == 200
    items = res.json()["data"]["items"]
    assert [p["title"] for p in items] == ["By Alice"]


async def test_user_posts_for_missing_user_is_404(client):
    res = await client.get(f"/api/users/{uuid4()}/posts")
    assert res.status_code == 404


async def test_delete_user_removes_posts_and_tombstones_comments(
    client, api_user, api_post,
):
    alice = await api_user("alice")
    bob = await api_user("bob")
    alice_post = await api_post(alice, title="Alice's")
    bob_post = await api_post(bob, title="Bob's")
    await client.post(f"/api/users/{bob['id']}/follow", json={"userId": alice["id"]})
    await client.post(f"/api/posts/{bob_post['id']}/like", json={"userId": alice["id"]})
    await client.post(
        f"/api/posts/{bob_post['id']}/comments",
        json={"text": "Lovely", "author": alice["id"]},
    )

    assert (await client.delete(f"/api/users/{alice['id']}")).status_code == 204

    assert (await client.get(f"/api/posts/{alice_post['id']}")).status_code == 404
    remaining = (await client.get(f"/api/posts/{bob_post['id']}")).json()["data"]
    assert remaining["likes"] == []
    assert remaining["likesCount"] == 0
    assert remaining["commentsCount"] == 1
    assert remaining["comments"][0]["author"] is None
    assert remaining["comments"][0]["text"] == "Lovely"
    bob_view = (await client.get(f"/api/users/{bob['id']}")).json()["data"]
    assert bob_view["followersCount"] == 0
