import uuid

import httpx
import pytest
import pytest_asyncio

from vidhub.core.database import get_db
from vidhub.main import app

PREFIX = "/api/v1"


@pytest_asyncio.fixture
async def client(session_factory):
    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://testserver",
    ) as c:
        yield c
    app.dependency_overrides.clear()


def as_user(user) -> dict:
    return {"X-User-Id": str(user.id)}


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_comment_feed_is_camel_case(client, make_user, make_video, make_comment, like_comment):
    a = await make_user("a")
    video = await make_video(a)
    comment = await make_comment(video, a, "hello")
    await like_comment(a, comment)

    response = await client.get(f"{PREFIX}/comments/{video.id}", headers=as_user(a))
    assert response.status_code == 200
    body = response.json()
    assert body["totalItems"] == 1
    assert body["totalPages"] == 1
    assert body["hasNextPage"] is False
    item = body["items"][0]
    assert item["likesCount"] == 1
    assert item["isLiked"] is True
    assert item["owner"]["fullName"] == "A"
    assert "email" not in item["owner"]


@pytest.mark.asyncio
async def test_comment_feed_sort_param(client, make_user, make_video, make_comment):
    a = await make_user("a")
    video = await make_video(a)
    await make_comment(video, a, "first")
    await make_comment(video, a, "second")

    response = await client.get(f"{PREFIX}/comments/{video.id}", params={"sort": "newest"})
    assert [i["content"] for i in response.json()["items"]] == ["second", "first"]


@pytest.mark.asyncio
async def test_mutations_require_viewer(client, make_user, make_video):
    a = await make_user("a")
    video = await make_video(a)

    response = await client.post(f"{PREFIX}/likes/toggle/v/{video.id}")
    assert response.status_code == 401
    assert response.json()["error"] == "unauthenticated"

    response = await client.post(f"{PREFIX}/comments/{video.id}", json={"content": "hi"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_add_comment_returns_201(client, make_user, make_video):
    a = await make_user("a")
    video = await make_video(a)

    response = await client.post(
        f"{PREFIX}/comments/{video.id}", json={"content": "hi"}, headers=as_user(a),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["content"] == "hi"
    assert body["video"] == str(video.id)
    assert "createdAt" in body


@pytest.mark.asyncio
async def test_edit_by_non_owner_is_forbidden(client, make_user, make_video, make_comment):
    a = await make_user("a")
    b = await make_user("b")
    video = await make_video(a)
    comment = await make_comment(video, a)

    response = await client.patch(
        f"{PREFIX}/comments/c/{comment.id}", json={"content": "mine now"}, headers=as_user(b),
    )
    assert response.status_code == 403
    assert response.json() == {
        "detail": "Only comment owner can edit their comment",
        "error": "unauthorized",
    }


@pytest.mark.asyncio
async def test_invalid_and_missing_ids(client, make_user):
    a = await make_user("a")

    response = await client.get(f"{PREFIX}/comments/not-an-id")
    assert response.status_code == 400
    assert response.json()["error"] == "validation"

    response = await client.delete(f"{PREFIX}/comments/c/{uuid.uuid4()}", headers=as_user(a))
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


@pytest.mark.asyncio
async def test_malformed_viewer_header_is_rejected(client, make_user, make_video):
    a = await make_user("a")
    video = await make_video(a)

    response = await client.post(f"{PREFIX}/likes/toggle/v/{video.id}", headers={"X-User-Id": "abc"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_toggle_endpoints(client, make_user, make_video):
    a = await make_user("a")
    b = await make_user("b")
    video = await make_video(b)

    response = await client.post(f"{PREFIX}/likes/toggle/v/{video.id}", headers=as_user(a))
    assert response.json() == {"isLiked": True}
    response = await client.post(f"{PREFIX}/likes/toggle/v/{video.id}", headers=as_user(a))
    assert response.json() == {"isLiked": False}

    response = await client.post(f"{PREFIX}/subscriptions/c/{b.id}", headers=as_user(a))
    assert response.json() == {"subscribed": True}

    response = await client.get(f"{PREFIX}/subscriptions/c/{b.id}")
    assert response.status_code == 200
    subscriber = response.json()[0]["subscriber"]
    assert subscriber["username"] == "a"
    assert subscriber["subscribedToSubscriber"] is False


@pytest.mark.asyncio
async def test_liked_videos_paged_on_request(client, make_user, make_video):
    a = await make_user("a")
    video = await make_video(a, title="clip")
    await client.post(f"{PREFIX}/likes/toggle/v/{video.id}", headers=as_user(a))

    plain = await client.get(f"{PREFIX}/likes/videos", headers=as_user(a))
    assert plain.json()[0]["likedVideo"]["title"] == "clip"

    paged = await client.get(f"{PREFIX}/likes/videos", params={"page": 1, "limit": 5}, headers=as_user(a))
    assert paged.json()["totalItems"] == 1
    assert paged.json()["items"][0]["likedVideo"]["ownerDetails"]["username"] == "a"


@pytest.mark.asyncio
async def test_playlist_flow(client, make_user, make_video):
    a = await make_user("a")
    video = await make_video(a, views=7)

    response = await client.post(
        f"{PREFIX}/playlists", json={"name": "Mix", "description": "tunes"}, headers=as_user(a),
    )
    assert response.status_code == 201
    playlist_id = response.json()["id"]

    response = await client.patch(f"{PREFIX}/playlists/add/{video.id}/{playlist_id}", headers=as_user(a))
    assert response.json()["videos"] == [str(video.id)]

    response = await client.get(f"{PREFIX}/playlists/user/{a.id}")
    summary = response.json()[0]
    assert summary["totalVideos"] == 1
    assert summary["totalViews"] == 7

    response = await client.get(f"{PREFIX}/playlists/{playlist_id}")
    assert response.json()["videos"][0]["ownerDetails"]["username"] == "a"

    response = await client.delete(f"{PREFIX}/playlists/{playlist_id}", headers=as_user(a))
    assert response.json() == {"playlistId": playlist_id}


@pytest.mark.asyncio
async def test_create_playlist_without_name(client, make_user):
    a = await make_user("a")
    response = await client.post(f"{PREFIX}/playlists", json={"description": "x"}, headers=as_user(a))
    assert response.status_code == 400
    assert response.json()["detail"] == "name is required"


@pytest.mark.asyncio
async def test_out_of_range_page_args_are_validation_errors(client, make_user, make_video):
    a = await make_user("a")
    video = await make_video(a)

    response = await client.get(f"{PREFIX}/comments/{video.id}", params={"page": 0})
    assert response.status_code == 400
    assert response.json()["error"] == "validation"
    assert isinstance(response.json()["detail"], str)

    response = await client.get(f"{PREFIX}/comments/{video.id}", params={"limit": 500})
    assert response.status_code == 400
    assert response.json()["error"] == "validation"


@pytest.mark.asyncio
async def test_oversized_limit_on_unpaged_feeds_is_rejected(client, make_user, make_video):
    a = await make_user("a")
    video = await make_video(a)
    await client.post(f"{PREFIX}/likes/toggle/v/{video.id}", headers=as_user(a))

    response = await client.get(f"{PREFIX}/likes/videos", params={"page": 1, "limit": 500}, headers=as_user(a))
    assert response.status_code == 400
    assert response.json() == {"detail": "limit must be at most 100", "error": "validation"}

    response = await client.get(f"{PREFIX}/subscriptions/u/{a.id}", params={"limit": 101})
    assert response.status_code == 400
