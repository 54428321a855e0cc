# tests/test_slack_client.py
import json

import httpx
import pytest

from wfo_bot.errors import ProfileLookupError
from wfo_bot.slack_client import SlackApiError, SlackClient


def _client(handler):
    return SlackClient("xoxb-test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_user_profile_maps_users_info():
    def handler(request):
        assert request.url.path == "/api/users.info"
        assert request.url.params["user"] == "U1"
        assert request.headers["Authorization"] == "Bearer xoxb-test"
        return httpx.Response(
            200,
            json={
                "ok": True,
                "user": {
                    "id": "U1",
                    "name": "alice",
                    "profile": {"real_name": "Alice A", "image_48": "https://img.example/u1.png"},
                },
            },
        )

    client = _client(handler)
    profile = await client.fetch_user_profile("U1")
    await client.close()

    assert profile.name == "alice"
    assert profile.real_name == "Alice A"
    assert profile.image_url == "https://img.example/u1.png"


@pytest.mark.asyncio
async def test_fetch_user_profile_error_becomes_lookup_error():
    client = _client(lambda request: httpx.Response(200, json={"ok": False, "error": "user_not_found"}))

    with pytest.raises(ProfileLookupError) as excinfo:
        await client.fetch_user_profile("U404")
    await client.close()

    assert excinfo.value.reason == "user_not_found"


@pytest.mark.asyncio
async def test_fetch_user_profile_transport_error_becomes_lookup_error():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    client = _client(handler)
    with pytest.raises(ProfileLookupError):
        await client.fetch_user_profile("U1")
    await client.close()


@pytest.mark.asyncio
async def test_publish_view_posts_json():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"ok": True, "view": {"id": "V1"}})

    client = _client(handler)
    data = await client.publish_view("U1", {"type": "home", "blocks": []})
    await client.close()

    assert seen == {"path": "/api/views.publish", "body": {"user_id": "U1", "view": {"type": "home", "blocks": []}}}
    assert data["view"]["id"] == "V1"


@pytest.mark.asyncio
async def test_view_call_error_raises_slack_api_error():
    client = _client(lambda request: httpx.Response(200, json={"ok": False, "error": "expired_trigger_id"}))

    with pytest.raises(SlackApiError) as excinfo:
        await client.open_view("T1", {"type": "modal"})
    await client.close()

    assert excinfo.value.method == "views.open"
    assert excinfo.value.error == "expired_trigger_id"
