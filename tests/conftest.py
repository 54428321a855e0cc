# tests/conftest.py
from datetime import date

import pytest

from wfo_bot.config import Settings
from wfo_bot.errors import ProfileLookupError
from wfo_bot.models import UserProfile
from wfo_bot.store import AttendanceStore

TODAY = date(2024, 3, 1)
SIGNING_SECRET = "test-signing-secret"


class FakeSlackClient:
    """
    Records every Web API call instead of talking to Slack.

    Profiles are served from `profiles`; unknown users fail the lookup
    the same way a `users.info` error would.
    """

    def __init__(self, profiles=None):
        self.profiles = dict(profiles or {})
        self.lookups = []
        self.published = []
        self.updated = []
        self.opened = []
        self.closed = False

    async def fetch_user_profile(self, user_id):
        self.lookups.append(user_id)
        if user_id not in self.profiles:
            raise ProfileLookupError(user_id, "user_not_found")
        return self.profiles[user_id]

    async def publish_view(self, user_id, view):
        self.published.append((user_id, view))
        return {"ok": True}

    async def update_view(self, view_id, view):
        self.updated.append((view_id, view))
        return {"ok": True}

    async def open_view(self, trigger_id, view):
        self.opened.append((trigger_id, view))
        return {"ok": True}

    async def close(self):
        self.closed = True


@pytest.fixture
def store() -> AttendanceStore:
    return AttendanceStore()


@pytest.fixture
def hq_store(store) -> AttendanceStore:
    """
    Two offices, HQ created first, with U1 and U2 in HQ and U3 in Annex.
    """
    store.create_office("HQ", "https://img.example/hq.png", "C1", {"id": "U0", "name": "admin"})
    store.create_office("Annex", "https://img.example/annex.png", "C2", {"id": "U0", "name": "admin"})
    store.join_office("U1", "HQ", "alice")
    store.join_office("U2", "HQ", "bob")
    store.join_office("U3", "Annex", "carol")
    return store


@pytest.fixture
def alice() -> UserProfile:
    return UserProfile(id="U1", name="alice", real_name="Alice A", image_url="https://img.example/u1.png")


@pytest.fixture
def fake_client(alice) -> FakeSlackClient:
    return FakeSlackClient({"U1": alice})


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        slack_bot_token="xoxb-test",
        slack_signing_secret=SIGNING_SECRET,
        data_dir=tmp_path / "db",
    )
