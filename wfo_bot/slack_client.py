"""HTTP client for interacting with Slack Web API."""

from __future__ import annotations

import json
from typing import Any, Dict

import httpx

from .errors import ProfileLookupError
from .models import UserProfile

SLACK_API_BASE = "https://slack.com/api"


class SlackApiError(RuntimeError):
    """Raised when Slack returns an error response."""

    def __init__(self, method: str, error: str) -> None:
        super().__init__(f"Slack API error for {method}: {error}")
        self.method = method
        self.error = error


class SlackClient:
    """Simple async wrapper around the Slack Web API endpoints used by the bot."""

    def __init__(self, token: str, timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._client = httpx.AsyncClient(
            base_url=SLACK_API_BASE,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._client.post(method, json=payload)
        response.raise_for_status()
        data = response.json()
        if not data.get("ok"):
            raise SlackApiError(method, data.get("error", "unknown_error"))
        return data

    async def fetch_user_profile(self, user_id: str) -> UserProfile:
        """Resolve a user's handle, real name and avatar via `users.info`."""

        try:
            response = await self._client.get("users.info", params={"user": user_id})
            data = response.json()
        except (httpx.HTTPError, json.JSONDecodeError) as exc:
            raise ProfileLookupError(user_id, str(exc)) from exc
        if not data.get("ok"):
            raise ProfileLookupError(user_id, data.get("error", "unknown_error"))

        member = data.get("user", {})
        profile = member.get("profile", {})
        name = member.get("name") or user_id
        return UserProfile(
            id=user_id,
            name=name,
            real_name=profile.get("real_name") or member.get("real_name") or name,
            image_url=profile.get("image_48") or profile.get("image_72"),
        )

    async def publish_view(self, user_id: str, view: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("views.publish", {"user_id": user_id, "view": view})

    async def update_view(self, view_id: str, view: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("views.update", {"view_id": view_id, "view": view})

    async def open_view(self, trigger_id: str, view: Dict[str, Any]) -> Dict[str, Any]:
        return await self._call("views.open", {"trigger_id": trigger_id, "view": view})


__all__ = ["SlackClient", "SlackApiError"]
