"""Handlers for the Slack events, actions, view submissions and commands."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable
from datetime import date
from typing import Any, Dict, Optional, TypeVar

import httpx

from .directory import UserDirectory
from .errors import ProfileLookupError, WfoBotError
from .models import Status
from .slack_client import SlackApiError, SlackClient
from .store import AttendanceStore, parse_day_text, parse_status
from .views import add_office_view, home_view, status_view

logger = logging.getLogger(__name__)

Payload = Dict[str, Any]
T = TypeVar("T")

COMMAND_STATUSES = {"/wfo": Status.OFFICE, "/wfh": Status.HOME}


def event_handler(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[Optional[T]]]:
    """Run one handler at a time and log, rather than raise, its failures."""

    @functools.wraps(func)
    async def wrapper(self: "WfoBot", *args: Any, **kwargs: Any) -> Optional[T]:
        async with self._lock:
            try:
                return await func(self, *args, **kwargs)
            except WfoBotError as exc:
                logger.warning("%s rejected: %s", func.__name__, exc)
            except (SlackApiError, httpx.HTTPError):
                logger.exception("%s failed talking to Slack", func.__name__)
            except (KeyError, IndexError, TypeError) as exc:
                logger.warning("%s got a malformed payload: %r", func.__name__, exc)
        return None

    return wrapper


class WfoBot:
    """Applies inbound Slack interactions to the store and re-renders views."""

    def __init__(
        self,
        store: AttendanceStore,
        directory: UserDirectory,
        client: SlackClient,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.directory = directory
        self.client = client
        self.today = today
        self._lock = asyncio.Lock()

    def render_home(self, user_id: str) -> Payload:
        return home_view(self.store, self.directory, self.today(), user_id)

    async def _record_status(self, user_id: str, day: date, status: Status) -> None:
        # Resolve the profile before writing so a failed lookup cannot
        # leave a half-applied update behind.
        try:
            await self.directory.lookup(user_id)
        except ProfileLookupError as exc:
            logger.warning("Showing %s by id: %s", user_id, exc)
        self.store.set_status(user_id, day, status)
        logger.info("%s is working from %s on %s", user_id, status.label, day.isoformat())

    # region Home tab
    @event_handler
    async def home_opened(self, event: Payload) -> None:
        user_id = event["user"]
        await self.client.publish_view(user_id, self.render_home(user_id))

    @event_handler
    async def join_office(self, body: Payload) -> None:
        user = body["user"]
        office = body["actions"][0]["value"]
        self.store.join_office(user["id"], office, user.get("username") or user.get("name"))
        logger.info("%s joined office %s", user["id"], office)
        await self.client.update_view(body["view"]["id"], self.render_home(user["id"]))

    @event_handler
    async def leave_office(self, body: Payload) -> None:
        user_id = body["user"]["id"]
        office = body["actions"][0]["value"]
        self.store.leave_office(user_id, office)
        logger.info("%s left office %s", user_id, office)
        await self.client.update_view(body["view"]["id"], self.render_home(user_id))

    @event_handler
    async def unset_status(self, body: Payload) -> None:
        user_id = body["user"]["id"]
        day = body["actions"][0]["value"]
        self.store.unset_status(user_id, day)
        logger.info("%s cleared their status on %s", user_id, day)
        await self.client.update_view(body["view"]["id"], self.render_home(user_id))

    # endregion

    # region Offices
    @event_handler
    async def open_add_office(self, body: Payload) -> None:
        await self.client.open_view(body["trigger_id"], add_office_view(body["view"]["id"]))

    @event_handler
    async def submit_add_office(self, body: Payload) -> None:
        user = body["user"]
        view = body["view"]
        values = view["state"]["values"]
        office = self.store.create_office(
            (values["name"]["name"]["value"] or "").strip(),
            values["image"]["image_url"]["value"] or "",
            values["channel"]["channel"].get("selected_channel"),
            {"id": user["id"], "name": user.get("username") or user.get("name") or user["id"]},
        )
        logger.info("%s created office %s", user["id"], office.name)
        await self.client.update_view(view["private_metadata"], self.render_home(user["id"]))

    # endregion

    # region Statuses
    @event_handler
    async def open_status_form(self, body: Payload, status: Status) -> None:
        await self.client.open_view(body["trigger_id"], status_view(status))

    @event_handler
    async def submit_status(self, body: Payload) -> None:
        user_id = body["user"]["id"]
        view = body["view"]
        status = parse_status(view["private_metadata"])
        selected = view["state"]["values"]["date"]["date"]["selected_date"]
        day = parse_day_text(selected, self.today())
        if day is None:
            logger.warning("submit_status rejected: invalid date %r", selected)
            return
        await self._record_status(user_id, day, status)
        await self.client.publish_view(user_id, self.render_home(user_id))

    @event_handler
    async def status_command(self, form: Payload) -> Optional[str]:
        """Handle `/wfo` and `/wfh`; returns the ephemeral reply, if any."""

        status = COMMAND_STATUSES[form["command"]]
        day = parse_day_text(form.get("text"), self.today())
        if day is None:
            await self.client.open_view(form["trigger_id"], status_view(status))
            return None
        await self._record_status(form["user_id"], day, status)
        return f"Set your status to working from {status.label} on {day.isoformat()}"

    @event_handler
    async def unset_command(self, form: Payload) -> Optional[str]:
        day = parse_day_text(form.get("text"), self.today())
        if day is None:
            return "Tell me which day to clear: today, tomorrow or YYYY-MM-DD"
        self.store.unset_status(form["user_id"], day)
        return f"Cleared your status on {day.isoformat()}"

    # endregion


__all__ = ["WfoBot", "event_handler", "COMMAND_STATUSES"]
