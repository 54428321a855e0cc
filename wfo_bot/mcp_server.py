"""MCP server exposing read-only WFO attendance tools."""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .snapshot import load_snapshot
from .store import parse_iso_date
from .views import project_office_week

mcp = FastMCP("wfo-bot")

# Only the snapshot is read; it changes when the bot process shuts down.
_data_dir = Path(os.getenv("WFO_DATA_DIR", "db")).expanduser()


def _ensure_date(day_str: Optional[str] = None) -> date:
    if not day_str:
        return date.today()
    return parse_iso_date(day_str)


@mcp.tool()
def list_offices() -> dict:
    """Return every office with its members, in creation order."""

    store, _ = load_snapshot(_data_dir)
    return {
        "offices": [
            {"name": office.name, "channel": office.channel, "members": list(office.members)}
            for office in store.offices()
        ]
    }


@mcp.tool()
def get_office_week(office: str, start: Optional[str] = None) -> dict:
    """Return who works from the office or from home over the next 7 days."""

    store, _ = load_snapshot(_data_dir)
    week = project_office_week(store, store.get_office(office), _ensure_date(start))
    return {
        "office": office,
        "days": [
            {
                "date": attendance.day.isoformat(),
                "label": attendance.label,
                "office": attendance.office,
                "home": attendance.home,
            }
            for attendance in week
        ],
    }


@mcp.tool()
def get_user_status(user_id: str, date: Optional[str] = None) -> dict:
    """Return a user's office and their status for the given date."""

    day = _ensure_date(date)
    store, _ = load_snapshot(_data_dir)
    status = store.status_of(user_id, day)
    return {
        "user_id": user_id,
        "date": day.isoformat(),
        "office": store.office_of(user_id),
        "status": status.label if status else None,
    }


__all__ = ["mcp", "list_offices", "get_office_week", "get_user_status"]
