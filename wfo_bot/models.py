"""Dataclasses representing WFO bot domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional


class Status(str, Enum):
    """Attendance plan for a single date. Values are the persisted codes."""

    OFFICE = "wfo"
    HOME = "wfh"

    @property
    def label(self) -> str:
        return "office" if self is Status.OFFICE else "home"


@dataclass(slots=True)
class Office:
    name: str
    image_url: str
    channel: Optional[str]
    created_by: Dict[str, str]
    # user id -> handle, in join order
    members: Dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class UserProfile:
    id: str
    name: str
    real_name: str
    image_url: Optional[str] = None


@dataclass(slots=True)
class DayAttendance:
    """Statuses of one office's members on one day of the rolling window."""

    day: date
    label: str
    office: List[str] = field(default_factory=list)
    home: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.office and not self.home


__all__ = ["Status", "Office", "UserProfile", "DayAttendance"]
