"""In-memory attendance state for offices, memberships and dated statuses."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Union

from .errors import DuplicateNameError, NotFoundError, ValidationError
from .models import Office, Status

DateLike = Union[date, str]
StatusLike = Union[Status, str]

_STATUS_ALIASES = {
    "wfo": Status.OFFICE,
    "office": Status.OFFICE,
    "wfh": Status.HOME,
    "home": Status.HOME,
}


class AttendanceStore:
    """Aggregate root owning every mutation of offices and statuses.

    Offices keep their creation order. Each user belongs to at most one
    office; ``_office_of`` is the back-reference kept in step with the
    member mapping of every office.
    """

    def __init__(self) -> None:
        self._offices: Dict[str, Office] = {}
        self._office_of: Dict[str, str] = {}
        self._dates: Dict[str, Dict[str, Status]] = {}

    # region Offices
    def create_office(
        self,
        name: str,
        image_url: str,
        channel: Optional[str],
        creator: Dict[str, str],
    ) -> Office:
        if not name or not name.strip():
            raise ValidationError("office name must not be blank")
        if name in self._offices:
            raise DuplicateNameError(name)
        office = Office(
            name=name,
            image_url=image_url,
            channel=channel,
            created_by=dict(creator),
        )
        self._offices[name] = office
        return office

    def get_office(self, name: str) -> Office:
        try:
            return self._offices[name]
        except KeyError:
            raise NotFoundError(name) from None

    def offices(self) -> List[Office]:
        return list(self._offices.values())

    def members(self, name: str) -> List[str]:
        return list(self.get_office(name).members)

    # endregion

    # region Membership
    def join_office(self, user_id: str, name: str, handle: Optional[str] = None) -> None:
        target = self.get_office(name)
        current = self._office_of.get(user_id)
        if current == name:
            return
        if current is not None:
            self._offices[current].members.pop(user_id, None)
        target.members[user_id] = handle or user_id
        self._office_of[user_id] = name

    def leave_office(self, user_id: str, name: str) -> None:
        office = self._offices.get(name)
        if office is None or user_id not in office.members:
            return
        del office.members[user_id]
        if self._office_of.get(user_id) == name:
            del self._office_of[user_id]

    def office_of(self, user_id: str) -> Optional[str]:
        return self._office_of.get(user_id)

    # endregion

    # region Statuses
    def set_status(self, user_id: str, day: DateLike, status: StatusLike) -> None:
        key = parse_iso_date(day).isoformat()
        value = parse_status(status)
        self._dates.setdefault(key, {})[user_id] = value

    def unset_status(self, user_id: str, day: DateLike) -> None:
        key = parse_iso_date(day).isoformat()
        users = self._dates.get(key)
        if users is None or user_id not in users:
            return
        del users[user_id]
        if not users:
            del self._dates[key]

    def status_of(self, user_id: str, day: DateLike) -> Optional[Status]:
        return self.statuses_on(day).get(user_id)

    def statuses_on(self, day: DateLike) -> Dict[str, Status]:
        key = parse_iso_date(day).isoformat()
        return dict(self._dates.get(key, {}))

    def dates(self) -> Dict[str, Dict[str, Status]]:
        return {key: dict(users) for key, users in self._dates.items()}

    # endregion


def parse_iso_date(value: DateLike) -> date:
    """Return a calendar date for a ``date`` or a ``YYYY-MM-DD`` string."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValidationError(f"invalid date {value!r}. Use YYYY-MM-DD") from exc


def parse_status(value: StatusLike) -> Status:
    if isinstance(value, Status):
        return value
    status = _STATUS_ALIASES.get(str(value).strip().lower())
    if status is None:
        raise ValidationError(f"unsupported status {value!r}")
    return status


def parse_day_text(text: Optional[str], today: date) -> Optional[date]:
    """Resolve the free text of a slash command to a date, if it names one."""

    if not text:
        return None
    normalized = text.strip().lower()
    if normalized == "today":
        return today
    if normalized == "tomorrow":
        return today + timedelta(days=1)
    try:
        return parse_iso_date(normalized)
    except ValidationError:
        return None


__all__ = [
    "AttendanceStore",
    "parse_iso_date",
    "parse_status",
    "parse_day_text",
]
