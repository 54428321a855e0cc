"""Block Kit views for the app home, the add-office modal and the status modal.

Every function here is pure: the rendered view depends only on the store,
the cached profiles, the date treated as "today" and the viewing user.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from .directory import UserDirectory
from .models import DayAttendance, Office, Status
from .store import AttendanceStore

WINDOW_DAYS = 7
MAX_CONTEXT_ELEMENTS = 10

Block = Dict[str, Any]


def week_window(today: date, days: int = WINDOW_DAYS) -> List[date]:
    return [today + timedelta(days=offset) for offset in range(days)]


def day_label(offset: int, day: date) -> str:
    if offset == 0:
        return "Today"
    if offset == 1:
        return "Tomorrow"
    return day.isoformat()


def project_office_week(
    store: AttendanceStore, office: Office, today: date
) -> List[DayAttendance]:
    """Split each day's statuses of the office members into office/home groups.

    Users keep the order in which their status was recorded for that day.
    """

    week: List[DayAttendance] = []
    for offset, day in enumerate(week_window(today)):
        attendance = DayAttendance(day=day, label=day_label(offset, day))
        for user_id, status in store.statuses_on(day).items():
            if user_id not in office.members:
                continue
            if status is Status.OFFICE:
                attendance.office.append(user_id)
            elif status is Status.HOME:
                attendance.home.append(user_id)
        week.append(attendance)
    return week


# region Elements
def _plain_text(text: str) -> Dict[str, str]:
    return {"type": "plain_text", "text": text}


def _mrkdwn(text: str) -> Dict[str, str]:
    return {"type": "mrkdwn", "text": text}


def _button(
    text: str,
    action_id: str,
    value: Optional[str] = None,
    style: Optional[str] = None,
) -> Block:
    button: Block = {"type": "button", "text": _plain_text(text), "action_id": action_id}
    if value is not None:
        button["value"] = value
    if style:
        button["style"] = style
    return button


def user_elements(user_ids: List[str], directory: UserDirectory) -> List[Block]:
    """Avatars for users with a cached profile, mentions for everyone else.

    Users keep their order; consecutive mentions share one mrkdwn element.
    """

    elements: List[Block] = []
    mentions: List[str] = []
    for user_id in user_ids:
        profile = directory.get(user_id)
        if profile is not None and profile.image_url:
            if mentions:
                elements.append(_mrkdwn("".join(mentions)))
                mentions = []
            elements.append(
                {
                    "type": "image",
                    "image_url": profile.image_url,
                    "alt_text": profile.real_name or profile.name,
                }
            )
        else:
            mentions.append(f"<@{user_id}>")
    if mentions:
        elements.append(_mrkdwn("".join(mentions)))
    return elements


# endregion


def _day_blocks(
    attendance: DayAttendance, directory: UserDirectory, viewer: str
) -> List[Block]:
    elements: List[Block] = []
    if attendance.office:
        elements.append(_plain_text(":office:"))
        elements.extend(user_elements(attendance.office, directory))
    if attendance.home:
        elements.append(_plain_text(":house:"))
        elements.extend(user_elements(attendance.home, directory))

    heading: Block = {"type": "section", "text": _mrkdwn(f"*{attendance.label}*")}
    if viewer in attendance.office or viewer in attendance.home:
        heading["accessory"] = _button("Clear", "unset_status", attendance.day.isoformat())
    # Slack rejects context blocks holding more than ten elements
    contexts = [
        {"type": "context", "elements": elements[start : start + MAX_CONTEXT_ELEMENTS]}
        for start in range(0, len(elements), MAX_CONTEXT_ELEMENTS)
    ]
    return [heading, *contexts]


def home_view(
    store: AttendanceStore, directory: UserDirectory, today: date, viewer: str
) -> Dict[str, Any]:
    blocks: List[Block] = [
        {
            "type": "section",
            "text": _mrkdwn(f"*Welcome to the WFO bot home, <@{viewer}> :house: :office:*"),
        },
        {"type": "divider"},
        {"type": "section", "text": _mrkdwn("*Offices*")},
        {"type": "divider"},
    ]

    for office in store.offices():
        section: Block = {"type": "section", "text": _mrkdwn(office.name)}
        if office.image_url:
            section["accessory"] = {
                "type": "image",
                "image_url": office.image_url,
                "alt_text": office.name,
            }
        blocks.append(section)

        for attendance in project_office_week(store, office, today):
            if attendance.is_empty:
                continue
            blocks.extend(_day_blocks(attendance, directory, viewer))

        if viewer in office.members:
            action = _button("Leave office", "leave_office", office.name, "danger")
        else:
            action = _button("Join office", "join_office", office.name, "primary")
        blocks.append({"type": "actions", "elements": [action]})

    blocks.append({"type": "divider"})
    blocks.append({"type": "actions", "elements": [_button("Add office", "add_office")]})
    return {"type": "home", "blocks": blocks}


def _input(block_id: str, label: str, element: Block) -> Block:
    return {"block_id": block_id, "type": "input", "label": _plain_text(label), "element": element}


def add_office_view(home_view_id: str) -> Dict[str, Any]:
    return {
        "type": "modal",
        "callback_id": "add_office",
        "private_metadata": home_view_id,
        "title": _plain_text("Add office"),
        "blocks": [
            _input("name", "Name", {"type": "plain_text_input", "action_id": "name"}),
            _input("image", "Image URL", {"type": "url_text_input", "action_id": "image_url"}),
            _input(
                "channel",
                "Post attendance in channel",
                {"type": "channels_select", "action_id": "channel"},
            ),
        ],
        "submit": _plain_text("Save"),
        "close": _plain_text("Cancel"),
    }


def status_view(status: Status) -> Dict[str, Any]:
    return {
        "type": "modal",
        "callback_id": "status",
        "private_metadata": status.value,
        "title": _plain_text(f"Working from {status.label}"),
        "blocks": [
            _input("date", "Date", {"type": "datepicker", "action_id": "date"}),
        ],
        "submit": _plain_text("Save"),
        "close": _plain_text("Cancel"),
    }


__all__ = [
    "WINDOW_DAYS",
    "MAX_CONTEXT_ELEMENTS",
    "week_window",
    "day_label",
    "project_office_week",
    "user_elements",
    "home_view",
    "add_office_view",
    "status_view",
]
