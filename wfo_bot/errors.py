"""Exceptions raised by the WFO bot core."""

from __future__ import annotations


class WfoBotError(Exception):
    """Base class for errors the event handlers catch and log."""


class NotFoundError(WfoBotError):
    """Raised when an operation references an office that does not exist."""

    def __init__(self, office: str) -> None:
        super().__init__(f"office not found: {office}")
        self.office = office


class DuplicateNameError(WfoBotError):
    """Raised when an office is created under a name already in use."""

    def __init__(self, office: str) -> None:
        super().__init__(f"office already exists: {office}")
        self.office = office


class ProfileLookupError(WfoBotError, LookupError):
    """Raised when a user's profile cannot be resolved from Slack."""

    def __init__(self, user_id: str, reason: str) -> None:
        super().__init__(f"profile lookup failed for {user_id}: {reason}")
        self.user_id = user_id
        self.reason = reason


class ValidationError(WfoBotError, ValueError):
    """Raised for a malformed date, an unsupported status or a bad snapshot."""


__all__ = [
    "WfoBotError",
    "NotFoundError",
    "DuplicateNameError",
    "ProfileLookupError",
    "ValidationError",
]
