"""Lazily populated cache of Slack user profiles."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Dict, Iterable, Optional

from .errors import ProfileLookupError
from .models import UserProfile

logger = logging.getLogger(__name__)

ProfileResolver = Callable[[str], Awaitable[UserProfile]]


class UserDirectory:
    """Maps user ids to display profiles.

    Entries are resolved on first use and kept for the process lifetime;
    they are never refreshed.
    """

    def __init__(
        self,
        resolver: Optional[ProfileResolver] = None,
        profiles: Iterable[UserProfile] = (),
    ) -> None:
        self._resolver = resolver
        self._profiles: Dict[str, UserProfile] = {}
        for profile in profiles:
            self.add(profile)

    def add(self, profile: UserProfile) -> None:
        self._profiles[profile.id] = profile

    def get(self, user_id: str) -> Optional[UserProfile]:
        return self._profiles.get(user_id)

    def profiles(self) -> list[UserProfile]:
        return list(self._profiles.values())

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._profiles

    async def lookup(self, user_id: str) -> UserProfile:
        """Return the cached profile, resolving and caching it on a miss.

        Raises ``ProfileLookupError`` when the resolver fails; nothing is
        cached in that case.
        """

        cached = self._profiles.get(user_id)
        if cached is not None:
            return cached
        if self._resolver is None:
            raise ProfileLookupError(user_id, "no resolver configured")
        profile = await self._resolver(user_id)
        self._profiles[user_id] = profile
        logger.info("Cached profile for %s (%s)", user_id, profile.name)
        return profile


__all__ = ["UserDirectory", "ProfileResolver"]
