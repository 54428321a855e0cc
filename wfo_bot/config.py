"""Configuration helpers for the WFO bot."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv


@dataclass(slots=True)
class Settings:
    """Runtime configuration values loaded from environment variables."""

    slack_bot_token: str
    slack_signing_secret: str
    data_dir: Path
    timezone: Optional[ZoneInfo] = None

    def today(self) -> date:
        """The local calendar date the rolling window starts from."""

        if self.timezone is None:
            return date.today()
        return datetime.now(self.timezone).date()


def load_settings(env_file: str | None = None) -> Settings:
    """Load settings from the environment, optionally from a specific file."""

    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    slack_token = os.getenv("SLACK_BOT_TOKEN")
    signing_secret = os.getenv("SLACK_SIGNING_SECRET")

    if not slack_token:
        raise RuntimeError("SLACK_BOT_TOKEN must be configured")
    if not signing_secret:
        raise RuntimeError("SLACK_SIGNING_SECRET must be configured")

    timezone: Optional[ZoneInfo] = None
    tz_name = os.getenv("WFO_TIMEZONE")
    if tz_name:
        try:
            timezone = ZoneInfo(tz_name)
        except ZoneInfoNotFoundError as exc:
            raise RuntimeError(f"WFO_TIMEZONE is not a known time zone: {tz_name}") from exc

    return Settings(
        slack_bot_token=slack_token,
        slack_signing_secret=signing_secret,
        data_dir=Path(os.getenv("WFO_DATA_DIR", "db")).expanduser(),
        timezone=timezone,
    )


__all__ = ["Settings", "load_settings"]
