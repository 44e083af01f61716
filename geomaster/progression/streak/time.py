from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo


def local_play_date(now_utc: datetime, *, timezone_name: str) -> date:
    """Calendar date of now_utc in the game timezone."""
    return now_utc.astimezone(ZoneInfo(timezone_name)).date()
