from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from geomaster.progression.streak.time import local_play_date

OVERALL_GAME_TYPE = "overall"
ALLTIME_PERIOD_KEY = "alltime"


class RankingPeriod(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ALLTIME = "alltime"


def period_key(period: RankingPeriod, local_date: date) -> str:
    if period == RankingPeriod.DAILY:
        return local_date.isoformat()
    if period == RankingPeriod.WEEKLY:
        iso_year, iso_week, _ = local_date.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    if period == RankingPeriod.MONTHLY:
        return f"{local_date.year:04d}-{local_date.month:02d}"
    return ALLTIME_PERIOD_KEY


def period_key_at(period: RankingPeriod, at_utc: datetime, *, timezone_name: str) -> str:
    return period_key(period, local_play_date(at_utc, timezone_name=timezone_name))


def period_keys_at(at_utc: datetime, *, timezone_name: str) -> dict[RankingPeriod, str]:
    local_date = local_play_date(at_utc, timezone_name=timezone_name)
    return {period: period_key(period, local_date) for period in RankingPeriod}
