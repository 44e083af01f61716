from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.progression.levels import LevelProgress, level_progress
from geomaster.progression.streak.service import StreakService
from geomaster.progression.streak.types import StreakSnapshot
from geomaster.ranking.service import RankingService


@dataclass(slots=True)
class ProgressionSnapshot:
    user_id: int
    total_points: int
    level: LevelProgress
    streak: StreakSnapshot


class ProgressionService:
    @staticmethod
    async def get_progression(session: AsyncSession, *, user_id: int, now_utc: datetime) -> ProgressionSnapshot:
        total_points = await RankingService.get_alltime_total(session, user_id=user_id)
        streak = await StreakService.get_snapshot(session, user_id=user_id, now_utc=now_utc)
        return ProgressionSnapshot(
            user_id=user_id,
            total_points=total_points,
            level=level_progress(total_points),
            streak=streak,
        )
