from __future__ import annotations

from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from geomaster.core.config import get_settings
from geomaster.db.models.user_streaks import UserStreak
from geomaster.db.repo.user_streaks_repo import UserStreaksRepo
from geomaster.progression.streak.rules import apply_play_date, effective_current_streak
from geomaster.progression.streak.time import local_play_date
from geomaster.progression.streak.types import StreakSnapshot, StreakUpdateResult


class StreakService:
    @staticmethod
    def _snapshot_from_model(state: UserStreak) -> StreakSnapshot:
        return StreakSnapshot(
            current_streak=state.current_streak,
            longest_streak=state.longest_streak,
            last_played_date=state.last_played_date,
        )

    @staticmethod
    def _apply_snapshot_to_model(state: UserStreak, snapshot: StreakSnapshot, now_utc: datetime) -> None:
        state.current_streak = snapshot.current_streak
        state.longest_streak = snapshot.longest_streak
        state.last_played_date = snapshot.last_played_date
        state.updated_at = now_utc
        state.version += 1

    @staticmethod
    async def _get_or_create_state_for_update(
        session: AsyncSession,
        user_id: int,
        now_utc: datetime,
    ) -> UserStreak:
        state = await UserStreaksRepo.get_by_user_id_for_update(session, user_id)
        if state is not None:
            return state
        try:
            async with session.begin_nested():
                return await UserStreaksRepo.create_default_state(session, user_id=user_id, now_utc=now_utc)
        except IntegrityError:
            # Lost the race against a concurrent first play.
            state = await UserStreaksRepo.get_by_user_id_for_update(session, user_id)
            if state is None:
                raise
            return state

    @staticmethod
    async def record_play(
        session: AsyncSession,
        *,
        user_id: int,
        played_at_utc: datetime,
    ) -> StreakUpdateResult:
        state = await StreakService._get_or_create_state_for_update(session, user_id, played_at_utc)
        play_date = local_play_date(played_at_utc, timezone_name=get_settings().game_timezone)

        snapshot, change = apply_play_date(StreakService._snapshot_from_model(state), play_date=play_date)
        StreakService._apply_snapshot_to_model(state, snapshot, played_at_utc)
        await session.flush()
        return StreakUpdateResult(
            change=change,
            current_streak=snapshot.current_streak,
            longest_streak=snapshot.longest_streak,
            last_played_date=snapshot.last_played_date,
        )

    @staticmethod
    async def get_snapshot(
        session: AsyncSession,
        *,
        user_id: int,
        now_utc: datetime,
    ) -> StreakSnapshot:
        state = await UserStreaksRepo.get_by_user_id(session, user_id)
        if state is None:
            return StreakSnapshot(current_streak=0, longest_streak=0, last_played_date=None)

        snapshot = StreakService._snapshot_from_model(state)
        today = local_play_date(now_utc, timezone_name=get_settings().game_timezone)
        snapshot.current_streak = effective_current_streak(snapshot, today=today)
        return snapshot
