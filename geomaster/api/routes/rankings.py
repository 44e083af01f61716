from __future__ import annotations

from datetime import date, datetime, timezone

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict

from geomaster.core.config import get_settings
from geomaster.db.session import SessionLocal
from geomaster.progression.levels import level_name
from geomaster.progression.service import ProgressionService
from geomaster.ranking.periods import RankingPeriod
from geomaster.ranking.service import RankingService
from geomaster.ranking.types import LeaderboardSort
from geomaster.services.internal_auth import resolve_player_identity

from .ranked_models import RankingEntryResponse

router = APIRouter(tags=["rankings"])


class LeaderboardRowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rank: int
    user_id: int
    display_name: str | None
    total_score: int
    total_games: int
    best_score: int
    average_score: float


class LeaderboardResponse(BaseModel):
    game_type: str
    period: RankingPeriod
    sort_by: LeaderboardSort
    rows: list[LeaderboardRowResponse]


class ProgressionResponse(BaseModel):
    user_id: int
    total_points: int
    level: int
    level_name: str
    next_level: int | None
    progress: float
    points_to_next: int
    points_in_current_level: int
    current_streak: int
    longest_streak: int
    last_played_date: date | None


def _require_user_id(request: Request) -> int:
    identity = resolve_player_identity(request, expected_token=get_settings().internal_api_token)
    if identity.user_id is None:
        raise HTTPException(status_code=401, detail={"code": "E_AUTH_REQUIRED"})
    return identity.user_id


@router.get("/rankings/{game_type}", response_model=LeaderboardResponse)
async def leaderboard(
    game_type: str,
    period: RankingPeriod = Query(default=RankingPeriod.ALLTIME),
    limit: int = Query(default=50, ge=1, le=200),
    sort_by: LeaderboardSort = Query(default=LeaderboardSort.BEST),
) -> LeaderboardResponse:
    async with SessionLocal.begin() as session:
        rows = await RankingService.get_leaderboard(
            session,
            game_type=game_type,
            period=period,
            now_utc=datetime.now(timezone.utc),
            limit=limit,
            sort_by=sort_by,
        )
    return LeaderboardResponse(
        game_type=game_type,
        period=period,
        sort_by=sort_by,
        rows=[LeaderboardRowResponse.model_validate(row) for row in rows],
    )


@router.get("/rankings/{game_type}/me", response_model=RankingEntryResponse)
async def my_ranking(
    game_type: str,
    request: Request,
    period: RankingPeriod = Query(default=RankingPeriod.ALLTIME),
) -> RankingEntryResponse:
    user_id = _require_user_id(request)
    async with SessionLocal.begin() as session:
        entry = await RankingService.get_user_entry(
            session,
            user_id=user_id,
            game_type=game_type,
            period=period,
            now_utc=datetime.now(timezone.utc),
        )
    if entry is None:
        raise HTTPException(status_code=404, detail={"code": "E_RANKING_NOT_FOUND"})
    return RankingEntryResponse.model_validate(entry)


@router.get("/progression/me", response_model=ProgressionResponse)
async def my_progression(
    request: Request,
    locale: str = Query(default="de", min_length=2, max_length=8),
) -> ProgressionResponse:
    user_id = _require_user_id(request)
    async with SessionLocal.begin() as session:
        snapshot = await ProgressionService.get_progression(
            session,
            user_id=user_id,
            now_utc=datetime.now(timezone.utc),
        )
    level = snapshot.level
    return ProgressionResponse(
        user_id=snapshot.user_id,
        total_points=snapshot.total_points,
        level=level.current_level.level,
        level_name=level_name(level.current_level, locale),
        next_level=level.next_level.level if level.next_level is not None else None,
        progress=level.progress,
        points_to_next=level.points_to_next,
        points_in_current_level=level.points_in_current_level,
        current_streak=snapshot.streak.current_streak,
        longest_streak=snapshot.streak.longest_streak,
        last_played_date=snapshot.streak.last_played_date,
    )
