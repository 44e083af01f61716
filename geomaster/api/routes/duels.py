from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from geomaster.core.config import get_settings
from geomaster.db.session import SessionLocal
from geomaster.game.duels import DuelService
from geomaster.game.duels.types import DuelRole
from geomaster.services.internal_auth import resolve_player_identity

from .errors import DOMAIN_ERRORS, http_error
from .ranked_models import SessionResponse

router = APIRouter(prefix="/duels", tags=["duels"])

MAX_CHALLENGE_TOKEN_LENGTH = 2048


class CreateDuelRequest(BaseModel):
    game_type: str = Field(min_length=3, max_length=96)
    challenge: str | None = Field(default=None, min_length=1, max_length=MAX_CHALLENGE_TOKEN_LENGTH)
    locale: str = Field(default="de", min_length=2, max_length=8)


class CompleteDuelRequest(BaseModel):
    challenge: str | None = Field(default=None, min_length=1, max_length=MAX_CHALLENGE_TOKEN_LENGTH)


class ChallengeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    game_type: str
    challenger_id: int
    challenger_name: str
    challenger_score: int
    challenger_time: float


class CreateDuelResponse(BaseModel):
    role: DuelRole
    session: SessionResponse
    challenge: ChallengeResponse | None = None


class CompleteDuelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    role: DuelRole
    game_session_id: UUID
    game_type: str
    score: int
    time_seconds: float
    encoded_challenge: str | None = None
    duel_result_id: UUID | None = None
    challenger_score: int | None = None
    challenger_time_seconds: float | None = None
    winner_user_id: int | None = None
    points_delta: int | None = None
    idempotent_replay: bool = False


class DuelStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    game_type: str
    total_duels: int
    wins: int
    losses: int
    win_rate: float
    duel_points: int
    rank: int | None = None


class DuelLeaderboardRowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rank: int
    user_id: int
    display_name: str | None
    total_duels: int
    wins: int
    losses: int
    win_rate: float
    duel_points: int


class DuelHistoryEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    duel_result_id: UUID
    game_type: str
    role: DuelRole
    opponent_user_id: int
    opponent_name: str
    score: int
    time_seconds: float
    opponent_score: int
    opponent_time_seconds: float
    won: bool
    points_delta: int
    created_at: datetime


def _user_id(request: Request) -> int | None:
    return resolve_player_identity(request, expected_token=get_settings().internal_api_token).user_id


@router.post("", response_model=CreateDuelResponse, status_code=201)
async def create_duel(payload: CreateDuelRequest, request: Request) -> CreateDuelResponse:
    user_id = _user_id(request)
    try:
        async with SessionLocal.begin() as session:
            created = await DuelService.create_duel_session(
                session,
                user_id=user_id,
                game_type=payload.game_type,
                now_utc=datetime.now(timezone.utc),
                challenge_token=payload.challenge,
                locale=payload.locale,
            )
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc

    return CreateDuelResponse(
        role=created.role,
        session=SessionResponse.model_validate(created.session),
        challenge=(
            ChallengeResponse.model_validate(created.challenge) if created.challenge is not None else None
        ),
    )


@router.post("/{game_session_id}/complete", response_model=CompleteDuelResponse)
async def complete_duel(
    game_session_id: UUID,
    payload: CompleteDuelRequest,
    request: Request,
) -> CompleteDuelResponse:
    user_id = _user_id(request)
    try:
        async with SessionLocal.begin() as session:
            completion = await DuelService.complete_duel(
                session,
                user_id=user_id,
                game_session_id=game_session_id,
                now_utc=datetime.now(timezone.utc),
                challenge_token=payload.challenge,
            )
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc

    return CompleteDuelResponse.model_validate(completion)


@router.get("/leaderboard/{game_type}", response_model=list[DuelLeaderboardRowResponse])
async def duel_leaderboard(
    game_type: str,
    limit: int = Query(default=50, ge=1, le=200),
) -> list[DuelLeaderboardRowResponse]:
    async with SessionLocal.begin() as session:
        rows = await DuelService.get_duel_leaderboard(session, game_type=game_type, limit=limit)
    return [DuelLeaderboardRowResponse.model_validate(row) for row in rows]


@router.get("/stats/{game_type}", response_model=DuelStatsResponse)
async def duel_stats(game_type: str, request: Request) -> DuelStatsResponse:
    user_id = _user_id(request)
    try:
        async with SessionLocal.begin() as session:
            stats = await DuelService.get_duel_stats(session, user_id=user_id, game_type=game_type)
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    if stats is None:
        raise HTTPException(status_code=404, detail={"code": "E_DUEL_STATS_NOT_FOUND"})
    return DuelStatsResponse.model_validate(stats)


@router.get("/history", response_model=list[DuelHistoryEntryResponse])
async def duel_history(
    request: Request,
    game_type: str | None = Query(default=None, min_length=3, max_length=96),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> list[DuelHistoryEntryResponse]:
    user_id = _user_id(request)
    try:
        async with SessionLocal.begin() as session:
            entries = await DuelService.get_duel_history(
                session,
                user_id=user_id,
                game_type=game_type,
                limit=limit,
                offset=offset,
            )
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return [DuelHistoryEntryResponse.model_validate(entry) for entry in entries]


@router.get("/results/{duel_result_id}", response_model=DuelHistoryEntryResponse)
async def duel_result(duel_result_id: UUID, request: Request) -> DuelHistoryEntryResponse:
    user_id = _user_id(request)
    try:
        async with SessionLocal.begin() as session:
            entry = await DuelService.get_duel_result(session, user_id=user_id, duel_result_id=duel_result_id)
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return DuelHistoryEntryResponse.model_validate(entry)
