from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import structlog
from fastapi import APIRouter, Query, Request

from geomaster.core.config import get_settings
from geomaster.db.session import SessionLocal
from geomaster.game.sessions.service import GameSessionService
from geomaster.game.sessions.types import CompleteSessionResult, PlayerIdentity
from geomaster.services.internal_auth import resolve_player_identity

from .errors import DOMAIN_ERRORS, http_error
from .ranked_models import (
    CompleteGameResponse,
    CreateGameRequest,
    GuessRequest,
    GuessResponse,
    LevelUpResponse,
    LocationActivationResponse,
    LocationIndexRequest,
    MapReadyResponse,
    RankingEntryResponse,
    SessionResponse,
    StreakResponse,
)

router = APIRouter(prefix="/ranked/games", tags=["ranked"])
logger = structlog.get_logger(__name__)


def _identity(request: Request) -> PlayerIdentity:
    return resolve_player_identity(request, expected_token=get_settings().internal_api_token)


def _complete_response(result: CompleteSessionResult) -> CompleteGameResponse:
    level_up = None
    if result.level_up is not None:
        level_up = LevelUpResponse(
            leveled_up=result.level_up.leveled_up,
            previous_level=result.level_up.previous_level.level,
            new_level=result.level_up.new_level.level,
            new_level_name=result.level_up.new_level.name("en"),
        )
    streak = None
    if result.streak is not None:
        streak = StreakResponse(
            change=result.streak.change.value,
            current_streak=result.streak.current_streak,
            longest_streak=result.streak.longest_streak,
            last_played_date=result.streak.last_played_date,
        )
    return CompleteGameResponse(
        game_session_id=result.game_session_id,
        mode=result.mode,
        game_type=result.game_type,
        total_score=result.total_score,
        average_score=result.average_score,
        total_distance_km=result.total_distance_km,
        total_time_seconds=result.total_time_seconds,
        rankings=[RankingEntryResponse.model_validate(view) for view in result.rankings],
        level_up=level_up,
        streak=streak,
        side_effects_failed=list(result.side_effects_failed),
    )


@router.post("", response_model=SessionResponse, status_code=201)
async def create_game(payload: CreateGameRequest, request: Request) -> SessionResponse:
    identity = _identity(request)
    try:
        async with SessionLocal.begin() as session:
            view = await GameSessionService.create_session(
                session,
                identity=identity,
                mode=payload.mode,
                game_type=payload.game_type,
                now_utc=datetime.now(timezone.utc),
                timed=payload.timed,
                locale=payload.locale,
            )
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return SessionResponse.model_validate(view)


@router.get("/{game_session_id}", response_model=SessionResponse)
async def get_game(
    game_session_id: UUID,
    request: Request,
    locale: str = Query(default="de", min_length=2, max_length=8),
) -> SessionResponse:
    identity = _identity(request)
    try:
        async with SessionLocal.begin() as session:
            view = await GameSessionService.get_session_view(
                session,
                identity=identity,
                game_session_id=game_session_id,
                locale=locale,
            )
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return SessionResponse.model_validate(view)


@router.post("/{game_session_id}/start-location", response_model=LocationActivationResponse)
async def start_location(
    game_session_id: UUID,
    payload: LocationIndexRequest,
    request: Request,
) -> LocationActivationResponse:
    identity = _identity(request)
    try:
        async with SessionLocal.begin() as session:
            result = await GameSessionService.activate_location(
                session,
                identity=identity,
                game_session_id=game_session_id,
                location_index=payload.location_index,
                locale=payload.locale,
            )
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return LocationActivationResponse.model_validate(result)


@router.post("/{game_session_id}/map-ready", response_model=MapReadyResponse)
async def map_ready(
    game_session_id: UUID,
    payload: LocationIndexRequest,
    request: Request,
) -> MapReadyResponse:
    identity = _identity(request)
    try:
        async with SessionLocal.begin() as session:
            result = await GameSessionService.mark_map_ready(
                session,
                identity=identity,
                game_session_id=game_session_id,
                location_index=payload.location_index,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return MapReadyResponse.model_validate(result)


@router.post("/{game_session_id}/guesses", response_model=GuessResponse, status_code=201)
async def submit_guess(
    game_session_id: UUID,
    payload: GuessRequest,
    request: Request,
) -> GuessResponse:
    identity = _identity(request)
    try:
        async with SessionLocal.begin() as session:
            result = await GameSessionService.submit_guess(
                session,
                identity=identity,
                game_session_id=game_session_id,
                location_index=payload.location_index,
                latitude=payload.latitude,
                longitude=payload.longitude,
                now_utc=datetime.now(timezone.utc),
                timeout=payload.timeout,
                clicked_country_code=payload.clicked_country_code,
            )
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return GuessResponse.model_validate(result)


@router.post("/{game_session_id}/complete", response_model=CompleteGameResponse)
async def complete_game(game_session_id: UUID, request: Request) -> CompleteGameResponse:
    identity = _identity(request)
    try:
        async with SessionLocal.begin() as session:
            result = await GameSessionService.complete_session(
                session,
                identity=identity,
                game_session_id=game_session_id,
                now_utc=datetime.now(timezone.utc),
            )
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc

    if result.side_effects_failed:
        logger.warning(
            "ranked_game_completed_with_failed_side_effects",
            game_session_id=str(game_session_id),
            failed=result.side_effects_failed,
        )
    return _complete_response(result)
