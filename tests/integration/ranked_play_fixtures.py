from __future__ import annotations

from datetime import datetime, timedelta
from uuid import UUID, uuid4

from geomaster.db.models.locations import Location
from geomaster.db.models.users import User
from geomaster.db.repo.game_rounds_repo import GameRoundsRepo
from geomaster.db.session import SessionLocal
from geomaster.game.sessions.service import GameSessionService
from geomaster.game.sessions.types import PlayerIdentity

SWISS_CITIES = (
    ("Bern", 46.948, 7.4474),
    ("Zürich", 47.3769, 8.5417),
    ("Luzern", 47.0502, 8.3093),
    ("Lugano", 46.0037, 8.9511),
    ("Genf", 46.2044, 6.1432),
    ("Basel", 47.5596, 7.5886),
    ("Chur", 46.8508, 9.532),
)


async def create_user(user_id: int, display_name: str) -> int:
    async with SessionLocal.begin() as session:
        session.add(User(id=user_id, display_name=display_name))
    return user_id


async def seed_swiss_locations() -> dict[UUID, tuple[float, float]]:
    coordinates: dict[UUID, tuple[float, float]] = {}
    async with SessionLocal.begin() as session:
        for name, lat, lng in SWISS_CITIES:
            location_id = uuid4()
            session.add(
                Location(
                    id=location_id,
                    country_id="switzerland",
                    name=name,
                    name_de=name,
                    latitude=lat,
                    longitude=lng,
                )
            )
            coordinates[location_id] = (lat, lng)
    return coordinates


async def play_session_exactly(
    *,
    identity: PlayerIdentity,
    game_session_id: UUID,
    coordinates: dict[UUID, tuple[float, float]],
    started_at: datetime,
    answer_after: timedelta = timedelta(seconds=2),
) -> list:
    async with SessionLocal.begin() as session:
        rounds = await GameRoundsRepo.list_for_session(session, game_session_id=game_session_id)

    results = []
    for offset, game_round in enumerate(sorted(rounds, key=lambda row: row.location_index)):
        shown_at = started_at + timedelta(minutes=offset)
        lat, lng = coordinates[game_round.location_id]
        async with SessionLocal.begin() as session:
            await GameSessionService.activate_location(
                session,
                identity=identity,
                game_session_id=game_session_id,
                location_index=game_round.location_index,
            )
            await GameSessionService.mark_map_ready(
                session,
                identity=identity,
                game_session_id=game_session_id,
                location_index=game_round.location_index,
                now_utc=shown_at,
            )
        async with SessionLocal.begin() as session:
            results.append(
                await GameSessionService.submit_guess(
                    session,
                    identity=identity,
                    game_session_id=game_session_id,
                    location_index=game_round.location_index,
                    latitude=lat,
                    longitude=lng,
                    now_utc=shown_at + answer_after,
                )
            )
    return results
