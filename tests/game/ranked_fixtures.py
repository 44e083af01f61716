from __future__ import annotations

from datetime import datetime, timedelta
from types import SimpleNamespace
from uuid import UUID, uuid4

from sqlalchemy.exc import IntegrityError

import geomaster.db.models  # noqa: F401
from geomaster.db.models.game_rounds import GameRound
from geomaster.db.models.game_sessions import GameSession
from geomaster.db.models.guesses import Guess
from geomaster.db.models.locations import Location, PanoramaLocation, WorldLocation
from geomaster.db.repo.duels_repo import DuelsRepo
from geomaster.db.repo.game_rounds_repo import GameRoundsRepo
from geomaster.db.repo.game_sessions_repo import GameSessionsRepo
from geomaster.db.repo.game_type_catalog_repo import GameTypeCatalogRepo
from geomaster.db.repo.guesses_repo import GuessesRepo
from geomaster.db.repo.locations_repo import LocationsRepo
from geomaster.db.repo.users_repo import UsersRepo
from geomaster.game.sessions.service import (
    GameSessionService,
    sessions_complete,
    sessions_create,
    sessions_rounds,
)
from geomaster.game.sessions.types import PlayerIdentity

SWISS_POINTS = (
    ("Bern", 46.948, 7.4474),
    ("Zürich", 47.3769, 8.5417),
    ("Luzern", 47.0502, 8.3093),
    ("Lugano", 46.0037, 8.9511),
    ("Genf", 46.2044, 6.1432),
    ("Basel", 47.5596, 7.5886),
    ("Chur", 46.8508, 9.532),
)


def fake_settings(**overrides) -> SimpleNamespace:
    values = {
        "scoring_version": 2,
        "locations_per_game": 5,
        "hint_circle_radius_km": 125.0,
        "game_timezone": "Europe/Zurich",
        "duel_token_secret": "test-duel-secret",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class _Savepoint:
    async def __aenter__(self) -> _Savepoint:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class FakeSession:
    def __init__(self) -> None:
        self.flushes = 0
        self.savepoints = 0

    async def flush(self) -> None:
        self.flushes += 1

    def begin_nested(self) -> _Savepoint:
        self.savepoints += 1
        return _Savepoint()


class GameStore:
    """In-memory stand-in for the game tables, wired into the repositories."""

    def __init__(self) -> None:
        self.sessions: dict[UUID, GameSession] = {}
        self.rounds: list[GameRound] = []
        self.guesses: list[Guess] = []
        self.locations: dict[UUID, Location | WorldLocation | PanoramaLocation] = {}
        self.catalog: dict[tuple[str, str], object] = {}
        self.hide_guesses = False

    def add_swiss_locations(self, count: int = len(SWISS_POINTS)) -> list[Location]:
        rows = []
        for name, lat, lng in SWISS_POINTS[:count]:
            row = Location(
                id=uuid4(),
                country_id="switzerland",
                name=name,
                name_de=name,
                name_en=None,
                name_sl=None,
                latitude=lat,
                longitude=lng,
            )
            self.locations[row.id] = row
            rows.append(row)
        return rows

    def add_panorama_locations(self, category: str, count: int) -> list[PanoramaLocation]:
        rows = []
        for index in range(count):
            row = PanoramaLocation(
                id=uuid4(),
                category=category,
                name=f"Pano {index}",
                name_de=None,
                name_en=f"Panorama {index}",
                name_sl=None,
                latitude=46.0 + index * 0.1,
                longitude=8.0 + index * 0.1,
                imagery_key=f"img-{index}",
                heading=90.0,
                pitch=0.0,
            )
            self.locations[row.id] = row
            rows.append(row)
        return rows

    def rounds_for(self, game_session_id: UUID) -> list[GameRound]:
        return sorted(
            (row for row in self.rounds if row.game_session_id == game_session_id),
            key=lambda row: (row.round_number, row.location_index),
        )

    def location_for(self, game_session_id: UUID, location_index: int):
        for game_round in self.rounds_for(game_session_id):
            if game_round.location_index == location_index:
                return self.locations.get(game_round.location_id)
        return None

    def _matches_identity(self, guess: Guess, *, user_id: int | None, guest_id: str | None) -> bool:
        if user_id is not None:
            return guess.user_id == user_id
        return guess.guest_id == guest_id

    def install(self, monkeypatch, *, settings: SimpleNamespace | None = None) -> None:
        store = self
        settings = settings or fake_settings()

        async def _get_session(session, game_session_id):
            del session
            return store.sessions.get(game_session_id)

        async def _create_session(session, *, game_session):
            del session
            store.sessions[game_session.id] = game_session
            return game_session

        async def _find_duel_session(session, *, user_id, duel_seed):
            del session
            matches = [
                row for row in store.sessions.values() if row.user_id == user_id and row.duel_seed == duel_seed
            ]
            return min(matches, key=lambda row: row.created_at) if matches else None

        async def _list_rounds(session, *, game_session_id):
            del session
            return store.rounds_for(game_session_id)

        async def _create_rounds(session, *, rounds):
            del session
            store.rounds.extend(rounds)
            return rounds

        async def _list_guesses(session, *, game_session_id, user_id, guest_id):
            del session
            if store.hide_guesses:
                return []
            round_ids = {row.id for row in store.rounds_for(game_session_id)}
            return [
                guess
                for guess in store.guesses
                if guess.game_round_id in round_ids
                and store._matches_identity(guess, user_id=user_id, guest_id=guest_id)
            ]

        async def _create_guess(session, *, guess):
            del session
            for existing in store.guesses:
                if existing.game_round_id == guess.game_round_id and store._matches_identity(
                    existing,
                    user_id=guess.user_id,
                    guest_id=guess.guest_id,
                ):
                    raise IntegrityError("INSERT INTO guesses", {}, Exception("duplicate key"))
            store.guesses.append(guess)
            return guess

        async def _get_by_source(session, *, location_source, location_id):
            del session
            row = store.locations.get(location_id)
            if row is None or row.__tablename__ != location_source:
                return None
            return row

        async def _country_pool(session, *, country_id):
            del session
            return [
                row
                for row in store.locations.values()
                if isinstance(row, Location) and row.country_id == country_id
            ]

        async def _world_pool(session, *, category):
            del session
            return [
                row
                for row in store.locations.values()
                if isinstance(row, WorldLocation) and row.category == category
            ]

        async def _panorama_pool(session, *, category):
            del session
            return [
                row
                for row in store.locations.values()
                if isinstance(row, PanoramaLocation) and row.category == category
            ]

        def _catalog_getter(kind: str):
            async def _get(session, key):
                del session
                return store.catalog.get((kind, key))

            return _get

        monkeypatch.setattr(GameSessionsRepo, "get_by_id", _get_session)
        monkeypatch.setattr(GameSessionsRepo, "get_by_id_for_update", _get_session)
        monkeypatch.setattr(GameSessionsRepo, "create", _create_session)
        monkeypatch.setattr(GameSessionsRepo, "find_duel_session", _find_duel_session)
        monkeypatch.setattr(GameRoundsRepo, "list_for_session", _list_rounds)
        monkeypatch.setattr(GameRoundsRepo, "create_many", _create_rounds)
        monkeypatch.setattr(GuessesRepo, "list_for_session", _list_guesses)
        monkeypatch.setattr(GuessesRepo, "create", _create_guess)
        monkeypatch.setattr(LocationsRepo, "get_by_source", _get_by_source)
        monkeypatch.setattr(LocationsRepo, "list_country_pool", _country_pool)
        monkeypatch.setattr(LocationsRepo, "list_world_pool", _world_pool)
        monkeypatch.setattr(LocationsRepo, "list_panorama_pool", _panorama_pool)
        monkeypatch.setattr(GameTypeCatalogRepo, "get_country", _catalog_getter("country"))
        monkeypatch.setattr(GameTypeCatalogRepo, "get_world_quiz_type", _catalog_getter("world"))
        monkeypatch.setattr(GameTypeCatalogRepo, "get_panorama_type", _catalog_getter("panorama"))
        monkeypatch.setattr(sessions_create, "get_settings", lambda: settings)
        monkeypatch.setattr(sessions_rounds, "get_settings", lambda: settings)


async def play_location(
    session: FakeSession,
    store: GameStore,
    *,
    identity: PlayerIdentity,
    game_session_id: UUID,
    location_index: int,
    started_at: datetime,
    answer_after: timedelta = timedelta(seconds=2),
    exact: bool = True,
):
    await GameSessionService.activate_location(
        session,
        identity=identity,
        game_session_id=game_session_id,
        location_index=location_index,
    )
    await GameSessionService.mark_map_ready(
        session,
        identity=identity,
        game_session_id=game_session_id,
        location_index=location_index,
        now_utc=started_at,
    )
    target = store.location_for(game_session_id, location_index)
    offset = 0.0 if exact else 0.5
    return await GameSessionService.submit_guess(
        session,
        identity=identity,
        game_session_id=game_session_id,
        location_index=location_index,
        latitude=target.latitude + offset,
        longitude=target.longitude,
        now_utc=started_at + answer_after,
    )


async def play_all(
    session: FakeSession,
    store: GameStore,
    *,
    identity: PlayerIdentity,
    game_session_id: UUID,
    started_at: datetime,
    count: int | None = None,
) -> list:
    total = count if count is not None else len(store.rounds_for(game_session_id))
    results = []
    for index in range(1, total + 1):
        results.append(
            await play_location(
                session,
                store,
                identity=identity,
                game_session_id=game_session_id,
                location_index=index,
                started_at=started_at + timedelta(minutes=index),
            )
        )
    return results


class DuelStore:
    """In-memory duel results, duel stats and users."""

    def __init__(self) -> None:
        self.results: list = []
        self.stats: dict[tuple[int, str], object] = {}
        self.display_names: dict[int, str | None] = {}

    def install(self, monkeypatch) -> None:
        store = self

        async def _result_by_accepter(session, accepter_session_id):
            del session
            for result in store.results:
                if result.accepter_session_id == accepter_session_id:
                    return result
            return None

        async def _result_by_seed_and_accepter(session, *, duel_seed, accepter_user_id):
            del session
            for result in store.results:
                if result.duel_seed == duel_seed and result.accepter_user_id == accepter_user_id:
                    return result
            return None

        async def _result_by_id(session, duel_result_id):
            del session
            for result in store.results:
                if result.id == duel_result_id:
                    return result
            return None

        async def _list_history(session, *, user_id, game_type, limit, offset):
            del session
            rows = [
                row
                for row in store.results
                if user_id in (row.challenger_user_id, row.accepter_user_id)
                and (game_type is None or row.game_type == game_type)
            ]
            rows.sort(key=lambda row: row.created_at, reverse=True)
            return rows[offset : offset + limit]

        async def _create_result(session, *, duel_result):
            del session
            if any(
                row.accepter_session_id == duel_result.accepter_session_id
                or (row.duel_seed, row.accepter_user_id) == (duel_result.duel_seed, duel_result.accepter_user_id)
                for row in store.results
            ):
                raise IntegrityError("INSERT INTO duel_results", {}, Exception("duplicate key"))
            store.results.append(duel_result)
            return duel_result

        async def _get_stats(session, *, user_id, game_type):
            del session
            return store.stats.get((user_id, game_type))

        async def _create_stats(session, *, stats):
            del session
            store.stats[(stats.user_id, stats.game_type)] = stats
            return stats

        def _sort_key(stats):
            return (-stats.duel_points, -stats.wins, -stats.win_rate, -stats.total_duels, stats.user_id)

        async def _count_ahead_of(session, *, stats):
            del session
            target = _sort_key(stats)[:4]
            return sum(
                1
                for other in store.stats.values()
                if other.game_type == stats.game_type and _sort_key(other)[:4] < target
            )

        async def _list_board(session, *, game_type, limit):
            del session
            rows = [row for row in store.stats.values() if row.game_type == game_type]
            return sorted(rows, key=_sort_key)[:limit]

        async def _get_user(session, user_id):
            del session
            if user_id not in store.display_names:
                return None
            return SimpleNamespace(id=user_id, display_name=store.display_names[user_id])

        async def _display_names(session, *, user_ids):
            del session
            return {user_id: store.display_names.get(user_id) for user_id in user_ids}

        monkeypatch.setattr(DuelsRepo, "get_result_by_accepter_session", _result_by_accepter)
        monkeypatch.setattr(DuelsRepo, "get_result_by_seed_and_accepter", _result_by_seed_and_accepter)
        monkeypatch.setattr(DuelsRepo, "get_result_by_id", _result_by_id)
        monkeypatch.setattr(DuelsRepo, "list_history", _list_history)
        monkeypatch.setattr(DuelsRepo, "create_result", _create_result)
        monkeypatch.setattr(DuelsRepo, "get_stats", _get_stats)
        monkeypatch.setattr(DuelsRepo, "get_stats_for_update", _get_stats)
        monkeypatch.setattr(DuelsRepo, "create_stats", _create_stats)
        monkeypatch.setattr(DuelsRepo, "count_ahead_of", _count_ahead_of)
        monkeypatch.setattr(DuelsRepo, "list_board", _list_board)
        monkeypatch.setattr(UsersRepo, "get_by_id", _get_user)
        monkeypatch.setattr(UsersRepo, "get_display_names", _display_names)


def install_completion_side_effects(monkeypatch) -> list:
    """Replaces rankings and streak updates on completion with recorders."""
    recorded: list = []

    async def _alltime_total(session, *, user_id):
        del session, user_id
        return 0

    async def _record_completed_game(session, **kwargs):
        del session
        recorded.append(kwargs)
        return []

    async def _record_play(session, *, user_id, played_at_utc):
        del session, user_id, played_at_utc
        return None

    monkeypatch.setattr(sessions_complete.RankingService, "get_alltime_total", _alltime_total)
    monkeypatch.setattr(sessions_complete.RankingService, "record_completed_game", _record_completed_game)
    monkeypatch.setattr(sessions_complete.StreakService, "record_play", _record_play)
    return recorded
