from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from geomaster.game.geo import haversine_km
from geomaster.game.sessions.errors import (
    InvalidLocationIndexError,
    LocationAlreadyGuessedError,
    LocationDataMissingError,
    LocationNotActiveError,
    PreviousLocationNotGuessedError,
    SessionAccessDeniedError,
    SessionNotFoundError,
)
from geomaster.game.sessions.service import GameSessionService
from geomaster.game.sessions.types import PlayerIdentity
from tests.game.ranked_fixtures import FakeSession, GameStore, play_location

UTC = timezone.utc
NOW = datetime(2026, 3, 4, 10, 0, tzinfo=UTC)
USER = PlayerIdentity(user_id=17)


@pytest.fixture
def store(monkeypatch) -> GameStore:
    game_store = GameStore()
    game_store.add_swiss_locations()
    game_store.install(monkeypatch)
    return game_store


async def _new_game(session: FakeSession, *, identity: PlayerIdentity = USER):
    return await GameSessionService.create_session(
        session,
        identity=identity,
        mode="ranked",
        game_type="country:switzerland",
        now_utc=NOW,
    )


def test_time_remaining_seconds() -> None:
    assert GameSessionService.time_remaining_seconds(
        started_at=NOW,
        time_limit_seconds=30,
        now_utc=NOW + timedelta(seconds=10.2),
    ) == 20
    assert GameSessionService.time_remaining_seconds(
        started_at=NOW,
        time_limit_seconds=30,
        now_utc=NOW + timedelta(seconds=45),
    ) == 0
    assert GameSessionService.time_remaining_seconds(
        started_at=NOW,
        time_limit_seconds=None,
        now_utc=NOW,
    ) is None


@pytest.mark.asyncio
async def test_activate_location_returns_name_and_hint(store: GameStore) -> None:
    session = FakeSession()
    view = await _new_game(session)

    result = await GameSessionService.activate_location(
        session,
        identity=USER,
        game_session_id=view.game_session_id,
        location_index=1,
    )

    target = store.location_for(view.game_session_id, 1)
    assert result.location_index == 1
    assert result.name == target.name
    assert result.time_limit_seconds == 30
    assert result.hint is not None
    assert result.hint.radius_km == 125.0
    assert haversine_km(result.hint.center_lat, result.hint.center_lng, target.latitude, target.longitude) < 125.0
    assert result.imagery_key is None

    stored = store.sessions[view.game_session_id]
    assert stored.active_location_index == 1
    assert stored.location_started_at is None


@pytest.mark.asyncio
async def test_repeated_activation_returns_identical_hint(store: GameStore) -> None:
    session = FakeSession()
    view = await _new_game(session)
    kwargs = {"identity": USER, "game_session_id": view.game_session_id, "location_index": 1}

    hints = {
        (result.hint.center_lat, result.hint.center_lng, result.hint.radius_km)
        for result in [await GameSessionService.activate_location(session, **kwargs) for _ in range(10)]
    }

    assert len(hints) == 1


@pytest.mark.asyncio
async def test_hint_differs_between_rounds(store: GameStore) -> None:
    session = FakeSession()
    first_view = await _new_game(session)
    second_view = await _new_game(session)

    first = await GameSessionService.activate_location(
        session, identity=USER, game_session_id=first_view.game_session_id, location_index=1
    )
    second = await GameSessionService.activate_location(
        session, identity=USER, game_session_id=second_view.game_session_id, location_index=1
    )

    assert (first.hint.center_lat, first.hint.center_lng) != (second.hint.center_lat, second.hint.center_lng)


@pytest.mark.asyncio
async def test_activation_requires_previous_locations(store: GameStore) -> None:
    session = FakeSession()
    view = await _new_game(session)
    await play_location(
        session,
        store,
        identity=USER,
        game_session_id=view.game_session_id,
        location_index=1,
        started_at=NOW,
    )

    with pytest.raises(PreviousLocationNotGuessedError) as exc_info:
        await GameSessionService.activate_location(
            session,
            identity=USER,
            game_session_id=view.game_session_id,
            location_index=4,
        )
    assert exc_info.value.missing_index == 2


@pytest.mark.asyncio
async def test_guessed_location_cannot_be_activated_again(store: GameStore) -> None:
    session = FakeSession()
    view = await _new_game(session)
    await play_location(
        session,
        store,
        identity=USER,
        game_session_id=view.game_session_id,
        location_index=1,
        started_at=NOW,
    )

    with pytest.raises(LocationAlreadyGuessedError):
        await GameSessionService.activate_location(
            session,
            identity=USER,
            game_session_id=view.game_session_id,
            location_index=1,
        )


@pytest.mark.asyncio
@pytest.mark.parametrize("location_index", [0, 6, -1])
async def test_out_of_range_index_is_rejected(store: GameStore, location_index: int) -> None:
    session = FakeSession()
    view = await _new_game(session)

    with pytest.raises(InvalidLocationIndexError):
        await GameSessionService.activate_location(
            session,
            identity=USER,
            game_session_id=view.game_session_id,
            location_index=location_index,
        )


@pytest.mark.asyncio
async def test_missing_location_row_is_reported(store: GameStore) -> None:
    session = FakeSession()
    view = await _new_game(session)
    target = store.location_for(view.game_session_id, 1)
    del store.locations[target.id]

    with pytest.raises(LocationDataMissingError):
        await GameSessionService.activate_location(
            session,
            identity=USER,
            game_session_id=view.game_session_id,
            location_index=1,
        )


@pytest.mark.asyncio
async def test_other_players_cannot_touch_the_session(store: GameStore) -> None:
    session = FakeSession()
    view = await _new_game(session)

    with pytest.raises(SessionAccessDeniedError):
        await GameSessionService.activate_location(
            session,
            identity=PlayerIdentity(user_id=99),
            game_session_id=view.game_session_id,
            location_index=1,
        )
    with pytest.raises(SessionAccessDeniedError):
        await GameSessionService.get_session_view(
            session,
            identity=PlayerIdentity(guest_id="guest-abc"),
            game_session_id=view.game_session_id,
        )
    with pytest.raises(SessionNotFoundError):
        await GameSessionService.get_session_view(
            session,
            identity=USER,
            game_session_id=uuid4(),
        )


@pytest.mark.asyncio
async def test_map_ready_starts_timer_once(store: GameStore) -> None:
    session = FakeSession()
    view = await _new_game(session)
    await GameSessionService.activate_location(
        session,
        identity=USER,
        game_session_id=view.game_session_id,
        location_index=1,
    )

    first = await GameSessionService.mark_map_ready(
        session,
        identity=USER,
        game_session_id=view.game_session_id,
        location_index=1,
        now_utc=NOW,
    )
    second = await GameSessionService.mark_map_ready(
        session,
        identity=USER,
        game_session_id=view.game_session_id,
        location_index=1,
        now_utc=NOW + timedelta(seconds=12),
    )

    assert first.already_started is False
    assert first.location_started_at == NOW
    assert first.time_remaining_seconds == 30
    assert second.already_started is True
    assert second.location_started_at == NOW
    assert second.time_remaining_seconds == 18
    assert store.sessions[view.game_session_id].location_started_at == NOW


@pytest.mark.asyncio
async def test_reactivating_same_location_keeps_timer(store: GameStore) -> None:
    session = FakeSession()
    view = await _new_game(session)
    kwargs = {"identity": USER, "game_session_id": view.game_session_id, "location_index": 1}
    await GameSessionService.activate_location(session, **kwargs)
    await GameSessionService.mark_map_ready(session, now_utc=NOW, **kwargs)

    await GameSessionService.activate_location(session, **kwargs)

    assert store.sessions[view.game_session_id].location_started_at == NOW


@pytest.mark.asyncio
async def test_map_ready_requires_active_location(store: GameStore) -> None:
    session = FakeSession()
    view = await _new_game(session)

    with pytest.raises(LocationNotActiveError):
        await GameSessionService.mark_map_ready(
            session,
            identity=USER,
            game_session_id=view.game_session_id,
            location_index=1,
            now_utc=NOW,
        )
