from __future__ import annotations

from uuid import UUID, uuid4

from fastapi.testclient import TestClient

from geomaster.api.routes import duels as duel_routes
from geomaster.game.duels.errors import (
    DuelAlreadyPlayedError,
    DuelChallengeDecodeError,
    DuelResultNotFoundError,
    DuelSelfChallengeError,
)
from geomaster.game.duels.types import (
    DuelChallenge,
    DuelCompletion,
    DuelHistoryEntry,
    DuelLeaderboardRow,
    DuelRole,
    DuelSessionCreated,
    DuelStatsView,
)
from geomaster.game.sessions.errors import AuthenticationRequiredError
from geomaster.main import app
from tests.api.api_fixtures import GAME_SESSION_ID, NOW, patch_route_module, session_view, user_headers

CHALLENGER_GAME_ID = UUID("5a1d7c2e-8b3f-4e6a-9c0d-1e2f3a4b5c6d")


def test_create_duel_as_challenger(monkeypatch) -> None:
    patch_route_module(monkeypatch, duel_routes)
    captured = {}

    async def _fake_create_duel_session(session, **kwargs):
        captured.update(kwargs)
        return DuelSessionCreated(role=DuelRole.CHALLENGER, session=session_view(mode="duel", duel_seed="seed-1"))

    monkeypatch.setattr(duel_routes.DuelService, "create_duel_session", _fake_create_duel_session)

    client = TestClient(app)
    response = client.post("/duels", json={"game_type": "country:switzerland"}, headers=user_headers(5))

    assert response.status_code == 201
    payload = response.json()
    assert payload["role"] == "challenger"
    assert "duel_seed" not in payload["session"]
    assert payload["challenge"] is None
    assert captured["user_id"] == 5
    assert captured["challenge_token"] is None


def test_create_duel_as_accepter_shows_challenge(monkeypatch) -> None:
    patch_route_module(monkeypatch, duel_routes)

    async def _fake_create_duel_session(session, **kwargs):
        return DuelSessionCreated(
            role=DuelRole.ACCEPTER,
            session=session_view(mode="duel", duel_seed="seed-1"),
            challenge=DuelChallenge(
                seed="seed-1",
                game_type="country:switzerland",
                challenger_id=9,
                challenger_name="Mara",
                challenger_score=1200,
                challenger_time=90.0,
                challenger_game_id=CHALLENGER_GAME_ID,
            ),
        )

    monkeypatch.setattr(duel_routes.DuelService, "create_duel_session", _fake_create_duel_session)

    client = TestClient(app)
    response = client.post(
        "/duels",
        json={"game_type": "country:switzerland", "challenge": "token.sig"},
        headers=user_headers(5),
    )

    assert response.status_code == 201
    assert response.json()["role"] == "accepter"
    assert response.json()["challenge"] == {
        "game_type": "country:switzerland",
        "challenger_id": 9,
        "challenger_name": "Mara",
        "challenger_score": 1200,
        "challenger_time": 90.0,
    }


def test_guest_cannot_create_duel(monkeypatch) -> None:
    patch_route_module(monkeypatch, duel_routes)

    async def _fake_create_duel_session(session, **kwargs):
        assert kwargs["user_id"] is None
        raise AuthenticationRequiredError

    monkeypatch.setattr(duel_routes.DuelService, "create_duel_session", _fake_create_duel_session)

    client = TestClient(app)
    response = client.post("/duels", json={"game_type": "country:switzerland"}, headers={"X-Guest-Id": "g-1"})

    assert response.status_code == 401
    assert response.json() == {"detail": {"code": "E_AUTH_REQUIRED"}}


def test_invalid_challenge_token_maps_to_400(monkeypatch) -> None:
    patch_route_module(monkeypatch, duel_routes)

    async def _fake_create_duel_session(session, **kwargs):
        raise DuelChallengeDecodeError("challenge signature mismatch")

    monkeypatch.setattr(duel_routes.DuelService, "create_duel_session", _fake_create_duel_session)

    client = TestClient(app)
    response = client.post(
        "/duels",
        json={"game_type": "country:switzerland", "challenge": "forged.token"},
        headers=user_headers(5),
    )

    assert response.status_code == 400
    assert response.json() == {"detail": {"code": "E_DUEL_CHALLENGE_INVALID"}}


def test_complete_duel_as_challenger_returns_token(monkeypatch) -> None:
    patch_route_module(monkeypatch, duel_routes)

    async def _fake_complete_duel(session, **kwargs):
        return DuelCompletion(
            role=DuelRole.CHALLENGER,
            game_session_id=kwargs["game_session_id"],
            game_type="country:switzerland",
            score=1200,
            time_seconds=90.0,
            encoded_challenge="payload.signature",
        )

    monkeypatch.setattr(duel_routes.DuelService, "complete_duel", _fake_complete_duel)

    client = TestClient(app)
    response = client.post(f"/duels/{GAME_SESSION_ID}/complete", json={}, headers=user_headers(9))

    assert response.status_code == 200
    payload = response.json()
    assert payload["role"] == "challenger"
    assert payload["encoded_challenge"] == "payload.signature"
    assert payload["winner_user_id"] is None


def test_self_challenge_maps_to_409(monkeypatch) -> None:
    patch_route_module(monkeypatch, duel_routes)

    async def _fake_complete_duel(session, **kwargs):
        raise DuelSelfChallengeError

    monkeypatch.setattr(duel_routes.DuelService, "complete_duel", _fake_complete_duel)

    client = TestClient(app)
    response = client.post(
        f"/duels/{GAME_SESSION_ID}/complete",
        json={"challenge": "payload.signature"},
        headers=user_headers(9),
    )

    assert response.status_code == 409
    assert response.json() == {"detail": {"code": "E_DUEL_SELF_CHALLENGE"}}


def test_duel_stats_not_found(monkeypatch) -> None:
    patch_route_module(monkeypatch, duel_routes)

    async def _fake_get_duel_stats(session, **kwargs):
        return None

    monkeypatch.setattr(duel_routes.DuelService, "get_duel_stats", _fake_get_duel_stats)

    client = TestClient(app)
    response = client.get("/duels/stats/country:switzerland", headers=user_headers(9))

    assert response.status_code == 404
    assert response.json() == {"detail": {"code": "E_DUEL_STATS_NOT_FOUND"}}


def test_duel_stats_with_rank(monkeypatch) -> None:
    patch_route_module(monkeypatch, duel_routes)

    async def _fake_get_duel_stats(session, **kwargs):
        return DuelStatsView(
            user_id=9,
            game_type=kwargs["game_type"],
            total_duels=4,
            wins=3,
            losses=1,
            win_rate=0.75,
            duel_points=15,
            rank=2,
        )

    monkeypatch.setattr(duel_routes.DuelService, "get_duel_stats", _fake_get_duel_stats)

    client = TestClient(app)
    response = client.get("/duels/stats/country:switzerland", headers=user_headers(9))

    assert response.status_code == 200
    assert response.json()["rank"] == 2
    assert response.json()["win_rate"] == 0.75


def test_duel_leaderboard(monkeypatch) -> None:
    patch_route_module(monkeypatch, duel_routes)

    async def _fake_get_duel_leaderboard(session, *, game_type: str, limit: int):
        assert limit == 10
        return [
            DuelLeaderboardRow(
                rank=1,
                user_id=9,
                display_name="Mara",
                total_duels=4,
                wins=3,
                losses=1,
                win_rate=0.75,
                duel_points=15,
            )
        ]

    monkeypatch.setattr(duel_routes.DuelService, "get_duel_leaderboard", _fake_get_duel_leaderboard)

    client = TestClient(app)
    response = client.get("/duels/leaderboard/country:switzerland?limit=10")

    assert response.status_code == 200
    assert [row["display_name"] for row in response.json()] == ["Mara"]


def test_second_accept_maps_to_409(monkeypatch) -> None:
    patch_route_module(monkeypatch, duel_routes)

    async def _fake_create_duel_session(session, **kwargs):
        raise DuelAlreadyPlayedError

    monkeypatch.setattr(duel_routes.DuelService, "create_duel_session", _fake_create_duel_session)

    client = TestClient(app)
    response = client.post(
        "/duels",
        json={"game_type": "country:switzerland", "challenge": "payload.signature"},
        headers=user_headers(5),
    )

    assert response.status_code == 409
    assert response.json() == {"detail": {"code": "E_DUEL_ALREADY_PLAYED"}}


def _history_entry(duel_result_id: UUID) -> DuelHistoryEntry:
    return DuelHistoryEntry(
        duel_result_id=duel_result_id,
        game_type="country:switzerland",
        role=DuelRole.ACCEPTER,
        opponent_user_id=9,
        opponent_name="Mara",
        score=1100,
        time_seconds=80.0,
        opponent_score=1200,
        opponent_time_seconds=90.0,
        won=False,
        points_delta=0,
        created_at=NOW,
    )


def test_duel_history_passes_paging(monkeypatch) -> None:
    patch_route_module(monkeypatch, duel_routes)
    captured = {}
    duel_result_id = uuid4()

    async def _fake_get_duel_history(session, **kwargs):
        captured.update(kwargs)
        return [_history_entry(duel_result_id)]

    monkeypatch.setattr(duel_routes.DuelService, "get_duel_history", _fake_get_duel_history)

    client = TestClient(app)
    response = client.get(
        "/duels/history?game_type=country:switzerland&limit=5&offset=10",
        headers=user_headers(5),
    )

    assert response.status_code == 200
    assert captured == {"user_id": 5, "game_type": "country:switzerland", "limit": 5, "offset": 10}
    payload = response.json()
    assert [row["duel_result_id"] for row in payload] == [str(duel_result_id)]
    assert payload[0]["opponent_name"] == "Mara"
    assert payload[0]["won"] is False
    assert "duel_seed" not in payload[0]


def test_duel_history_rejects_oversized_page(monkeypatch) -> None:
    patch_route_module(monkeypatch, duel_routes)

    client = TestClient(app)
    response = client.get("/duels/history?limit=500", headers=user_headers(5))

    assert response.status_code == 422


def test_duel_result_lookup(monkeypatch) -> None:
    patch_route_module(monkeypatch, duel_routes)
    duel_result_id = uuid4()

    async def _fake_get_duel_result(session, *, user_id, duel_result_id):
        if user_id != 5:
            raise DuelResultNotFoundError
        return _history_entry(duel_result_id)

    monkeypatch.setattr(duel_routes.DuelService, "get_duel_result", _fake_get_duel_result)

    client = TestClient(app)
    found = client.get(f"/duels/results/{duel_result_id}", headers=user_headers(5))
    hidden = client.get(f"/duels/results/{duel_result_id}", headers=user_headers(6))

    assert found.status_code == 200
    assert found.json()["duel_result_id"] == str(duel_result_id)
    assert found.json()["role"] == "accepter"
    assert hidden.status_code == 404
    assert hidden.json() == {"detail": {"code": "E_DUEL_RESULT_NOT_FOUND"}}
