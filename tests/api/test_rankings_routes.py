from __future__ import annotations

from datetime import date

from fastapi.testclient import TestClient

from geomaster.api.routes import rankings as ranking_routes
from geomaster.main import app
from geomaster.progression.levels import level_progress
from geomaster.progression.service import ProgressionSnapshot
from geomaster.progression.streak.types import StreakSnapshot
from geomaster.ranking.periods import RankingPeriod
from geomaster.ranking.types import LeaderboardRow, LeaderboardSort, RankingEntryView
from tests.api.api_fixtures import patch_route_module, user_headers


def test_leaderboard_defaults_to_alltime(monkeypatch) -> None:
    patch_route_module(monkeypatch, ranking_routes)
    captured = {}

    async def _fake_get_leaderboard(session, **kwargs):
        captured.update(kwargs)
        return [
            LeaderboardRow(
                rank=1,
                user_id=3,
                display_name="Nika",
                total_score=2400,
                total_games=2,
                best_score=1300,
                average_score=1200.0,
            )
        ]

    monkeypatch.setattr(ranking_routes.RankingService, "get_leaderboard", _fake_get_leaderboard)

    client = TestClient(app)
    response = client.get("/rankings/overall")

    assert response.status_code == 200
    payload = response.json()
    assert payload["period"] == "alltime"
    assert payload["rows"][0]["display_name"] == "Nika"
    assert captured["period"] == RankingPeriod.ALLTIME
    assert captured["game_type"] == "overall"
    assert captured["limit"] == 50
    assert captured["sort_by"] == LeaderboardSort.BEST
    assert payload["sort_by"] == "best"


def test_leaderboard_rejects_unknown_period(monkeypatch) -> None:
    patch_route_module(monkeypatch, ranking_routes)

    client = TestClient(app)
    response = client.get("/rankings/overall?period=yearly")

    assert response.status_code == 422


def test_leaderboard_sorted_by_total(monkeypatch) -> None:
    patch_route_module(monkeypatch, ranking_routes)
    captured = {}

    async def _fake_get_leaderboard(session, **kwargs):
        captured.update(kwargs)
        return []

    monkeypatch.setattr(ranking_routes.RankingService, "get_leaderboard", _fake_get_leaderboard)

    client = TestClient(app)
    response = client.get("/rankings/overall?period=weekly&sort_by=total")

    assert response.status_code == 200
    assert response.json() == {"game_type": "overall", "period": "weekly", "sort_by": "total", "rows": []}
    assert captured["sort_by"] == LeaderboardSort.TOTAL


def test_leaderboard_rejects_unknown_sort(monkeypatch) -> None:
    patch_route_module(monkeypatch, ranking_routes)

    client = TestClient(app)
    response = client.get("/rankings/overall?sort_by=average")

    assert response.status_code == 422


def test_my_ranking_requires_user(monkeypatch) -> None:
    patch_route_module(monkeypatch, ranking_routes)

    client = TestClient(app)
    response = client.get("/rankings/country:switzerland/me", headers={"X-Guest-Id": "g-1"})

    assert response.status_code == 401
    assert response.json() == {"detail": {"code": "E_AUTH_REQUIRED"}}


def test_my_ranking_not_found(monkeypatch) -> None:
    patch_route_module(monkeypatch, ranking_routes)

    async def _fake_get_user_entry(session, **kwargs):
        return None

    monkeypatch.setattr(ranking_routes.RankingService, "get_user_entry", _fake_get_user_entry)

    client = TestClient(app)
    response = client.get("/rankings/country:switzerland/me?period=weekly", headers=user_headers(3))

    assert response.status_code == 404
    assert response.json() == {"detail": {"code": "E_RANKING_NOT_FOUND"}}


def test_my_ranking_with_rank(monkeypatch) -> None:
    patch_route_module(monkeypatch, ranking_routes)

    async def _fake_get_user_entry(session, **kwargs):
        assert kwargs["user_id"] == 3
        assert kwargs["period"] == RankingPeriod.DAILY
        return RankingEntryView(
            game_type="country:switzerland",
            period=RankingPeriod.DAILY,
            period_key="2026-03-04",
            total_score=900,
            total_games=2,
            best_score=600,
            average_score=450.0,
            rank=4,
        )

    monkeypatch.setattr(ranking_routes.RankingService, "get_user_entry", _fake_get_user_entry)

    client = TestClient(app)
    response = client.get("/rankings/country:switzerland/me?period=daily", headers=user_headers(3))

    assert response.status_code == 200
    assert response.json()["rank"] == 4
    assert response.json()["period_key"] == "2026-03-04"


def test_progression_me(monkeypatch) -> None:
    patch_route_module(monkeypatch, ranking_routes)

    async def _fake_get_progression(session, *, user_id: int, now_utc):
        return ProgressionSnapshot(
            user_id=user_id,
            total_points=2_000,
            level=level_progress(2_000),
            streak=StreakSnapshot(current_streak=3, longest_streak=5, last_played_date=date(2026, 3, 3)),
        )

    monkeypatch.setattr(ranking_routes.ProgressionService, "get_progression", _fake_get_progression)

    client = TestClient(app)
    response = client.get("/progression/me?locale=de", headers=user_headers(3))

    assert response.status_code == 200
    assert response.json() == {
        "user_id": 3,
        "total_points": 2000,
        "level": 2,
        "level_name": "Entdecker",
        "next_level": 3,
        "progress": 0.5,
        "points_to_next": 1000,
        "points_in_current_level": 1000,
        "current_streak": 3,
        "longest_streak": 5,
        "last_played_date": "2026-03-03",
    }
