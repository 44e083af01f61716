from __future__ import annotations

import pytest
from sqlalchemy import text

from geomaster.core.integration_db_safety import assert_safe_integration_db
from geomaster.db.session import engine

TRUNCATE_TABLES = (
    "duel_results",
    "duel_stats",
    "rankings",
    "ranked_game_results",
    "user_streaks",
    "guesses",
    "game_rounds",
    "game_sessions",
    "locations",
    "world_locations",
    "panorama_locations",
    "countries",
    "world_quiz_types",
    "panorama_types",
    "users",
)

TRUNCATE_SQL = f"TRUNCATE TABLE {', '.join(TRUNCATE_TABLES)} RESTART IDENTITY CASCADE"


@pytest.fixture(scope="session", autouse=True)
def guard_integration_db_target() -> None:
    assert_safe_integration_db(str(engine.url))


@pytest.fixture(autouse=True)
async def cleanup_db() -> None:
    # Pooled asyncpg connections are bound to the loop that opened them.
    await engine.dispose()

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as exc:  # pragma: no cover - environment-dependent
        pytest.skip(f"Postgres is required for integration tests: {exc}")

    async with engine.begin() as conn:
        await conn.execute(text(TRUNCATE_SQL))

    yield

    await engine.dispose()
