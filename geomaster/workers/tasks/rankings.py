from __future__ import annotations

from datetime import datetime, timezone

import structlog
from celery.schedules import crontab

from geomaster.core.config import get_settings
from geomaster.db.session import SessionLocal
from geomaster.ranking.service import RankingService
from geomaster.workers.asyncio_runner import run_async_job
from geomaster.workers.celery_app import celery_app

logger = structlog.get_logger(__name__)

RANKINGS_REBUILD_HOUR = 3
RANKINGS_REBUILD_MINUTE = 15


async def run_rankings_rebuild_async() -> dict[str, object]:
    started_at = datetime.now(timezone.utc)
    if not get_settings().rankings_rebuild_enabled:
        logger.info("rankings_rebuild_skipped", reason="disabled")
        return {"status": "skipped"}

    async with SessionLocal.begin() as session:
        result = await RankingService.rebuild_rankings(session)

    summary: dict[str, object] = {
        "status": "ok",
        "started_at": started_at.isoformat(),
        "games_folded": result.games_folded,
        "entries_deleted": result.entries_deleted,
        "entries_written": result.entries_written,
    }
    logger.info("rankings_rebuild_finished", **summary)
    return summary


@celery_app.task(name="geomaster.workers.tasks.rankings.run_rankings_rebuild")
def run_rankings_rebuild() -> dict[str, object]:
    return run_async_job(run_rankings_rebuild_async())


celery_app.conf.beat_schedule = celery_app.conf.beat_schedule or {}
celery_app.conf.beat_schedule.update(
    {
        "rankings-rebuild-nightly": {
            "task": "geomaster.workers.tasks.rankings.run_rankings_rebuild",
            "schedule": crontab(hour=RANKINGS_REBUILD_HOUR, minute=RANKINGS_REBUILD_MINUTE),
            "options": {"queue": "q_low"},
        },
    }
)
