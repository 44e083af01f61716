from __future__ import annotations

import asyncio
import time
from collections.abc import Coroutine
from typing import Any, TypeVar

import structlog

from geomaster.db.session import dispose_engine

T = TypeVar("T")

logger = structlog.get_logger(__name__)


async def _run_with_fresh_db_pool(job: Coroutine[Any, Any, T]) -> T:
    # Each asyncio.run gets its own loop; pooled connections must not cross loops.
    await dispose_engine()
    try:
        return await job
    finally:
        await dispose_engine()


def run_async_job(job: Coroutine[Any, Any, T]) -> T:
    job_name = getattr(job, "__qualname__", type(job).__name__)
    started = time.monotonic()
    try:
        return asyncio.run(_run_with_fresh_db_pool(job))
    except Exception:
        logger.exception("worker_job_failed", job=job_name)
        raise
    finally:
        logger.info("worker_job_finished", job=job_name, duration_ms=int((time.monotonic() - started) * 1000))
