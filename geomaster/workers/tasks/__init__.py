from geomaster.workers.tasks.rankings import run_rankings_rebuild

__all__ = ["run_rankings_rebuild"]
