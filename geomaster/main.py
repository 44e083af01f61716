import uvicorn
from fastapi import FastAPI

from geomaster.api.routes.duels import router as duels_router
from geomaster.api.routes.health import router as health_router
from geomaster.api.routes.ranked import router as ranked_router
from geomaster.api.routes.rankings import router as rankings_router
from geomaster.core.config import get_settings
from geomaster.core.logging import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.app_env != "dev")

    app = FastAPI(
        title="GeoMaster Ranked Play API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.include_router(health_router)
    app.include_router(ranked_router)
    app.include_router(duels_router)
    app.include_router(rankings_router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "geomaster.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_env == "dev",
    )


if __name__ == "__main__":
    run()
