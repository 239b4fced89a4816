# hydromon/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hydromon.config import Settings, get_settings
from hydromon.models.profile import get_profile
from hydromon.services.history import resolve_timezone
from hydromon.services.scheduler import start_scheduler, stop_scheduler

# Routers
from hydromon.routers import health_router, monitoring_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    # fail fast on a misconfigured device profile or display timezone
    profile = get_profile(settings.device_profile)
    resolve_timezone(settings.display_timezone)

    app = FastAPI(
        title="Hydroponics Monitoring API",
        description="Firebase-backed monitoring for hydroponic systems: live readings, history, status and alerts",
        version="1.0.0",
    )

    # every route resolves this app's settings, not a fresh read of the environment
    app.dependency_overrides[get_settings] = lambda: settings

    # origins from CORS_ORIGINS (Vite dev server by default)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list or ["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount router
    app.include_router(health_router)                                  # /healthz, /api/v1/health, /api/v1/test-firebase
    app.include_router(monitoring_router, prefix="/api/v1")            # /api/v1/realtime-data, /api/v1/historical-data ...
    app.include_router(monitoring_router, prefix="/api", include_in_schema=False)  # paths used by the existing dashboard

    @app.on_event("startup")
    async def _startup():
        logger.info(
            f"Hydroponics monitor starting (profile={profile.name}, "
            f"firebase={'configured' if settings.firebase_configured else 'mock'})"
        )
        start_scheduler(settings)

    @app.on_event("shutdown")
    async def _shutdown():
        stop_scheduler()

    return app


app = create_app()
