"""FastAPI application factory.

Lifespan
--------
On startup the app checks that the mail credentials are configured (startup
aborts with :class:`~linkwatch.config.ConfigError` otherwise) and starts the
cron scheduler.  On shutdown the scheduler is stopped without waiting for a
running scan to finish.

Routers
-------
    /health    — liveness probe
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from linkwatch import __version__
from linkwatch.api.routers import health as health_router
from linkwatch.config import settings
from linkwatch.scheduler import build_scheduler


def create_app(start_scheduler: bool = True) -> FastAPI:
    """Return a configured application.

    Args:
        start_scheduler: Run the self-ping and scan jobs for the lifetime of
            the app.  Tests pass ``False`` to get a bare health endpoint.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if not start_scheduler:
            app.state.scheduler = None
            yield
            return

        settings.require_email_settings()
        scheduler = build_scheduler()
        scheduler.start()
        app.state.scheduler = scheduler
        print("[api] Scheduler started")
        try:
            yield
        finally:
            scheduler.shutdown(wait=False)
            print("[api] Scheduler stopped")

    app = FastAPI(
        title="linkwatch",
        description="Health endpoint for the scheduled broken-link scanner.",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(health_router.router, prefix="/health", tags=["health"])
    return app


# Module-level instance used by uvicorn:
#   uvicorn linkwatch.api.app:app
app = create_app()
