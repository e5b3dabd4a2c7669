"""FacilityDesk backend application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from facilitydesk.api.routes import (
    cases,
    dashboard,
    kanban,
    maintenance,
    realtime,
    reference,
    search,
    session,
    tasks,
)
from facilitydesk.config import settings
from facilitydesk.context import build_context
from facilitydesk.db import dispose_db, init_db
from facilitydesk.db.models import OPTIONAL_TABLES

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not settings.USE_FIXTURES:
        # Optional tables are created by their own migration, never implicitly
        await init_db(skip=OPTIONAL_TABLES)
        logger.info("Database ready")

    ctx = build_context(settings)
    app.state.context = ctx
    await ctx.start()
    try:
        yield
    finally:
        await ctx.stop()
        if not settings.USE_FIXTURES:
            await dispose_db()


# Create FastAPI application
app = FastAPI(
    title="FacilityDesk API",
    description="Facility management dashboard: cases, work orders and maintenance plans",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routes
app.include_router(session.router)
app.include_router(cases.router)
app.include_router(tasks.router)
app.include_router(maintenance.router)
app.include_router(dashboard.router)
app.include_router(kanban.router)
app.include_router(search.router)
app.include_router(reference.router)
app.include_router(realtime.router)


@app.get("/", tags=["health"])
async def root():
    """API health check."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }
