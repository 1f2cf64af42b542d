"""FastAPI application entry point."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from trackboard.core import config
from trackboard.core.logging import configure_logging
from trackboard.domain.common.errors import TrackboardError
from trackboard.persistence.db import init_db
from trackboard.api import course, gym, health, progress, tasks

# ------------------------------------------------------------------
# App creation
# ------------------------------------------------------------------
app = FastAPI(
    title="Trackboard API",
    description="Curriculum progress, daily tasks and gym logs",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------------
# Startup: logging + DB schema
# ------------------------------------------------------------------
@app.on_event("startup")
def on_startup():
    configure_logging()
    init_db()


# ------------------------------------------------------------------
# Domain errors -> HTTP
# ------------------------------------------------------------------
@app.exception_handler(TrackboardError)
def handle_domain_error(request: Request, exc: TrackboardError):
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# ------------------------------------------------------------------
# Routers
# ------------------------------------------------------------------
app.include_router(health.router)
app.include_router(course.router)
app.include_router(progress.router)
app.include_router(tasks.router)
app.include_router(gym.router)
