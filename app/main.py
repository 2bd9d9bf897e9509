from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.database import init_db, close_db, utcnow
from app.errors import register_exception_handlers
from app.logging import TimingMiddleware, setup_logging
from app.routers import calendar_events, dashboard, music_tracks, users, weather
from app.schemas import HealthResponse

settings = get_settings()
setup_logging(settings.log_level)
log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store on startup and release it on shutdown."""
    await init_db()
    log.info("database_ready", url=settings.async_database_url.split("@")[-1])
    yield
    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="Profile, calendar, weather and music widgets for a personal dashboard",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(TimingMiddleware)

register_exception_handlers(app)

# Include routers
app.include_router(users.router)
app.include_router(calendar_events.router)
app.include_router(weather.router)
app.include_router(music_tracks.router)
app.include_router(dashboard.router)


@app.get("/trpc/healthcheck", response_model=HealthResponse)
async def healthcheck():
    """Health check endpoint."""
    return HealthResponse(status="ok", timestamp=utcnow())


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
