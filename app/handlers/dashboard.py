"""Dashboard aggregation.

Four independent reads with no transaction around them: the result is a
best-effort snapshot, not a consistent view under concurrent writes.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import utcnow
from app.errors import NotFoundError, log_failures
from app.handlers.music_tracks import get_user_music_tracks
from app.handlers.users import get_user
from app.handlers.weather import latest_weather_record
from app.models import CalendarEvent
from app.schemas import (
    CalendarEventResponse,
    DashboardResponse,
    MusicTrackResponse,
    UserResponse,
    WeatherResponse,
)

UPCOMING_EVENTS_LIMIT = 5
FAVORITE_TRACKS_LIMIT = 10


async def get_upcoming_events(db: AsyncSession, user_id: int, limit: int = UPCOMING_EVENTS_LIMIT) -> list[CalendarEvent]:
    """Events starting now or later, earliest first."""
    result = await db.execute(
        select(CalendarEvent)
        .where(CalendarEvent.user_id == user_id, CalendarEvent.start_time >= utcnow())
        .order_by(CalendarEvent.start_time.asc(), CalendarEvent.id.asc())
        .limit(limit)
    )
    return list(result.scalars().all())


@log_failures("dashboard_fetch_failed")
async def get_dashboard_data(db: AsyncSession, user_id: int) -> DashboardResponse:
    user = await get_user(db, user_id)
    if user is None:
        raise NotFoundError("User", user_id)

    events = await get_upcoming_events(db, user_id)
    weather = await latest_weather_record(db, user_id)
    tracks = await get_user_music_tracks(db, user_id, favorites_only=True, limit=FAVORITE_TRACKS_LIMIT)

    return DashboardResponse(
        user=UserResponse.model_validate(user),
        upcoming_events=[CalendarEventResponse.model_validate(e) for e in events],
        current_weather=WeatherResponse.model_validate(weather) if weather else None,
        favorite_tracks=[MusicTrackResponse.model_validate(t) for t in tracks],
    )
