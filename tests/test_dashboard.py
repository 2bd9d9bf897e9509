from datetime import timedelta
from decimal import Decimal

import pytest

from app.database import utcnow
from app.errors import NotFoundError
from app.handlers.dashboard import get_dashboard_data
from app.models import CalendarEvent, MusicTrack, WeatherRecord
from app.schemas import DashboardResponse, UserResponse


def _event(user_id: int, title: str, start) -> CalendarEvent:
    return CalendarEvent(
        user_id=user_id,
        title=title,
        start_time=start,
        end_time=start + timedelta(hours=1),
    )


def _track(user_id: int, title: str, added_at, is_favorite: bool = True) -> MusicTrack:
    return MusicTrack(
        user_id=user_id,
        title=title,
        artist="Artist",
        duration_seconds=200,
        is_favorite=is_favorite,
        added_at=added_at,
    )


@pytest.mark.asyncio
async def test_dashboard_for_missing_user(db):
    with pytest.raises(NotFoundError) as exc_info:
        await get_dashboard_data(db, 999)

    assert exc_info.value.entity == "User"
    assert exc_info.value.identifier == 999


@pytest.mark.asyncio
async def test_dashboard_for_user_without_data(db, user):
    dashboard = await get_dashboard_data(db, user.id)

    assert dashboard.user.id == user.id
    assert dashboard.user.location == "Test City"
    assert dashboard.upcoming_events == []
    assert dashboard.current_weather is None
    assert dashboard.favorite_tracks == []


@pytest.mark.asyncio
async def test_dashboard_caps_upcoming_events_at_five(db, user):
    now = utcnow()
    # Inserted latest-first so ordering comes from the query
    db.add_all([_event(user.id, f"event {i}", now + timedelta(days=i)) for i in range(10, 0, -1)])
    db.add(_event(user.id, "yesterday", now - timedelta(days=1)))
    await db.flush()

    dashboard = await get_dashboard_data(db, user.id)

    assert [e.title for e in dashboard.upcoming_events] == [f"event {i}" for i in range(1, 6)]


@pytest.mark.asyncio
async def test_dashboard_caps_favorite_tracks_at_ten(db, user):
    now = utcnow()
    db.add_all([_track(user.id, f"fav {i}", now - timedelta(minutes=i)) for i in range(15)])
    db.add(_track(user.id, "not a favorite", now + timedelta(minutes=1), is_favorite=False))
    await db.flush()

    dashboard = await get_dashboard_data(db, user.id)

    assert [t.title for t in dashboard.favorite_tracks] == [f"fav {i}" for i in range(10)]


@pytest.mark.asyncio
async def test_dashboard_uses_latest_weather(db, user):
    now = utcnow()
    db.add_all([
        WeatherRecord(
            user_id=user.id, location="Oslo", temperature=Decimal("-3.50"), condition="Snow",
            humidity=80, wind_speed=Decimal("7.25"), recorded_at=now,
        ),
        WeatherRecord(
            user_id=user.id, location="Oslo", temperature=Decimal("1.00"), condition="Sleet",
            humidity=85, wind_speed=Decimal("4.00"), recorded_at=now - timedelta(hours=3),
        ),
    ])
    await db.flush()

    dashboard = await get_dashboard_data(db, user.id)

    assert dashboard.current_weather.condition == "Snow"
    assert dashboard.current_weather.temperature == -3.5
    assert dashboard.current_weather.wind_speed == 7.25


def test_dashboard_serializes_camel_case_keys():
    dashboard = DashboardResponse(
        user=UserResponse(id=1, name="A", email="a@x.com", location=None, created_at=utcnow()),
        upcoming_events=[],
        current_weather=None,
        favorite_tracks=[],
    )

    assert set(dashboard.model_dump(by_alias=True)) == {
        "user", "upcomingEvents", "currentWeather", "favoriteTracks",
    }
