from datetime import timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import select

from app.database import utcnow
from app.errors import ReferentialIntegrityError
from app.handlers.weather import create_weather_record, get_current_weather, to_fixed_point
from app.models import WeatherRecord
from app.schemas import CreateWeatherInput, WeatherResponse


def _weather_input(user_id: int, **overrides) -> CreateWeatherInput:
    values = {
        "user_id": user_id,
        "location": "Berlin",
        "temperature": 21.5,
        "condition": "Sunny",
        "humidity": 40,
        "wind_speed": 12.25,
    }
    values.update(overrides)
    return CreateWeatherInput(**values)


def test_to_fixed_point_rounds_half_up():
    assert to_fixed_point(23.456789) == Decimal("23.46")
    assert to_fixed_point(-15.2) == Decimal("-15.20")
    assert to_fixed_point(0.005) == Decimal("0.01")


@pytest.mark.asyncio
async def test_create_weather_record_returns_floats(db, user):
    before = utcnow()
    record = await create_weather_record(db, _weather_input(user.id))

    assert isinstance(record, WeatherResponse)
    assert record.id > 0
    assert isinstance(record.temperature, float)
    assert isinstance(record.wind_speed, float)
    assert record.temperature == 21.5
    assert record.wind_speed == 12.25
    assert record.recorded_at.tzinfo is not None
    assert record.recorded_at >= before.replace(tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_temperature_is_stored_with_two_decimals(db, user):
    await create_weather_record(db, _weather_input(user.id, temperature=23.456789))

    current = await get_current_weather(db, user.id)
    assert current.temperature == pytest.approx(23.46)


@pytest.mark.asyncio
async def test_negative_temperature_round_trips(db, user):
    await create_weather_record(db, _weather_input(user.id, temperature=-15.2))

    current = await get_current_weather(db, user.id)
    assert current.temperature == -15.2


@pytest.mark.asyncio
async def test_create_weather_record_for_missing_user(db):
    with pytest.raises(ReferentialIntegrityError) as exc_info:
        await create_weather_record(db, _weather_input(777))

    assert "User with id 777 not found" in str(exc_info.value)
    result = await db.execute(select(WeatherRecord))
    assert result.scalars().all() == []


@pytest.mark.asyncio
async def test_current_weather_is_none_without_records(db, user):
    assert await get_current_weather(db, user.id) is None


@pytest.mark.asyncio
async def test_current_weather_picks_latest_recorded_at(db, user):
    now = utcnow()
    db.add_all([
        WeatherRecord(
            user_id=user.id, location="Berlin", temperature=Decimal("10.00"), condition="Rain",
            humidity=90, wind_speed=Decimal("5.00"), recorded_at=now - timedelta(hours=2),
        ),
        WeatherRecord(
            user_id=user.id, location="Berlin", temperature=Decimal("18.50"), condition="Cloudy",
            humidity=60, wind_speed=Decimal("3.00"), recorded_at=now,
        ),
        WeatherRecord(
            user_id=user.id, location="Berlin", temperature=Decimal("12.00"), condition="Fog",
            humidity=95, wind_speed=Decimal("1.00"), recorded_at=now - timedelta(hours=1),
        ),
    ])
    await db.flush()

    current = await get_current_weather(db, user.id)
    assert current.condition == "Cloudy"
    assert current.temperature == 18.5
