"""Weather records.

Records are append-only: there is no update or delete. The current weather is
simply the newest row by ``recorded_at``; refreshing it re-runs the same read.

Temperature and wind speed are stored as ``Numeric(5, 2)``. Inputs are rounded
half-up to two decimals on the way in and returned as floats, so precision past
the second decimal is lost.
"""

from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import log_failures
from app.handlers.users import ensure_user_exists
from app.models import WeatherRecord
from app.schemas import CreateWeatherInput, WeatherResponse

CENTS = Decimal("0.01")


def to_fixed_point(value: float) -> Decimal:
    """Convert a float to the two-decimal fixed-point value the store holds."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


@log_failures("weather_record_creation_failed")
async def create_weather_record(db: AsyncSession, data: CreateWeatherInput) -> WeatherResponse:
    await ensure_user_exists(db, data.user_id)

    record = WeatherRecord(
        user_id=data.user_id,
        location=data.location,
        temperature=to_fixed_point(data.temperature),
        condition=data.condition,
        humidity=data.humidity,
        wind_speed=to_fixed_point(data.wind_speed),
    )
    db.add(record)
    await db.flush()
    await db.refresh(record)
    return WeatherResponse.model_validate(record)


async def latest_weather_record(db: AsyncSession, user_id: int) -> WeatherRecord | None:
    result = await db.execute(
        select(WeatherRecord)
        .where(WeatherRecord.user_id == user_id)
        .order_by(WeatherRecord.recorded_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


@log_failures("current_weather_fetch_failed")
async def get_current_weather(db: AsyncSession, user_id: int) -> WeatherResponse | None:
    """Most recent record for the user, or None when there is none."""
    record = await latest_weather_record(db, user_id)
    if record is None:
        return None
    return WeatherResponse.model_validate(record)
