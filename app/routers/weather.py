from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.handlers import weather
from app.schemas import CreateWeatherInput, WeatherResponse

router = APIRouter(prefix="/trpc", tags=["weather"])


@router.post("/createWeatherRecord", response_model=WeatherResponse, status_code=status.HTTP_201_CREATED)
async def create_weather_record(
    weather_data: CreateWeatherInput,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Append a weather reading for an existing user."""
    return await weather.create_weather_record(db, weather_data)


@router.get("/getCurrentWeather", response_model=WeatherResponse | None)
async def get_current_weather(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: int = Query(...),
):
    """Latest weather reading for the user, or null."""
    return await weather.get_current_weather(db, user_id)
