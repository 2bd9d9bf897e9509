from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, AnyUrl, BaseModel, EmailStr, Field, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel

_url_adapter = TypeAdapter(AnyUrl)


def _check_url(v: str | None) -> str | None:
    # Validate the format but keep the submitted text as-is
    if v is None:
        return v
    try:
        _url_adapter.validate_python(v)
    except ValidationError:
        raise ValueError("must be a valid URL")
    return v


def _as_utc(value: datetime) -> datetime:
    # Stored timestamps are naive UTC; responses carry the offset explicitly
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UTCDatetime = Annotated[datetime, AfterValidator(_as_utc)]


def _reject_null(v):
    if v is None:
        raise ValueError("may be omitted but not null")
    return v


# ============ User Schemas ============

class CreateUserInput(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    location: str | None = None


class UpdateUserInput(BaseModel):
    id: int
    name: str | None = Field(None, min_length=1)
    email: EmailStr | None = None
    location: str | None = None

    @field_validator("name", "email")
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    location: str | None
    created_at: UTCDatetime

    class Config:
        from_attributes = True


# ============ Calendar Event Schemas ============

class CreateCalendarEventInput(BaseModel):
    user_id: int
    title: str = Field(..., min_length=1)
    description: str | None = None
    start_time: datetime
    end_time: datetime
    location: str | None = None
    is_all_day: bool = False


class UpdateCalendarEventInput(BaseModel):
    id: int
    title: str | None = Field(None, min_length=1)
    description: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    location: str | None = None
    is_all_day: bool | None = None

    @field_validator("title", "start_time", "end_time", "is_all_day")
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)


class EventIdInput(BaseModel):
    event_id: int = Field(..., alias="eventId")


class CalendarEventResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: str | None
    start_time: UTCDatetime
    end_time: UTCDatetime
    location: str | None
    is_all_day: bool
    created_at: UTCDatetime
    updated_at: UTCDatetime

    class Config:
        from_attributes = True


# ============ Weather Schemas ============

class CreateWeatherInput(BaseModel):
    user_id: int
    location: str = Field(..., min_length=1)
    temperature: float
    condition: str = Field(..., min_length=1)
    humidity: int = Field(..., ge=0, le=100, description="Relative humidity in percent")
    wind_speed: float = Field(..., ge=0)


class WeatherResponse(BaseModel):
    id: int
    user_id: int
    location: str
    temperature: float
    condition: str
    humidity: int
    wind_speed: float
    recorded_at: UTCDatetime

    class Config:
        from_attributes = True


# ============ Music Track Schemas ============

class CreateMusicTrackInput(BaseModel):
    user_id: int
    title: str = Field(..., min_length=1)
    artist: str = Field(..., min_length=1)
    album: str | None = None
    duration_seconds: int = Field(..., gt=0)
    genre: str | None = None
    spotify_url: str | None = None
    is_favorite: bool = False

    @field_validator("spotify_url")
    @classmethod
    def valid_url(cls, v: str | None) -> str | None:
        return _check_url(v)


class UpdateMusicTrackInput(BaseModel):
    id: int
    title: str | None = Field(None, min_length=1)
    artist: str | None = Field(None, min_length=1)
    album: str | None = None
    duration_seconds: int | None = Field(None, gt=0)
    genre: str | None = None
    spotify_url: str | None = None
    is_favorite: bool | None = None

    @field_validator("title", "artist", "duration_seconds", "is_favorite")
    @classmethod
    def not_null(cls, v):
        return _reject_null(v)

    @field_validator("spotify_url")
    @classmethod
    def valid_url(cls, v: str | None) -> str | None:
        return _check_url(v)


class TrackIdInput(BaseModel):
    track_id: int = Field(..., alias="trackId")


class MusicTrackResponse(BaseModel):
    id: int
    user_id: int
    title: str
    artist: str
    album: str | None
    duration_seconds: int
    genre: str | None
    spotify_url: str | None
    is_favorite: bool
    added_at: UTCDatetime

    class Config:
        from_attributes = True


# ============ Dashboard Schemas ============

class DashboardResponse(BaseModel):
    user: UserResponse
    upcoming_events: list[CalendarEventResponse]
    current_weather: WeatherResponse | None
    favorite_tracks: list[MusicTrackResponse]

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class HealthResponse(BaseModel):
    status: str
    timestamp: UTCDatetime
