from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.handlers import calendar_events
from app.schemas import (
    CalendarEventResponse,
    CreateCalendarEventInput,
    EventIdInput,
    UpdateCalendarEventInput,
)

router = APIRouter(prefix="/trpc", tags=["calendar"])


@router.post("/createCalendarEvent", response_model=CalendarEventResponse, status_code=status.HTTP_201_CREATED)
async def create_calendar_event(
    event_data: CreateCalendarEventInput,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a calendar event for an existing user."""
    return await calendar_events.create_calendar_event(db, event_data)


@router.get("/getUserEvents", response_model=list[CalendarEventResponse])
async def get_user_events(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: int = Query(...),
    start_date: datetime | None = Query(None, description="Only events starting at or after this time"),
    end_date: datetime | None = Query(None, description="Only events starting at or before this time"),
):
    """List a user's events, earliest first."""
    return await calendar_events.get_user_events(db, user_id, start_date, end_date)


@router.post("/updateCalendarEvent", response_model=CalendarEventResponse)
async def update_calendar_event(
    event_data: UpdateCalendarEventInput,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update an event; the modification timestamp is always refreshed."""
    return await calendar_events.update_calendar_event(db, event_data)


@router.post("/deleteCalendarEvent", response_model=bool)
async def delete_calendar_event(
    payload: EventIdInput,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Delete an event; false when nothing was removed."""
    return await calendar_events.delete_calendar_event(db, payload.event_id)
