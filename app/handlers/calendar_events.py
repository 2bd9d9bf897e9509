from datetime import datetime

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import to_naive_utc, utcnow
from app.errors import NotFoundError, log_failures
from app.handlers.users import ensure_user_exists
from app.models import CalendarEvent
from app.schemas import CreateCalendarEventInput, UpdateCalendarEventInput


@log_failures("calendar_event_creation_failed")
async def create_calendar_event(db: AsyncSession, data: CreateCalendarEventInput) -> CalendarEvent:
    """Create an event for an existing user.

    No ordering is enforced between ``start_time`` and ``end_time``.
    """
    await ensure_user_exists(db, data.user_id)

    event = CalendarEvent(
        user_id=data.user_id,
        title=data.title,
        description=data.description,
        start_time=to_naive_utc(data.start_time),
        end_time=to_naive_utc(data.end_time),
        location=data.location,
        is_all_day=data.is_all_day,
    )
    db.add(event)
    await db.flush()
    await db.refresh(event)
    return event


@log_failures("calendar_event_fetch_failed")
async def get_calendar_event(db: AsyncSession, event_id: int) -> CalendarEvent | None:
    result = await db.execute(select(CalendarEvent).where(CalendarEvent.id == event_id))
    return result.scalar_one_or_none()


@log_failures("user_events_fetch_failed")
async def get_user_events(
    db: AsyncSession,
    user_id: int,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> list[CalendarEvent]:
    """List a user's events by ascending start time.

    ``start_date`` and ``end_date`` bound ``start_time`` inclusively.
    """
    query = select(CalendarEvent).where(CalendarEvent.user_id == user_id)

    if start_date is not None:
        query = query.where(CalendarEvent.start_time >= to_naive_utc(start_date))
    if end_date is not None:
        query = query.where(CalendarEvent.start_time <= to_naive_utc(end_date))

    query = query.order_by(CalendarEvent.start_time.asc(), CalendarEvent.id.asc())

    result = await db.execute(query)
    return list(result.scalars().all())


@log_failures("calendar_event_update_failed")
async def update_calendar_event(db: AsyncSession, data: UpdateCalendarEventInput) -> CalendarEvent:
    """Apply the fields present in ``data`` and always refresh ``updated_at``."""
    event = await get_calendar_event(db, data.id)
    if event is None:
        raise NotFoundError("CalendarEvent", data.id)

    changes = data.model_dump(exclude_unset=True, exclude={"id"})
    for field in ("start_time", "end_time"):
        if field in changes:
            changes[field] = to_naive_utc(changes[field])

    for field, value in changes.items():
        setattr(event, field, value)
    event.updated_at = utcnow()

    await db.flush()
    await db.refresh(event)
    return event


@log_failures("calendar_event_deletion_failed")
async def delete_calendar_event(db: AsyncSession, event_id: int) -> bool:
    """Delete an event; returns True only if a row was removed."""
    result = await db.execute(delete(CalendarEvent).where(CalendarEvent.id == event_id))
    return result.rowcount > 0
