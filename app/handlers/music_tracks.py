from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, log_failures
from app.handlers.users import ensure_user_exists
from app.models import MusicTrack
from app.schemas import CreateMusicTrackInput, UpdateMusicTrackInput


@log_failures("music_track_creation_failed")
async def create_music_track(db: AsyncSession, data: CreateMusicTrackInput) -> MusicTrack:
    await ensure_user_exists(db, data.user_id)

    track = MusicTrack(
        user_id=data.user_id,
        title=data.title,
        artist=data.artist,
        album=data.album,
        duration_seconds=data.duration_seconds,
        genre=data.genre,
        spotify_url=data.spotify_url,
        is_favorite=data.is_favorite,
    )
    db.add(track)
    await db.flush()
    await db.refresh(track)
    return track


@log_failures("music_track_fetch_failed")
async def get_music_track(db: AsyncSession, track_id: int) -> MusicTrack | None:
    result = await db.execute(select(MusicTrack).where(MusicTrack.id == track_id))
    return result.scalar_one_or_none()


@log_failures("user_music_tracks_fetch_failed")
async def get_user_music_tracks(
    db: AsyncSession,
    user_id: int,
    favorites_only: bool | None = None,
    limit: int | None = None,
) -> list[MusicTrack]:
    """List a user's tracks, most recently added first."""
    query = select(MusicTrack).where(MusicTrack.user_id == user_id)

    if favorites_only:
        query = query.where(MusicTrack.is_favorite.is_(True))

    query = query.order_by(MusicTrack.added_at.desc(), MusicTrack.id.desc())
    if limit is not None:
        query = query.limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all())


@log_failures("music_track_update_failed")
async def update_music_track(db: AsyncSession, data: UpdateMusicTrackInput) -> MusicTrack:
    """Partial update; an explicit null clears an optional field such as ``spotify_url``."""
    track = await get_music_track(db, data.id)
    if track is None:
        raise NotFoundError("MusicTrack", data.id)

    changes = data.model_dump(exclude_unset=True, exclude={"id"})
    if not changes:
        return track

    for field, value in changes.items():
        setattr(track, field, value)

    await db.flush()
    await db.refresh(track)
    return track


@log_failures("music_track_deletion_failed")
async def delete_music_track(db: AsyncSession, track_id: int) -> bool:
    result = await db.execute(delete(MusicTrack).where(MusicTrack.id == track_id))
    return result.rowcount > 0
