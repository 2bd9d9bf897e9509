from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.handlers import music_tracks
from app.schemas import (
    CreateMusicTrackInput,
    MusicTrackResponse,
    TrackIdInput,
    UpdateMusicTrackInput,
)

router = APIRouter(prefix="/trpc", tags=["music"])


@router.post("/createMusicTrack", response_model=MusicTrackResponse, status_code=status.HTTP_201_CREATED)
async def create_music_track(
    track_data: CreateMusicTrackInput,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Add a track to a user's library."""
    return await music_tracks.create_music_track(db, track_data)


@router.get("/getUserMusicTracks", response_model=list[MusicTrackResponse])
async def get_user_music_tracks(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: int = Query(...),
    favorites_only: bool | None = Query(None, description="Only return favorited tracks"),
):
    """List a user's tracks, most recently added first."""
    return await music_tracks.get_user_music_tracks(db, user_id, favorites_only)


@router.post("/updateMusicTrack", response_model=MusicTrackResponse)
async def update_music_track(
    track_data: UpdateMusicTrackInput,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update any subset of a track's fields."""
    return await music_tracks.update_music_track(db, track_data)


@router.post("/deleteMusicTrack", response_model=bool)
async def delete_music_track(
    payload: TrackIdInput,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Delete a track; false when nothing was removed."""
    return await music_tracks.delete_music_track(db, payload.track_id)
