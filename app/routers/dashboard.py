from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.handlers.dashboard import get_dashboard_data
from app.schemas import DashboardResponse

router = APIRouter(prefix="/trpc", tags=["dashboard"])


@router.get("/getDashboardData", response_model=DashboardResponse)
async def dashboard(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: int = Query(..., alias="userId"),
):
    """User profile, next events, current weather and favorite tracks in one call."""
    return await get_dashboard_data(db, user_id)
