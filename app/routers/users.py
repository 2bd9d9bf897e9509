from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.handlers import users
from app.schemas import CreateUserInput, UpdateUserInput, UserResponse

router = APIRouter(prefix="/trpc", tags=["users"])


@router.post("/createUser", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: CreateUserInput,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Create a new user."""
    return await users.create_user(db, user_data)


@router.get("/getUser", response_model=UserResponse | None)
async def get_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: int = Query(..., alias="userId"),
):
    """Get a user by ID, or null when it does not exist."""
    return await users.get_user(db, user_id)


@router.post("/updateUser", response_model=UserResponse)
async def update_user(
    user_data: UpdateUserInput,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Update the fields present in the request body."""
    return await users.update_user(db, user_data)
