from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import NotFoundError, ReferentialIntegrityError, log_failures
from app.models import User
from app.schemas import CreateUserInput, UpdateUserInput


@log_failures("user_creation_failed")
async def create_user(db: AsyncSession, data: CreateUserInput) -> User:
    """Insert a new user; ``location`` defaults to null."""
    user = User(
        name=data.name,
        email=data.email,
        location=data.location,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


@log_failures("user_fetch_failed")
async def get_user(db: AsyncSession, user_id: int) -> User | None:
    """Get a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


@log_failures("user_update_failed")
async def update_user(db: AsyncSession, data: UpdateUserInput) -> User:
    """Apply the fields present in ``data``; raises NotFoundError for an unknown id."""
    user = await get_user(db, data.id)
    if user is None:
        raise NotFoundError("User", data.id)

    changes = data.model_dump(exclude_unset=True, exclude={"id"})
    if not changes:
        return user

    for field, value in changes.items():
        setattr(user, field, value)

    await db.flush()
    await db.refresh(user)
    return user


async def ensure_user_exists(db: AsyncSession, user_id: int) -> None:
    """Raise ReferentialIntegrityError unless a user with ``user_id`` exists."""
    result = await db.execute(select(User.id).where(User.id == user_id))
    if result.scalar_one_or_none() is None:
        raise ReferentialIntegrityError("User", user_id)
