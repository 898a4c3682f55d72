"""User data-access layer.

Pure query functions — no business logic, no HTTP concerns.
Each function takes a session and returns models or scalars.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from usuarios_api.models import User


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    """Return the user with the given id, or None."""
    return await db.get(User, user_id)


async def list_users(db: AsyncSession, offset: int, limit: int) -> list[User]:
    """Return a slice of users ordered by id."""
    stmt = select(User).order_by(User.id).offset(offset).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_users(db: AsyncSession) -> int:
    """Return total number of users."""
    result = await db.execute(select(func.count(User.id)))
    return result.scalar_one()


async def save_user(db: AsyncSession, user: User) -> User:
    """Flush pending changes for ``user`` and reload server-side columns.

    A duplicate email surfaces here as sqlalchemy.exc.IntegrityError.
    """
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def delete_user(db: AsyncSession, user: User) -> None:
    await db.delete(user)
    await db.flush()
