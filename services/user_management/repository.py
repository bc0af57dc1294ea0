# services/user_management/repository.py
"""
User reads and writes.

Reads go through `live_users()` so soft-deleted rows never leak out, and
writes go through `save_user()` so the role/department invariant is
re-applied every time, not just at creation.
"""
import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from services.user_management.core.identity import normalize_user
from services.user_management.models.users import User
from shared.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def live_users():
    return select(User).where(User.is_deleted.is_(False))


async def get_live_user(db: AsyncSession, id) -> User:
    result = await db.execute(live_users().where(User.id == id))
    user = result.scalars().first()
    if not user:
        raise NotFoundError("User not found")
    return user


async def find_live_user_by_user_id(db: AsyncSession, user_id: str) -> Optional[User]:
    result = await db.execute(live_users().where(User.user_id == user_id))
    return result.scalars().first()


async def ensure_identity_free(db: AsyncSession, user_id: str, email: str):
    # Soft-deleted rows still hold their unique user_id/email.
    result = await db.execute(
        select(User).where(or_(User.email == email, User.user_id == user_id))
    )
    existing = result.scalars().first()
    if existing:
        field = "email" if existing.email == email else "user ID"
        raise ConflictError(f"User with this {field} already exists", errors={
            "email" if field == "email" else "user_id": "Already taken"
        })


async def save_user(db: AsyncSession, user: User) -> User:
    normalize_user(user)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("Unique constraint hit while saving user %s", user.user_id)
        raise ConflictError("User with this user ID or email already exists")
    await db.refresh(user)
    return user


async def delete_user(db: AsyncSession, user: User):
    await db.delete(user)
    await db.commit()
