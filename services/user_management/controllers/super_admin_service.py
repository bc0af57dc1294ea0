# services/user_management/controllers/super_admin_service.py

import logging
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from services.user_management.core import approval
from services.user_management.core.identity import soft_delete
from services.user_management.core.policy import Actor, ensure_super_admin
from services.user_management.core.roles import UserRole
from services.user_management.models.users import User
from services.user_management.repository import delete_user, get_live_user, live_users, save_user
from services.user_management.schemas.users import (
    ApproveRequest,
    DashboardStats,
    MessageOut,
    UserListOut,
    UserOut,
    UserStatusOut,
)
from services.timetable_management.controllers.timetable_service import list_timetables_with_creators
from services.timetable_management.models.timetables import Timetable
from services.timetable_management.schemas.timetables import TimetableListOut
from shared.auth import get_current_actor
from shared.db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/super-admin", tags=["SuperAdmin"])


def require_super_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    ensure_super_admin(actor)
    return actor


async def _list_users(db: AsyncSession, *conditions) -> UserListOut:
    result = await db.execute(live_users().where(*conditions).order_by(User.created_at.desc()))
    users = result.scalars().all()
    return UserListOut(count=len(users), data=[UserOut.model_validate(u) for u in users])


async def _count_users(db: AsyncSession, *conditions) -> int:
    result = await db.execute(
        select(func.count()).select_from(User).where(User.is_deleted.is_(False), *conditions)
    )
    return result.scalar_one()


# --- PENDING LOGIN REQUESTS ---
@router.get("/pending-requests", response_model=UserListOut)
async def get_pending_requests(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_super_admin),
):
    return await _list_users(db, User.is_approved.is_(False), User.role == UserRole.PENDING)


# --- ACTIVE ADMINS & USERS ---
@router.get("/active-admins", response_model=UserListOut)
async def get_active_admins(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_super_admin),
):
    return await _list_users(
        db,
        User.is_approved.is_(True),
        User.is_active.is_(True),
        User.role != UserRole.SUPER_ADMIN,
    )


# --- DISABLED USERS ---
@router.get("/disabled-admins", response_model=UserListOut)
async def get_disabled_admins(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_super_admin),
):
    return await _list_users(db, User.is_active.is_(False), User.role != UserRole.SUPER_ADMIN)


# --- DASHBOARD STATS ---
@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_super_admin),
):
    timetables = await db.execute(select(func.count()).select_from(Timetable))
    return DashboardStats(
        pending_requests=await _count_users(
            db, User.role == UserRole.PENDING, User.is_approved.is_(False)
        ),
        active_users=await _count_users(
            db, User.is_approved.is_(True), User.is_active.is_(True), User.role != UserRole.SUPER_ADMIN
        ),
        disabled_users=await _count_users(
            db, User.is_active.is_(False), User.role != UserRole.SUPER_ADMIN
        ),
        total_timetables=timetables.scalar_one(),
    )


# --- VIEW ALL TIMETABLES (read-only) ---
@router.get("/timetables", response_model=TimetableListOut)
async def get_all_timetables(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_super_admin),
):
    return await list_timetables_with_creators(db)


# --- APPROVE USER ---
@router.put("/approve/{id}", response_model=UserStatusOut)
async def approve_user(
    id: UUID,
    payload: ApproveRequest,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_super_admin),
):
    """
    USER -> read-only, ADMIN_<dept> -> editor for that department.
    """
    # A bad role or department is a 400 even when the id is unknown.
    approval.resolve_approval_role(payload.role, payload.department)
    user = await get_live_user(db, id)
    approval.approve(actor, user, payload.role, payload.department)
    user = await save_user(db, user)
    logger.info("User %s approved as %s by %s", user.user_id, user.role.value, actor.id)
    return UserStatusOut(message="User approved successfully", user=UserOut.model_validate(user))


# --- REJECT USER (hard delete) ---
@router.delete("/reject/{id}", response_model=MessageOut)
async def reject_user(
    id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_super_admin),
):
    user = await get_live_user(db, id)
    approval.reject(actor, user)
    await delete_user(db, user)
    logger.info("User %s rejected and deleted by %s", user.user_id, actor.id)
    return MessageOut(message="User rejected and deleted")


# --- TOGGLE USER STATUS ---
@router.put("/toggle-status/{id}", response_model=UserStatusOut)
async def toggle_user_status(
    id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_super_admin),
):
    user = await get_live_user(db, id)
    approval.toggle_active(actor, user)
    user = await save_user(db, user)
    state = "activated" if user.is_active else "disabled"
    logger.info("User %s %s by %s", user.user_id, state, actor.id)
    return UserStatusOut(message=f"User {state} successfully", user=UserOut.model_validate(user))


# --- SOFT DELETE USER ---
@router.delete("/users/{id}", response_model=MessageOut)
async def delete_user_account(
    id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(require_super_admin),
):
    user = await get_live_user(db, id)
    soft_delete(user)
    await save_user(db, user)
    logger.info("User %s soft-deleted by %s", user.user_id, actor.id)
    return MessageOut(message="User deleted")
