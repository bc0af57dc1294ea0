# services/timetable_management/controllers/timetable_service.py
import logging
import uuid
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from services.timetable_management.core.cells import CellState, apply_cell_edit
from services.timetable_management.core.grid import clean_timetable_definition, grid_slots, slot_sort_key
from services.timetable_management.models.cells import TimetableCell
from services.timetable_management.models.timetables import Timetable
from services.timetable_management.schemas.timetables import (
    CellOut,
    CellUpdate,
    CellUpdateResponse,
    CreatorOut,
    TimetableCreate,
    TimetableDetail,
    TimetableListOut,
    TimetableOut,
)
from services.user_management.core.policy import (
    Actor,
    ensure_can_create_timetable,
    ensure_can_delete_timetable,
    ensure_can_edit_cells,
    ensure_can_view_timetables,
)
from services.user_management.core.roles import ALL_ROLES, Department
from services.user_management.models.users import User
from services.user_management.schemas.users import MessageOut
from shared.auth import get_current_actor
from shared.db import get_db
from shared.errors import ConflictError, DataIntegrityError, NotFoundError, AuthorizationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/timetables", tags=["Timetables"])


def timetable_out(timetable: Timetable, creator: Optional[User] = None) -> TimetableOut:
    out = TimetableOut.model_validate(timetable)
    if creator is not None:
        out.creator = CreatorOut.model_validate(creator)
    return out


async def list_timetables_with_creators(db: AsyncSession) -> TimetableListOut:
    result = await db.execute(
        select(Timetable, User)
        .outerjoin(User, User.id == Timetable.created_by)
        .order_by(Timetable.created_at.desc())
    )
    data = [timetable_out(timetable, creator) for timetable, creator in result.all()]
    return TimetableListOut(count=len(data), data=data)


async def _get_timetable(db: AsyncSession, id) -> Timetable:
    timetable = await db.get(Timetable, id)
    if not timetable:
        raise NotFoundError("Timetable not found")
    return timetable


def viewer(actor: Actor = Depends(get_current_actor)) -> Actor:
    ensure_can_view_timetables(actor)
    return actor


# --- CREATE TIMETABLE (ROOM-BASED) ---
@router.post("", response_model=TimetableOut, status_code=status.HTTP_201_CREATED)
async def create_timetable(
    payload: TimetableCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """
    Create a timetable together with one empty, unclaimed cell per
    (day, period) slot. Department admins only.
    """
    ensure_can_create_timetable(actor)
    data = clean_timetable_definition(
        payload.room_name, payload.class_name, payload.days, payload.periods_per_day
    )

    existing = await db.execute(
        select(Timetable).where(
            (Timetable.room_name == data["room_name"]) & (Timetable.class_name == data["class_name"])
        )
    )
    if existing.scalars().first():
        raise ConflictError("Timetable already exists for this room and class")

    timetable = Timetable(id=uuid.uuid4(), created_by=actor.id, **data)
    db.add(timetable)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Timetable with this room name and class already exists")

    db.add_all(
        TimetableCell(
            timetable_id=timetable.id,
            day=day,
            period=period,
            subject="",
            department=Department.NONE,
            editable_by_role=ALL_ROLES,
            history=[],
        )
        for day, period in grid_slots(data["days"], data["periods_per_day"])
    )
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise ConflictError("Duplicate timetable slot")

    await db.refresh(timetable)
    logger.info(
        "Timetable %s/%s created by %s with %d cells",
        timetable.room_name,
        timetable.class_name,
        actor.id,
        len(timetable.days) * timetable.periods_per_day,
    )
    return timetable_out(timetable)


# --- GET ALL TIMETABLES ---
@router.get("", response_model=TimetableListOut)
async def get_timetables(db: AsyncSession = Depends(get_db), actor: Actor = Depends(viewer)):
    return await list_timetables_with_creators(db)


# --- GET SINGLE TIMETABLE + CELLS ---
@router.get("/{id}", response_model=TimetableDetail)
async def get_timetable(
    id: UUID,
    department: Optional[Department] = Query(default=None),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(viewer),
):
    timetable = await _get_timetable(db, id)
    creator = await db.get(User, timetable.created_by)

    query = select(TimetableCell).where(TimetableCell.timetable_id == id)
    if department is not None:
        query = query.where(TimetableCell.department == department)
    result = await db.execute(query)
    cells = sorted(result.scalars().all(), key=slot_sort_key(timetable.days))

    return TimetableDetail(
        timetable=timetable_out(timetable, creator),
        cells=[CellOut.model_validate(cell) for cell in cells],
    )


# --- UPDATE CELL (CELL-LEVEL RBAC) ---
@router.put("/cell/{cell_id}", response_model=CellUpdateResponse)
async def update_cell(
    cell_id: UUID,
    payload: CellUpdate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    ensure_can_edit_cells(actor)

    cell = await db.get(TimetableCell, cell_id)
    if not cell:
        raise NotFoundError("Cell not found")

    try:
        state = apply_cell_edit(
            actor, CellState.from_row(cell), subject=payload.subject, department=payload.department
        )
    except AuthorizationError as exc:
        logger.warning("Cell %s edit denied for %s: %s", cell_id, actor.id, exc.message)
        raise

    cell.subject = state.subject
    cell.department = state.department
    cell.editable_by_role = state.editable_by_role
    cell.history = state.history_dicts()
    await db.commit()
    await db.refresh(cell)

    logger.info("Cell %s (%s P%s) updated by %s", cell.id, cell.day, cell.period, actor.id)
    return CellUpdateResponse(data=CellOut.model_validate(cell))


# --- DELETE TIMETABLE ---
@router.delete("/{id}", response_model=MessageOut)
async def delete_timetable(
    id: UUID,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """
    Creator or super admin only. Cells go first, then the timetable, in one
    transaction.
    """
    timetable = await _get_timetable(db, id)
    ensure_can_delete_timetable(actor, timetable.created_by)

    try:
        await db.execute(delete(TimetableCell).where(TimetableCell.timetable_id == id))
        await db.delete(timetable)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Cascade delete of timetable %s failed", id)
        raise DataIntegrityError(f"Failed to delete timetable: {exc}")

    logger.info("Timetable %s deleted by %s", id, actor.id)
    return MessageOut(message="Timetable deleted successfully")
