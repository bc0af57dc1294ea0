# services/timetable_management/models/cells.py
from sqlalchemy import Column, String, Integer, DateTime, Enum, ForeignKey, UniqueConstraint, Index, Uuid
from sqlalchemy.sql import func
from shared.db import Base
from services.user_management.core.roles import ALL_ROLES, Department
from services.timetable_management.models.timetables import JSONList
import uuid


class TimetableCell(Base):
    __tablename__ = "timetable_cells"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    timetable_id = Column(Uuid(as_uuid=True), ForeignKey("timetables.id", ondelete="CASCADE"), nullable=False)
    day = Column(String(16), nullable=False)
    period = Column(Integer, nullable=False)
    subject = Column(String(200), nullable=False, default="")
    department = Column(Enum(Department, name="department"), nullable=False, default=Department.NONE)
    editable_by_role = Column(String(16), nullable=False, default=ALL_ROLES)
    history = Column(JSONList, nullable=False, default=list)  # newest first, at most 2 entries
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("timetable_id", "day", "period", name="uq_cell_slot"),
        Index("ix_cell_timetable", "timetable_id"),
        Index("ix_cell_department", "department"),
    )
