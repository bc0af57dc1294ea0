# services/timetable_management/models/timetables.py
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint, Index, Uuid, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from shared.db import Base
import uuid

JSONList = JSON().with_variant(JSONB, "postgresql")


class Timetable(Base):
    __tablename__ = "timetables"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    room_name = Column(String(100), nullable=False)
    class_name = Column(String(100), nullable=False)
    days = Column(JSONList, nullable=False)  # ordered weekday names
    periods_per_day = Column(Integer, nullable=False)
    created_by = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("room_name", "class_name", name="uq_timetable_room_class"),
        Index("ix_timetable_creator", "created_by", "created_at"),
    )
