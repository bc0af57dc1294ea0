from pydantic import BaseModel, ConfigDict, field_validator
from typing import Any, List, Optional
from datetime import datetime
from uuid import UUID

from services.user_management.core.roles import Department, UserRole


class TimetableCreate(BaseModel):
    room_name: str
    class_name: str
    days: List[str]
    periods_per_day: Any  # range-checked by the grid rules, not coerced here


class CreatorOut(BaseModel):
    id: UUID
    name: str
    role: UserRole
    department: Department

    model_config = ConfigDict(from_attributes=True)


class TimetableOut(BaseModel):
    id: UUID
    room_name: str
    class_name: str
    days: List[str]
    periods_per_day: int
    created_by: UUID
    creator: Optional[CreatorOut] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TimetableListOut(BaseModel):
    count: int
    data: List[TimetableOut]


class HistoryEntryOut(BaseModel):
    previous_value: str
    edited_by: str
    edited_by_name: str
    timestamp: datetime


class CellOut(BaseModel):
    id: UUID
    timetable_id: UUID
    day: str
    period: int
    subject: str
    department: Department
    editable_by_role: str
    history: List[HistoryEntryOut]
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TimetableDetail(BaseModel):
    timetable: TimetableOut
    cells: List[CellOut]


class CellUpdate(BaseModel):
    subject: Optional[str] = None
    department: Optional[Department] = None

    @field_validator("department", mode="before")
    @classmethod
    def blank_department_means_unchanged(cls, value):
        if isinstance(value, str):
            return value.strip() or None
        return value


class CellUpdateResponse(BaseModel):
    message: str = "Cell updated successfully"
    data: CellOut
