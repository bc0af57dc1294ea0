from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from services.user_management.core.roles import Department, UserRole


class UserRegister(BaseModel):
    user_id: str
    name: str
    email: EmailStr
    password: str


class UserOut(BaseModel):
    id: UUID
    user_id: str
    name: str
    email: EmailStr
    role: UserRole
    department: Department
    is_approved: bool
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RegisterResponse(BaseModel):
    message: str
    awaiting_approval: bool = True
    user: UserOut


class Permissions(BaseModel):
    can_view_timetable: bool
    can_edit_cell: bool
    is_super_admin: bool


class CurrentUserOut(UserOut):
    permissions: Permissions


class LoginRequest(BaseModel):
    user_id: str
    password: str


class LoginResponse(BaseModel):
    message: str = "Login successful"
    access_token: str
    token_type: str = "bearer"
    user: CurrentUserOut


class ApproveRequest(BaseModel):
    role: Optional[str] = None
    department: Optional[str] = None


class UserStatusOut(BaseModel):
    message: str
    user: UserOut


class MessageOut(BaseModel):
    message: str


class UserListOut(BaseModel):
    count: int
    data: List[UserOut]


class DashboardStats(BaseModel):
    pending_requests: int
    active_users: int
    disabled_users: int
    total_timetables: int
