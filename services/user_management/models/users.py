# services/user_management/models/users.py
from sqlalchemy import Column, String, Enum, DateTime, Boolean, Index, Uuid
from sqlalchemy.sql import func
from shared.db import Base
from services.user_management.core.roles import Department, UserRole
import uuid


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(50), unique=True, nullable=False)  # login handle chosen at registration
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.PENDING)
    department = Column(Enum(Department, name="department"), nullable=False, default=Department.NONE)
    is_approved = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_user_approval_state", "is_approved", "is_active", "role"),  # dashboard listings
        Index("idx_user_role_department", "role", "department"),
        Index("idx_user_deleted_created", "is_deleted", "created_at"),
    )
