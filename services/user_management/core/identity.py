# services/user_management/core/identity.py
"""Invariants of the user record, applied explicitly by the write path."""
from datetime import datetime, timezone

from services.user_management.core.roles import Role, SuperAdmin, parse_role, role_name
from shared.errors import AuthorizationError, ValidationError

USER_ID_MAX_LENGTH = 50
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 6


def clean_registration(user_id, name, email, password) -> dict:
    user_id = str(user_id or "").strip()
    name = (name or "").strip()
    email = (email or "").strip().lower()
    password = password or ""

    errors = {}
    if not user_id:
        errors["user_id"] = "User ID is required"
    elif len(user_id) > USER_ID_MAX_LENGTH:
        errors["user_id"] = f"User ID cannot exceed {USER_ID_MAX_LENGTH} characters"
    if not name:
        errors["name"] = "Name is required"
    elif len(name) > NAME_MAX_LENGTH:
        errors["name"] = f"Name cannot exceed {NAME_MAX_LENGTH} characters"
    if not email:
        errors["email"] = "Email is required"
    if len(password) < PASSWORD_MIN_LENGTH:
        errors["password"] = f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"

    if errors:
        raise ValidationError("Please provide all required fields", errors=errors)
    return {"user_id": user_id, "name": name, "email": email, "password": password}


def user_role(user) -> Role:
    return parse_role(user.role)


def apply_role(user, role: Role):
    """Set role and the department it implies."""
    user.role = role_name(role)
    user.department = role.department
    return user


def normalize_user(user):
    """
    Re-derive `department` from `role`.

    SUPER_ADMIN, USER and PENDING always end up with NONE, ADMIN_X with X,
    whatever the department field held before.
    """
    return apply_role(user, user_role(user))


def soft_delete(user, now=None):
    if isinstance(user_role(user), SuperAdmin):
        raise AuthorizationError("Cannot delete super admin")
    user.is_deleted = True
    user.deleted_at = now or datetime.now(timezone.utc)
    user.is_active = False
    return user
