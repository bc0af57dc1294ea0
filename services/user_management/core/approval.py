# services/user_management/core/approval.py
"""
PENDING -> USER | ADMIN_<dept>, once; then is_active may be flipped freely.

The functions mutate the user record they are given and leave persisting it
to the caller. Super admin accounts are out of reach of all three.
"""
from typing import Optional

from services.user_management.core.identity import apply_role, user_role
from services.user_management.core.policy import Actor, ensure_super_admin
from services.user_management.core.roles import (
    ADMIN_ROLES,
    Pending,
    Role,
    SuperAdmin,
    UserRole,
    Viewer,
    parse_role,
)
from shared.errors import AuthorizationError, InvalidTransitionError, ValidationError

APPROVABLE_ROLES = [UserRole.USER] + list(ADMIN_ROLES.values())


def resolve_approval_role(role: Optional[str], department: Optional[str] = None) -> Role:
    """
    Validate the (role, department) pair requested for an approval.

    A USER approval ignores the department; an ADMIN_X approval requires
    exactly X. Mismatches are rejected rather than corrected.
    """
    valid = ", ".join(r.value for r in APPROVABLE_ROLES)
    if role not in {r.value for r in APPROVABLE_ROLES}:
        raise ValidationError(
            f"Invalid role. Must be one of: {valid}",
            errors={"role": f"Must be one of: {valid}"},
        )

    resolved = parse_role(role)
    if isinstance(resolved, Viewer):
        return resolved

    expected = resolved.department.value
    if department != expected:
        raise ValidationError(
            f"Department must be {expected} for role {role}",
            errors={"department": f"Must be {expected}"},
        )
    return resolved


def _ensure_not_super_admin(user, message):
    if isinstance(user_role(user), SuperAdmin):
        raise AuthorizationError(message)


def approve(actor: Actor, user, role: Optional[str], department: Optional[str] = None):
    ensure_super_admin(actor)
    new_role = resolve_approval_role(role, department)
    _ensure_not_super_admin(user, "Cannot modify super admin")
    if user.is_approved or not isinstance(user_role(user), Pending):
        raise InvalidTransitionError("User is already approved")

    apply_role(user, new_role)
    user.is_approved = True
    user.is_active = True
    return user


def reject(actor: Actor, user):
    """Check that `user` may be rejected; the caller deletes the record."""
    ensure_super_admin(actor)
    _ensure_not_super_admin(user, "Cannot reject super admin")
    if user.is_approved:
        raise InvalidTransitionError("Cannot reject approved users. Use toggle status instead")
    return user


def toggle_active(actor: Actor, user):
    ensure_super_admin(actor)
    _ensure_not_super_admin(user, "Cannot modify super admin status")
    if not user.is_approved:
        raise InvalidTransitionError("Cannot toggle status of unapproved user")
    user.is_active = not user.is_active
    return user

