# services/user_management/core/policy.py
"""
Access decisions.

Every function here is pure: it looks at the acting user's role and
approval/active flags and either answers yes/no (`can_*`) or raises
`AuthorizationError` with the reason (`ensure_*`).
"""
from dataclasses import dataclass
from typing import Any

from services.user_management.core.roles import (
    Admin,
    Department,
    Pending,
    Role,
    SuperAdmin,
    Viewer,
    parse_role,
)
from shared.errors import AuthorizationError


@dataclass(frozen=True)
class Actor:
    id: Any
    name: str
    role: Role
    is_approved: bool
    is_active: bool

    @property
    def department(self) -> Department:
        return self.role.department

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(
            id=user.id,
            name=user.name,
            role=parse_role(user.role),
            is_approved=bool(user.is_approved),
            is_active=bool(user.is_active),
        )


def is_super_admin(actor: Actor) -> bool:
    return isinstance(actor.role, SuperAdmin)


def ensure_may_authenticate(actor: Actor):
    # Super admins skip the approval gate, never the active gate.
    if not actor.is_active:
        raise AuthorizationError("Your account has been disabled. Contact administrator.")
    if not actor.is_approved and not is_super_admin(actor):
        raise AuthorizationError("Your account is awaiting approval", awaiting_approval=True)


def ensure_super_admin(actor: Actor):
    if not is_super_admin(actor):
        raise AuthorizationError("You are not authorized to perform this action")


def can_view_timetables(actor: Actor) -> bool:
    return isinstance(actor.role, (SuperAdmin, Admin, Viewer))


def ensure_can_view_timetables(actor: Actor):
    if not can_view_timetables(actor):
        raise AuthorizationError("Not authorized to view this resource")


def can_edit_cells(actor: Actor) -> bool:
    return isinstance(actor.role, Admin) and actor.is_approved and actor.is_active


def ensure_can_edit_cells(actor: Actor):
    if isinstance(actor.role, SuperAdmin):
        raise AuthorizationError("Super admin cannot edit timetable cells")
    if isinstance(actor.role, Viewer):
        raise AuthorizationError("Read-only users cannot edit timetable cells")
    if isinstance(actor.role, Pending) or not actor.is_approved:
        raise AuthorizationError("Your account is awaiting approval", awaiting_approval=True)
    if not actor.is_active:
        raise AuthorizationError("Your account has been disabled. Contact administrator.")


def can_create_timetable(actor: Actor) -> bool:
    return isinstance(actor.role, Admin)


def ensure_can_create_timetable(actor: Actor):
    if not can_create_timetable(actor):
        raise AuthorizationError("Only department admins can create timetables")


def can_delete_timetable(actor: Actor, created_by) -> bool:
    return is_super_admin(actor) or str(actor.id) == str(created_by)


def ensure_can_delete_timetable(actor: Actor, created_by):
    if not can_delete_timetable(actor, created_by):
        raise AuthorizationError("Not authorized to delete this timetable")


def permissions(actor: Actor) -> dict:
    return {
        "can_view_timetable": can_view_timetables(actor),
        "can_edit_cell": can_edit_cells(actor),
        "is_super_admin": is_super_admin(actor),
    }
