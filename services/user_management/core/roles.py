# services/user_management/core/roles.py
"""
Roles and departments.

The stored form of a role is the `UserRole` string enum. Everything that
decides *what a role may do* works on the `Role` variants instead, so no
caller ever has to parse "ADMIN_" prefixes:

    Role = SuperAdmin | Viewer | Pending | Admin(department)

Every variant exposes `.department`; it is `Department.NONE` for all but
`Admin`, which makes the role/department co-constraint hold by construction.
"""
import enum
from dataclasses import dataclass
from typing import Union


class Department(str, enum.Enum):
    NONE = "NONE"
    CS = "CS"
    ECE = "ECE"
    IT = "IT"
    MNC = "MNC"
    ML = "ML"


class UserRole(str, enum.Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN_CS = "ADMIN_CS"
    ADMIN_ECE = "ADMIN_ECE"
    ADMIN_IT = "ADMIN_IT"
    ADMIN_MNC = "ADMIN_MNC"
    ADMIN_ML = "ADMIN_ML"
    USER = "USER"
    PENDING = "PENDING"


ALL_ROLES = "ALL"

ADMIN_ROLES = {
    Department.CS: UserRole.ADMIN_CS,
    Department.ECE: UserRole.ADMIN_ECE,
    Department.IT: UserRole.ADMIN_IT,
    Department.MNC: UserRole.ADMIN_MNC,
    Department.ML: UserRole.ADMIN_ML,
}
_ADMIN_DEPARTMENTS = {role: department for department, role in ADMIN_ROLES.items()}


@dataclass(frozen=True)
class SuperAdmin:
    department = Department.NONE


@dataclass(frozen=True)
class Viewer:
    """The read-only USER role."""

    department = Department.NONE


@dataclass(frozen=True)
class Pending:
    department = Department.NONE


@dataclass(frozen=True)
class Admin:
    department: Department

    def __post_init__(self):
        if Department(self.department) is Department.NONE:
            raise ValueError("An admin role needs a department")
        object.__setattr__(self, "department", Department(self.department))


Role = Union[SuperAdmin, Viewer, Pending, Admin]


def parse_role(name) -> Role:
    """Turn a stored role name (or `UserRole`) into its variant."""
    role = UserRole(name)
    if role is UserRole.SUPER_ADMIN:
        return SuperAdmin()
    if role is UserRole.USER:
        return Viewer()
    if role is UserRole.PENDING:
        return Pending()
    return Admin(_ADMIN_DEPARTMENTS[role])


def role_name(role: Role) -> UserRole:
    if isinstance(role, Admin):
        return ADMIN_ROLES[role.department]
    if isinstance(role, SuperAdmin):
        return UserRole.SUPER_ADMIN
    if isinstance(role, Viewer):
        return UserRole.USER
    if isinstance(role, Pending):
        return UserRole.PENDING
    raise TypeError(f"Not a role: {role!r}")


def editable_by_role(department) -> str:
    """Who may edit a cell owned by `department`: "ALL" or one admin role."""
    department = Department(department)
    if department is Department.NONE:
        return ALL_ROLES
    return ADMIN_ROLES[department].value
