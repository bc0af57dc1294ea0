# services/timetable_management/core/cells.py
"""
Cell ownership and the bounded edit trail.

A cell's department is its owner: NONE means any department admin may
claim it, anything else locks it to that department's admin. `apply_cell_edit`
is the only way a cell's content changes; it returns the new state and
leaves persisting it to the caller.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional, Tuple

from services.user_management.core.policy import Actor, ensure_can_edit_cells
from services.user_management.core.roles import Department, editable_by_role
from shared.errors import AuthorizationError, ValidationError

HISTORY_LIMIT = 2
SUBJECT_MAX_LENGTH = 200


@dataclass(frozen=True)
class HistoryEntry:
    previous_value: str
    edited_by: str
    edited_by_name: str
    timestamp: datetime

    def to_dict(self) -> dict:
        return {
            "previous_value": self.previous_value,
            "edited_by": self.edited_by,
            "edited_by_name": self.edited_by_name,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        timestamp = data["timestamp"]
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        return cls(
            previous_value=data.get("previous_value") or "",
            edited_by=str(data["edited_by"]),
            edited_by_name=data["edited_by_name"],
            timestamp=timestamp,
        )


@dataclass(frozen=True)
class CellState:
    subject: str = ""
    department: Department = Department.NONE
    history: Tuple[HistoryEntry, ...] = field(default_factory=tuple)

    @property
    def editable_by_role(self) -> str:
        return editable_by_role(self.department)

    @classmethod
    def from_row(cls, cell) -> "CellState":
        return cls(
            subject=cell.subject or "",
            department=Department(cell.department),
            history=tuple(HistoryEntry.from_dict(entry) for entry in (cell.history or [])),
        )

    def history_dicts(self) -> list:
        return [entry.to_dict() for entry in self.history]


def check_ownership(actor: Actor, current: Department, requested: Optional[Department]):
    """
    Raise unless `actor` may touch a cell owned by `current` and move it to
    `requested` (None when the department is left as is).
    """
    current = Department(current)
    if current is not Department.NONE and current is not actor.department:
        raise AuthorizationError(f"Only {current.value} admin can edit this cell")

    if (
        current is Department.NONE
        and requested is not None
        and Department(requested) not in (Department.NONE, actor.department)
    ):
        raise AuthorizationError("You can only assign cells to your own department")


def push_history(history: Tuple[HistoryEntry, ...], entry: HistoryEntry) -> Tuple[HistoryEntry, ...]:
    """Newest first, never more than HISTORY_LIMIT entries."""
    return ((entry,) + tuple(history))[:HISTORY_LIMIT]


def clean_subject(subject: str) -> str:
    subject = subject.strip()
    if len(subject) > SUBJECT_MAX_LENGTH:
        raise ValidationError(
            f"Subject cannot exceed {SUBJECT_MAX_LENGTH} characters",
            errors={"subject": f"Subject cannot exceed {SUBJECT_MAX_LENGTH} characters"},
        )
    return subject


def apply_cell_edit(
    actor: Actor,
    cell: CellState,
    subject: Optional[str] = None,
    department: Optional[Department] = None,
    now: Optional[datetime] = None,
) -> CellState:
    """
    Apply an edit request to `cell` on behalf of `actor`.

    `subject` / `department` of None mean "leave unchanged". Any subject that
    differs from the stored one, compared before trimming, pushes the old
    subject (blank included) onto the history; department moves are not
    recorded.
    """
    ensure_can_edit_cells(actor)
    if department is not None:
        department = Department(department)
    check_ownership(actor, cell.department, department)

    updated = cell
    if subject is not None:
        new_subject = clean_subject(subject)
        if subject != cell.subject:
            entry = HistoryEntry(
                previous_value=cell.subject or "",
                edited_by=str(actor.id),
                edited_by_name=actor.name.strip(),
                timestamp=now or datetime.now(timezone.utc),
            )
            updated = replace(updated, history=push_history(updated.history, entry))
        updated = replace(updated, subject=new_subject)

    if department is not None and department is not Department(cell.department):
        updated = replace(updated, department=department)

    return updated
