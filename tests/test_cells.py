import itertools
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from services.timetable_management.core.cells import (
    HISTORY_LIMIT,
    CellState,
    HistoryEntry,
    apply_cell_edit,
    push_history,
)
from services.user_management.core.roles import Admin, Department, UserRole
from shared.errors import AuthorizationError, ValidationError
from tests.conftest import make_actor

CS_ADMIN = make_actor(UserRole.ADMIN_CS, id="cs-admin", name="CS Admin")
ECE_ADMIN = make_actor(UserRole.ADMIN_ECE, id="ece-admin", name="ECE Admin")
T0 = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)


def owned(department, subject="", history=()):
    return CellState(subject=subject, department=Department(department), history=tuple(history))


def expected_outcome(cell_department, role, requested):
    """Accept/reject straight from the ownership rules."""
    actor_role = make_actor(role).role
    if not isinstance(actor_role, Admin):
        return False
    mine = actor_role.department
    if cell_department is not Department.NONE and cell_department is not mine:
        return False
    if cell_department is Department.NONE and requested not in (None, Department.NONE, mine):
        return False
    return True


@pytest.mark.parametrize(
    "cell_department,role,requested",
    list(itertools.product(list(Department), list(UserRole), [None] + list(Department))),
)
def test_ownership_rules_exhaustively(cell_department, role, requested):
    actor = make_actor(role)
    cell = owned(cell_department, subject="Old")

    if expected_outcome(cell_department, role, requested):
        result = apply_cell_edit(actor, cell, subject="New", department=requested, now=T0)
        assert result.subject == "New"
        assert result.department is (requested if requested is not None else cell_department)
    else:
        with pytest.raises(AuthorizationError):
            apply_cell_edit(actor, cell, subject="New", department=requested, now=T0)


def test_claiming_an_unclaimed_cell():
    result = apply_cell_edit(CS_ADMIN, owned("NONE"), subject="Math", department=Department.CS, now=T0)
    assert result.department is Department.CS
    assert result.editable_by_role == "ADMIN_CS"
    assert result.subject == "Math"
    assert result.history == (HistoryEntry("", "cs-admin", "CS Admin", T0),)


def test_other_department_is_locked_out_with_reason():
    with pytest.raises(AuthorizationError, match="Only CS admin can edit this cell"):
        apply_cell_edit(ECE_ADMIN, owned("CS", "Math"), subject="Circuits")


def test_cannot_assign_unclaimed_cell_to_third_department():
    with pytest.raises(AuthorizationError, match="your own department"):
        apply_cell_edit(CS_ADMIN, owned("NONE"), department=Department.ML)


def test_leaving_a_cell_unclaimed():
    result = apply_cell_edit(CS_ADMIN, owned("NONE"), subject="Free study", department=Department.NONE)
    assert result.department is Department.NONE
    assert result.editable_by_role == "ALL"


def test_subject_change_records_previous_value():
    result = apply_cell_edit(CS_ADMIN, owned("CS", "Math"), subject="Physics", now=T0)
    assert result.history == (HistoryEntry("Math", "cs-admin", "CS Admin", T0),)


def test_history_keeps_two_most_recent_entries():
    cell = apply_cell_edit(CS_ADMIN, owned("NONE"), subject="Math", department=Department.CS, now=T0)
    assert [e.previous_value for e in cell.history] == [""]

    cell = apply_cell_edit(CS_ADMIN, cell, subject="Physics", now=T0 + timedelta(minutes=1))
    assert [e.previous_value for e in cell.history] == ["Math", ""]

    cell = apply_cell_edit(CS_ADMIN, cell, subject="Chemistry", now=T0 + timedelta(minutes=2))
    assert len(cell.history) == HISTORY_LIMIT
    assert [e.previous_value for e in cell.history] == ["Physics", "Math"]
    assert cell.history[0].timestamp > cell.history[1].timestamp


def test_same_subject_or_department_only_changes_leave_history_alone():
    cell = owned("CS", "Math", [HistoryEntry("Algebra", "x", "X", T0)])
    assert apply_cell_edit(CS_ADMIN, cell, subject="Math").history == cell.history

    unclaimed = owned("NONE", "Math")
    claimed = apply_cell_edit(CS_ADMIN, unclaimed, department=Department.CS)
    assert claimed.history == ()
    assert claimed.subject == "Math"


def test_padded_subject_counts_as_a_change_but_is_stored_trimmed():
    result = apply_cell_edit(CS_ADMIN, owned("CS", "Math"), subject="Math ", now=T0)
    assert result.subject == "Math"
    assert [e.previous_value for e in result.history] == ["Math"]


def test_clearing_a_subject_is_recorded():
    result = apply_cell_edit(CS_ADMIN, owned("CS", "Math"), subject="   ", now=T0)
    assert result.subject == ""
    assert result.history[0].previous_value == "Math"


def test_subject_is_trimmed_and_bounded():
    assert apply_cell_edit(CS_ADMIN, owned("CS"), subject="  Math ").subject == "Math"
    with pytest.raises(ValidationError):
        apply_cell_edit(CS_ADMIN, owned("CS"), subject="x" * 201)


def test_no_changes_requested_returns_same_state():
    cell = owned("CS", "Math")
    assert apply_cell_edit(CS_ADMIN, cell) == cell


def test_read_only_roles_are_rejected_before_ownership():
    for role in (UserRole.SUPER_ADMIN, UserRole.USER, UserRole.PENDING):
        with pytest.raises(AuthorizationError):
            apply_cell_edit(make_actor(role), owned("NONE"), subject="Math")


def test_push_history_truncates():
    entries = [HistoryEntry(str(i), "u", "U", T0) for i in range(3)]
    history = ()
    for entry in entries:
        history = push_history(history, entry)
    assert [e.previous_value for e in history] == ["2", "1"]


def test_state_round_trips_through_stored_row():
    entry = HistoryEntry("Math", "cs-admin", "CS Admin", T0)
    row = SimpleNamespace(subject="Physics", department="CS", history=[entry.to_dict()])
    state = CellState.from_row(row)
    assert state == owned("CS", "Physics", [entry])
    assert state.history_dicts() == [entry.to_dict()]
