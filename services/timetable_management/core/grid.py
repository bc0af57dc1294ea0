# services/timetable_management/core/grid.py
from typing import List, Tuple

from shared.errors import ValidationError

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
MAX_DAYS = 7
MIN_PERIODS = 1
MAX_PERIODS = 20
NAME_MAX_LENGTH = 100


def clean_timetable_definition(room_name, class_name, days, periods_per_day) -> dict:
    """Validate and trim a new timetable's room, class and grid shape."""
    errors = {}

    room_name = (room_name or "").strip()
    class_name = (class_name or "").strip()
    for field, value, label in (
        ("room_name", room_name, "Room name"),
        ("class_name", class_name, "Class name"),
    ):
        if not value:
            errors[field] = f"{label} is required"
        elif len(value) > NAME_MAX_LENGTH:
            errors[field] = f"{label} cannot exceed {NAME_MAX_LENGTH} characters"

    if not isinstance(days, (list, tuple)) or not days:
        errors["days"] = "Days must be a non-empty array"
        days = []
    else:
        days = [day.strip() if isinstance(day, str) else day for day in days]
        if len(days) > MAX_DAYS:
            errors["days"] = f"Days must be between 1 and {MAX_DAYS}"
        elif any(day not in WEEKDAYS for day in days):
            errors["days"] = "Invalid day name provided"
        elif len(set(days)) != len(days):
            errors["days"] = "Days cannot contain duplicates"

    if (
        isinstance(periods_per_day, bool)
        or not isinstance(periods_per_day, int)
        or not MIN_PERIODS <= periods_per_day <= MAX_PERIODS
    ):
        errors["periods_per_day"] = f"Periods per day must be between {MIN_PERIODS} and {MAX_PERIODS}"

    if errors:
        raise ValidationError(next(iter(errors.values())), errors=errors)

    return {
        "room_name": room_name,
        "class_name": class_name,
        "days": list(days),
        "periods_per_day": periods_per_day,
    }


def grid_slots(days: List[str], periods_per_day: int) -> List[Tuple[str, int]]:
    """Every (day, period) slot of the grid, periods numbered from 1."""
    return [(day, period) for day in days for period in range(1, periods_per_day + 1)]


def slot_sort_key(days: List[str]):
    order = {day: index for index, day in enumerate(days)}

    def key(cell):
        return order.get(cell.day, len(order)), cell.period

    return key
