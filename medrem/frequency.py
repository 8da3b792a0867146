"""
Daily dosing patterns.

Maps a frequency label to the ordered times of day a dose is due.
The ``custom`` pseudo-label is not in the table; it means the caller
supplies its own times.
"""

import re
from typing import Dict, List, NamedTuple, Sequence

from .exceptions import ReminderValidationError

CUSTOM_FREQUENCY = "custom"


class ReminderTime(NamedTuple):
    hour: int
    minute: int


FREQUENCY_TIMES: Dict[str, tuple] = {
    "once": (ReminderTime(9, 0),),
    "twice": (ReminderTime(9, 0), ReminderTime(21, 0)),
    "thrice": (ReminderTime(9, 0), ReminderTime(15, 0), ReminderTime(21, 0)),
    "four": (
        ReminderTime(9, 0),
        ReminderTime(13, 0),
        ReminderTime(17, 0),
        ReminderTime(21, 0),
    ),
}

FREQUENCY_LABELS = {
    "once": "Once daily",
    "twice": "Twice daily",
    "thrice": "Three times daily",
    "four": "Four times daily",
    CUSTOM_FREQUENCY: "Custom times",
}

_TIME_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def parse_time(value: str) -> ReminderTime:
    """Parse an ``HH:MM`` string (24-hour clock)"""
    match = _TIME_PATTERN.match(value or "")
    if not match:
        raise ReminderValidationError(f"Invalid time '{value}', expected HH:MM")

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ReminderValidationError(f"Invalid time '{value}', out of range")

    return ReminderTime(hour, minute)


def resolve_times(frequency: str, custom_times: Sequence[str] = None) -> List[ReminderTime]:
    """
    Resolve the times of day for one day of dosing.

    Explicit custom times always win over the frequency label, even when
    the label is a known one. Order is preserved as given.
    """
    if custom_times:
        return [parse_time(t) for t in custom_times]

    if frequency not in FREQUENCY_TIMES:
        raise ReminderValidationError(
            f"Unknown frequency '{frequency}' and no custom times given"
        )

    return list(FREQUENCY_TIMES[frequency])


def format_display_time(hour: int, minute: int) -> str:
    """12-hour display format, e.g. ``9:00 AM``"""
    suffix = "AM" if hour < 12 else "PM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {suffix}"
