"""
Read-side projections over the reminder store.

Every function here takes a list of reminders and returns a fresh
structure; none of them mutates or keeps what it is given.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from .reminder_system import Reminder

COMPLETED = "Completed"

REMINDER_COLUMNS = ["id", "medicine", "dosage", "date", "time", "type", "taken", "contact_number"]


@dataclass(frozen=True)
class MedicineSummary:
    name: str
    dosage: str
    total: int
    taken: int
    remaining: int
    progress: float  # percent taken, 0-100
    next_dose: str
    next_dose_id: Optional[str] = None


def today_reminders(reminders: Iterable[Reminder], today: date = None) -> List[Reminder]:
    """Reminders due on ``today`` (defaults to the current date)"""
    today = today or date.today()
    return [r for r in reminders if r.calendar_date() == today]


def start_of_week(day: date) -> date:
    """Sunday on or before ``day``"""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def shift_week(anchor: date, weeks: int) -> date:
    return anchor + timedelta(weeks=weeks)


def week_days(anchor: date) -> List[date]:
    first = start_of_week(anchor)
    return [first + timedelta(days=i) for i in range(7)]


def week_view(reminders: Iterable[Reminder], anchor: date = None) -> List[Tuple[date, List[Reminder]]]:
    """The seven days of the week containing ``anchor``, each with its reminders"""
    days = week_days(anchor or date.today())
    by_date: Dict[date, List[Reminder]] = {day: [] for day in days}

    for reminder in reminders:
        day = reminder.calendar_date()
        if day in by_date:
            by_date[day].append(reminder)

    return [(day, by_date[day]) for day in days]


def upcoming_reminders(reminders: Iterable[Reminder], today: date = None) -> List[Reminder]:
    """
    Reminders from today onwards, ordered by date.

    Only the date is compared, so doses on the same day keep the order
    they were created in.
    """
    today = today or date.today()
    upcoming = [r for r in reminders if r.calendar_date() >= today]
    return sorted(upcoming, key=lambda r: r.calendar_date())


def medicine_summaries(reminders: Iterable[Reminder]) -> List[MedicineSummary]:
    """
    Group reminders by medicine name and compute progress per medicine.

    Names are matched exactly; 'Aspirin' and 'aspirin' are separate groups.
    """
    groups: Dict[str, List[Reminder]] = {}
    for reminder in reminders:
        groups.setdefault(reminder.medicine, []).append(reminder)

    summaries = []
    for name, group in groups.items():
        total = len(group)
        taken = sum(1 for r in group if r.taken)
        next_dose = next((r for r in group if not r.taken), None)

        summaries.append(MedicineSummary(
            name=name,
            dosage=group[0].dosage if group else "N/A",
            total=total,
            taken=taken,
            remaining=total - taken,
            progress=(taken / total) * 100 if total else 0.0,
            next_dose=next_dose.time if next_dose else COMPLETED,
            next_dose_id=next_dose.id if next_dose else None,
        ))

    return summaries


def reminders_to_dataframe(reminders: Iterable[Reminder]) -> pd.DataFrame:
    """Tabular view of reminders for display and CSV export"""
    rows = [
        {
            'id': r.id,
            'medicine': r.medicine,
            'dosage': r.dosage,
            'date': r.date,
            'time': r.time,
            'type': r.type,
            'taken': r.taken,
            'contact_number': r.contact_number or '',
        }
        for r in reminders
    ]
    return pd.DataFrame(rows, columns=REMINDER_COLUMNS)
