import logging
from datetime import date, datetime, timedelta
from typing import Callable, Iterator, List, Optional, Sequence, Union
from dataclasses import dataclass, replace

from .exceptions import ReminderValidationError
from .frequency import resolve_times, format_display_time

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

REGULAR = "Regular"
DATE_FORMAT = "%Y-%m-%d"
DISPLAY_TIME_FORMAT = "%I:%M %p"


@dataclass(frozen=True)
class Reminder:
    """One scheduled dose of a medicine"""
    id: str
    medicine: str
    dosage: str
    time: str  # display time, e.g. '9:00 AM'
    date: str  # yyyy-mm-dd
    type: str = REGULAR
    taken: bool = False
    contact_number: Optional[str] = None

    def scheduled_at(self) -> datetime:
        """Absolute local date-time this dose is due"""
        return datetime.strptime(f"{self.date} {self.time}", f"{DATE_FORMAT} {DISPLAY_TIME_FORMAT}")

    def calendar_date(self) -> date:
        return datetime.strptime(self.date, DATE_FORMAT).date()


def reminder_id(medicine: str, when: datetime) -> str:
    """
    Identity of a dose: medicine name plus date and minute.

    Two doses of the same medicine at the same minute get the same id.
    """
    return f"{medicine}-{when.strftime('%Y-%m-%d-%H-%M')}"


def parse_duration(duration: Union[int, str]) -> int:
    """Number of days as a positive integer"""
    if isinstance(duration, bool):
        raise ReminderValidationError("Duration must be a number")
    try:
        days = int(str(duration).strip())
    except (TypeError, ValueError):
        raise ReminderValidationError(f"Duration must be a whole number of days, got '{duration}'")

    if days <= 0:
        raise ReminderValidationError("Duration must be at least one day")
    return days


def parse_start_date(start_date: Union[date, str]) -> date:
    if isinstance(start_date, datetime):
        return start_date.date()
    if isinstance(start_date, date):
        return start_date
    try:
        return datetime.strptime(str(start_date).strip(), DATE_FORMAT).date()
    except ValueError:
        raise ReminderValidationError(f"Start date must be yyyy-mm-dd, got '{start_date}'")


def expand_reminders(
    medicine: str,
    dosage: str,
    frequency: str,
    start_date: Union[date, str],
    duration: Union[int, str],
    custom_times: Optional[Sequence[str]] = None,
    contact_number: Optional[str] = None,
) -> List[Reminder]:
    """
    Expand a prescription into dated dose reminders

    Args:
        medicine: Medicine name, used verbatim in the reminder id
        dosage: Free-text dosage
        frequency: One of the frequency table labels, or 'custom'
        start_date: First day of the course
        duration: Number of days
        custom_times: 'HH:MM' strings; when non-empty these replace the
            frequency table lookup regardless of the label
        contact_number: WhatsApp destination stored on every reminder

    Returns:
        duration x len(times) reminders, ordered by day and then by the
        given time order
    """
    if not medicine or not medicine.strip():
        raise ReminderValidationError("Medicine name is required")
    if not dosage or not dosage.strip():
        raise ReminderValidationError("Dosage is required")

    times = resolve_times(frequency, custom_times)
    days = parse_duration(duration)
    start = datetime.combine(parse_start_date(start_date), datetime.min.time())

    reminders = []
    for day in range(days):
        current = start + timedelta(days=day)

        for reminder_time in times:
            when = current.replace(hour=reminder_time.hour, minute=reminder_time.minute)
            reminders.append(Reminder(
                id=reminder_id(medicine, when),
                medicine=medicine,
                dosage=dosage,
                time=format_display_time(reminder_time.hour, reminder_time.minute),
                date=when.strftime(DATE_FORMAT),
                contact_number=contact_number,
            ))

    logger.info(f"Expanded {medicine} into {len(reminders)} reminders over {days} days")
    return reminders


def mark_taken(reminder: Reminder) -> Reminder:
    if reminder.taken:
        return reminder
    return replace(reminder, taken=True)


class ReminderStore:
    """
    In-memory collection of every reminder created this session.

    Records are only ever appended or marked taken; nothing is deleted.
    Duplicate ids are kept as they come.
    """

    def __init__(self, reminders: Optional[Sequence[Reminder]] = None):
        self._reminders: List[Reminder] = list(reminders or [])

    def __len__(self) -> int:
        return len(self._reminders)

    def __iter__(self) -> Iterator[Reminder]:
        return iter(self.all())

    def all(self) -> List[Reminder]:
        """Snapshot of the current records in insertion order"""
        return list(self._reminders)

    def get(self, reminder_id: str) -> Optional[Reminder]:
        for reminder in self._reminders:
            if reminder.id == reminder_id:
                return reminder
        return None

    def append(self, batch: Sequence[Reminder]) -> None:
        self._reminders.extend(batch)
        logger.info(f"Stored {len(batch)} reminders ({len(self._reminders)} total)")

    def update_by_identity(
        self,
        reminder_id: str,
        transform: Callable[[Reminder], Reminder] = mark_taken,
    ) -> bool:
        """
        Replace the record(s) carrying ``reminder_id`` with a transformed copy.

        Returns False, leaving the store untouched, when the id is unknown.
        The transform may not change the id or clear ``taken``.
        """
        found = False
        updated = []
        for reminder in self._reminders:
            if reminder.id == reminder_id:
                found = True
                changed = transform(reminder)
                if changed.id != reminder.id:
                    raise ReminderValidationError(f"Update may not change reminder id {reminder.id}")
                if reminder.taken and not changed.taken:
                    raise ReminderValidationError(f"Reminder {reminder.id} is already taken")
                reminder = changed
            updated.append(reminder)

        if not found:
            logger.warning(f"No reminder with id {reminder_id} - nothing updated")
            return False

        self._reminders = updated
        return True

    def mark_taken(self, reminder_id: str) -> bool:
        """Mark a dose as taken"""
        return self.update_by_identity(reminder_id, mark_taken)
