from datetime import datetime
from typing import Dict, Mapping, Sequence

from .frequency import CUSTOM_FREQUENCY, FREQUENCY_TIMES, parse_time
from .exceptions import ReminderValidationError

REQUIRED_MESSAGE = "{} is required"


def validate_prescription_form(form: Mapping[str, str], custom_times: Sequence[str] = ()) -> Dict[str, str]:
    """
    Check the prescription form before any reminders are generated.

    Args:
        form: medicine_name, dosage, frequency, duration, start_date, phone_number
        custom_times: 'HH:MM' strings entered for the custom frequency

    Returns:
        Field name to error message; empty when the form can be submitted
    """
    errors = {}

    def value(key):
        return str(form.get(key) or "").strip()

    if not value("medicine_name"):
        errors["medicine_name"] = REQUIRED_MESSAGE.format("Medicine name")

    if not value("dosage"):
        errors["dosage"] = REQUIRED_MESSAGE.format("Dosage")

    frequency = value("frequency")
    if not frequency:
        errors["frequency"] = REQUIRED_MESSAGE.format("Frequency")
    elif frequency == CUSTOM_FREQUENCY:
        if not custom_times:
            errors["frequency"] = "At least one time must be set"
        else:
            for t in custom_times:
                try:
                    parse_time(t)
                except ReminderValidationError as e:
                    errors["frequency"] = str(e)
                    break
    elif frequency not in FREQUENCY_TIMES:
        errors["frequency"] = f"Unknown frequency '{frequency}'"

    duration = value("duration")
    if not duration:
        errors["duration"] = REQUIRED_MESSAGE.format("Duration")
    elif not duration.isdecimal():
        errors["duration"] = "Duration must be a number"
    elif int(duration) <= 0:
        errors["duration"] = "Duration must be at least one day"

    start_date = value("start_date")
    if not start_date:
        errors["start_date"] = REQUIRED_MESSAGE.format("Start date")
    else:
        try:
            datetime.strptime(start_date, "%Y-%m-%d")
        except ValueError:
            errors["start_date"] = "Start date must be yyyy-mm-dd"

    if not value("phone_number"):
        errors["phone_number"] = REQUIRED_MESSAGE.format("Phone number")

    return errors
