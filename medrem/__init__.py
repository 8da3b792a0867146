"""
Medicine Reminder - Core Modules

This package contains the reminder engine and its collaborators:
- Frequency table and reminder expansion
- In-memory reminder store
- Local alert triggers and WhatsApp delivery
- Dashboard projections (today, week, upcoming, per medicine)
- Prescription photo prefill and drug label lookup
"""

__version__ = "1.0.0"
__author__ = "Medicine Reminder Team"

# Import main functions for easy access
from .exceptions import MedremError, ReminderValidationError, OCRError
from .config import AppConfig, load_config
from .frequency import FREQUENCY_TIMES, CUSTOM_FREQUENCY, resolve_times
from .reminder_system import Reminder, ReminderStore, expand_reminders
from .notifications import NotificationPermission, LocalNotifier
from .whatsapp import WhatsAppClient, DeliveryResult
from .dispatcher import DeliveryDispatcher
from .views import (
    today_reminders,
    week_view,
    upcoming_reminders,
    medicine_summaries,
    reminders_to_dataframe,
)
from .validation import validate_prescription_form

__all__ = [
    "MedremError",
    "ReminderValidationError",
    "OCRError",
    "AppConfig",
    "load_config",
    "FREQUENCY_TIMES",
    "CUSTOM_FREQUENCY",
    "resolve_times",
    "Reminder",
    "ReminderStore",
    "expand_reminders",
    "NotificationPermission",
    "LocalNotifier",
    "WhatsAppClient",
    "DeliveryResult",
    "DeliveryDispatcher",
    "today_reminders",
    "week_view",
    "upcoming_reminders",
    "medicine_summaries",
    "reminders_to_dataframe",
    "validate_prescription_form",
]
