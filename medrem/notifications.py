"""
Local desktop alerts for due doses.

A trigger is a daemon timer carrying an alert payload captured when it is
armed. Whether the alert is actually shown is decided when the timer fires,
by asking the permission object at that moment.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from plyer import notification

logger = logging.getLogger(__name__)

APP_NAME = "Medicine Reminder"
ALERT_BODY = "Time to take your medicine!"


class NotificationPermission:
    """
    Grant/revoke flag for showing local alerts.

    ``request()`` is meant to be called once when the app starts.
    """

    def __init__(self, granted: bool = False):
        self._granted = granted
        self._requested = False
        self._lock = threading.Lock()

    def request(self, prompt: Optional[Callable[[], bool]] = None) -> bool:
        with self._lock:
            if not self._requested:
                self._requested = True
                if prompt is not None:
                    self._granted = bool(prompt())
                else:
                    self._granted = True
            return self._granted

    def grant(self):
        with self._lock:
            self._granted = True

    def revoke(self):
        with self._lock:
            self._granted = False

    def is_granted(self) -> bool:
        with self._lock:
            return self._granted


@dataclass(frozen=True)
class AlertPayload:
    title: str
    message: str = ALERT_BODY


def desktop_notify(payload: AlertPayload):
    """Show a desktop notification through plyer"""
    notification.notify(
        title=payload.title,
        message=payload.message,
        app_name=APP_NAME,
        timeout=10,
    )


class LocalNotifier:
    """Arms delayed alerts and shows them if still permitted at fire time"""

    def __init__(
        self,
        permission: NotificationPermission,
        notify: Callable[[AlertPayload], None] = desktop_notify,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.permission = permission
        self.notify = notify
        self.clock = clock

    def schedule(
        self,
        title: str,
        when: datetime,
        on_fire: Optional[Callable[[AlertPayload, bool], None]] = None,
    ) -> Optional[threading.Timer]:
        """
        Arm an alert for ``when``.

        Returns None without arming anything when ``when`` is already in the
        past; a missed dose is never alerted late.
        """
        delay = (when - self.clock()).total_seconds()
        if delay < 0:
            logger.info(f"Skipping alert '{title}' - {when:%Y-%m-%d %H:%M} already passed")
            return None

        payload = AlertPayload(title=title)
        timer = threading.Timer(delay, self._fire, args=(payload, on_fire))
        timer.daemon = True
        timer.start()
        return timer

    def _fire(self, payload: AlertPayload, on_fire=None):
        shown = False
        if self.permission.is_granted():
            try:
                self.notify(payload)
                shown = True
            except Exception as e:
                logger.error(f"Failed to show alert '{payload.title}': {e}")
        else:
            logger.info(f"Alert '{payload.title}' suppressed - notifications not permitted")

        if on_fire is not None:
            on_fire(payload, shown)
