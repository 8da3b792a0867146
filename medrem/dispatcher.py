import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .notifications import AlertPayload, LocalNotifier
from .reminder_system import Reminder
from .whatsapp import DeliveryResult, WhatsAppClient

logger = logging.getLogger(__name__)


class DeliveryChannel(Enum):
    LOCAL = "local"
    WHATSAPP = "whatsapp"


class DeliveryStatus(Enum):
    ARMED = "armed"
    SKIPPED = "skipped"
    FIRED = "fired"
    SUPPRESSED = "suppressed"
    SENT = "sent"
    FAILED = "failed"


@dataclass
class DispatchReport:
    """What one dispatch call started; nothing in here needs to be awaited"""
    armed: int = 0
    skipped: int = 0
    outbound: List[Future] = field(default_factory=list)


def alert_title(reminder: Reminder) -> str:
    return f"Time to take {reminder.medicine} {reminder.dosage}"


class DeliveryDispatcher:
    """
    Delivers each newly stored reminder through a local alert and a
    WhatsApp message.

    The two channels are independent: a failure in one never stops the
    other and never raises to the caller.
    """

    def __init__(
        self,
        notifier: LocalNotifier,
        whatsapp: WhatsAppClient,
        executor: Optional[ThreadPoolExecutor] = None,
        max_workers: int = 8,
    ):
        self.notifier = notifier
        self.whatsapp = whatsapp
        self.executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="whatsapp"
        )
        self.delivery_log: List[Dict] = []
        self._log_lock = threading.Lock()

    def dispatch(self, batch: Sequence[Reminder]) -> DispatchReport:
        """
        Arm alerts and queue outbound messages for a batch that is already
        in the store. Returns immediately.
        """
        report = DispatchReport()

        for reminder in batch:
            if self._arm(reminder):
                report.armed += 1
            else:
                report.skipped += 1

            future = self._send(reminder)
            if future is not None:
                report.outbound.append(future)

        logger.info(
            f"Dispatched {len(batch)} reminders: {report.armed} alerts armed, "
            f"{report.skipped} skipped, {len(report.outbound)} messages queued"
        )
        return report

    def _arm(self, reminder: Reminder) -> bool:
        try:
            timer = self.notifier.schedule(
                alert_title(reminder),
                reminder.scheduled_at(),
                on_fire=lambda payload, shown, rid=reminder.id: self._alert_fired(rid, payload, shown),
            )
        except Exception as e:
            logger.error(f"Could not arm alert for {reminder.id}: {e}")
            self.log_delivery(reminder.id, DeliveryChannel.LOCAL, DeliveryStatus.FAILED, str(e))
            return False

        if timer is None:
            self.log_delivery(reminder.id, DeliveryChannel.LOCAL, DeliveryStatus.SKIPPED, "time already passed")
            return False

        self.log_delivery(reminder.id, DeliveryChannel.LOCAL, DeliveryStatus.ARMED)
        return True

    def _alert_fired(self, reminder_id: str, payload: AlertPayload, shown: bool):
        status = DeliveryStatus.FIRED if shown else DeliveryStatus.SUPPRESSED
        self.log_delivery(reminder_id, DeliveryChannel.LOCAL, status, payload.title)

    def _send(self, reminder: Reminder) -> Optional[Future]:
        if not reminder.contact_number:
            logger.warning(f"No contact number on {reminder.id} - WhatsApp message not sent")
            self.log_delivery(reminder.id, DeliveryChannel.WHATSAPP, DeliveryStatus.SKIPPED, "no contact number")
            return None

        try:
            return self.executor.submit(self._deliver, reminder)
        except RuntimeError as e:
            logger.error(f"Could not queue WhatsApp message for {reminder.id}: {e}")
            self.log_delivery(reminder.id, DeliveryChannel.WHATSAPP, DeliveryStatus.FAILED, str(e))
            return None

    def _deliver(self, reminder: Reminder) -> DeliveryResult:
        try:
            result = self.whatsapp.send_reminder(reminder.contact_number, reminder.medicine, reminder.time)
        except Exception as e:
            logger.error(f"WhatsApp delivery for {reminder.id} failed: {e}")
            result = DeliveryResult(success=False, error=str(e))

        if result.success:
            self.log_delivery(reminder.id, DeliveryChannel.WHATSAPP, DeliveryStatus.SENT, result.sid)
        else:
            self.log_delivery(reminder.id, DeliveryChannel.WHATSAPP, DeliveryStatus.FAILED, result.error)
        return result

    def log_delivery(self, reminder_id: str, channel: DeliveryChannel, status: DeliveryStatus, detail: str = None):
        """Record a delivery outcome"""
        entry = {
            'reminder_id': reminder_id,
            'channel': channel.value,
            'status': status.value,
            'detail': detail,
            'timestamp': datetime.now().isoformat()
        }
        with self._log_lock:
            self.delivery_log.append(entry)

    def deliveries_for(self, reminder_id: str) -> List[Dict]:
        with self._log_lock:
            return [e for e in self.delivery_log if e['reminder_id'] == reminder_id]

    def failed_deliveries(self) -> List[Dict]:
        with self._log_lock:
            return [e for e in self.delivery_log if e['status'] == DeliveryStatus.FAILED.value]

    def shutdown(self, wait: bool = False):
        self.executor.shutdown(wait=wait)
