import json
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import requests

from .config import RelayConfig

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryResult:
    success: bool
    sid: Optional[str] = None
    error: Optional[str] = None


def reminder_template_variables(medicine: str, time: str) -> Dict[str, str]:
    """Slots of the registered reminder template: 1 = medicine, 2 = time"""
    return {"1": medicine, "2": time}


class WhatsAppClient:
    """
    Client for the local relay that forwards templated WhatsApp messages
    """

    def __init__(self, config: RelayConfig = None, session: requests.Session = None):
        self.config = config or RelayConfig()
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': 'Medicine-Reminder/1.0',
            'Content-Type': 'application/json'
        })

    @property
    def endpoint(self) -> str:
        return f"{self.config.url.rstrip('/')}/send-whatsapp"

    def send_message(self, to: str, template_variables: Dict[str, str]) -> DeliveryResult:
        """
        Send one templated message through the relay.

        Never raises; failures come back as ``DeliveryResult(success=False)``.
        """
        try:
            response = self.session.post(
                self.endpoint,
                json={"to": to, "templateVariables": template_variables},
                timeout=self.config.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"WhatsApp relay request failed: {e}")
            return DeliveryResult(success=False, error=str(e))

        try:
            data = response.json()
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse relay response (HTTP {response.status_code}): {e}")
            return DeliveryResult(success=False, error=f"HTTP {response.status_code}")

        if not isinstance(data, dict):
            logger.error(f"Unexpected relay response (HTTP {response.status_code}): {data!r}")
            return DeliveryResult(success=False, error=f"HTTP {response.status_code}")

        if data.get("success"):
            logger.info(f"WhatsApp message sent: {data.get('sid')}")
            return DeliveryResult(success=True, sid=data.get("sid"))

        error = data.get("error") or f"HTTP {response.status_code}"
        logger.error(f"Failed to send WhatsApp message: {error}")
        return DeliveryResult(success=False, error=error)

    def send_reminder(self, to: str, medicine: str, time: str) -> DeliveryResult:
        return self.send_message(to, reminder_template_variables(medicine, time))
