import os
import logging
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ReminderValidationError

logger = logging.getLogger(__name__)

DEFAULT_RELAY_URL = "http://localhost:3000"
DEFAULT_OPENFDA_URL = "https://api.fda.gov/drug"


@dataclass(frozen=True)
class RelayConfig:
    """Where the app posts outbound WhatsApp requests"""
    url: str = DEFAULT_RELAY_URL
    timeout: float = 10.0
    port: int = 3000


@dataclass(frozen=True)
class TwilioConfig:
    """Credentials and template identity used by the relay"""
    account_sid: Optional[str] = None
    auth_token: Optional[str] = None
    whatsapp_from: str = "whatsapp:+14155238886"
    content_sid: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.content_sid)


@dataclass(frozen=True)
class DrugInfoConfig:
    base_url: str = DEFAULT_OPENFDA_URL
    timeout: float = 10.0


@dataclass(frozen=True)
class AppConfig:
    relay: RelayConfig = field(default_factory=RelayConfig)
    twilio: TwilioConfig = field(default_factory=TwilioConfig)
    drug_info: DrugInfoConfig = field(default_factory=DrugInfoConfig)


def _number(name: str, default, cast=float):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ReminderValidationError(f"{name} must be numeric, got '{raw}'")


def load_config(dotenv: bool = True) -> AppConfig:
    """
    Build the application configuration from the environment.

    A ``.env`` file in the working directory is loaded first when present.
    """
    if dotenv:
        load_dotenv()

    relay = RelayConfig(
        url=os.getenv("MEDREM_RELAY_URL", DEFAULT_RELAY_URL).rstrip("/"),
        timeout=_number("MEDREM_RELAY_TIMEOUT", 10.0),
        port=_number("MEDREM_RELAY_PORT", 3000, int),
    )

    twilio = TwilioConfig(
        account_sid=os.getenv("TWILIO_ACCOUNT_SID"),
        auth_token=os.getenv("TWILIO_AUTH_TOKEN"),
        whatsapp_from=os.getenv("TWILIO_WHATSAPP_FROM", TwilioConfig.whatsapp_from),
        content_sid=os.getenv("TWILIO_CONTENT_SID"),
    )

    drug_info = DrugInfoConfig(
        base_url=os.getenv("OPENFDA_BASE_URL", DEFAULT_OPENFDA_URL).rstrip("/"),
    )

    if not twilio.is_configured:
        logger.warning("Twilio credentials not configured - relay will reject sends")

    return AppConfig(relay=relay, twilio=twilio, drug_info=drug_info)
