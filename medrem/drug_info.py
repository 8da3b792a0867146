import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

import requests

from .config import DrugInfoConfig
from .exceptions import DrugLookupError

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

NOT_AVAILABLE = "Not available"


@dataclass(frozen=True)
class DrugInfo:
    """Label information for one medicine"""
    name: str
    found: bool = False
    indications_and_usage: str = NOT_AVAILABLE
    adverse_reactions: str = NOT_AVAILABLE
    dosage_and_administration: str = NOT_AVAILABLE


def _label_field(record: dict, key: str) -> str:
    # openFDA returns label sections as lists of paragraphs
    value = record.get(key)
    if isinstance(value, list):
        value = "\n\n".join(str(v) for v in value if v)
    if not value:
        return NOT_AVAILABLE
    return str(value).strip() or NOT_AVAILABLE


class OpenFDAClient:
    """
    openFDA drug label API client
    """

    def __init__(self, config: DrugInfoConfig = None):
        self.config = config or DrugInfoConfig()
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': 'Medicine-Reminder/1.0',
            'Accept': 'application/json'
        })

    def _make_request(self, endpoint: str, params: dict = None) -> Optional[dict]:
        url = f"{self.config.base_url}/{endpoint}"

        try:
            response = self.session.get(url, params=params, timeout=self.config.timeout)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.RequestException as e:
            logger.error(f"openFDA request failed: {e}")
            return None
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse openFDA response: {e}")
            return None

    def fetch_label(self, medicine_name: str) -> Optional[dict]:
        """
        First drug label whose indications mention the medicine
        """
        if not medicine_name or not medicine_name.strip():
            return None

        data = self._make_request(
            "label.json",
            {"search": f"indications_and_usage:{medicine_name.strip()}", "limit": 1},
        )

        results = (data or {}).get('results') or []
        if not results:
            logger.warning(f"No drug label found for: {medicine_name}")
            return None

        return results[0]

    def get_drug_info(self, medicine_name: str) -> DrugInfo:
        try:
            record = self.fetch_label(medicine_name)
        except Exception as e:
            logger.error(f"Error getting drug info for '{medicine_name}': {e}")
            record = None

        if not record:
            return DrugInfo(name=medicine_name)

        logger.info(f"Found drug label for '{medicine_name}'")
        return DrugInfo(
            name=medicine_name,
            found=True,
            indications_and_usage=_label_field(record, 'indications_and_usage'),
            adverse_reactions=_label_field(record, 'adverse_reactions'),
            dosage_and_administration=_label_field(record, 'dosage_and_administration'),
        )


# Convenience functions for easy use
@lru_cache(maxsize=256)
def _cached_drug_info(medicine_name: str) -> DrugInfo:
    # Misses raise so lru_cache only keeps labels that were found
    info = OpenFDAClient().get_drug_info(medicine_name)
    if not info.found:
        raise DrugLookupError(f"No drug label for {medicine_name}")
    return info


def get_drug_info(medicine_name: str) -> DrugInfo:
    """Get label information for a medicine"""
    try:
        return _cached_drug_info(medicine_name)
    except DrugLookupError:
        return DrugInfo(name=medicine_name)
