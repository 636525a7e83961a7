"""
App settings persisted as a single JSON document in the key-value table.
Saving always replaces the whole document; there is no merge.
"""

import json
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from app.errors import InvalidRequestError
from app.models.kv_store import KeyValue

logger = logging.getLogger(__name__)

SETTINGS_KEY = "APP_SETTINGS"
CREDENTIAL_FIELDS = ("googleApiKey", "googleCxId")


class SettingsStore:
    """Get/put the APP_SETTINGS document."""

    def __init__(self, db: Session):
        self.db = db

    def get(self) -> Dict[str, Any]:
        row = self.db.query(KeyValue).filter(KeyValue.key == SETTINGS_KEY).first()
        if not row:
            return {}
        try:
            return json.loads(row.value)
        except json.JSONDecodeError:
            logger.error(f"Stored {SETTINGS_KEY} is not valid JSON, treating as empty")
            return {}

    def put(self, new_settings: Dict[str, Any]) -> None:
        """Overwrite the stored settings. Both credential fields must be strings (may be empty)."""
        if not isinstance(new_settings, dict) or any(
            not isinstance(new_settings.get(field), str) for field in CREDENTIAL_FIELDS
        ):
            raise InvalidRequestError("Invalid settings payload.")

        value = json.dumps(new_settings)
        row = self.db.query(KeyValue).filter(KeyValue.key == SETTINGS_KEY).first()
        if row:
            row.value = value
        else:
            self.db.add(KeyValue(key=SETTINGS_KEY, value=value))
        self.db.commit()
        logger.info("Settings saved")


def is_google_configured(app_settings: Dict[str, Any]) -> bool:
    return bool(app_settings.get("googleApiKey") and app_settings.get("googleCxId"))
