"""
Settings Service

Global boolean toggles stored as "true"/"false" strings. Unknown keys are
stored like any other but never reported back.
"""

from typing import Dict

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
from repositories.setting_repository import SettingRepository

DEFAULT_SETTINGS: Dict[str, bool] = {
    key: field.default for key, field in schemas.SystemSettings.model_fields.items()
}


def encode_bool(value: bool) -> str:
    return "true" if value else "false"


class SettingsService:
    @staticmethod
    def get_settings(db: Session) -> schemas.SystemSettings:
        """Recognized toggles, falling back to defaults for unset keys."""
        stored = SettingRepository(db).get_values()
        values = {
            key: stored[key] == "true" if key in stored else default
            for key, default in DEFAULT_SETTINGS.items()
        }
        return schemas.SystemSettings(**values)

    @staticmethod
    def update_setting(db: Session, update: schemas.SettingUpdate) -> None:
        """Upsert one toggle."""
        repo = SettingRepository(db)
        repo.upsert(update.key, encode_bool(update.value))
        repo.commit()
        if update.key not in DEFAULT_SETTINGS:
            logger.warning(f"Stored unrecognized setting '{update.key}'")
        else:
            logger.info(f"Setting '{update.key}' set to {encode_bool(update.value)}")

    @staticmethod
    def seed_defaults(db: Session) -> None:
        """Insert any missing recognized setting with its default. Does not overwrite."""
        repo = SettingRepository(db)
        for key, default in DEFAULT_SETTINGS.items():
            if repo.get_by_key(key) is None:
                repo.upsert(key, encode_bool(default))
        repo.commit()
