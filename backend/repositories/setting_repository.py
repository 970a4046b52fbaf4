"""
System setting repository for database operations.
"""

from typing import Dict, Optional

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class SettingRepository(BaseRepository[db_models.SystemSetting]):
    """Key/value store for global toggles."""

    def __init__(self, db: Session):
        super().__init__(db_models.SystemSetting, db)

    def get_by_key(self, key: str) -> Optional[db_models.SystemSetting]:
        return (
            self.db.query(db_models.SystemSetting)
            .filter(db_models.SystemSetting.key == key)
            .first()
        )

    def get_values(self) -> Dict[str, str]:
        """All stored settings as a plain mapping."""
        return {
            row.key: row.value for row in self.db.query(db_models.SystemSetting).all()
        }

    def upsert(self, key: str, value: str) -> db_models.SystemSetting:
        """
        Insert or overwrite a setting. Does not commit.

        Args:
            key: Setting key
            value: String value to store

        Returns:
            The stored row
        """
        setting = self.get_by_key(key)
        if setting is None:
            setting = db_models.SystemSetting(key=key, value=value)
            self.db.add(setting)
        else:
            setting.value = value
        return setting
