"""
Location Service

Read-only lookups over the Zone -> Ward -> Area hierarchy.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from repositories.location_repository import (
    AreaRepository,
    WardRepository,
    ZoneRepository,
)


class LocationService:
    @staticmethod
    def get_zones(db: Session) -> List[db_models.Zone]:
        return ZoneRepository(db).get_all_by_name()

    @staticmethod
    def get_wards(db: Session, zone_id: Optional[int] = None) -> List[db_models.Ward]:
        return WardRepository(db).get_by_zone(zone_id)

    @staticmethod
    def get_areas(db: Session, ward_id: Optional[int] = None) -> List[db_models.Area]:
        return AreaRepository(db).get_by_ward(ward_id)
