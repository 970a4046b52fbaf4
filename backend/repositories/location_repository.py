"""
Repositories for the Zone -> Ward -> Area hierarchy.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class ZoneRepository(BaseRepository[db_models.Zone]):
    def __init__(self, db: Session):
        super().__init__(db_models.Zone, db)

    def get_all_by_name(self) -> List[db_models.Zone]:
        return self.db.query(db_models.Zone).order_by(db_models.Zone.name).all()


class WardRepository(BaseRepository[db_models.Ward]):
    def __init__(self, db: Session):
        super().__init__(db_models.Ward, db)

    def get_by_zone(self, zone_id: Optional[int] = None) -> List[db_models.Ward]:
        """Wards ordered by name, optionally restricted to one zone."""
        query = self.db.query(db_models.Ward)
        if zone_id is not None:
            query = query.filter(db_models.Ward.zone_id == zone_id)
        return query.order_by(db_models.Ward.name).all()


class AreaRepository(BaseRepository[db_models.Area]):
    def __init__(self, db: Session):
        super().__init__(db_models.Area, db)

    def get_by_ward(self, ward_id: Optional[int] = None) -> List[db_models.Area]:
        """Areas ordered by name, optionally restricted to one ward."""
        query = self.db.query(db_models.Area)
        if ward_id is not None:
            query = query.filter(db_models.Area.ward_id == ward_id)
        return query.order_by(db_models.Area.name).all()
