from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_db
from services import DepartmentService, LocationService

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get("/zones", response_model=List[schemas.Zone])
def get_zones(
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    return LocationService.get_zones(db)


@router.get("/wards", response_model=List[schemas.Ward])
def get_wards(
    zone_id: Optional[int] = Query(None),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    """Wards, optionally only those of one zone."""
    return LocationService.get_wards(db, zone_id)


@router.get("/areas", response_model=List[schemas.Area])
def get_areas(
    ward_id: Optional[int] = Query(None),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    """Areas, optionally only those of one ward."""
    return LocationService.get_areas(db, ward_id)


@router.get("/departments", response_model=List[schemas.Department])
def get_departments(
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    """Departments for routing pickers; open to every signed-in user."""
    return DepartmentService.get_all_departments(db)
