from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_db
from services import SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=schemas.SystemSettings)
def get_settings(
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    return SettingsService.get_settings(db)


@router.patch("", response_model=schemas.SystemSettings)
def update_setting(
    update: schemas.SettingUpdate,
    current_user: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
):
    """Set one toggle and return the resulting settings (admin only)."""
    SettingsService.update_setting(db, update)
    return SettingsService.get_settings(db)
