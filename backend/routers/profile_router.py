"""The signed-in user's own profile."""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_db
from services import UserService

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=schemas.User)
def get_profile(
    current_user: db_models.User = Depends(auth.get_current_user),
) -> schemas.User:
    return UserService.to_schema(current_user)


@router.patch("", response_model=schemas.User)
def update_profile(
    profile_update: schemas.ProfileUpdate,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.User:
    """Update name, phone and notification preferences."""
    return UserService.update_profile(db, current_user, profile_update)


@router.post("/avatar", response_model=schemas.AvatarUploadResponse)
def upload_avatar(
    file: UploadFile = File(...),
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.AvatarUploadResponse:
    """Upload a new avatar image."""
    return UserService.upload_avatar(db, current_user, file)


@router.post("/change-password", response_model=schemas.MessageResponse)
def change_password(
    password_change: schemas.PasswordChange,
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
) -> schemas.MessageResponse:
    """Change password; the current password must be supplied."""
    UserService.change_password(db, current_user, password_change)
    return schemas.MessageResponse(message="Password changed successfully")
