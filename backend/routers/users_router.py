"""User administration endpoints (admin only)."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_db
from services import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[schemas.User])
def list_users(
    current_user: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> List[schemas.User]:
    """All accounts, newest first, with department names."""
    return UserService.list_users(db)


@router.get("/{user_id}", response_model=schemas.User)
def get_user(
    user_id: int,
    current_user: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> schemas.User:
    return UserService.to_schema(UserService.get_user_or_404(db, user_id))


@router.post("", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def create_user(
    user: schemas.AdminUserCreate,
    current_user: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> schemas.User:
    """Create an account with any role; staff roles require a department."""
    return UserService.create_user(db, user)


@router.patch("/{user_id}", response_model=schemas.User)
def update_user(
    user_id: int,
    update: schemas.AdminUserUpdate,
    current_user: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> schemas.User:
    """Change role, department, name or phone."""
    return UserService.update_user(db, user_id, update)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    current_user: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> None:
    """Delete an account. Its complaints and comments are kept, unattributed."""
    UserService.delete_user(db, current_user, user_id)
