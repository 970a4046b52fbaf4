"""
User Service

Administrator management of accounts and each user's own profile.
"""

from typing import List, Optional

from fastapi import UploadFile
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.auth import get_password_hash, verify_password
from models.config import settings
from models.exceptions import (
    AuthenticationException,
    BusinessRuleException,
    UserAlreadyExistsException,
    UserNotFoundException,
    ValidationException,
)
from repositories.department_repository import DepartmentRepository
from repositories.user_repository import UserRepository
from services.auth_service import check_password, normalize_email
from services.upload_service import UploadService


class UserService:
    @staticmethod
    def to_schema(user: db_models.User) -> schemas.User:
        """User in API shape, with the department name resolved."""
        data = schemas.User.model_validate(user)
        data.department_name = user.department.name if user.department else None
        return data

    @staticmethod
    def get_user_or_404(db: Session, user_id: int) -> db_models.User:
        user = UserRepository(db).get_by_id(user_id)
        if user is None:
            raise UserNotFoundException(f"User with ID {user_id} not found")
        return user

    @staticmethod
    def _check_role_department(
        db: Session, role: db_models.UserRole, department_id: Optional[int]
    ) -> Optional[int]:
        """
        Validate a role/department pairing and return the department to store.

        Officers and department heads need an existing department; admins and
        citizens are stored without one.

        Raises:
            ValidationException: If a staff role lacks a valid department
        """
        if role not in db_models.STAFF_ROLES:
            return None
        if department_id is None:
            raise ValidationException(f"A department is required for role '{role.value}'")
        if not DepartmentRepository(db).exists(department_id):
            raise ValidationException(f"Department {department_id} does not exist")
        return department_id

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    @staticmethod
    def list_users(db: Session) -> List[schemas.User]:
        return [UserService.to_schema(u) for u in UserRepository(db).get_all_users()]

    @staticmethod
    def create_user(db: Session, user_data: schemas.AdminUserCreate) -> schemas.User:
        """
        Create an account with any role.

        Raises:
            UserAlreadyExistsException: If the email is taken
            ValidationException: Weak password or bad role/department pairing
        """
        check_password(user_data.password)
        department_id = UserService._check_role_department(
            db, user_data.role, user_data.department_id
        )

        email = normalize_email(user_data.email)
        user_repo = UserRepository(db)
        if user_repo.email_exists(email):
            raise UserAlreadyExistsException()

        user = db_models.User(
            email=email,
            hashed_password=get_password_hash(user_data.password),
            full_name=user_data.full_name,
            phone=user_data.phone or None,
            role=user_data.role,
            department_id=department_id,
        )
        try:
            user = user_repo.create(user)
        except IntegrityError:
            user_repo.rollback()
            raise UserAlreadyExistsException()

        logger.info(f"Created {user.role.value} account {user.id}")
        return UserService.to_schema(user)

    @staticmethod
    def update_user(
        db: Session, user_id: int, update: schemas.AdminUserUpdate
    ) -> schemas.User:
        """
        Change a user's role, department, name or phone.

        Raises:
            UserNotFoundException: If the user does not exist
            ValidationException: Bad role/department pairing
        """
        user_repo = UserRepository(db)
        user = UserService.get_user_or_404(db, user_id)
        changes = update.model_dump(exclude_unset=True)

        role = changes.get("role") or user.role
        if "role" in changes or "department_id" in changes:
            department_id = changes.get("department_id", user.department_id)
            user.department_id = UserService._check_role_department(
                db, role, department_id
            )
            user.role = role

        if changes.get("full_name"):
            user.full_name = changes["full_name"].strip()
        if "phone" in changes:
            user.phone = changes["phone"] or None

        user = user_repo.update(user)
        logger.info(f"Updated account {user.id}: {', '.join(sorted(changes))}")
        return UserService.to_schema(user)

    @staticmethod
    def delete_user(db: Session, acting_user: db_models.User, user_id: int) -> None:
        """
        Delete an account. Complaints and comments remain, detached from it.

        Raises:
            BusinessRuleException: If an admin tries to delete themselves
            UserNotFoundException: If the user does not exist
        """
        if acting_user.id == user_id:
            raise BusinessRuleException("You cannot delete your own account")

        user_repo = UserRepository(db)
        user = UserService.get_user_or_404(db, user_id)
        avatar_url = user.avatar_url

        user_repo.detach_references(user_id)
        user_repo.delete(user)
        if avatar_url:
            UploadService.discard([avatar_url])
        logger.info(f"Account {user_id} deleted by admin {acting_user.id}")

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    @staticmethod
    def update_profile(
        db: Session, user: db_models.User, update: schemas.ProfileUpdate
    ) -> schemas.User:
        """Edit the caller's own name, phone and notification preferences."""
        changes = update.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if field == "phone":
                user.phone = value or None
            elif value is not None:
                setattr(user, field, value)
        user = UserRepository(db).update(user)
        return UserService.to_schema(user)

    @staticmethod
    def change_password(
        db: Session, user: db_models.User, passwords: schemas.PasswordChange
    ) -> None:
        """
        Replace the caller's password after verifying the current one.

        Raises:
            AuthenticationException: If the current password is wrong
            ValidationException: If the new password is too weak
        """
        if not verify_password(passwords.current_password, user.hashed_password):
            raise AuthenticationException("Current password is incorrect")
        check_password(passwords.new_password)

        user.hashed_password = get_password_hash(passwords.new_password)
        UserRepository(db).update(user)
        logger.info(f"Password changed for account {user.id}")

    @staticmethod
    def upload_avatar(
        db: Session, user: db_models.User, file: UploadFile
    ) -> schemas.AvatarUploadResponse:
        """
        Store a new avatar and remove the previous one.

        Raises:
            InvalidImageException: If the file is not an acceptable image
        """
        image = UploadService.validate_image(file, settings.MAX_AVATAR_SIZE)
        avatar_url = UploadService.store(image, "avatars")

        previous = user.avatar_url
        user.avatar_url = avatar_url
        UserRepository(db).update(user)
        if previous:
            UploadService.discard([previous])

        return schemas.AvatarUploadResponse(
            message="Avatar uploaded successfully", avatar_url=avatar_url
        )
