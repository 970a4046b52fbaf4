"""
Authentication Service

Registration and login. Both return a bearer token with a user summary.
"""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from authentication.auth import (
    authenticate_user,
    create_user_token,
    get_password_hash,
)
from helpers.password_validation import validate_password
from models.exceptions import (
    InvalidCredentialsException,
    UserAlreadyExistsException,
    ValidationException,
)
from repositories.user_repository import UserRepository


def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_password(password: str) -> None:
    """
    Raises:
        ValidationException: If the password does not meet the requirements
    """
    is_valid, errors = validate_password(password)
    if not is_valid:
        raise ValidationException("; ".join(errors))


class AuthService:
    """Service for authentication business logic."""

    @staticmethod
    def token_for(user: db_models.User) -> schemas.Token:
        # nosec B106: "bearer" is OAuth2 token type, not a password
        return schemas.Token(
            access_token=create_user_token(user),
            token_type="bearer",  # nosec B106
            user=schemas.UserSummary.model_validate(user),
        )

    @staticmethod
    def register(db: Session, user_data: schemas.UserCreate) -> schemas.Token:
        """
        Register a citizen account and sign it in.

        Args:
            db: Database session
            user_data: Email, password, full name and optional phone

        Returns:
            Token with the new user's summary

        Raises:
            UserAlreadyExistsException: If the email is already registered
            ValidationException: If the password is too weak
        """
        check_password(user_data.password)

        email = normalize_email(user_data.email)
        user_repo = UserRepository(db)
        if user_repo.email_exists(email):
            raise UserAlreadyExistsException()

        user = db_models.User(
            email=email,
            hashed_password=get_password_hash(user_data.password),
            full_name=user_data.full_name,
            phone=user_data.phone or None,
            role=db_models.UserRole.CITIZEN,
        )
        try:
            user = user_repo.create(user)
        except IntegrityError:
            user_repo.rollback()
            raise UserAlreadyExistsException()

        logger.info(f"Registered citizen account {user.id}")
        return AuthService.token_for(user)

    @staticmethod
    def login(db: Session, email: str, password: str) -> schemas.Token:
        """
        Authenticate a user and create an access token.

        Unknown email and wrong password produce the same error.

        Raises:
            InvalidCredentialsException: If email or password is incorrect
        """
        user = authenticate_user(db, normalize_email(email), password)
        if not user:
            logger.warning("Failed login attempt")
            raise InvalidCredentialsException("Invalid email or password")
        return AuthService.token_for(user)
