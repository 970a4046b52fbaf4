from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Callable, Optional

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.config import settings
from models.exceptions import (
    AuthenticationException,
    InsufficientPermissionsException,
)
from repositories.database import get_db
from repositories.user_repository import UserRepository

bearer_scheme = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_user_token(user: db_models.User) -> str:
    """Issue a bearer token carrying the user's id and email."""
    return create_access_token(data={"sub": str(user.id), "email": user.email})


def decode_access_token(token: str) -> schemas.TokenData:
    """
    Verify a bearer token's signature and expiry.

    Raises:
        AuthenticationException: If the token is invalid, expired or malformed.
    """
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except jwt.exceptions.ExpiredSignatureError:
        raise AuthenticationException("Session expired. Please log in again.")
    except jwt.exceptions.InvalidTokenError:
        raise AuthenticationException("Could not validate credentials")

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        raise AuthenticationException("Could not validate credentials")
    return schemas.TokenData(user_id=user_id)


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    return get_password_hash("citicare-unknown-account")


def authenticate_user(db: Session, email: str, password: str) -> db_models.User | None:
    user = UserRepository(db).get_by_email(email)
    if not user:
        # Same bcrypt cost as a real check so timing does not reveal the email
        verify_password(password, _dummy_password_hash())
        return None
    if not verify_password(password, str(user.hashed_password)):
        return None
    return user


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> db_models.User:
    """
    Get the current authenticated user from the bearer token.

    Role and department are read from the database on every request, never
    from the token.

    Raises:
        AuthenticationException: If the token is missing, invalid, expired, or
            the user no longer exists.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationException("Not authenticated")

    token_data = decode_access_token(credentials.credentials)
    user = UserRepository(db).get_by_id(token_data.user_id)  # type: ignore[arg-type]
    if user is None:
        raise AuthenticationException("Could not validate credentials")
    return user


def require_roles(
    *roles: db_models.UserRole,
) -> Callable[..., db_models.User]:
    """
    Build a dependency that only lets the given roles through.

    Usage:
        admin: db_models.User = Depends(require_roles(UserRole.ADMIN))

    Raises:
        InsufficientPermissionsException: If the user's role is not allowed.
    """
    allowed = frozenset(roles)

    async def dependency(
        current_user: db_models.User = Depends(get_current_user),
    ) -> db_models.User:
        if current_user.role not in allowed:
            raise InsufficientPermissionsException("Not enough permissions")
        return current_user

    return dependency  # type: ignore[return-value]


get_admin_user = require_roles(db_models.UserRole.ADMIN)

get_staff_or_admin_user = require_roles(
    db_models.UserRole.ADMIN,
    db_models.UserRole.DEPARTMENT_HEAD,
    db_models.UserRole.OFFICER,
)
