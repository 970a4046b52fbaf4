"""Authentication router endpoints."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from helpers.rate_limiter import LOGIN_RATE_LIMIT, REGISTER_RATE_LIMIT, limiter
from repositories.database import get_db
from services import AuthService, UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register", response_model=schemas.Token, status_code=status.HTTP_201_CREATED
)
@limiter.limit(REGISTER_RATE_LIMIT)
def register(
    request: Request, user: schemas.UserCreate, db: Session = Depends(get_db)
) -> schemas.Token:
    """
    Register a citizen account.

    Returns a bearer token so the new user is signed in immediately.
    """
    return AuthService.register(db, user)


@router.post("/login", response_model=schemas.Token)
@limiter.limit(LOGIN_RATE_LIMIT)
def login(
    request: Request, credentials: schemas.UserLogin, db: Session = Depends(get_db)
) -> schemas.Token:
    """Exchange email and password for a bearer token."""
    return AuthService.login(db, credentials.email, credentials.password)


@router.get("/me", response_model=schemas.User)
async def read_users_me(
    current_user: db_models.User = Depends(auth.get_current_user),
) -> schemas.User:
    """Get the signed-in user, including role and department."""
    return UserService.to_schema(current_user)
