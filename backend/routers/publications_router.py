"""Read-only listings: public documents and municipal projects."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_db
from services import PublicationService

documents_router = APIRouter(prefix="/documents", tags=["documents"])
projects_router = APIRouter(prefix="/projects", tags=["projects"])


@documents_router.get("", response_model=List[schemas.Document])
def list_documents(
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    """Documents, newest first."""
    return PublicationService.list_documents(db)


@projects_router.get("", response_model=List[schemas.Project])
def list_projects(
    current_user: db_models.User = Depends(auth.get_current_user),
    db: Session = Depends(get_db),
):
    """Projects, newest first, with department and ward names."""
    return PublicationService.list_projects(db)
