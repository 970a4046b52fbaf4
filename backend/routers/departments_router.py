from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_db
from services import DepartmentService

router = APIRouter(prefix="/departments", tags=["departments"])


@router.get("", response_model=List[schemas.Department])
def get_departments(
    current_user: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
):
    """Get all departments, alphabetically."""
    return DepartmentService.get_all_departments(db)


@router.get("/{department_id}", response_model=schemas.Department)
def get_department(
    department_id: int,
    current_user: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
):
    return DepartmentService.get_department_by_id(db, department_id)


@router.post(
    "", response_model=schemas.Department, status_code=status.HTTP_201_CREATED
)
def create_department(
    department: schemas.DepartmentCreate,
    current_user: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
):
    """Create a department. Name and code must be unique; codes are upper-cased."""
    return DepartmentService.create_department(db, department)


@router.patch("/{department_id}", response_model=schemas.Department)
def update_department(
    department_id: int,
    department: schemas.DepartmentUpdate,
    current_user: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
):
    return DepartmentService.update_department(db, department_id, department)


@router.delete("/{department_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_department(
    department_id: int,
    current_user: db_models.User = Depends(auth.get_admin_user),
    db: Session = Depends(get_db),
) -> None:
    """Delete a department; complaints and staff routed to it are detached."""
    DepartmentService.delete_department(db, department_id)
