"""
Department Service

Administrator CRUD over municipal departments.
"""

from typing import List

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import (
    DepartmentAlreadyExistsException,
    DepartmentNotFoundException,
)
from repositories.department_repository import DepartmentRepository


class DepartmentService:
    @staticmethod
    def get_all_departments(db: Session) -> List[db_models.Department]:
        return DepartmentRepository(db).get_all_by_name()

    @staticmethod
    def get_department_by_id(db: Session, department_id: int) -> db_models.Department:
        """
        Raises:
            DepartmentNotFoundException: If the department does not exist
        """
        department = DepartmentRepository(db).get_by_id(department_id)
        if department is None:
            raise DepartmentNotFoundException(
                f"Department with ID {department_id} not found"
            )
        return department

    @staticmethod
    def create_department(
        db: Session, department: schemas.DepartmentCreate
    ) -> db_models.Department:
        """
        Create a department.

        Raises:
            DepartmentAlreadyExistsException: If the name or code is taken
        """
        repo = DepartmentRepository(db)
        data = department.model_dump()
        data["code"] = data["code"].strip().upper()
        data["name"] = data["name"].strip()

        if repo.find_conflict(data["name"], data["code"]):
            raise DepartmentAlreadyExistsException()

        try:
            db_department = repo.create(db_models.Department(**data))
        except IntegrityError:
            repo.rollback()
            raise DepartmentAlreadyExistsException()

        logger.info(f"Department {db_department.code} created")
        return db_department

    @staticmethod
    def update_department(
        db: Session, department_id: int, update: schemas.DepartmentUpdate
    ) -> db_models.Department:
        """
        Update a department's name, code or description.

        Raises:
            DepartmentNotFoundException: If the department does not exist
            DepartmentAlreadyExistsException: If the new name or code is taken
        """
        repo = DepartmentRepository(db)
        department = DepartmentService.get_department_by_id(db, department_id)
        changes = update.model_dump(exclude_unset=True)
        if changes.get("code") is not None:
            changes["code"] = changes["code"].strip().upper()
        if changes.get("name") is not None:
            changes["name"] = changes["name"].strip()

        if repo.find_conflict(
            changes.get("name"), changes.get("code"), exclude_id=department_id
        ):
            raise DepartmentAlreadyExistsException()

        for field, value in changes.items():
            if value is not None or field == "description":
                setattr(department, field, value)

        try:
            return repo.update(department)
        except IntegrityError:
            repo.rollback()
            raise DepartmentAlreadyExistsException()

    @staticmethod
    def delete_department(db: Session, department_id: int) -> None:
        """
        Delete a department. Complaints, staff and projects routed to it keep
        existing with no department.

        Raises:
            DepartmentNotFoundException: If the department does not exist
        """
        repo = DepartmentRepository(db)
        department = DepartmentService.get_department_by_id(db, department_id)
        repo.detach_references(department_id)
        repo.delete(department)
        logger.info(f"Department {department_id} deleted")
