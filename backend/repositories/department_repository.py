"""
Department repository for database operations.
"""

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class DepartmentRepository(BaseRepository[db_models.Department]):
    """Repository for Department entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Department, db)

    def get_all_by_name(self) -> List[db_models.Department]:
        """Get all departments ordered alphabetically."""
        return (
            self.db.query(db_models.Department)
            .order_by(db_models.Department.name)
            .all()
        )

    def find_conflict(
        self,
        name: Optional[str],
        code: Optional[str],
        exclude_id: Optional[int] = None,
    ) -> Optional[db_models.Department]:
        """
        Find another department already using this name or code.

        Args:
            name: Candidate name (ignored when None)
            code: Candidate code (ignored when None)
            exclude_id: Department being updated, excluded from the search

        Returns:
            The conflicting department, or None
        """
        conditions = []
        if name is not None:
            conditions.append(db_models.Department.name == name)
        if code is not None:
            conditions.append(db_models.Department.code == code)
        if not conditions:
            return None

        query = self.db.query(db_models.Department).filter(or_(*conditions))
        if exclude_id is not None:
            query = query.filter(db_models.Department.id != exclude_id)
        return query.first()

    def detach_references(self, department_id: int) -> None:
        """
        Null out complaint, user and project references to a department.

        Does not commit.
        """
        for model in (db_models.Complaint, db_models.User, db_models.Project):
            self.db.query(model).filter(model.department_id == department_id).update(
                {model.department_id: None}, synchronize_session=False
            )
