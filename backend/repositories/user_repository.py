"""
User repository for database operations.
"""

from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

import repositories.db_models as db_models
from .base import BaseRepository


class UserRepository(BaseRepository[db_models.User]):
    """Repository for User entity database operations."""

    def __init__(self, db: Session):
        """
        Initialize user repository.

        Args:
            db: Database session
        """
        super().__init__(db_models.User, db)

    def get_by_email(self, email: str) -> Optional[db_models.User]:
        """
        Get user by email.

        Args:
            email: User email (compared case-insensitively)

        Returns:
            User if found, None otherwise
        """
        return (
            self.db.query(db_models.User)
            .filter(db_models.User.email == email.strip().lower())
            .first()
        )

    def email_exists(self, email: str) -> bool:
        """Check if email already exists."""
        return self.get_by_email(email) is not None

    def get_all_users(self) -> List[db_models.User]:
        """
        Get all users, newest first, with their department loaded.

        Returns:
            List of users
        """
        return (
            self.db.query(db_models.User)
            .options(joinedload(db_models.User.department))
            .order_by(db_models.User.created_at.desc(), db_models.User.id.desc())
            .all()
        )

    def get_staff(self, department_id: Optional[int] = None) -> List[db_models.User]:
        """
        Get officers and department heads, optionally for one department.

        Args:
            department_id: Restrict to members of this department

        Returns:
            Staff users ordered by name
        """
        query = self.db.query(db_models.User).filter(
            db_models.User.role.in_(db_models.STAFF_ROLES)
        )
        if department_id is not None:
            query = query.filter(db_models.User.department_id == department_id)
        return query.order_by(db_models.User.full_name).all()

    def detach_references(self, user_id: int) -> None:
        """
        Null out every reference to a user that is about to be deleted.

        Complaints, comments, documents and projects outlive their author.
        Does not commit.

        Args:
            user_id: ID of the user being deleted
        """
        complaint = db_models.Complaint
        for column in (
            complaint.user_id,
            complaint.assigned_to,
            complaint.cost_approved_by,
        ):
            self.db.query(complaint).filter(column == user_id).update(
                {column: None}, synchronize_session=False
            )
        self.db.query(db_models.ComplaintComment).filter(
            db_models.ComplaintComment.user_id == user_id
        ).update({db_models.ComplaintComment.user_id: None}, synchronize_session=False)
        self.db.query(db_models.Document).filter(
            db_models.Document.uploaded_by == user_id
        ).update({db_models.Document.uploaded_by: None}, synchronize_session=False)
        self.db.query(db_models.Project).filter(
            db_models.Project.created_by == user_id
        ).update({db_models.Project.created_by: None}, synchronize_session=False)
