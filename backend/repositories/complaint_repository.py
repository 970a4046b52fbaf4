"""
Complaint repository for database operations.

Every read that lists or aggregates complaints takes a `ComplaintScope`, the
row filter derived from the caller's role. The same scope can be checked
against a single loaded complaint with `ComplaintScope.matches`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import case, false, func, update
from sqlalchemy.orm import Query, Session, joinedload, selectinload

import repositories.db_models as db_models
from repositories.db_models import ComplaintSortOrder
from .base import BaseRepository

# Lower rank sorts first
_PRIORITY_RANK = case(
    (db_models.Complaint.priority == db_models.PriorityLevel.URGENT, 0),
    (db_models.Complaint.priority == db_models.PriorityLevel.HIGH, 1),
    (db_models.Complaint.priority == db_models.PriorityLevel.MEDIUM, 2),
    else_=3,
)

_COUNTER_ID = 1


@dataclass(frozen=True)
class ComplaintScope:
    """
    The set of complaints a caller may see.

    Exactly one of the shapes holds:
    - no restriction (both ids None, `empty` False)
    - complaints filed by `reporter_id`
    - complaints routed to `department_id`
    - nothing at all (`empty` True)
    """

    reporter_id: Optional[int] = None
    department_id: Optional[int] = None
    empty: bool = False

    @classmethod
    def everything(cls) -> "ComplaintScope":
        return cls()

    @classmethod
    def reported_by(cls, user_id: int) -> "ComplaintScope":
        return cls(reporter_id=user_id)

    @classmethod
    def routed_to(cls, department_id: int) -> "ComplaintScope":
        return cls(department_id=department_id)

    @classmethod
    def nothing(cls) -> "ComplaintScope":
        return cls(empty=True)

    def matches(self, complaint: db_models.Complaint) -> bool:
        """Check a single complaint against the scope."""
        if self.empty:
            return False
        if self.reporter_id is not None:
            return complaint.user_id == self.reporter_id
        if self.department_id is not None:
            return complaint.department_id == self.department_id
        return True

    def apply(self, query: Query) -> Query:
        """Restrict a query over complaints to the scope."""
        if self.empty:
            return query.filter(false())
        if self.reporter_id is not None:
            return query.filter(db_models.Complaint.user_id == self.reporter_id)
        if self.department_id is not None:
            return query.filter(
                db_models.Complaint.department_id == self.department_id
            )
        return query


class ComplaintRepository(BaseRepository[db_models.Complaint]):
    """Repository for Complaint entity database operations."""

    def __init__(self, db: Session):
        """
        Initialize complaint repository.

        Args:
            db: Database session
        """
        super().__init__(db_models.Complaint, db)

    def _with_details(self) -> Query:
        return self.db.query(db_models.Complaint).options(
            joinedload(db_models.Complaint.department),
            joinedload(db_models.Complaint.zone),
            joinedload(db_models.Complaint.ward),
            joinedload(db_models.Complaint.area),
            joinedload(db_models.Complaint.reporter),
            joinedload(db_models.Complaint.assignee),
            selectinload(db_models.Complaint.images),
        )

    def get_with_details(self, complaint_id: int) -> Optional[db_models.Complaint]:
        """
        Get a complaint with its taxonomy, people and images loaded.

        Args:
            complaint_id: Complaint ID

        Returns:
            Complaint if found, None otherwise
        """
        return (
            self._with_details()
            .filter(db_models.Complaint.id == complaint_id)
            .first()
        )

    def list_complaints(
        self,
        scope: ComplaintScope,
        sort: ComplaintSortOrder = ComplaintSortOrder.DATE,
        status: Optional[db_models.ComplaintStatus] = None,
        category: Optional[str] = None,
    ) -> List[db_models.Complaint]:
        """
        List complaints visible within a scope.

        Args:
            scope: Row filter derived from the caller
            sort: date (newest first), priority (urgent first) or area
                (ward, then area, then newest)
            status: Optional status filter
            category: Optional category filter

        Returns:
            Complaints with details loaded
        """
        query = scope.apply(self._with_details())
        if status is not None:
            query = query.filter(db_models.Complaint.status == status)
        if category:
            query = query.filter(db_models.Complaint.category == category)

        newest = (db_models.Complaint.created_at.desc(), db_models.Complaint.id.desc())
        if sort == ComplaintSortOrder.PRIORITY:
            query = query.order_by(_PRIORITY_RANK, *newest)
        elif sort == ComplaintSortOrder.AREA:
            query = query.order_by(
                db_models.Complaint.ward_id,
                db_models.Complaint.area_id,
                *newest,
            )
        else:
            query = query.order_by(*newest)
        return query.all()

    def count_by_status(self, scope: ComplaintScope) -> Dict[str, int]:
        """
        Count complaints per status within a scope.

        Returns:
            Mapping of status value to count (statuses with no rows omitted)
        """
        query = self.db.query(
            db_models.Complaint.status, func.count(db_models.Complaint.id)
        )
        rows = scope.apply(query).group_by(db_models.Complaint.status).all()
        return {status.value: count for status, count in rows}

    def get_created_since(
        self, scope: ComplaintScope, since: datetime
    ) -> List[datetime]:
        """Creation timestamps of complaints in scope created at or after `since`."""
        query = self.db.query(db_models.Complaint.created_at).filter(
            db_models.Complaint.created_at >= since
        )
        return [row[0] for row in scope.apply(query).all()]

    def next_sequence(self) -> int:
        """
        Atomically advance the global complaint counter.

        The increment is a single UPDATE, so concurrent writers never read the
        same value. Runs inside the caller's transaction and does not commit.

        Returns:
            The new counter value
        """
        result = self.db.execute(
            update(db_models.ComplaintCounter)
            .where(db_models.ComplaintCounter.id == _COUNTER_ID)
            .values(seq=db_models.ComplaintCounter.seq + 1)
        )
        if result.rowcount == 0:
            self.db.add(db_models.ComplaintCounter(id=_COUNTER_ID, seq=1))
            self.db.flush()
            return 1
        seq = (
            self.db.query(db_models.ComplaintCounter.seq)
            .filter(db_models.ComplaintCounter.id == _COUNTER_ID)
            .scalar()
        )
        return int(seq)


class ComplaintCommentRepository(BaseRepository[db_models.ComplaintComment]):
    """Repository for complaint comment threads."""

    def __init__(self, db: Session):
        super().__init__(db_models.ComplaintComment, db)

    def get_for_complaint(
        self, complaint_id: int
    ) -> List[db_models.ComplaintComment]:
        """
        Get a complaint's comments oldest first, with authors loaded.

        Args:
            complaint_id: Complaint ID

        Returns:
            Comments in creation order
        """
        return (
            self.db.query(db_models.ComplaintComment)
            .options(joinedload(db_models.ComplaintComment.author))
            .filter(db_models.ComplaintComment.complaint_id == complaint_id)
            .order_by(
                db_models.ComplaintComment.created_at,
                db_models.ComplaintComment.id,
            )
            .all()
        )
