"""
Analytics Service

Dashboard aggregates over the complaints a user is allowed to see.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.time_utils import (
    as_utc,
    month_abbreviation,
    start_of_month,
    trailing_months,
    utc_now,
)
from repositories.complaint_repository import ComplaintRepository
from services import complaint_policy

MONTHLY_WINDOW = 6


class AnalyticsService:
    @staticmethod
    def get_status_counts(db: Session, user: db_models.User) -> schemas.ComplaintStats:
        """
        Count the user's visible complaints per status.

        Returns:
            Totals with every status present, zero when no rows match
        """
        counts = ComplaintRepository(db).count_by_status(
            complaint_policy.scope_for(user)
        )
        return schemas.ComplaintStats(
            total=sum(counts.values()),
            **{status.value: counts.get(status.value, 0) for status in db_models.ComplaintStatus},
        )

    @staticmethod
    def get_monthly_counts(
        db: Session, user: db_models.User, now: Optional[datetime] = None
    ) -> List[schemas.MonthlyCount]:
        """
        Complaints created per calendar month over the trailing six months.

        Buckets are keyed by (year, month), so the same month in different
        years never merges.

        Args:
            db: Database session
            user: Requesting user (scopes the counts)
            now: Reference instant, defaults to the current time

        Returns:
            Exactly six entries, oldest month first, ending with the current month
        """
        now = as_utc(now or utc_now())
        months = trailing_months(now, MONTHLY_WINDOW)
        buckets = {key: 0 for key in months}

        since = start_of_month(*months[0])
        created = ComplaintRepository(db).get_created_since(
            complaint_policy.scope_for(user), since.replace(tzinfo=None)
        )
        for created_at in created:
            created_at = as_utc(created_at)
            key = (created_at.year, created_at.month)
            if key in buckets:
                buckets[key] += 1

        return [
            schemas.MonthlyCount(
                month=month_abbreviation(month), year=year, complaints=buckets[(year, month)]
            )
            for year, month in months
        ]
