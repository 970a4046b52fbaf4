"""
Database models using SQLAlchemy 2.0 style with Mapped type hints.

The complaint is the aggregate root: its images and comments are owned
children removed together with it. Taxonomy rows (departments, zones, wards,
areas) are referenced by id and never cascade.
"""

import enum
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repositories.database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    DEPARTMENT_HEAD = "department_head"
    OFFICER = "officer"
    CITIZEN = "citizen"


# Roles that act on behalf of a department
STAFF_ROLES = frozenset({UserRole.OFFICER, UserRole.DEPARTMENT_HEAD})


class ComplaintStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    RESOLVED = "resolved"
    REJECTED = "rejected"
    CLOSED = "closed"


class PriorityLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class CostStatus(str, enum.Enum):
    """State of the estimate-submit-approve cycle."""

    PENDING = "pending"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class AcceptanceDecision(str, enum.Enum):
    """Whether the routed department took the complaint on."""

    UNDECIDED = "undecided"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class ImagePhase(str, enum.Enum):
    """What an attached photo documents."""

    BEFORE = "before"
    AFTER = "after"
    GENERAL = "general"


class ComplaintSortOrder(str, enum.Enum):
    """Complaint list orderings."""

    DATE = "date"  # newest first
    PRIORITY = "priority"  # urgent first, then newest
    AREA = "area"  # ward, area, then newest


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


class Department(Base):
    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    members: Mapped[List["User"]] = relationship("User", back_populates="department")


class Zone(Base):
    __tablename__ = "zones"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)

    wards: Mapped[List["Ward"]] = relationship(
        "Ward", back_populates="zone", order_by="Ward.name"
    )


class Ward(Base):
    __tablename__ = "wards"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    zone_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("zones.id"), nullable=False, index=True
    )

    zone: Mapped["Zone"] = relationship("Zone", back_populates="wards")
    areas: Mapped[List["Area"]] = relationship(
        "Area", back_populates="ward", order_by="Area.name"
    )


class Area(Base):
    __tablename__ = "areas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    ward_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("wards.id"), nullable=False, index=True
    )

    ward: Mapped["Ward"] = relationship("Ward", back_populates="areas")


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    full_name: Mapped[str] = mapped_column(String(120), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole), default=UserRole.CITIZEN, nullable=False
    )
    department_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("departments.id"), nullable=True, index=True
    )

    # Notification preferences
    notification_email: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    notification_push: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    notification_status_updates: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    notification_comments: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    department: Mapped[Optional["Department"]] = relationship(
        "Department", back_populates="members"
    )


class ComplaintCounter(Base):
    """Single-row sequence backing complaint numbers."""

    __tablename__ = "complaint_counters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    seq: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class Complaint(Base):
    __tablename__ = "complaints"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    complaint_number: Mapped[str] = mapped_column(
        String(20), unique=True, index=True, nullable=False
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    status: Mapped[ComplaintStatus] = mapped_column(
        Enum(ComplaintStatus), default=ComplaintStatus.PENDING, nullable=False
    )
    priority: Mapped[PriorityLevel] = mapped_column(
        Enum(PriorityLevel), default=PriorityLevel.MEDIUM, nullable=False
    )

    # Routing
    department_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("departments.id"), nullable=True, index=True
    )
    assigned_to: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    zone_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("zones.id"), nullable=True
    )
    ward_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("wards.id"), nullable=True
    )
    area_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("areas.id"), nullable=True
    )
    address: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Department acceptance
    acceptance: Mapped[AcceptanceDecision] = mapped_column(
        Enum(AcceptanceDecision),
        default=AcceptanceDecision.UNDECIDED,
        nullable=False,
    )
    accepted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Cost approval
    cost_estimated_amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2), nullable=True
    )
    cost_materials: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cost_labor: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cost_status: Mapped[CostStatus] = mapped_column(
        Enum(CostStatus), default=CostStatus.PENDING, nullable=False
    )
    cost_submitted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True
    )
    cost_approved_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )

    # Completion
    completion_remarks: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    reporter: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=lambda: [Complaint.user_id]
    )
    assignee: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=lambda: [Complaint.assigned_to]
    )
    department: Mapped[Optional["Department"]] = relationship("Department")
    zone: Mapped[Optional["Zone"]] = relationship("Zone")
    ward: Mapped[Optional["Ward"]] = relationship("Ward")
    area: Mapped[Optional["Area"]] = relationship("Area")
    images: Mapped[List["ComplaintImage"]] = relationship(
        "ComplaintImage",
        back_populates="complaint",
        cascade="all, delete-orphan",
        order_by="ComplaintImage.id",
    )
    comments: Mapped[List["ComplaintComment"]] = relationship(
        "ComplaintComment",
        back_populates="complaint",
        cascade="all, delete-orphan",
        order_by="ComplaintComment.id",
    )

    __table_args__ = (
        Index("ix_complaints_department_created", "department_id", "created_at"),
        Index("ix_complaints_user_created", "user_id", "created_at"),
    )

    @property
    def accepted_by_department(self) -> Optional[bool]:
        """Nullable boolean view of `acceptance` used by API clients."""
        if self.acceptance == AcceptanceDecision.ACCEPTED:
            return True
        if self.acceptance == AcceptanceDecision.REJECTED:
            return False
        return None


class ComplaintImage(Base):
    __tablename__ = "complaint_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    complaint_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("complaints.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url: Mapped[str] = mapped_column(String, nullable=False)
    caption: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    phase: Mapped[ImagePhase] = mapped_column(
        Enum(ImagePhase), default=ImagePhase.GENERAL, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    complaint: Mapped["Complaint"] = relationship("Complaint", back_populates="images")


class ComplaintComment(Base):
    __tablename__ = "complaint_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    complaint_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("complaints.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_internal: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    complaint: Mapped["Complaint"] = relationship(
        "Complaint", back_populates="comments"
    )
    author: Mapped[Optional["User"]] = relationship("User")


class SystemSetting(Base):
    __tablename__ = "system_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    value: Mapped[str] = mapped_column(String, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )


class Document(Base):
    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    file_url: Mapped[str] = mapped_column(String, nullable=False)
    file_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    file_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    uploaded_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    department_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("departments.id"), nullable=True
    )
    ward_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("wards.id"), nullable=True
    )
    created_by: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=True
    )
    budget: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    progress: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    status: Mapped[str] = mapped_column(String(30), default="planned", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    department: Mapped[Optional["Department"]] = relationship("Department")
    ward: Mapped[Optional["Ward"]] = relationship("Ward")
