from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from repositories.db_models import (
    ComplaintSortOrder,
    ComplaintStatus,
    CostStatus,
    ImagePhase,
    PriorityLevel,
    UserRole,
)


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


# User Schemas
class UserBase(BaseModel):
    email: EmailStr
    full_name: str


class UserCreate(UserBase):
    password: str
    phone: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, v: str) -> str:
        return _strip_required(v)


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserSummary(BaseModel):
    id: int
    email: EmailStr
    full_name: str
    role: UserRole
    department_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class User(UserSummary):
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    department_name: Optional[str] = None
    notification_email: bool = True
    notification_push: bool = False
    notification_status_updates: bool = True
    notification_comments: bool = True
    created_at: datetime


class Token(BaseModel):
    access_token: str
    token_type: str
    user: UserSummary


class TokenData(BaseModel):
    user_id: Optional[int] = None


# Admin user management
class AdminUserCreate(UserCreate):
    role: UserRole = UserRole.CITIZEN
    department_id: Optional[int] = None


class AdminUserUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[UserRole] = None
    department_id: Optional[int] = None


class OfficerOption(BaseModel):
    id: int
    full_name: str
    email: EmailStr
    role: UserRole
    department_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


# Profile
class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    notification_email: Optional[bool] = None
    notification_push: Optional[bool] = None
    notification_status_updates: Optional[bool] = None
    notification_comments: Optional[bool] = None

    @field_validator("full_name")
    @classmethod
    def full_name_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _strip_required(v)


class PasswordChange(BaseModel):
    current_password: str
    new_password: str


class AvatarUploadResponse(BaseModel):
    message: str
    avatar_url: str


class MessageResponse(BaseModel):
    message: str


# Department & location schemas
class DepartmentBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    code: str = Field(..., min_length=1, max_length=20)
    description: Optional[str] = None


class DepartmentCreate(DepartmentBase):
    @field_validator("name", "code")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _strip_required(v)


class DepartmentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    code: Optional[str] = Field(None, min_length=1, max_length=20)
    description: Optional[str] = None

    @field_validator("name", "code")
    @classmethod
    def not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _strip_required(v)


class Department(DepartmentBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


class Zone(BaseModel):
    id: int
    name: str
    code: str

    model_config = ConfigDict(from_attributes=True)


class Ward(Zone):
    zone_id: int


class Area(Zone):
    ward_id: int


# Complaint schemas
class ComplaintImage(BaseModel):
    id: int
    url: str
    caption: Optional[str] = None
    type: ImagePhase = Field(validation_alias="phase")

    model_config = ConfigDict(from_attributes=True)


class ComplaintCreate(BaseModel):
    """Fields of a new complaint; images travel alongside as multipart files."""

    title: str = Field(..., max_length=200)
    description: str
    category: str = Field(..., max_length=50)
    address: Optional[str] = None
    department_id: Optional[int] = None
    zone_id: Optional[int] = None
    ward_id: Optional[int] = None
    area_id: Optional[int] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator("title", "description", "category")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _strip_required(v)


class ComplaintUpdate(BaseModel):
    """
    Lifecycle changes accepted by PATCH /complaints/{id}.

    Only fields present in the request body are applied; several
    transitions may be combined in one request.
    """

    status: Optional[ComplaintStatus] = None
    priority: Optional[PriorityLevel] = None
    department_id: Optional[int] = None
    assigned_to: Optional[int] = None
    accepted_by_department: Optional[bool] = None
    cost_estimated_amount: Optional[Decimal] = Field(None, ge=0)
    cost_materials: Optional[str] = None
    cost_labor: Optional[str] = None
    cost_status: Optional[CostStatus] = None
    completion_remarks: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class Complaint(BaseModel):
    id: int
    complaint_number: str
    user_id: Optional[int] = None
    title: str
    description: str
    category: str
    status: ComplaintStatus
    priority: PriorityLevel
    department_id: Optional[int] = None
    assigned_to: Optional[int] = None
    zone_id: Optional[int] = None
    ward_id: Optional[int] = None
    area_id: Optional[int] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: datetime
    updated_at: datetime
    resolved_at: Optional[datetime] = None

    department_name: Optional[str] = None
    zone_name: Optional[str] = None
    ward_name: Optional[str] = None
    area_name: Optional[str] = None
    reporter_name: Optional[str] = None
    assignee_name: Optional[str] = None

    accepted_by_department: Optional[bool] = None
    accepted_at: Optional[datetime] = None
    cost_estimated_amount: Optional[float] = None
    cost_materials: Optional[str] = None
    cost_labor: Optional[str] = None
    cost_status: CostStatus
    cost_submitted_at: Optional[datetime] = None
    cost_approved_by: Optional[int] = None
    completion_remarks: Optional[str] = None
    completed_at: Optional[datetime] = None

    images: List[ComplaintImage] = []

    model_config = ConfigDict(from_attributes=True)


class ComplaintStats(BaseModel):
    total: int = 0
    pending: int = 0
    in_progress: int = 0
    on_hold: int = 0
    resolved: int = 0
    rejected: int = 0
    closed: int = 0


class MonthlyCount(BaseModel):
    month: str
    year: int
    complaints: int


# Comment schemas
class CommentCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        return _strip_required(v)


class Comment(BaseModel):
    id: int
    complaint_id: int
    user_id: Optional[int] = None
    author_name: Optional[str] = None
    content: str
    is_internal: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Settings
class SystemSettings(BaseModel):
    auto_assign_complaints: bool = True
    email_confirmations: bool = False
    maintenance_mode: bool = False


class SettingUpdate(BaseModel):
    key: str = Field(..., min_length=1, max_length=100)
    value: bool


# Documents & projects
class Document(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    file_url: str
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    uploaded_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Project(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    ward_id: Optional[int] = None
    ward_name: Optional[str] = None
    budget: Optional[float] = None
    progress: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
