"""
Repository pattern implementation for data access layer.
"""

from .base import BaseRepository
from .complaint_repository import (
    ComplaintCommentRepository,
    ComplaintRepository,
    ComplaintScope,
)
from .department_repository import DepartmentRepository
from .location_repository import AreaRepository, WardRepository, ZoneRepository
from .publication_repository import DocumentRepository, ProjectRepository
from .setting_repository import SettingRepository
from .user_repository import UserRepository

__all__ = [
    "AreaRepository",
    "BaseRepository",
    "ComplaintCommentRepository",
    "ComplaintRepository",
    "ComplaintScope",
    "DepartmentRepository",
    "DocumentRepository",
    "ProjectRepository",
    "SettingRepository",
    "UserRepository",
    "WardRepository",
    "ZoneRepository",
]
