"""
Services layer for business logic.

This package contains service modules that encapsulate business logic
separate from the API routes.
"""

from .analytics_service import AnalyticsService
from .auth_service import AuthService
from .comment_service import CommentService
from .complaint_service import ComplaintService
from .department_service import DepartmentService
from .location_service import LocationService
from .publication_service import PublicationService
from .settings_service import SettingsService
from .upload_service import UploadService
from .user_service import UserService

__all__ = [
    "AnalyticsService",
    "AuthService",
    "CommentService",
    "ComplaintService",
    "DepartmentService",
    "LocationService",
    "PublicationService",
    "SettingsService",
    "UploadService",
    "UserService",
]
