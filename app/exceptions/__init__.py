"""
Application exceptions module.

Separation of concerns for error handling:
- Base exception defines the hierarchy root
- CRUD exceptions cover missing records
- Auth exceptions cover authorization failures
- Application exceptions cover the application status workflow
- HTTP mapping is handled separately in app/core/error_handlers.py
"""

from app.exceptions.base import AppException
from app.exceptions.crud import NotFoundError
from app.exceptions.auth import InsufficientPermissionsError
from app.exceptions.application import (
    ApplicationLifecycleError,
    IllegalTransitionError,
    NotOwnerError,
    DuplicateApplicationError,
    ProjectUnavailableError,
    ProjectNotAcceptingApplicationsError,
    DeadlinePassedError,
    ProjectFullError,
)

__all__ = [
    # Base
    "AppException",
    # CRUD
    "NotFoundError",
    # Auth
    "InsufficientPermissionsError",
    # Application workflow
    "ApplicationLifecycleError",
    "IllegalTransitionError",
    "NotOwnerError",
    "DuplicateApplicationError",
    "ProjectUnavailableError",
    "ProjectNotAcceptingApplicationsError",
    "DeadlinePassedError",
    "ProjectFullError",
]
