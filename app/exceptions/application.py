"""Domain failures of the application workflow.

Every class carries a literal `message` and a stable `code`; HTTP status
mapping lives in app/core/error_handlers.py.
"""

from typing import TYPE_CHECKING

from app.exceptions.base import AppException
from app.exceptions.auth import InsufficientPermissionsError

if TYPE_CHECKING:
    from app.models.enums import ApplicationStatus


class ApplicationLifecycleError(AppException):
    """Base class for expected, caller-recoverable workflow outcomes."""

    code = "application_error"
    message = "The application request could not be processed"

    def __init__(self) -> None:
        super().__init__(type(self).message)


class IllegalTransitionError(ApplicationLifecycleError):
    """
    The requested status change is not in the transition table.

    Raised both for plainly invalid requests and for writers that lost a race
    on the same application; retrying with the same stale view is pointless.
    """

    code = "illegal_transition"
    message = "The application cannot move to the requested status"

    def __init__(self, current: "ApplicationStatus", target: "ApplicationStatus"):
        self.current = current
        self.target = target
        super().__init__()


class NotOwnerError(ApplicationLifecycleError, InsufficientPermissionsError):
    """Only the volunteer who applied may withdraw the application."""

    code = "not_owner"
    message = "Only the applicant can withdraw this application"

    def __init__(self, application_id: int, volunteer_id: int):
        self.application_id = application_id
        self.volunteer_id = volunteer_id
        super().__init__()


class DuplicateApplicationError(ApplicationLifecycleError):
    """The volunteer already holds an application for this project."""

    code = "duplicate_application"
    message = "The volunteer has already applied to this project"

    def __init__(self, volunteer_id: int, project_id: int):
        self.volunteer_id = volunteer_id
        self.project_id = project_id
        super().__init__()


class ProjectUnavailableError(ApplicationLifecycleError):
    """The project cannot take this volunteer right now."""

    code = "project_unavailable"
    message = "The project cannot take new volunteers"

    def __init__(self, project_id: int):
        self.project_id = project_id
        super().__init__()


class ProjectNotAcceptingApplicationsError(ProjectUnavailableError):
    code = "project_not_accepting_applications"
    message = "The project is not accepting applications"


class DeadlinePassedError(ProjectUnavailableError):
    code = "deadline_passed"
    message = "The application deadline for this project has passed"


class ProjectFullError(ProjectUnavailableError):
    code = "project_full"
    message = "The project has reached its maximum number of volunteers"
