"""Application lifecycle service: submit, review, withdraw and complete applications.

Unlike the module-level service functions that take a `session`, this service
is a class built from repository protocols and a notification dispatcher.
Routers get one per request from `get_application_service`; tests build it
over in-process fakes. Repositories flush; the router commits.
"""

from collections.abc import Callable
from datetime import datetime

from loguru import logger

from app.exceptions import (
    NotFoundError,
    IllegalTransitionError,
    NotOwnerError,
    DuplicateApplicationError,
    ProjectNotAcceptingApplicationsError,
    DeadlinePassedError,
    ProjectFullError,
)
from app.models.application import Application, ApplicationPublic
from app.models.enums import ApplicationStatus, ProjectStatus
from app.models.project import Project
from app.repositories.protocols import (
    ApplicationRepository,
    ProjectRepository,
    VolunteerRepository,
)
from app.services.application_state import ApplicationStateMachine, allowed_transitions
from app.services.notification import NotificationDispatcher
from app.utils.clock import ensure_utc, utc_now

# Project statuses in which volunteers may still apply
ACCEPTING_PROJECT_STATUSES = frozenset({ProjectStatus.PUBLISHED})


def to_application_public(application: Application) -> ApplicationPublic:
    """
    Convert an Application row into its public representation.

    Adds `allowed_transitions` so clients can offer only the actions the
    current status permits.
    """
    return ApplicationPublic(
        **application.model_dump(),
        allowed_transitions=allowed_transitions(application.status),
    )


class ApplicationLifecycleService:
    """
    Orchestrates application status changes and their side effects.

    Instances are cheap and hold no state besides their collaborators; build
    one per request. Domain failures are raised as ApplicationLifecycleError
    subclasses or NotFoundError. Persistence errors propagate untouched and are
    never retried here.
    """

    def __init__(
        self,
        applications: ApplicationRepository,
        projects: ProjectRepository,
        volunteers: VolunteerRepository,
        notifier: NotificationDispatcher,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.applications = applications
        self.projects = projects
        self.volunteers = volunteers
        self.notifier = notifier
        self.clock = clock
        self.state_machine = ApplicationStateMachine(clock=clock)

    # Reads

    def get(self, application_id: int) -> Application:
        """
        Raises:
            NotFoundError: If no application has this id.
        """
        application = self.applications.get(application_id)
        if application is None:
            raise NotFoundError("Application", application_id)
        return application

    def list_applications(
        self,
        *,
        project_id: int | None = None,
        status: ApplicationStatus | None = None,
        volunteer_id: int | None = None,
    ) -> list[Application]:
        """Applications matching every given filter, most recent first."""
        return self.applications.list(
            project_id=project_id, status=status, volunteer_id=volunteer_id
        )

    # Workflow

    def submit(self, volunteer_id: int, project_id: int) -> Application:
        """
        Create a pending application of a volunteer to a project.

        Checks, in order: the volunteer exists and is active, the pair has no
        application yet, the project exists, is published, its deadline is
        still ahead, and it has a free slot.

        Returns:
            Application: The stored application, status PENDING.

        Raises:
            NotFoundError: Unknown or inactive volunteer, unknown project.
            DuplicateApplicationError: The volunteer already applied.
            ProjectNotAcceptingApplicationsError: Project is not published.
            DeadlinePassedError: The application deadline is over.
            ProjectFullError: No slot left.
        """
        volunteer = self.volunteers.get(volunteer_id)
        if volunteer is None or not volunteer.is_active:
            raise NotFoundError("Volunteer", volunteer_id)

        if self.applications.get_by_volunteer_and_project(volunteer_id, project_id):
            raise DuplicateApplicationError(volunteer_id, project_id)

        project = self._get_project(project_id)
        now = self.clock()
        if project.status not in ACCEPTING_PROJECT_STATUSES:
            raise ProjectNotAcceptingApplicationsError(project_id)
        if ensure_utc(now) >= ensure_utc(project.application_deadline):
            raise DeadlinePassedError(project_id)
        if not project.has_available_slots:
            raise ProjectFullError(project_id)

        application = self.applications.add(
            Application(
                id_volunteer=volunteer_id,
                id_project=project_id,
                status=ApplicationStatus.PENDING,
                applied_at=now,
            )
        )
        logger.info(
            "Created application #{} for volunteer {} to project {}",
            application.id_application,
            volunteer_id,
            project_id,
        )
        self._dispatch(self.notifier.notify_submitted, application)
        return application

    def approve(self, application_id: int, review_notes: str | None = None) -> Application:
        """
        Accept a pending application and take one project slot.

        Capacity is checked again against a fresh read of the project, since
        other approvals may have filled it since submission. The slot is
        reserved with an atomic increment-with-ceiling before the status write;
        if the status write then loses a race the slot is given back.

        Raises:
            NotFoundError: Unknown application or project.
            IllegalTransitionError: Not pending, or approved concurrently.
            ProjectFullError: No slot left; the application stays pending.
        """
        application = self.get(application_id)
        accepted = self.state_machine.apply_transition(
            application, ApplicationStatus.ACCEPTED, review_notes
        )

        project = self._get_project(application.id_project)
        if not project.has_available_slots:
            logger.warning(
                "Cannot approve application #{}: project {} has no available slots",
                application_id,
                application.id_project,
            )
            raise ProjectFullError(application.id_project)
        if not self.projects.reserve_slot(application.id_project):
            logger.warning(
                "Cannot approve application #{}: project {} filled concurrently",
                application_id,
                application.id_project,
            )
            raise ProjectFullError(application.id_project)

        stored = self.applications.compare_and_set(accepted, ApplicationStatus.PENDING)
        if stored is None:
            self.projects.release_slot(application.id_project)
            raise IllegalTransitionError(application.status, ApplicationStatus.ACCEPTED)

        self._log_transition(application, stored)
        self._dispatch(self.notifier.notify_approved, stored)
        return stored

    def reject(self, application_id: int, review_notes: str | None = None) -> Application:
        """
        Raises:
            NotFoundError: Unknown application.
            IllegalTransitionError: Not pending, or reviewed concurrently.
        """
        application = self.get(application_id)
        stored = self._transition(application, ApplicationStatus.REJECTED, review_notes)

        self._dispatch(self.notifier.notify_rejected, stored)
        return stored

    def withdraw(self, application_id: int, requesting_volunteer_id: int) -> Application:
        """
        Withdraw an application on behalf of the volunteer who submitted it.

        Withdrawing an accepted application frees its project slot.

        Raises:
            NotFoundError: Unknown application.
            NotOwnerError: The requester is not the applicant.
            IllegalTransitionError: Already rejected, withdrawn or completed.
        """
        application = self.get(application_id)
        if application.id_volunteer != requesting_volunteer_id:
            raise NotOwnerError(application_id, requesting_volunteer_id)

        previous = application.status
        stored = self._transition(application, ApplicationStatus.WITHDRAWN)
        if previous == ApplicationStatus.ACCEPTED:
            self._release_slot(stored.id_project)

        self._dispatch(self.notifier.notify_withdrawn, stored)
        return stored

    def complete(self, application_id: int) -> Application:
        """
        Raises:
            NotFoundError: Unknown application.
            IllegalTransitionError: Not accepted.
        """
        application = self.get(application_id)
        stored = self._transition(application, ApplicationStatus.COMPLETED)
        return stored

    # Administration

    def delete(self, application_id: int) -> None:
        """
        Remove an application record.

        Administrative operation, not part of the status workflow. Deleting an
        accepted application frees its project slot.

        The row is only removed if its status still matches the one just read,
        so a concurrent withdrawal cannot free the same slot a second time.
        On a mismatch the row is read again; statuses only move forward, so
        this ends after at most two retries.

        Raises:
            NotFoundError: Unknown application, or deleted concurrently.
        """
        while True:
            application = self.get(application_id)
            if self.applications.delete(application, application.status):
                break
            logger.debug(
                "Application #{} changed while deleting, reading it again",
                application_id,
            )

        if application.status == ApplicationStatus.ACCEPTED:
            self._release_slot(application.id_project)
        logger.info(
            "Deleted application #{} (was {})", application_id, application.status.value
        )

    # Helpers

    def _get_project(self, project_id: int) -> Project:
        project = self.projects.get(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    def _transition(
        self,
        application: Application,
        target: ApplicationStatus,
        review_notes: str | None = None,
    ) -> Application:
        """Validate, then write the new status only if nobody changed it meanwhile."""
        updated = self.state_machine.apply_transition(application, target, review_notes)
        stored = self.applications.compare_and_set(updated, application.status)
        if stored is None:
            raise IllegalTransitionError(application.status, target)
        self._log_transition(application, stored)
        return stored

    def _log_transition(self, before: Application, after: Application) -> None:
        logger.info(
            "Application #{} transitioned from {} to {}",
            after.id_application,
            before.status.value,
            after.status.value,
        )

    def _release_slot(self, project_id: int) -> None:
        if not self.projects.release_slot(project_id):
            logger.warning("Volunteer count of project {} was already zero", project_id)

    def _dispatch(
        self, notify: Callable[[Application], None], application: Application
    ) -> None:
        # Notifications never undo a committed status change
        try:
            notify(application)
        except Exception:
            logger.exception(
                "Notification {} failed for application #{}",
                getattr(notify, "__name__", "dispatch"),
                application.id_application,
            )
