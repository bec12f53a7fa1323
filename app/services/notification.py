"""Notification dispatch for application workflow events.

Dispatchers are best effort: the lifecycle service calls them after a status
change has been written and logs, rather than propagates, their failures.
Cross-cutting behavior is layered by composing dispatchers, not by wrapping.
"""

from typing import Any, Protocol

from fastapi import BackgroundTasks
from loguru import logger

from app.models.application import Application
from app.repositories.protocols import ProjectRepository, VolunteerRepository
from app.services.email import send_notification_email
from app.utils.validation import mask_email


class NotificationDispatcher(Protocol):
    def notify_submitted(self, application: Application) -> None: ...

    def notify_approved(self, application: Application) -> None: ...

    def notify_rejected(self, application: Application) -> None: ...

    def notify_withdrawn(self, application: Application) -> None: ...


class LoggingNotificationDispatcher:
    """Writes one log line per workflow event."""

    def _log(self, event: str, application: Application) -> None:
        logger.info(
            "[NOTIFICATION] Application #{} {} - volunteer: {}, project: {}",
            application.id_application,
            event,
            application.id_volunteer,
            application.id_project,
        )

    def notify_submitted(self, application: Application) -> None:
        self._log("SUBMITTED", application)

    def notify_approved(self, application: Application) -> None:
        self._log("APPROVED", application)

    def notify_rejected(self, application: Application) -> None:
        self._log("REJECTED", application)

    def notify_withdrawn(self, application: Application) -> None:
        self._log("WITHDRAWN", application)


async def deliver_email(
    template_name: str, recipient_email: str, context: dict[str, Any]
) -> None:
    """
    Send one templated email, logging instead of raising on failure.

    Runs as a background task after the response has been sent, so there is
    nobody left to report an error to.
    """
    try:
        await send_notification_email(
            template_name=template_name,
            recipient_email=recipient_email,
            context=context,
        )
    except Exception:
        logger.exception(
            "Failed to send {} email to {}", template_name, mask_email(recipient_email)
        )


class EmailNotificationDispatcher:
    """
    Emails volunteers and organizations about application events.

    Recipients are resolved synchronously from the repositories; the actual
    SMTP round trip is queued on FastAPI background tasks and happens after the
    response, outside the request transaction.
    """

    def __init__(
        self,
        background_tasks: BackgroundTasks,
        volunteers: VolunteerRepository,
        projects: ProjectRepository,
        frontend_url: str,
    ):
        self.background_tasks = background_tasks
        self.volunteers = volunteers
        self.projects = projects
        self.frontend_url = frontend_url

    def _context(self, application: Application) -> dict[str, Any] | None:
        volunteer = self.volunteers.get(application.id_volunteer)
        project = self.projects.get(application.id_project)
        if volunteer is None or project is None:
            logger.warning(
                "Skipping email for application #{}: volunteer or project missing",
                application.id_application,
            )
            return None

        organization = project.organization
        return {
            "application_id": application.id_application,
            "volunteer_name": volunteer.full_name,
            "volunteer_email": volunteer.email,
            "project_id": project.id_project,
            "project_title": project.title,
            "organization_name": organization.name if organization else "",
            "organization_email": organization.email if organization else None,
            "review_notes": application.review_notes or "",
            "frontend_url": self.frontend_url,
        }

    def _schedule(
        self, template_name: str, recipient: str | None, context: dict[str, Any]
    ) -> None:
        if not recipient:
            return
        self.background_tasks.add_task(deliver_email, template_name, recipient, context)

    def notify_submitted(self, application: Application) -> None:
        context = self._context(application)
        if context is None:
            return
        self._schedule("application_submitted", context["volunteer_email"], context)
        self._schedule("application_received", context["organization_email"], context)

    def notify_approved(self, application: Application) -> None:
        context = self._context(application)
        if context is None:
            return
        self._schedule("application_approved", context["volunteer_email"], context)

    def notify_rejected(self, application: Application) -> None:
        context = self._context(application)
        if context is None:
            return
        self._schedule("application_rejected", context["volunteer_email"], context)

    def notify_withdrawn(self, application: Application) -> None:
        context = self._context(application)
        if context is None:
            return
        self._schedule("application_withdrawn", context["organization_email"], context)


class CompositeNotificationDispatcher:
    """Fans every event out to several dispatchers, isolating their failures."""

    def __init__(self, *dispatchers: NotificationDispatcher):
        self.dispatchers = dispatchers

    def _each(self, event: str, application: Application) -> None:
        for dispatcher in self.dispatchers:
            try:
                getattr(dispatcher, event)(application)
            except Exception:
                logger.exception(
                    "{} failed on {} for application #{}",
                    type(dispatcher).__name__,
                    event,
                    application.id_application,
                )

    def notify_submitted(self, application: Application) -> None:
        self._each("notify_submitted", application)

    def notify_approved(self, application: Application) -> None:
        self._each("notify_approved", application)

    def notify_rejected(self, application: Application) -> None:
        self._each("notify_rejected", application)

    def notify_withdrawn(self, application: Application) -> None:
        self._each("notify_withdrawn", application)
