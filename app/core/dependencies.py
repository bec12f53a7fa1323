from typing import Annotated

from fastapi import BackgroundTasks, Depends
from sqlmodel import Session

from app.core.config import get_settings
from app.database.database import get_session
from app.repositories.application import SqlApplicationRepository
from app.repositories.project import SqlProjectRepository
from app.repositories.volunteer import SqlVolunteerRepository
from app.services.application import ApplicationLifecycleService
from app.services.notification import (
    CompositeNotificationDispatcher,
    EmailNotificationDispatcher,
    LoggingNotificationDispatcher,
    NotificationDispatcher,
)


def get_application_service(
    session: Annotated[Session, Depends(get_session)],
    background_tasks: BackgroundTasks,
) -> ApplicationLifecycleService:
    """
    Build the lifecycle service for one request.

    Repositories share the request session, so the router's commit covers the
    status write and the slot counter together. Notifications always go to the
    log; email is added when EMAIL_NOTIFICATIONS_ENABLED is set.

    Returns:
        ApplicationLifecycleService: Service bound to the request session.
    """
    settings = get_settings()
    applications = SqlApplicationRepository(session)
    projects = SqlProjectRepository(session)
    volunteers = SqlVolunteerRepository(session)

    dispatchers: list[NotificationDispatcher] = [LoggingNotificationDispatcher()]
    if settings.EMAIL_NOTIFICATIONS_ENABLED:
        dispatchers.append(
            EmailNotificationDispatcher(
                background_tasks, volunteers, projects, settings.FRONTEND_URL
            )
        )

    return ApplicationLifecycleService(
        applications=applications,
        projects=projects,
        volunteers=volunteers,
        notifier=CompositeNotificationDispatcher(*dispatchers),
    )
