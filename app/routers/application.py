"""Volunteer application router: submission, review and withdrawal."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.core.dependencies import get_application_service
from app.database.database import get_session
from app.models.application import (
    ApplicationCreate,
    ApplicationList,
    ApplicationPublic,
    ApplicationReview,
)
from app.models.enums import ApplicationStatus
from app.services.application import ApplicationLifecycleService, to_application_public

router = APIRouter(prefix="/applications", tags=["applications"])

ServiceDep = Annotated[ApplicationLifecycleService, Depends(get_application_service)]
SessionDep = Annotated[Session, Depends(get_session)]


@router.get("/", response_model=ApplicationList)
def list_applications(
    service: ServiceDep,
    project_id: int | None = Query(default=None, description="Filter by project"),
    status: ApplicationStatus | None = Query(
        default=None, description="Filter by application status"
    ),
    volunteer_id: int | None = Query(default=None, description="Filter by volunteer"),
) -> ApplicationList:
    """
    List applications, most recent first.

    ### Filters:
    - **project_id**: Applications to one project
    - **status**: Applications in one status
    - **volunteer_id**: Applications of one volunteer

    Filters combine with AND logic.
    """
    applications = service.list_applications(
        project_id=project_id, status=status, volunteer_id=volunteer_id
    )
    return ApplicationList(
        applications=[to_application_public(a) for a in applications],
        total_count=len(applications),
    )


@router.get("/{application_id}", response_model=ApplicationPublic)
def read_application(application_id: int, service: ServiceDep) -> ApplicationPublic:
    """
    Get one application with the statuses it can move to next.

    Raises:
        `404 NotFoundError`: If the application does not exist.
    """
    return to_application_public(service.get(application_id))


@router.post("/", response_model=ApplicationPublic, status_code=201)
def submit_application(
    application_in: ApplicationCreate,
    service: ServiceDep,
    session: SessionDep,
) -> ApplicationPublic:
    """
    Apply a volunteer to a project.

    The application starts as `pending` and does not take a project slot until
    it is approved.

    Raises:
        `404 NotFoundError`: Unknown or inactive volunteer, or unknown project.
        `409 DuplicateApplicationError`: The volunteer already applied.
        `409 ProjectUnavailableError`: Project not published, deadline passed
            or project full.
    """
    application = service.submit(application_in.id_volunteer, application_in.id_project)
    session.commit()
    session.refresh(application)
    return to_application_public(application)


@router.patch("/{application_id}/approve", response_model=ApplicationPublic)
def approve_application(
    application_id: int,
    service: ServiceDep,
    session: SessionDep,
    review: ApplicationReview | None = None,
) -> ApplicationPublic:
    """
    Accept a pending application, taking one project slot.

    The body with `review_notes` is optional.

    Raises:
        `404 NotFoundError`: If the application does not exist.
        `400 IllegalTransitionError`: If the application is not pending.
        `409 ProjectFullError`: If the project has no slot left.
    """
    review_notes = review.review_notes if review else None
    application = service.approve(application_id, review_notes)
    session.commit()
    session.refresh(application)
    return to_application_public(application)


@router.patch("/{application_id}/reject", response_model=ApplicationPublic)
def reject_application(
    application_id: int,
    service: ServiceDep,
    session: SessionDep,
    review: ApplicationReview | None = None,
) -> ApplicationPublic:
    """
    Reject a pending application.

    The body with `review_notes` is optional.

    Raises:
        `404 NotFoundError`: If the application does not exist.
        `400 IllegalTransitionError`: If the application is not pending.
    """
    review_notes = review.review_notes if review else None
    application = service.reject(application_id, review_notes)
    session.commit()
    session.refresh(application)
    return to_application_public(application)


@router.patch("/{application_id}/withdraw", response_model=ApplicationPublic)
def withdraw_application(
    application_id: int,
    service: ServiceDep,
    session: SessionDep,
    volunteer_id: int = Query(description="Volunteer requesting the withdrawal"),
) -> ApplicationPublic:
    """
    Withdraw a pending or accepted application.

    Only the volunteer who applied may withdraw. Withdrawing an accepted
    application frees its project slot.

    Raises:
        `404 NotFoundError`: If the application does not exist.
        `403 NotOwnerError`: If `volunteer_id` is not the applicant.
        `400 IllegalTransitionError`: If the application is already closed.
    """
    application = service.withdraw(application_id, volunteer_id)
    session.commit()
    session.refresh(application)
    return to_application_public(application)


@router.patch("/{application_id}/complete", response_model=ApplicationPublic)
def complete_application(
    application_id: int,
    service: ServiceDep,
    session: SessionDep,
) -> ApplicationPublic:
    """
    Mark an accepted application as completed.

    Raises:
        `404 NotFoundError`: If the application does not exist.
        `400 IllegalTransitionError`: If the application is not accepted.
    """
    application = service.complete(application_id)
    session.commit()
    session.refresh(application)
    return to_application_public(application)


@router.delete("/{application_id}", status_code=204)
def delete_application(
    application_id: int,
    service: ServiceDep,
    session: SessionDep,
) -> None:
    """
    Delete an application record (administrative).

    Deleting an accepted application frees its project slot.

    Raises:
        `404 NotFoundError`: If the application does not exist.
    """
    service.delete(application_id)
    session.commit()
