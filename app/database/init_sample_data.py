"""Sample data initialization script for non-production environments.

This module seeds the database with a small dataset for development and staging:
one organization, one published project open for applications, and two
volunteers. Applications are left to be created through the API.

Safety:
- Raises error if attempted in production
- Idempotent: skips creation when the sample organization already exists
"""

from datetime import date, timedelta
from typing import Any

from loguru import logger
from sqlmodel import Session, select

from app.core.config import get_settings
from app.models.enums import ProjectStatus
from app.models.organization import Organization, OrganizationCreate
from app.models.project import Project, ProjectCreate
from app.models.volunteer import Volunteer, VolunteerCreate
from app.utils.clock import utc_now

SAMPLE_ORGANIZATION_EMAIL = "contact@greenhands.example.org"

VOLUNTEERS_CONFIG: list[dict[str, Any]] = [
    {"first_name": "Alice", "last_name": "Johnson", "email": "alice@example.com"},
    {"first_name": "Bob", "last_name": "Smith", "email": "bob@example.com"},
]


def init_sample_data(session: Session) -> None:
    """
    Initialize sample data for non-production environments.

    This function is idempotent and safe to run multiple times.

    Args:
        session: Database session for data creation

    Raises:
        RuntimeError: If attempted to run in production environment
    """
    settings = get_settings()
    if settings.ENVIRONMENT.lower() == "production":
        raise RuntimeError(
            "Sample data initialization cannot run in production environment! "
            "This is a safety measure to prevent accidental data seeding in production."
        )

    existing = session.exec(
        select(Organization).where(Organization.email == SAMPLE_ORGANIZATION_EMAIL)
    ).first()
    if existing:
        logger.info("Sample data already exists. Skipping initialization.")
        return

    logger.info("Initializing sample data for {} environment...", settings.ENVIRONMENT)
    today = date.today()

    organization = Organization.model_validate(
        OrganizationCreate(
            name="Green Hands",
            email=SAMPLE_ORGANIZATION_EMAIL,
            description="Neighbourhood association caring for urban gardens.",
        )
    )
    session.add(organization)
    session.flush()

    project_in = ProjectCreate(
        title="Community garden spring planting",
        description="Prepare beds and plant vegetables with local families.",
        city="Lyon",
        start_date=today + timedelta(days=30),
        end_date=today + timedelta(days=32),
        max_volunteers=5,
        status=ProjectStatus.PUBLISHED,
        id_organization=organization.id_organization,  # type: ignore
        application_deadline=utc_now() + timedelta(days=21),
    )
    session.add(Project.model_validate(project_in))

    logger.info("Creating {} Volunteers...", len(VOLUNTEERS_CONFIG))
    for v_conf in VOLUNTEERS_CONFIG:
        session.add(Volunteer.model_validate(VolunteerCreate(**v_conf)))

    session.commit()
    logger.info("Sample data created")
