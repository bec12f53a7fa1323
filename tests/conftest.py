import os

# The engine in app.database.database is built at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlalchemy.pool import StaticPool

from app.database.database import get_session
from app.main import app
from app.models.enums import ProjectStatus
from app.models.organization import Organization
from app.models.project import Project
from app.models.volunteer import Volunteer

from tests.fakes import NOW


@pytest.fixture(name="session")
def session_fixture():
    """
    Create and yield a SQLModel Session bound to a fresh in-memory SQLite database.

    Yields:
        Session: A SQLModel Session connected to the created in-memory SQLite database; the session is closed when the fixture tears down.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    """
    TestClient whose requests share the test session.

    Lifespan is not entered, so no tables are created on the configured
    DATABASE_URL and logging is left as pytest configured it.
    """

    def get_session_override():
        # Mirrors the rollback a closing production session performs
        try:
            yield session
        except Exception:
            session.rollback()
            raise

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="organization")
def organization_fixture(session: Session) -> Organization:
    organization = Organization(name="Green Hands", email="contact@greenhands.org")
    session.add(organization)
    session.commit()
    session.refresh(organization)
    return organization


@pytest.fixture(name="project_factory")
def project_factory_fixture(session: Session, organization: Organization):
    """
    Return a callable creating committed projects.

    Defaults describe a published project with two slots whose deadline is one
    week after NOW; any field can be overridden by keyword.
    """

    def create(**overrides) -> Project:
        values = {
            "title": "Beach clean-up",
            "start_date": date(2026, 6, 1),
            "end_date": date(2026, 6, 2),
            "max_volunteers": 2,
            "status": ProjectStatus.PUBLISHED,
            "application_deadline": NOW + timedelta(days=7),
            "id_organization": organization.id_organization,
        }
        values.update(overrides)
        project = Project(**values)
        session.add(project)
        session.commit()
        session.refresh(project)
        return project

    return create


@pytest.fixture(name="volunteer_factory")
def volunteer_factory_fixture(session: Session):
    """Return a callable creating committed volunteers with unique emails."""
    counter = {"n": 0}

    def create(**overrides) -> Volunteer:
        counter["n"] += 1
        values = {
            "first_name": "Vol",
            "last_name": f"Number{counter['n']}",
            "email": f"volunteer{counter['n']}@example.com",
        }
        values.update(overrides)
        volunteer = Volunteer(**values)
        session.add(volunteer)
        session.commit()
        session.refresh(volunteer)
        return volunteer

    return create
