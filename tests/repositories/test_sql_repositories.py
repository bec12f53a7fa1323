"""Tests for the SQLModel repositories' conditional writes."""

import pytest
from sqlmodel import Session

from app.exceptions import DuplicateApplicationError
from app.models.application import Application
from app.models.enums import ApplicationStatus
from app.models.project import Project
from app.repositories.application import SqlApplicationRepository
from app.repositories.project import SqlProjectRepository
from app.repositories.volunteer import SqlVolunteerRepository
from tests.fakes import NOW

S = ApplicationStatus


@pytest.fixture(name="pending")
def pending_fixture(session: Session, project_factory, volunteer_factory) -> Application:
    project = project_factory()
    volunteer = volunteer_factory()
    application = Application(
        id_volunteer=volunteer.id_volunteer,
        id_project=project.id_project,
        applied_at=NOW,
    )
    session.add(application)
    session.commit()
    session.refresh(application)
    return application


class TestSqlApplicationRepository:
    def test_compare_and_set_succeeds_on_expected_status(
        self, session: Session, pending: Application
    ):
        repo = SqlApplicationRepository(session)
        updated = Application(**(pending.model_dump() | {"status": S.ACCEPTED}))

        stored = repo.compare_and_set(updated, S.PENDING)

        assert stored is not None
        assert stored.status == S.ACCEPTED
        assert repo.get(pending.id_application).status == S.ACCEPTED

    def test_compare_and_set_fails_on_stale_status(
        self, session: Session, pending: Application
    ):
        repo = SqlApplicationRepository(session)
        first = Application(**(pending.model_dump() | {"status": S.ACCEPTED}))
        second = Application(**(pending.model_dump() | {"status": S.REJECTED}))

        assert repo.compare_and_set(first, S.PENDING) is not None
        assert repo.compare_and_set(second, S.PENDING) is None
        assert repo.get(pending.id_application).status == S.ACCEPTED

    def test_compare_and_set_on_missing_row(self, session: Session, pending: Application):
        repo = SqlApplicationRepository(session)
        ghost = Application(**(pending.model_dump() | {"id_application": 999}))

        assert repo.compare_and_set(ghost, S.PENDING) is None

    def test_add_duplicate_pair_raises(self, session: Session, pending: Application):
        repo = SqlApplicationRepository(session)

        with pytest.raises(DuplicateApplicationError):
            repo.add(
                Application(
                    id_volunteer=pending.id_volunteer,
                    id_project=pending.id_project,
                    applied_at=NOW,
                )
            )

        assert len(repo.list()) == 1

    def test_get_by_volunteer_and_project(self, session: Session, pending: Application):
        repo = SqlApplicationRepository(session)

        found = repo.get_by_volunteer_and_project(pending.id_volunteer, pending.id_project)

        assert found is not None
        assert found.id_application == pending.id_application
        assert repo.get_by_volunteer_and_project(pending.id_volunteer, 999) is None

    def test_list_filters(self, session: Session, pending: Application):
        repo = SqlApplicationRepository(session)

        assert len(repo.list(project_id=pending.id_project)) == 1
        assert repo.list(status=S.ACCEPTED) == []
        assert repo.list(volunteer_id=pending.id_volunteer + 100) == []

    def test_delete(self, session: Session, pending: Application):
        repo = SqlApplicationRepository(session)

        assert repo.delete(pending, S.PENDING) is True

        assert repo.get(pending.id_application) is None

    def test_delete_skips_row_whose_status_changed(
        self, session: Session, pending: Application
    ):
        repo = SqlApplicationRepository(session)

        assert repo.delete(pending, S.ACCEPTED) is False

        assert repo.get(pending.id_application).status == S.PENDING

    def test_delete_missing_row(self, session: Session, pending: Application):
        repo = SqlApplicationRepository(session)
        repo.delete(pending, S.PENDING)

        assert repo.delete(pending, S.PENDING) is False


class TestSqlProjectRepository:
    def test_reserve_until_full(self, session: Session, project_factory):
        project = project_factory(max_volunteers=2)
        repo = SqlProjectRepository(session)

        assert repo.reserve_slot(project.id_project)
        assert repo.reserve_slot(project.id_project)
        assert not repo.reserve_slot(project.id_project)
        assert repo.get(project.id_project).current_volunteers == 2

    def test_release_never_goes_below_zero(self, session: Session, project_factory):
        project = project_factory()
        repo = SqlProjectRepository(session)

        assert not repo.release_slot(project.id_project)
        assert repo.get(project.id_project).current_volunteers == 0

    def test_reserve_then_release(self, session: Session, project_factory):
        project = project_factory()
        repo = SqlProjectRepository(session)

        repo.reserve_slot(project.id_project)
        assert repo.release_slot(project.id_project)
        assert repo.get(project.id_project).current_volunteers == 0

    def test_unknown_project(self, session: Session):
        repo = SqlProjectRepository(session)

        assert not repo.reserve_slot(404)
        assert repo.get(404) is None

    def test_get_sees_changes_made_outside_the_identity_map(
        self, session: Session, project_factory
    ):
        project = project_factory(max_volunteers=3)
        repo = SqlProjectRepository(session)
        cached = session.get(Project, project.id_project)

        repo.reserve_slot(project.id_project)

        assert repo.get(project.id_project).current_volunteers == 1
        assert cached.current_volunteers == 1


def test_volunteer_repository_get(session: Session, volunteer_factory):
    volunteer = volunteer_factory(first_name="Ada")
    repo = SqlVolunteerRepository(session)

    assert repo.get(volunteer.id_volunteer).first_name == "Ada"
    assert repo.get(12345) is None
