"""SQLModel-backed application persistence."""

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.exceptions import DuplicateApplicationError
from app.models.application import Application
from app.models.enums import ApplicationStatus
from app.utils.validation import ensure_id


class SqlApplicationRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, application_id: int) -> Application | None:
        return self.session.get(Application, application_id, populate_existing=True)

    def get_by_volunteer_and_project(
        self, volunteer_id: int, project_id: int
    ) -> Application | None:
        statement = select(Application).where(
            Application.id_volunteer == volunteer_id,
            Application.id_project == project_id,
        )
        return self.session.exec(statement).first()

    def add(self, application: Application) -> Application:
        """
        Insert a new application row.

        A concurrent insert for the same (volunteer, project) pair trips the
        unique constraint. The unit of work is rolled back and the race is
        reported as a duplicate.

        Raises:
            DuplicateApplicationError: If the pair already holds an application.
        """
        self.session.add(application)
        try:
            self.session.flush()
        except IntegrityError:
            self.session.rollback()
            raise DuplicateApplicationError(
                application.id_volunteer, application.id_project
            )
        self.session.refresh(application)
        return application

    def list(
        self,
        *,
        project_id: int | None = None,
        status: ApplicationStatus | None = None,
        volunteer_id: int | None = None,
    ) -> list[Application]:
        statement = select(Application)
        if project_id is not None:
            statement = statement.where(Application.id_project == project_id)
        if status is not None:
            statement = statement.where(Application.status == status)
        if volunteer_id is not None:
            statement = statement.where(Application.id_volunteer == volunteer_id)

        statement = statement.order_by(
            Application.applied_at.desc(),  # type: ignore
            Application.id_application.desc(),  # type: ignore
        )
        return list(self.session.exec(statement).all())

    def compare_and_set(
        self, updated: Application, expected_status: ApplicationStatus
    ) -> Application | None:
        """
        Conditionally write status and review fields of `updated`.

        The WHERE clause on the current status makes the write a compare-and-swap:
        of two writers holding the same stale view only the first matches a row.

        Returns:
            Application | None: The refreshed row, or None if the status changed
            under us (or the row is gone).
        """
        self.session.flush()
        statement = (
            update(Application)
            .where(
                Application.id_application == updated.id_application,  # type: ignore
                Application.status == expected_status,  # type: ignore
            )
            .values(
                status=updated.status,
                reviewed_at=updated.reviewed_at,
                review_notes=updated.review_notes,
            )
        )
        result = self.session.connection().execute(statement)
        if result.rowcount != 1:
            return None
        return self.get(ensure_id(updated.id_application, "Application"))

    def delete(self, application: Application, expected_status: ApplicationStatus) -> bool:
        """
        Delete the row only while its status is still `expected_status`.

        Returns:
            bool: True if a row was removed, False if the status changed under
            us (or the row is gone).
        """
        self.session.flush()
        statement = delete(Application).where(
            Application.id_application == application.id_application,  # type: ignore
            Application.status == expected_status,  # type: ignore
        )
        result = self.session.connection().execute(statement)
        if result.rowcount != 1:
            return False
        if application in self.session:
            self.session.expunge(application)
        return True
