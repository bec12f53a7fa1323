"""SQLModel-backed project persistence, including volunteer slot accounting."""

from sqlalchemy import update
from sqlmodel import Session

from app.models.project import Project


class SqlProjectRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, project_id: int) -> Project | None:
        # populate_existing discards the identity-map copy so counters are current
        return self.session.get(Project, project_id, populate_existing=True)

    def reserve_slot(self, project_id: int) -> bool:
        """
        Increment `current_volunteers` if it is below `max_volunteers`.

        Check and increment happen in one UPDATE, so the database row lock (not
        a read done earlier in Python) decides which of two racing approvals
        gets the last slot.

        Returns:
            bool: True if a slot was taken, False if the project is full or missing.
        """
        statement = (
            update(Project)
            .where(
                Project.id_project == project_id,  # type: ignore
                Project.current_volunteers < Project.max_volunteers,  # type: ignore
            )
            .values(current_volunteers=Project.current_volunteers + 1)
        )
        return self._execute(statement)

    def release_slot(self, project_id: int) -> bool:
        """
        Decrement `current_volunteers`, never below zero.

        Returns:
            bool: True if a slot was released.
        """
        statement = (
            update(Project)
            .where(
                Project.id_project == project_id,  # type: ignore
                Project.current_volunteers > 0,  # type: ignore
            )
            .values(current_volunteers=Project.current_volunteers - 1)
        )
        return self._execute(statement)

    def _execute(self, statement) -> bool:
        self.session.flush()
        result = self.session.connection().execute(statement)
        return result.rowcount == 1
