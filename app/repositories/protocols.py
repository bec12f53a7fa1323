"""Persistence contracts consumed by the application workflow.

SQL implementations live next to this module; tests provide in-process fakes.
Implementations flush but never commit, the caller owns the transaction.
"""

from typing import Protocol

from app.models.application import Application
from app.models.enums import ApplicationStatus
from app.models.project import Project
from app.models.volunteer import Volunteer


class ApplicationRepository(Protocol):
    def get(self, application_id: int) -> Application | None: ...

    def get_by_volunteer_and_project(
        self, volunteer_id: int, project_id: int
    ) -> Application | None: ...

    def add(self, application: Application) -> Application:
        """Insert a new application; raises DuplicateApplicationError on a taken pair."""
        ...

    def list(
        self,
        *,
        project_id: int | None = None,
        status: ApplicationStatus | None = None,
        volunteer_id: int | None = None,
    ) -> list[Application]: ...

    def compare_and_set(
        self, updated: Application, expected_status: ApplicationStatus
    ) -> Application | None:
        """
        Store status and review fields of `updated` only if the stored status
        still equals `expected_status`. Returns the stored row, or None when
        another writer got there first.
        """
        ...

    def delete(self, application: Application, expected_status: ApplicationStatus) -> bool:
        """
        Remove the row only if its stored status still equals `expected_status`.
        Returns False when the row changed or is already gone.
        """
        ...


class ProjectRepository(Protocol):
    def get(self, project_id: int) -> Project | None:
        """Fresh read, never a cached copy."""
        ...

    def reserve_slot(self, project_id: int) -> bool:
        """Atomically add one volunteer unless the project is full."""
        ...

    def release_slot(self, project_id: int) -> bool:
        """Atomically remove one volunteer unless the count is already zero."""
        ...


class VolunteerRepository(Protocol):
    def get(self, volunteer_id: int) -> Volunteer | None: ...
