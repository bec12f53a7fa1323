from datetime import date, datetime
from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import CheckConstraint, Column, DateTime

from app.models.enums import ProjectStatus
from app.utils.clock import utc_now

if TYPE_CHECKING:
    from app.models.organization import Organization


class ProjectBase(SQLModel):
    title: str = Field(max_length=100)
    description: str = Field(default="", max_length=3000)
    city: str = Field(default="", max_length=100)
    start_date: date
    end_date: date
    max_volunteers: int = Field(ge=1)
    status: ProjectStatus = Field(default=ProjectStatus.DRAFT, index=True)


class Project(ProjectBase, table=True):
    __table_args__ = (
        CheckConstraint("current_volunteers >= 0", name="ck_project_volunteers_floor"),
        CheckConstraint(
            "current_volunteers <= max_volunteers", name="ck_project_volunteers_ceiling"
        ),
    )

    id_project: int | None = Field(default=None, primary_key=True)
    id_organization: int = Field(foreign_key="organization.id_organization", index=True)
    application_deadline: datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    # Only ever changed through the slot reservation statements of ProjectRepository
    current_volunteers: int = Field(default=0)
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    organization: "Organization" = Relationship(back_populates="projects")

    @property
    def has_available_slots(self) -> bool:
        return self.current_volunteers < self.max_volunteers


class ProjectCreate(ProjectBase):
    id_organization: int
    application_deadline: datetime

