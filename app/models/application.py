from datetime import datetime
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, UniqueConstraint

from app.models.enums import ApplicationStatus
from app.utils.clock import utc_now


class Application(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint(
            "id_volunteer", "id_project", name="uq_application_volunteer_project"
        ),
    )

    id_application: int | None = Field(default=None, primary_key=True)
    id_volunteer: int = Field(foreign_key="volunteer.id_volunteer", index=True)
    id_project: int = Field(foreign_key="project.id_project", index=True)
    status: ApplicationStatus = Field(default=ApplicationStatus.PENDING, index=True)
    applied_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    reviewed_at: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    review_notes: str | None = Field(default=None, max_length=500)


class ApplicationCreate(SQLModel):
    id_volunteer: int
    id_project: int


class ApplicationReview(SQLModel):
    review_notes: str | None = Field(default=None, max_length=500)


class ApplicationPublic(SQLModel):
    id_application: int
    id_volunteer: int
    id_project: int
    status: ApplicationStatus
    applied_at: datetime
    reviewed_at: datetime | None = None
    review_notes: str | None = None
    allowed_transitions: list[ApplicationStatus] = Field(default_factory=list)


class ApplicationList(SQLModel):
    applications: list[ApplicationPublic]
    total_count: int
