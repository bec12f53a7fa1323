from datetime import datetime
from typing import TYPE_CHECKING
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, DateTime

from app.utils.clock import utc_now

if TYPE_CHECKING:
    from app.models.project import Project


class OrganizationBase(SQLModel):
    name: str = Field(index=True, max_length=100)
    email: str = Field(unique=True, index=True, max_length=255)
    description: str = Field(default="", max_length=2000)


class Organization(OrganizationBase, table=True):
    id_organization: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    projects: list["Project"] = Relationship(back_populates="organization")


class OrganizationCreate(OrganizationBase):
    pass

