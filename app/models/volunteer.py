from datetime import datetime
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime

from app.utils.clock import utc_now


class VolunteerBase(SQLModel):
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    email: str = Field(unique=True, index=True, max_length=255)
    is_active: bool = Field(default=True)


class Volunteer(VolunteerBase, table=True):
    id_volunteer: int | None = Field(default=None, primary_key=True)
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class VolunteerCreate(VolunteerBase):
    pass

