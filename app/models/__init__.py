"""Table models, imported here so SQLModel.metadata knows every table."""

from app.models.organization import Organization
from app.models.volunteer import Volunteer
from app.models.project import Project
from app.models.application import Application

__all__ = ["Organization", "Volunteer", "Project", "Application"]
