"""Persistence-level exceptions."""

from app.exceptions.base import AppException


class NotFoundError(AppException):
    """A referenced record does not exist."""

    code = "not_found"

    def __init__(self, resource: str, identifier: int | str):
        """
        Initialize a NotFoundError for a missing record.

        Parameters:
            resource (str): The kind of record that was looked up, e.g. "Application".
            identifier (int | str): The identifier that matched nothing.
        """
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} with identifier '{identifier}' not found")
