"""Authorization exceptions."""

from app.exceptions.base import AppException


class InsufficientPermissionsError(AppException):
    """The caller is not allowed to perform this action."""

    code = "forbidden"

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)
