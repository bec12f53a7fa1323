"""Root of the application exception hierarchy."""


class AppException(Exception):
    """
    Base class for every error raised on purpose by the application.

    `code` is a stable, machine-readable identifier included in HTTP error
    bodies; subclasses override it.
    """

    code: str = "internal_error"

    def __init__(self, message: str = "An internal error occurred"):
        self.message = message
        super().__init__(message)
