"""HTTP error handlers for FastAPI application.

This module provides the bridge between application exceptions and HTTP responses.
It maps domain-level exceptions to appropriate HTTP status codes and response formats.

Purpose:
    - Keep HTTP concerns separate from business logic
    - Provide consistent error response format across the API
    - Allow easy modification of HTTP responses without changing domain logic
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from app.exceptions import (
    AppException,
    NotFoundError,
    InsufficientPermissionsError,
    IllegalTransitionError,
    DuplicateApplicationError,
    ProjectUnavailableError,
)

INTERNAL_ERROR_DETAIL = "An internal error occurred"


def _error_response(status_code: int, exc: AppException) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"detail": exc.message, "code": exc.code}
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """
    Map a NotFoundError to an HTTP 404 JSON response.

    Parameters:
        request (Request): The incoming HTTP request.
        exc (NotFoundError): The exception indicating that a requested resource was not found.

    Returns:
        JSONResponse: Response with status 404 and a JSON body `{"detail": ..., "code": "not_found"}`.
    """
    return _error_response(status.HTTP_404_NOT_FOUND, exc)


async def illegal_transition_handler(
    request: Request, exc: IllegalTransitionError
) -> JSONResponse:
    """
    Convert an IllegalTransitionError into an HTTP 400 Bad Request response.

    The same response is returned whether the request was invalid from the
    start or lost a race with another writer.
    """
    return _error_response(status.HTTP_400_BAD_REQUEST, exc)


async def duplicate_application_handler(
    request: Request, exc: DuplicateApplicationError
) -> JSONResponse:
    """
    Convert a DuplicateApplicationError into an HTTP 409 Conflict JSON response.

    HTTP 409 semantics: The request conflicts with the current state of the server
    (the volunteer already holds an application for the project).
    """
    return _error_response(status.HTTP_409_CONFLICT, exc)


async def project_unavailable_handler(
    request: Request, exc: ProjectUnavailableError
) -> JSONResponse:
    """
    Map ProjectUnavailableError and its subclasses (not accepting, deadline
    passed, full) to HTTP 409 Conflict.
    """
    return _error_response(status.HTTP_409_CONFLICT, exc)


async def insufficient_permissions_handler(
    request: Request, exc: InsufficientPermissionsError
) -> JSONResponse:
    """
    Handle an InsufficientPermissionsError by returning a 403 Forbidden JSON response.

    Parameters:
        request (Request): The incoming HTTP request.
        exc (InsufficientPermissionsError): The exception indicating that the caller lacks the required permissions.

    Returns:
        JSONResponse: Response with status code 403 and the exception's `detail` and `code`.
    """
    return _error_response(status.HTTP_403_FORBIDDEN, exc)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle unhandled application-level exceptions and produce a standardized 500 Internal Server Error response.

    Parameters:
        request (Request): The incoming HTTP request.
        exc (AppException): The unhandled application-level exception.

    Returns:
        JSONResponse: HTTP 500 response with content {"detail": "An internal error occurred"}.
    """
    logger.error(
        "Unhandled {} on {} {}: {}",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc.message,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": INTERNAL_ERROR_DETAIL},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler for exceptions outside the application hierarchy.

    The exception is logged with its traceback; the client only sees the
    generic message.
    """
    logger.opt(exception=exc).error(
        "Unhandled exception on {} {}", request.method, request.url.path
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": INTERNAL_ERROR_DETAIL},
    )


def register_exception_handlers(app) -> None:
    """
    Register the application's domain-to-HTTP exception handlers on a FastAPI app.

    Registers handlers in order from most specific to most general so that subclassed
    exceptions are matched before their parent types. The following mappings are added:
    NotFoundError -> 404, IllegalTransitionError -> 400, DuplicateApplicationError -> 409,
    ProjectUnavailableError (and subclasses) -> 409, InsufficientPermissionsError
    (including NotOwnerError) -> 403, AppException -> 500 and Exception -> 500.

    Parameters:
        app: The FastAPI application instance to which the exception handlers will be attached.
    """
    # CRUD exception handlers
    app.add_exception_handler(NotFoundError, not_found_handler)

    # Application workflow handlers
    app.add_exception_handler(IllegalTransitionError, illegal_transition_handler)
    app.add_exception_handler(DuplicateApplicationError, duplicate_application_handler)
    app.add_exception_handler(ProjectUnavailableError, project_unavailable_handler)

    # Auth exception handlers (NotOwnerError resolves here through its MRO)
    app.add_exception_handler(
        InsufficientPermissionsError, insufficient_permissions_handler
    )

    # Catch-all for unhandled exceptions
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
