"""Tests for the domain-to-HTTP exception mapping."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.core.error_handlers import register_exception_handlers
from app.exceptions import (
    AppException,
    DeadlinePassedError,
    DuplicateApplicationError,
    IllegalTransitionError,
    InsufficientPermissionsError,
    NotFoundError,
    NotOwnerError,
    ProjectFullError,
    ProjectNotAcceptingApplicationsError,
)
from app.models.enums import ApplicationStatus

ERRORS = {
    "illegal": IllegalTransitionError(ApplicationStatus.COMPLETED, ApplicationStatus.PENDING),
    "not_found": NotFoundError("Application", 9),
    "not_owner": NotOwnerError(1, 2),
    "forbidden": InsufficientPermissionsError(),
    "duplicate": DuplicateApplicationError(1, 2),
    "not_accepting": ProjectNotAcceptingApplicationsError(3),
    "deadline": DeadlinePassedError(3),
    "full": ProjectFullError(3),
    "app": AppException("database exploded"),
}


@pytest.fixture(name="error_client")
def error_client_fixture() -> TestClient:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/raise/{name}")
    def raise_error(name: str):
        if name == "unexpected":
            raise RuntimeError("boom")
        raise ERRORS[name]

    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.parametrize(
    "name,status_code,code",
    [
        ("illegal", 400, "illegal_transition"),
        ("not_found", 404, "not_found"),
        ("not_owner", 403, "not_owner"),
        ("forbidden", 403, "forbidden"),
        ("duplicate", 409, "duplicate_application"),
        ("not_accepting", 409, "project_not_accepting_applications"),
        ("deadline", 409, "deadline_passed"),
        ("full", 409, "project_full"),
    ],
)
def test_domain_errors(error_client: TestClient, name, status_code, code):
    response = error_client.get(f"/raise/{name}")

    assert response.status_code == status_code
    assert response.json() == {"detail": ERRORS[name].message, "code": code}


def test_not_found_message_names_resource(error_client: TestClient):
    response = error_client.get("/raise/not_found")

    assert response.json()["detail"] == "Application with identifier '9' not found"


def test_messages_do_not_leak_identifiers(error_client: TestClient):
    response = error_client.get("/raise/illegal")

    assert "completed" not in response.json()["detail"]


@pytest.mark.parametrize("name", ["app", "unexpected"])
def test_other_errors_are_generic_500(error_client: TestClient, name):
    response = error_client.get(f"/raise/{name}")

    assert response.status_code == 500
    assert response.json() == {"detail": "An internal error occurred"}
