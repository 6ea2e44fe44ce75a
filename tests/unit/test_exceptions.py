"""Tests for the error taxonomy and exception handlers."""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from src.portfolio.core.exceptions import (
    AppError,
    ConflictError,
    DependencyError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ValidationError,
    classify_integrity_error,
    setup_exception_handlers,
)

pytestmark = pytest.mark.unit


def _integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, Exception(message))


@pytest.mark.parametrize(
    ("error_cls", "status_code", "code"),
    [
        (ValidationError, 400, "validation_error"),
        (ForbiddenError, 403, "forbidden"),
        (NotFoundError, 404, "not_found"),
        (ConflictError, 409, "conflict"),
        (DependencyError, 409, "dependency_conflict"),
    ],
)
def test_error_status_codes(error_cls, status_code, code):
    error = error_cls("boom")
    assert error.status_code == status_code
    assert error.code == code
    assert error.to_content() == {"message": "boom", "error": code}


def test_field_is_reported_when_given():
    error = ValidationError("Project name is required", field="name")
    assert error.to_content()["field"] == "name"


def test_internal_error_message_is_generic():
    assert InternalError().message == "Internal server error"


class TestClassifyIntegrityError:
    def test_foreign_key_violation_is_dependency_error(self):
        error = classify_integrity_error(_integrity_error("FOREIGN KEY constraint failed"))
        assert isinstance(error, DependencyError)

    def test_creator_foreign_key_gets_specific_message(self):
        error = classify_integrity_error(
            _integrity_error(
                'update or delete on table "users" violates foreign key constraint '
                '"projects_created_by_user_id_fkey" on table "projects"'
            )
        )
        assert isinstance(error, DependencyError)
        assert "projects still depend on it" in error.message

    def test_unique_violation_is_conflict(self):
        error = classify_integrity_error(_integrity_error("UNIQUE constraint failed: users.email"))
        assert isinstance(error, ConflictError)

    def test_postgres_duplicate_key_is_conflict(self):
        error = classify_integrity_error(
            _integrity_error('duplicate key value violates unique constraint "ix_users_email"')
        )
        assert isinstance(error, ConflictError)

    def test_other_violations_are_internal(self):
        error = classify_integrity_error(
            _integrity_error("NOT NULL constraint failed: projects.name")
        )
        assert isinstance(error, InternalError)


class _Payload(BaseModel):
    name: str


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/not-found")
    async def not_found() -> None:
        raise NotFoundError("Project not found")

    @app.get("/invalid")
    async def invalid() -> None:
        raise ValidationError("Invalid skills data", field="skills")

    @app.get("/http")
    async def http() -> None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    @app.get("/crash")
    async def crash() -> None:
        raise RuntimeError("database password is hunter2")

    @app.post("/payload")
    async def payload(body: _Payload) -> dict[str, str]:
        return {"name": body.name}

    return TestClient(app, raise_server_exceptions=False)


def test_app_error_response(client: TestClient):
    response = client.get("/not-found")

    assert response.status_code == 404
    data = response.json()
    assert data["message"] == "Project not found"
    assert data["error"] == "not_found"
    assert "request_id" in data


def test_app_error_response_names_field(client: TestClient):
    response = client.get("/invalid")

    assert response.status_code == 400
    assert response.json()["field"] == "skills"


def test_http_exception_response(client: TestClient):
    response = client.get("/http")

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


def test_request_validation_is_reported_as_400(client: TestClient):
    response = client.post("/payload", json={})

    assert response.status_code == 400
    data = response.json()
    assert data["message"] == "Validation failed"
    assert data["error"] == "validation_error"
    assert data["errors"][0]["field"] == "name"


def test_unhandled_exception_hides_details(client: TestClient):
    response = client.get("/crash")

    assert response.status_code == 500
    data = response.json()
    assert data["message"] == "Internal server error"
    assert "hunter2" not in response.text


def test_app_error_is_an_exception():
    with pytest.raises(AppError):
        raise ConflictError("Cannot approve a project that is approved")
