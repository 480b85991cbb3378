"""Shared test fixtures for Jobly."""

import os

# Must be set before anything under ``jobly`` is imported.
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"

from typing import Any

import pytest
from fastapi.testclient import TestClient

from jobly import models  # noqa: F401
from jobly.database import Base, SessionLocal, engine, run_query
from jobly.main import app
from jobly.services.user_service import hash_password
from jobly.utils.tokens import create_token

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class _FakeResult:
    def __init__(self, rows: list[dict[str, Any]]) -> None:
        self._rows = rows

    def mappings(self) -> "_FakeResult":
        return self

    def all(self) -> list[dict[str, Any]]:
        return list(self._rows)

    def first(self) -> dict[str, Any] | None:
        return self._rows[0] if self._rows else None


class RecordingSession:
    """Stand-in for a SQLAlchemy ``Session`` that records statements.

    Used where the SQL itself is under test, e.g. ``ILIKE`` predicates that
    the SQLite test database cannot run.
    """

    def __init__(self, rows: list[dict[str, Any]] | None = None) -> None:
        self.rows: list[dict[str, Any]] = rows or []
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def execute(self, statement, params=None) -> _FakeResult:
        self.calls.append((str(statement), dict(params or {})))
        return _FakeResult(self.rows)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


def _seed() -> dict[str, int]:
    session = SessionLocal()
    try:
        for n in (1, 2, 3):
            run_query(
                session,
                "INSERT INTO companies (handle, name, num_employees, description, logo_url) VALUES ($1, $2, $3, $4, $5)",
                [f"c{n}", f"C{n}", n, f"Desc{n}", f"http://c{n}.img"],
            )

        job_ids = {}
        for title, salary, equity, handle in (
            ("j1", 5000, "0", "c1"),
            ("j2", 10000, "0.15", "c2"),
            ("j3", 20000, "0.3", "c2"),
            ("j4", None, None, "c3"),
        ):
            row = run_query(
                session,
                "INSERT INTO jobs (title, salary, equity, company_handle) VALUES ($1, $2, $3, $4) RETURNING id",
                [title, salary, equity, handle],
            ).first()
            job_ids[title] = row.id

        for username, is_admin in (("u1", True), ("u2", False)):
            run_query(
                session,
                """INSERT INTO users (username, password, first_name, last_name, email, is_admin)
                   VALUES ($1, $2, $3, $4, $5, $6)""",
                [username, hash_password(f"password{username[-1]}"), f"U{username[-1]}F", f"U{username[-1]}L",
                 f"{username}@email.com", is_admin],
            )

        run_query(session, "INSERT INTO applications (username, job_id) VALUES ($1, $2)", ["u1", job_ids["j1"]])
        session.commit()
        return job_ids
    finally:
        session.close()


@pytest.fixture(autouse=True)
def tables():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def job_ids(tables) -> dict[str, int]:
    """Seed companies c1..c3, jobs j1..j4 and users u1 (admin), u2; return job ids by title."""
    return _seed()


@pytest.fixture
def db(job_ids):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def recording_session() -> RecordingSession:
    return RecordingSession()


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture
def client(job_ids) -> TestClient:
    return TestClient(app)


@pytest.fixture
def u1_token() -> str:
    """Token for the admin user."""
    return create_token({"username": "u1", "isAdmin": True})


@pytest.fixture
def u2_token() -> str:
    return create_token({"username": "u2", "isAdmin": False})


@pytest.fixture
def admin_headers(u1_token) -> dict[str, str]:
    return {"Authorization": f"Bearer {u1_token}"}


@pytest.fixture
def user_headers(u2_token) -> dict[str, str]:
    return {"Authorization": f"Bearer {u2_token}"}
