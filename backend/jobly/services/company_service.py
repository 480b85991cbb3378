import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import run_query
from ..errors import BadRequestError, NotFoundError
from ..utils.sql import sql_for_company_partial_filter, sql_for_partial_update
from .job_service import format_job

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = 'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'

JS_TO_SQL = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}


def create(db: Session, data: dict[str, Any]) -> dict[str, Any]:
    """Create a company from ``{handle, name, description, numEmployees, logoUrl}``.

    Raises BadRequestError if the company is already in the database.
    """
    handle = data["handle"]
    duplicate = run_query(db, "SELECT handle FROM companies WHERE handle = $1", [handle]).first()
    if duplicate:
        raise BadRequestError(f"Duplicate company: {handle}")

    try:
        company = run_query(
            db,
            f"""INSERT INTO companies (handle, name, description, num_employees, logo_url)
                VALUES ($1, $2, $3, $4, $5)
                RETURNING {COMPANY_COLUMNS}""",
            [handle, data["name"], data.get("description", ""), data.get("numEmployees"), data.get("logoUrl")],
        ).mappings().first()
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise BadRequestError(f"Duplicate company name: {data['name']}") from exc

    logger.info("Created company %s", handle)
    return dict(company)


def find_all(db: Session) -> list[dict[str, Any]]:
    result = run_query(db, f"SELECT {COMPANY_COLUMNS} FROM companies ORDER BY name")
    return [dict(row) for row in result.mappings().all()]


def search(db: Session, filters: dict[str, Any]) -> list[dict[str, Any]]:
    """Find companies matching any combination of nameLike, minEmployees and maxEmployees."""
    fragment = sql_for_company_partial_filter(filters)

    # Both values passed number coercion above; blank ones were dropped.
    min_employees = str(filters.get("minEmployees") or "").strip()
    max_employees = str(filters.get("maxEmployees") or "").strip()
    if min_employees and max_employees and float(min_employees) > float(max_employees):
        raise BadRequestError("minEmployees cannot be greater than maxEmployees")

    result = run_query(
        db,
        f"SELECT {COMPANY_COLUMNS} FROM companies WHERE {fragment.clause} ORDER BY name",
        fragment.values,
    )
    return [dict(row) for row in result.mappings().all()]


def get(db: Session, handle: str) -> dict[str, Any]:
    """Return a company with its ``jobs``: ``[{id, title, salary, equity}, ...]``.

    Raises NotFoundError if not found.
    """
    company = run_query(db, f"SELECT {COMPANY_COLUMNS} FROM companies WHERE handle = $1", [handle]).mappings().first()
    if not company:
        raise NotFoundError(f"No company: {handle}")

    jobs = run_query(
        db,
        "SELECT id, title, salary, equity FROM jobs WHERE company_handle = $1 ORDER BY id",
        [handle],
    ).mappings().all()

    company = dict(company)
    company["jobs"] = [format_job(job) for job in jobs]
    return company


def update(db: Session, handle: str, data: dict[str, Any]) -> dict[str, Any]:
    """Update company data with ``data``.

    This is a "partial update": only the fields present in ``data`` change.
    Data can include ``{name, description, numEmployees, logoUrl}``.

    Raises NotFoundError if not found.
    """
    fragment = sql_for_partial_update(data, JS_TO_SQL)
    handle_idx = f"${len(fragment.values) + 1}"

    try:
        company = run_query(
            db,
            f"""UPDATE companies
                SET {fragment.clause}
                WHERE handle = {handle_idx}
                RETURNING {COMPANY_COLUMNS}""",
            [*fragment.values, handle],
        ).mappings().first()
    except IntegrityError as exc:
        db.rollback()
        raise BadRequestError(f"Invalid update for company {handle}") from exc

    if not company:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info("Updated company %s: %s", handle, ", ".join(data))
    return dict(company)


def remove(db: Session, handle: str) -> None:
    """Delete a company (and its jobs). Raises NotFoundError if not found."""
    deleted = run_query(db, "DELETE FROM companies WHERE handle = $1 RETURNING handle", [handle]).first()
    if not deleted:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info("Deleted company %s", handle)
