import logging
from decimal import Decimal
from typing import Any, Mapping

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import run_query
from ..errors import BadRequestError, NotFoundError
from ..utils.sql import sql_for_job_partial_filter, sql_for_partial_update

logger = logging.getLogger(__name__)

JOB_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'

JS_TO_SQL = {
    "companyHandle": "company_handle",
}


def format_job(row: Mapping[str, Any]) -> dict[str, Any]:
    """Row → API dict. Equity is a NUMERIC and always goes out as a string."""
    job = dict(row)
    if job.get("equity") is not None:
        job["equity"] = str(job["equity"])
    return job


def _bind_equity(data):
    # Decimal has no sqlite adapter; the database casts the text to NUMERIC.
    if isinstance(data, Mapping) and isinstance(data.get("equity"), Decimal):
        return {**data, "equity": str(data["equity"])}
    return data


def create(db: Session, data: dict[str, Any]) -> dict[str, Any]:
    """Create a job from ``{title, salary, equity, companyHandle}``.

    Raises BadRequestError if the company does not exist.
    """
    data = _bind_equity(data)
    company_handle = data["companyHandle"]

    company = run_query(db, "SELECT handle FROM companies WHERE handle = $1", [company_handle]).first()
    if not company:
        raise BadRequestError(f"No company: {company_handle}")

    job = run_query(
        db,
        f"""INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {JOB_COLUMNS}""",
        [data["title"], data.get("salary"), data.get("equity"), company_handle],
    ).mappings().first()
    db.commit()

    logger.info("Created job %s (%s) at %s", job["id"], job["title"], company_handle)
    return format_job(job)


def find_all(db: Session) -> list[dict[str, Any]]:
    result = run_query(db, f"SELECT {JOB_COLUMNS} FROM jobs ORDER BY title, id")
    return [format_job(row) for row in result.mappings().all()]


def search(db: Session, filters: dict[str, Any]) -> list[dict[str, Any]]:
    """Find all jobs matching any combination of title, minSalary and hasEquity."""
    fragment = sql_for_job_partial_filter(filters)
    result = run_query(
        db,
        f"SELECT {JOB_COLUMNS} FROM jobs WHERE {fragment.clause} ORDER BY title, id",
        fragment.values,
    )
    return [format_job(row) for row in result.mappings().all()]


def get(db: Session, job_id: int) -> dict[str, Any]:
    """Given a job id, return the job with its full ``company``.

    Returns ``{id, title, salary, equity, company}`` where company is
    ``{handle, name, description, numEmployees, logoUrl}``.

    Raises NotFoundError if not found.
    """
    row = run_query(db, f"SELECT {JOB_COLUMNS} FROM jobs WHERE id = $1", [job_id]).mappings().first()
    if not row:
        raise NotFoundError(f"No job: {job_id}")

    job = format_job(row)
    company = run_query(
        db,
        """SELECT handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"
           FROM companies
           WHERE handle = $1""",
        [job.pop("companyHandle")],
    ).mappings().first()
    job["company"] = dict(company)
    return job


def update(db: Session, job_id: int, data: dict[str, Any]) -> dict[str, Any]:
    """Update job data with ``data``.

    This is a "partial update": only the fields present in ``data`` change.
    Data can include ``{title, salary, equity}``.

    Raises NotFoundError if not found.
    """
    fragment = sql_for_partial_update(_bind_equity(data), JS_TO_SQL)
    id_idx = f"${len(fragment.values) + 1}"

    try:
        job = run_query(
            db,
            f"""UPDATE jobs
                SET {fragment.clause}
                WHERE id = {id_idx}
                RETURNING {JOB_COLUMNS}""",
            [*fragment.values, job_id],
        ).mappings().first()
    except IntegrityError as exc:
        db.rollback()
        raise BadRequestError(f"Invalid update for job {job_id}") from exc

    if not job:
        db.rollback()
        raise NotFoundError(f"No job: {job_id}")

    db.commit()
    logger.info("Updated job %s: %s", job_id, ", ".join(data))
    return format_job(job)


def remove(db: Session, job_id: int) -> dict[str, Any]:
    """Delete a job; returns ``{id, title}``. Raises NotFoundError if not found."""
    job = run_query(db, "DELETE FROM jobs WHERE id = $1 RETURNING id, title", [job_id]).mappings().first()
    if not job:
        db.rollback()
        raise NotFoundError(f"No job: {job_id}")

    db.commit()
    logger.info("Deleted job %s", job_id)
    return dict(job)
