import logging
from typing import Any, Mapping

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import BCRYPT_WORK_FACTOR
from ..database import run_query
from ..errors import BadRequestError, NotFoundError, UnauthorizedError
from ..utils.sql import sql_for_partial_update

logger = logging.getLogger(__name__)

USER_COLUMNS = 'username, first_name AS "firstName", last_name AS "lastName", email, is_admin AS "isAdmin"'

JS_TO_SQL = {
    "firstName": "first_name",
    "lastName": "last_name",
    "isAdmin": "is_admin",
}


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_WORK_FACTOR)).decode("utf-8")


def _format_user(row: Mapping[str, Any]) -> dict[str, Any]:
    user = dict(row)
    user["isAdmin"] = bool(user["isAdmin"])
    return user


def authenticate(db: Session, username: str, password: str) -> dict[str, Any]:
    """Return the user for ``username``/``password``.

    Raises UnauthorizedError if the user is not found or the password is wrong.
    """
    row = run_query(
        db,
        f"SELECT {USER_COLUMNS}, password FROM users WHERE username = $1",
        [username],
    ).mappings().first()

    if row and bcrypt.checkpw(password.encode("utf-8"), row["password"].encode("utf-8")):
        user = _format_user(row)
        del user["password"]
        return user

    logger.info("Failed login for %s", username)
    raise UnauthorizedError("Invalid username/password")


def register(db: Session, data: dict[str, Any]) -> dict[str, Any]:
    """Register a user from ``{username, password, firstName, lastName, email, isAdmin}``.

    Raises BadRequestError on duplicates.
    """
    username = data["username"]
    duplicate = run_query(db, "SELECT username FROM users WHERE username = $1", [username]).first()
    if duplicate:
        raise BadRequestError(f"Duplicate username: {username}")

    user = run_query(
        db,
        f"""INSERT INTO users (username, password, first_name, last_name, email, is_admin)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING {USER_COLUMNS}""",
        [
            username,
            hash_password(data["password"]),
            data["firstName"],
            data["lastName"],
            data["email"],
            bool(data.get("isAdmin", False)),
        ],
    ).mappings().first()
    db.commit()

    logger.info("Registered user %s", username)
    return _format_user(user)


def find_all(db: Session) -> list[dict[str, Any]]:
    result = run_query(db, f"SELECT {USER_COLUMNS} FROM users ORDER BY username")
    return [_format_user(row) for row in result.mappings().all()]


def get(db: Session, username: str) -> dict[str, Any]:
    """Return ``{username, firstName, lastName, email, isAdmin, jobs}``; jobs are applied job ids.

    Raises NotFoundError if not found.
    """
    row = run_query(db, f"SELECT {USER_COLUMNS} FROM users WHERE username = $1", [username]).mappings().first()
    if not row:
        raise NotFoundError(f"No user: {username}")

    applications = run_query(
        db,
        "SELECT job_id FROM applications WHERE username = $1 ORDER BY job_id",
        [username],
    ).all()

    user = _format_user(row)
    user["jobs"] = [app.job_id for app in applications]
    return user


def update(db: Session, username: str, data: dict[str, Any]) -> dict[str, Any]:
    """Update user data with ``data``.

    This is a "partial update": only the fields present in ``data`` change.
    Data can include ``{firstName, lastName, password, email, isAdmin}``.
    A new password is hashed before it is stored.

    Raises NotFoundError if not found.
    """
    if isinstance(data, Mapping) and data.get("password"):
        data = {**data, "password": hash_password(data["password"])}

    fragment = sql_for_partial_update(data, JS_TO_SQL)
    username_idx = f"${len(fragment.values) + 1}"

    try:
        user = run_query(
            db,
            f"""UPDATE users
                SET {fragment.clause}
                WHERE username = {username_idx}
                RETURNING {USER_COLUMNS}""",
            [*fragment.values, username],
        ).mappings().first()
    except IntegrityError as exc:
        db.rollback()
        raise BadRequestError(f"Invalid update for user {username}") from exc

    if not user:
        db.rollback()
        raise NotFoundError(f"No user: {username}")

    db.commit()
    logger.info("Updated user %s: %s", username, ", ".join(data))
    return _format_user(user)


def remove(db: Session, username: str) -> None:
    deleted = run_query(db, "DELETE FROM users WHERE username = $1 RETURNING username", [username]).first()
    if not deleted:
        db.rollback()
        raise NotFoundError(f"No user: {username}")

    db.commit()
    logger.info("Deleted user %s", username)


def apply_to_job(db: Session, username: str, job_id: int) -> None:
    """Record that ``username`` applied to ``job_id``.

    Raises NotFoundError if either is missing, BadRequestError if already applied.
    """
    if not run_query(db, "SELECT id FROM jobs WHERE id = $1", [job_id]).first():
        raise NotFoundError(f"No job: {job_id}")
    if not run_query(db, "SELECT username FROM users WHERE username = $1", [username]).first():
        raise NotFoundError(f"No username: {username}")

    existing = run_query(
        db,
        "SELECT job_id FROM applications WHERE username = $1 AND job_id = $2",
        [username, job_id],
    ).first()
    if existing:
        raise BadRequestError(f"Already applied: {username} to job {job_id}")

    run_query(db, "INSERT INTO applications (job_id, username) VALUES ($1, $2)", [job_id, username])
    db.commit()
    logger.info("User %s applied to job %s", username, job_id)
