import re
from typing import Any, Sequence
from urllib.parse import urlsplit, urlunsplit

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Result
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from .config import get_database_uri

DATABASE_URL = get_database_uri()

IS_SQLITE = DATABASE_URL.startswith("sqlite")

if IS_SQLITE:
    # In-memory databases live and die with a connection, so share one.
    in_memory = DATABASE_URL in ("sqlite://", "sqlite:///:memory:")
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool if in_memory else None,
    )
else:
    engine = create_engine(
        DATABASE_URL,
        connect_args={"prepare_threshold": None},
        pool_pre_ping=True,
        poolclass=NullPool,
    )
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

if IS_SQLITE:

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _connection_record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")


_PLACEHOLDER_RE = re.compile(r"\$(\d+)")


def database_url_for_log() -> str:
    if not DATABASE_URL:
        return ""
    parsed = urlsplit(DATABASE_URL)
    if parsed.password is None:
        return DATABASE_URL
    netloc = parsed.netloc.replace(f":{parsed.password}@", ":***@")
    return urlunsplit((parsed.scheme, netloc, parsed.path, parsed.query, parsed.fragment))


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def run_query(db: Session, sql: str, values: Sequence[Any] = ()) -> Result:
    """Execute ``sql`` written with ``$1..$n`` placeholders bound to ``values``.

    ``$n`` markers are rewritten to SQLAlchemy named binds (``:p1``...) so the
    same statement runs on any dialect the engine supports.
    """
    params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}
    for match in _PLACEHOLDER_RE.finditer(sql):
        if f"p{match.group(1)}" not in params:
            raise ValueError(f"No bind value for placeholder ${match.group(1)}")
    return db.execute(text(_PLACEHOLDER_RE.sub(r":p\1", sql)), params)
