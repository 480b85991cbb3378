"""Shared config for the application; can be required many places."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from backend/.env
ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(dotenv_path=ENV_PATH)

APP_ENV = os.getenv("APP_ENV", "development").strip()

SECRET_KEY = os.getenv("SECRET_KEY", "secret-dev")

PORT = int(os.getenv("PORT", "3001"))

# Speed up bcrypt during tests, since the algorithm safety isn't being tested.
# bcrypt refuses anything below 4 rounds.
BCRYPT_WORK_FACTOR = 4 if APP_ENV == "test" else 12

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,http://127.0.0.1:3000",
    ).split(",")
    if origin.strip()
]


def get_database_uri() -> str:
    """Use dev database, testing database, or via env var, production database."""
    url = os.getenv("DATABASE_URL", "").strip()
    if not url:
        name = "jobly_test" if os.getenv("APP_ENV", APP_ENV) == "test" else "jobly"
        return f"postgresql+psycopg:///{name}"

    # Hosted Postgres URLs are often provided as postgresql:// or postgres://
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+psycopg://", 1)
    elif url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg://", 1)
    return url
