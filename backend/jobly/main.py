import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import models  # noqa: F401  registers the tables on Base.metadata
from .config import CORS_ORIGINS, PORT
from .database import Base, database_url_for_log, engine
from .routes import auth, companies, jobs, users

app = FastAPI(title="Jobly API", version="1.0.0")
logger = logging.getLogger("uvicorn.error")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(companies.router)
app.include_router(jobs.router)
app.include_router(users.router)


def _error_response(message, status: int) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": {"message": message, "status": status}})


@app.on_event("startup")
def init_database() -> None:
    logger.info("Database connection URL: %s", database_url_for_log())
    Base.metadata.create_all(bind=engine)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # ApiError carries its own message; plain HTTP errors (404 routes, 405) use detail.
    message = getattr(exc, "message", exc.detail)
    return _error_response(message, exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]
    return _error_response(errors, 400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # ServerErrorMiddleware re-raises after this, and the server logs the traceback.
    return _error_response("Internal Server Error", 500)


@app.get("/health")
def health_check():
    return {"status": "ok"}


def run() -> None:
    """Start the API server on the configured port."""
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=PORT)


if __name__ == "__main__":
    run()
