"""Routes for jobs."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import ensure_admin
from ..schemas import JobNew, JobUpdate
from ..services import job_service

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("", status_code=201, dependencies=[Depends(ensure_admin)])
def create_job(payload: JobNew, db: Session = Depends(get_db)):
    """
    POST /jobs { title, salary, equity, companyHandle } => { job }

    Authorization required: admin
    """
    return {"job": job_service.create(db, payload.changes())}


@router.get("")
def list_jobs(request: Request, db: Session = Depends(get_db)):
    """
    GET /jobs => { jobs: [{ id, title, salary, equity, companyHandle }, ...] }

    Can filter on provided search filters:
    - title (will find case-insensitive, partial matches)
    - minSalary
    - hasEquity ("true" or "false")
    """
    filters = dict(request.query_params)
    if not filters:
        return {"jobs": job_service.find_all(db)}
    return {"jobs": job_service.search(db, filters)}


@router.get("/{job_id}")
def get_job(job_id: int, db: Session = Depends(get_db)):
    return {"job": job_service.get(db, job_id)}


@router.patch("/{job_id}", dependencies=[Depends(ensure_admin)])
def update_job(job_id: int, payload: JobUpdate, db: Session = Depends(get_db)):
    """
    PATCH /jobs/{id} { title, salary, equity } => { job }

    The company of a job cannot be changed.

    Authorization required: admin
    """
    return {"job": job_service.update(db, job_id, payload.changes())}


@router.delete("/{job_id}", dependencies=[Depends(ensure_admin)])
def delete_job(job_id: int, db: Session = Depends(get_db)):
    job = job_service.remove(db, job_id)
    return {"deleted": f"id({job['id']}) - {job['title']}"}
