"""Routes for companies."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import ensure_admin
from ..schemas import CompanyNew, CompanyUpdate
from ..services import company_service

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.post("", status_code=201, dependencies=[Depends(ensure_admin)])
def create_company(payload: CompanyNew, db: Session = Depends(get_db)):
    """
    POST /companies { handle, name, description, numEmployees, logoUrl } => { company }

    Authorization required: admin
    """
    return {"company": company_service.create(db, payload.changes())}


@router.get("")
def list_companies(request: Request, db: Session = Depends(get_db)):
    """
    GET /companies => { companies: [{ handle, name, description, numEmployees, logoUrl }, ...] }

    Can filter on provided search filters:
    - minEmployees
    - maxEmployees
    - nameLike (will find case-insensitive, partial matches)
    """
    filters = dict(request.query_params)
    if not filters:
        return {"companies": company_service.find_all(db)}
    return {"companies": company_service.search(db, filters)}


@router.get("/{handle}")
def get_company(handle: str, db: Session = Depends(get_db)):
    """Company is { handle, name, description, numEmployees, logoUrl, jobs }."""
    return {"company": company_service.get(db, handle)}


@router.patch("/{handle}", dependencies=[Depends(ensure_admin)])
def update_company(handle: str, payload: CompanyUpdate, db: Session = Depends(get_db)):
    return {"company": company_service.update(db, handle, payload.changes())}


@router.delete("/{handle}", dependencies=[Depends(ensure_admin)])
def delete_company(handle: str, db: Session = Depends(get_db)):
    company_service.remove(db, handle)
    return {"deleted": handle}
