"""Routes for users."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import ensure_admin, ensure_correct_user_or_admin
from ..errors import ForbiddenError
from ..schemas import UserNew, UserUpdate
from ..services import user_service
from ..utils.tokens import create_token

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", status_code=201, dependencies=[Depends(ensure_admin)])
def create_user(payload: UserNew, db: Session = Depends(get_db)):
    """
    POST /users { user } => { user, token }

    Adds a new user. This is not the registration endpoint; it is for admins
    adding new users, who may be admins themselves.

    Authorization required: admin
    """
    user = user_service.register(db, payload.changes())
    return {"user": user, "token": create_token(user)}


@router.get("", dependencies=[Depends(ensure_admin)])
def list_users(db: Session = Depends(get_db)):
    return {"users": user_service.find_all(db)}


@router.get("/{username}", dependencies=[Depends(ensure_correct_user_or_admin)])
def get_user(username: str, db: Session = Depends(get_db)):
    """Returns { username, firstName, lastName, email, isAdmin, jobs }."""
    return {"user": user_service.get(db, username)}


@router.patch("/{username}")
def update_user(
    username: str,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(ensure_correct_user_or_admin),
):
    """
    PATCH /users/{username} { firstName, lastName, password, email, isAdmin } => { user }

    Only admins may change isAdmin.
    """
    data = payload.changes()
    if "isAdmin" in data and not current_user.get("isAdmin"):
        raise ForbiddenError("Only admins can change admin status")
    return {"user": user_service.update(db, username, data)}


@router.delete("/{username}", dependencies=[Depends(ensure_correct_user_or_admin)])
def delete_user(username: str, db: Session = Depends(get_db)):
    user_service.remove(db, username)
    return {"deleted": username}


@router.post("/{username}/jobs/{job_id}", dependencies=[Depends(ensure_correct_user_or_admin)])
def apply_for_job(username: str, job_id: int, db: Session = Depends(get_db)):
    user_service.apply_to_job(db, username, job_id)
    return {"applied": job_id}
