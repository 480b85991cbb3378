"""Routes for authentication."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas import UserAuth, UserRegister
from ..services import user_service
from ..utils.tokens import create_token

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/token")
def login(payload: UserAuth, db: Session = Depends(get_db)):
    """
    POST /auth/token { username, password } => { token }

    Returns a JWT which can be used to authenticate further requests.
    """
    user = user_service.authenticate(db, payload.username, payload.password)
    return {"token": create_token(user)}


@router.post("/register", status_code=201)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    """
    POST /auth/register { username, password, firstName, lastName, email } => { token }

    New users are never admins.
    """
    user = user_service.register(db, {**payload.changes(), "isAdmin": False})
    return {"token": create_token(user)}
