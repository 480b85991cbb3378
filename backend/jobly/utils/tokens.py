import jwt

from ..config import SECRET_KEY

ALGORITHM = "HS256"


def create_token(user: dict) -> str:
    """Return a signed JWT for ``user``, carrying its username and admin flag."""
    payload = {
        "username": user["username"],
        "isAdmin": bool(user.get("isAdmin", False)),
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Verify ``token`` and return its payload; raises ``jwt.InvalidTokenError``."""
    return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
