from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Optional

from flask import g, request
from jose import JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from config import JWT_ALGORITHM, JWT_EXPIRE_HOURS, JWT_SECRET
from errors import ForbiddenError, UnauthenticatedError


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return bool(hashed) and check_password_hash(hashed, password)


def create_token(user: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Signed session token carrying the user's id, username and email."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=JWT_EXPIRE_HOURS))
    claims = {
        "userId": str(user["_id"]),
        "username": user.get("username"),
        "email": user.get("email"),
        "exp": expire,
    }
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Returns the claims, or None if the token is invalid or expired."""
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None


def _bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    parts = header.split(" ")
    if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1]:
        return parts[1]
    return None


def token_required(f):
    """Decorator: rejects the request unless it carries a valid bearer token."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _bearer_token()
        if not token:
            raise UnauthenticatedError("Token required")
        claims = decode_token(token)
        if not claims or not claims.get("userId"):
            raise ForbiddenError("Invalid token")
        g.current_user = {
            "userId": claims["userId"],
            "username": claims.get("username"),
            "email": claims.get("email"),
        }
        return f(*args, **kwargs)
    return decorated_function
