"""Password hashing and JWT helpers."""
from datetime import timedelta
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from moviehub.config import settings
from moviehub.database import utcnow


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(user_id: str, email: str, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a bearer token whose subject is the user id."""
    now = utcnow()
    expire_at = now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRES_MINUTES))
    payload = {"sub": user_id, "email": email, "iat": now, "exp": expire_at}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """Return the user id carried by a valid token, or None."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    return subject if isinstance(subject, str) else None
