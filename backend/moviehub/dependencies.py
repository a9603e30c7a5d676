"""FastAPI dependencies resolving the request principal from a bearer token."""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from moviehub.database import get_db
from moviehub.errors import Unauthorized
from moviehub.models.user import User
from moviehub.security import decode_access_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _resolve_user_id(db: Session, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is None:
        return None
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        return None
    # Tokens outlive accounts; the user must still exist.
    if db.query(User.user_id).filter(User.user_id == user_id).first() is None:
        return None
    return user_id


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> str:
    """Principal for endpoints that require authentication."""
    if credentials is None:
        raise Unauthorized("Authentication required. Please provide a valid token.")
    user_id = _resolve_user_id(db, credentials)
    if user_id is None:
        logger.warning("Rejected bearer token")
        raise Unauthorized("Invalid or expired token. Please login again.")
    return user_id


def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[str]:
    """Principal for public endpoints; any unusable token means anonymous."""
    return _resolve_user_id(db, credentials)
