"""Registration, login and logout routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from moviehub.database import get_db
from moviehub.errors import Conflict, Unauthorized
from moviehub.models.user import User
from moviehub.schemas.common import ApiResponse
from moviehub.schemas.user import AuthOut, LoginRequest, RegisterRequest, UserOut
from moviehub.security import create_access_token, hash_password, verify_password
from moviehub.validation import check_email_length, normalize_email, require_fields, validate_password

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=ApiResponse[AuthOut], status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account and return a bearer token for it."""
    require_fields(email=payload.email, password=payload.password)
    email = normalize_email(payload.email)
    check_email_length(email)
    validate_password(payload.password)

    if db.query(User).filter(User.email == email).first():
        raise Conflict("User with this email already exists")

    user = User(email=email, password_hash=hash_password(payload.password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("User with this email already exists") from None
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.user_id, user.email)

    token = create_access_token(user.user_id, user.email)
    return ApiResponse(
        message="User registered successfully",
        data=AuthOut(user=UserOut.model_validate(user), token=token),
    )


@router.post("/login", response_model=ApiResponse[AuthOut])
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Check credentials and issue a bearer token."""
    require_fields(email=payload.email, password=payload.password)
    user = db.query(User).filter(User.email == normalize_email(payload.email)).first()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning("Failed login attempt for %s", payload.email)
        raise Unauthorized("Invalid email or password")

    token = create_access_token(user.user_id, user.email)
    return ApiResponse(
        message="Login successful",
        data=AuthOut(user=UserOut.model_validate(user), token=token),
    )


@router.post("/logout", response_model=ApiResponse[None])
def logout():
    # Tokens are stateless; the client discards its copy.
    return ApiResponse(message="Logout successful. Please remove the token from client storage.")
