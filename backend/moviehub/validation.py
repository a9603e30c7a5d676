"""Input checks shared by routers and services; failures raise ValidationError.

Email syntax is checked by ``EmailStr`` on the request schemas.
"""
from typing import Any, Optional

from moviehub.config import settings
from moviehub.errors import ValidationError

EMAIL_MAX_LENGTH = 255
MIN_PASSWORD_LENGTH = 8
# movie_id is stored in a 32-bit INTEGER column
MAX_MOVIE_ID = 2**31 - 1


def require_fields(**fields: Optional[str]) -> None:
    """Reject missing or blank string fields, naming all of them at once."""
    missing = [name for name, value in fields.items() if value is None or not value.strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_email_length(email: str) -> None:
    if len(email) > EMAIL_MAX_LENGTH:
        raise ValidationError(f"Email is too long (max {EMAIL_MAX_LENGTH} characters)")


def validate_password(password: str) -> None:
    """Require 8+ characters with an uppercase letter, a lowercase letter and a digit."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if not any(c.isupper() for c in password):
        raise ValidationError("Password must contain at least one uppercase letter")
    if not any(c.islower() for c in password):
        raise ValidationError("Password must contain at least one lowercase letter")
    if not any(c.isdigit() for c in password):
        raise ValidationError("Password must contain at least one number")


def check_movie_id(movie_id: Any) -> int:
    """TMDb ids are positive integers that fit the movie_id column."""
    if isinstance(movie_id, bool) or not isinstance(movie_id, int) or not 1 <= movie_id <= MAX_MOVIE_ID:
        raise ValidationError("Invalid movie_id. Must be a positive number (TMDb movie ID).")
    return movie_id


def check_pagination(page: int, limit: int) -> None:
    if page < 1:
        raise ValidationError("Page must be a positive number")
    if limit < 1 or limit > settings.MAX_PAGE_SIZE:
        raise ValidationError(f"Limit must be between 1 and {settings.MAX_PAGE_SIZE}")
