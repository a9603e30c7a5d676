"""Movie reviews: one per user per movie, editable and deletable by their author only."""
import logging
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from moviehub.config import settings
from moviehub.database import utcnow
from moviehub.errors import Conflict, Forbidden, NoOp, NotFound, ValidationError
from moviehub.models.review import Review
from moviehub.models.user import User
from moviehub.validation import check_movie_id, check_pagination

logger = logging.getLogger(__name__)

ALREADY_REVIEWED = "You have already reviewed this movie. You can update your existing review."


def _check_rating(rating: Any) -> int:
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValidationError("Rating must be a number between 1 and 5")
    return rating


def _clean_text(text: Optional[str]) -> str:
    if text is None or not text.strip():
        raise ValidationError("Review text cannot be empty")
    return text.strip()


def _review_fields(review: Review, user_email: Optional[str]) -> dict[str, Any]:
    return {
        "review_id": review.review_id,
        "user_id": review.user_id,
        "user_email": user_email,
        "movie_id": review.movie_id,
        "rating": review.rating,
        "text": review.text,
        "created_at": review.created_at,
        "updated_at": review.updated_at,
    }


def _get_review(db: Session, review_id: str) -> Review:
    review = db.query(Review).filter(Review.review_id == review_id).first()
    if not review:
        raise NotFound("Review not found")
    return review


def _email_of(db: Session, user_id: str) -> Optional[str]:
    return db.query(User.email).filter(User.user_id == user_id).scalar()


def create_review(db: Session, principal_id: str, movie_id: Any, rating: Any, text: Optional[str]) -> dict[str, Any]:
    movie_id = check_movie_id(movie_id)
    rating = _check_rating(rating)
    text = _clean_text(text)

    existing = (
        db.query(Review)
        .filter(Review.user_id == principal_id, Review.movie_id == movie_id)
        .first()
    )
    if existing:
        raise Conflict(ALREADY_REVIEWED)

    review = Review(user_id=principal_id, movie_id=movie_id, rating=rating, text=text)
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict(ALREADY_REVIEWED) from None
    db.refresh(review)
    logger.info("User %s reviewed movie %d (%d/5)", principal_id, movie_id, rating)
    return _review_fields(review, _email_of(db, principal_id))


def list_reviews(
    db: Session,
    movie_id: Optional[int] = None,
    user_id: Optional[str] = None,
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
) -> tuple[list[dict[str, Any]], int]:
    """One page of reviews, newest first, optionally filtered by movie and/or author."""
    check_pagination(page, limit)
    if movie_id is not None:
        check_movie_id(movie_id)

    query = db.query(Review, User.email).join(User, User.user_id == Review.user_id)
    count_query = db.query(func.count(Review.review_id))
    if movie_id is not None:
        query = query.filter(Review.movie_id == movie_id)
        count_query = count_query.filter(Review.movie_id == movie_id)
    if user_id is not None:
        query = query.filter(Review.user_id == user_id)
        count_query = count_query.filter(Review.user_id == user_id)

    rows = (
        query.order_by(Review.created_at.desc(), Review.review_id)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total = count_query.scalar() or 0
    return [_review_fields(review, email) for review, email in rows], total


def reviews_for_movie(db: Session, movie_id: Any) -> list[dict[str, Any]]:
    movie_id = check_movie_id(movie_id)
    rows = (
        db.query(Review, User.email)
        .join(User, User.user_id == Review.user_id)
        .filter(Review.movie_id == movie_id)
        .order_by(Review.created_at.desc(), Review.review_id)
        .all()
    )
    return [_review_fields(review, email) for review, email in rows]


def update_review(db: Session, principal_id: str, review_id: str, updates: dict[str, Any]) -> dict[str, Any]:
    """Apply rating/text from ``updates``; None values count as absent."""
    changes = {k: v for k, v in updates.items() if k in ("rating", "text") and v is not None}
    if not changes:
        raise NoOp("At least one field (rating or text) must be provided for update")

    review = _get_review(db, review_id)
    if review.user_id != principal_id:
        raise Forbidden("You can only update your own reviews")

    if "rating" in changes:
        review.rating = _check_rating(changes["rating"])
    if "text" in changes:
        review.text = _clean_text(changes["text"])
    review.updated_at = utcnow()
    db.commit()
    db.refresh(review)
    logger.info("Updated review %s", review_id)
    return _review_fields(review, _email_of(db, principal_id))


def delete_review(db: Session, principal_id: str, review_id: str) -> None:
    review = _get_review(db, review_id)
    if review.user_id != principal_id:
        raise Forbidden("You can only delete your own reviews")
    db.delete(review)
    db.commit()
    logger.info("Deleted review %s", review_id)
