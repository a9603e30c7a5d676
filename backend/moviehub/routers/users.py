"""Current-user profile, account deletion and favorites routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from moviehub.database import get_db
from moviehub.dependencies import get_current_user_id
from moviehub.errors import Conflict, NotFound
from moviehub.models.favorite import Favorite
from moviehub.models.user import User
from moviehub.schemas.common import ApiResponse
from moviehub.schemas.favorite import FavoriteAdd, FavoriteListOut, FavoriteOut
from moviehub.schemas.user import ProfileOut
from moviehub.validation import check_movie_id

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


@router.get("/me", response_model=ApiResponse[ProfileOut])
def get_profile(principal_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return ApiResponse(data=ProfileOut.model_validate(_get_user(db, principal_id)))


@router.delete("/me", response_model=ApiResponse[None])
def delete_account(principal_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Delete the caller's account; owned groups, memberships, requests, favorites and reviews cascade."""
    user = _get_user(db, principal_id)
    db.delete(user)
    db.commit()
    logger.info("Deleted user %s", principal_id)
    return ApiResponse(message="Account deleted successfully. All associated data has been removed.")


@router.post("/me/favorites", response_model=ApiResponse[FavoriteOut], status_code=status.HTTP_201_CREATED)
def add_favorite(
    payload: FavoriteAdd,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    movie_id = check_movie_id(payload.movie_id)
    existing = (
        db.query(Favorite)
        .filter(Favorite.user_id == principal_id, Favorite.movie_id == movie_id)
        .first()
    )
    if existing:
        raise Conflict("Movie is already in your favorites list")

    favorite = Favorite(user_id=principal_id, movie_id=movie_id)
    db.add(favorite)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Movie is already in your favorites list") from None
    db.refresh(favorite)
    logger.info("User %s added movie %d to favorites", principal_id, movie_id)
    return ApiResponse(message="Movie added to favorites successfully", data=FavoriteOut.model_validate(favorite))


@router.get("/me/favorites", response_model=ApiResponse[FavoriteListOut])
def list_favorites(principal_id: str = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """The caller's favorites, newest first."""
    favorites = (
        db.query(Favorite)
        .filter(Favorite.user_id == principal_id)
        .order_by(Favorite.created_at.desc())
        .all()
    )
    return ApiResponse(
        data=FavoriteListOut(
            favorites=[FavoriteOut.model_validate(f) for f in favorites],
            count=len(favorites),
        )
    )


@router.delete("/me/favorites/{movie_id}", response_model=ApiResponse[None])
def remove_favorite(
    movie_id: int,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    check_movie_id(movie_id)
    favorite = (
        db.query(Favorite)
        .filter(Favorite.user_id == principal_id, Favorite.movie_id == movie_id)
        .first()
    )
    if not favorite:
        raise NotFound("Movie not found in your favorites list")
    db.delete(favorite)
    db.commit()
    logger.info("User %s removed movie %d from favorites", principal_id, movie_id)
    return ApiResponse(message="Movie removed from favorites successfully")
