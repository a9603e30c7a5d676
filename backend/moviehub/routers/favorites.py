"""Public, shareable view of a user's favorites."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from moviehub.database import get_db
from moviehub.errors import NotFound
from moviehub.models.favorite import Favorite
from moviehub.models.user import User
from moviehub.schemas.common import ApiResponse
from moviehub.schemas.favorite import SharedFavoriteOut, SharedFavoritesOut, SharedUserOut

router = APIRouter()


@router.get("/share/{user_id}", response_model=ApiResponse[SharedFavoritesOut])
def get_shared_favorites(user_id: str, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFound("User not found")

    favorites = (
        db.query(Favorite)
        .filter(Favorite.user_id == user_id)
        .order_by(Favorite.created_at.desc())
        .all()
    )
    return ApiResponse(
        data=SharedFavoritesOut(
            user=SharedUserOut(user_id=user.user_id, email=user.email),
            favorites=[SharedFavoriteOut(movie_id=f.movie_id, added_at=f.created_at) for f in favorites],
            count=len(favorites),
        )
    )
