"""Review routes, plus the per-movie review listing mounted under /api/movies."""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from moviehub.config import settings
from moviehub.database import get_db
from moviehub.dependencies import get_current_user_id
from moviehub.schemas.common import ApiResponse, Pagination
from moviehub.schemas.review import MovieReviewsOut, ReviewCreate, ReviewListOut, ReviewOut, ReviewUpdate
from moviehub.services import review_service

router = APIRouter()
movie_router = APIRouter()


@router.post("/", response_model=ApiResponse[ReviewOut], status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreate,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    review = review_service.create_review(db, principal_id, payload.movie_id, payload.rating, payload.text)
    return ApiResponse(message="Review created successfully", data=ReviewOut.model_validate(review))


@router.get("/", response_model=ApiResponse[ReviewListOut])
def list_reviews(
    movie_id: Optional[int] = Query(None),
    user_id: Optional[str] = Query(None),
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    reviews, total = review_service.list_reviews(db, movie_id, user_id, page, limit)
    return ApiResponse(
        data=ReviewListOut(
            reviews=[ReviewOut.model_validate(r) for r in reviews],
            pagination=Pagination.build(page, limit, total),
        )
    )


@router.put("/{review_id}", response_model=ApiResponse[ReviewOut])
def update_review(
    review_id: str,
    payload: ReviewUpdate,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    review = review_service.update_review(db, principal_id, review_id, payload.model_dump(exclude_unset=True))
    return ApiResponse(message="Review updated successfully", data=ReviewOut.model_validate(review))


@router.delete("/{review_id}", response_model=ApiResponse[None])
def delete_review(
    review_id: str,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    review_service.delete_review(db, principal_id, review_id)
    return ApiResponse(message="Review deleted successfully")


@movie_router.get("/{movie_id}/reviews", response_model=ApiResponse[MovieReviewsOut])
def get_movie_reviews(movie_id: int, db: Session = Depends(get_db)):
    """All reviews for one movie, newest first."""
    reviews = review_service.reviews_for_movie(db, movie_id)
    return ApiResponse(
        data=MovieReviewsOut(
            movie_id=movie_id,
            reviews=[ReviewOut.model_validate(r) for r in reviews],
            count=len(reviews),
        )
    )
