"""Pydantic schemas for movie reviews."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from moviehub.schemas.common import Pagination


class ReviewCreate(BaseModel):
    movie_id: int = Field(strict=True)
    rating: int = Field(strict=True)
    text: str


class ReviewUpdate(BaseModel):
    rating: Optional[int] = Field(default=None, strict=True)
    text: Optional[str] = None


class ReviewOut(BaseModel):
    review_id: str
    user_id: str
    user_email: Optional[str] = None
    movie_id: int
    rating: int
    text: str
    created_at: datetime
    updated_at: datetime


class ReviewListOut(BaseModel):
    reviews: list[ReviewOut]
    pagination: Pagination


class MovieReviewsOut(BaseModel):
    movie_id: int
    reviews: list[ReviewOut]
    count: int
