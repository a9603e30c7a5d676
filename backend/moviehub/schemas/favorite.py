"""Pydantic schemas for favorites."""
from datetime import datetime
from pydantic import BaseModel, Field


class FavoriteAdd(BaseModel):
    movie_id: int = Field(strict=True)


class FavoriteOut(BaseModel):
    favorite_id: str
    user_id: str
    movie_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class FavoriteListOut(BaseModel):
    favorites: list[FavoriteOut]
    count: int


class SharedUserOut(BaseModel):
    user_id: str
    email: str


class SharedFavoriteOut(BaseModel):
    movie_id: int
    added_at: datetime


class SharedFavoritesOut(BaseModel):
    user: SharedUserOut
    favorites: list[SharedFavoriteOut]
    count: int
