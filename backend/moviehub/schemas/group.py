"""Pydantic schemas for groups, memberships and group content."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from moviehub.models.group import GroupRole
from moviehub.schemas.common import Pagination


class GroupCreate(BaseModel):
    name: str
    description: Optional[str] = None


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class GroupOut(BaseModel):
    group_id: str
    name: str
    description: Optional[str] = None
    owner_id: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class GroupSummaryOut(GroupOut):
    owner_email: Optional[str] = None
    member_count: int
    movie_count: int
    is_member: bool
    is_owner: bool
    first_movie_id: Optional[int] = None


class GroupListOut(BaseModel):
    groups: list[GroupSummaryOut]
    pagination: Pagination


class GroupMemberOut(BaseModel):
    user_id: str
    email: Optional[str] = None
    role: GroupRole
    joined_at: datetime

    model_config = {"from_attributes": True}


class GroupContentAdd(BaseModel):
    movie_id: int = Field(strict=True)


class GroupContentOut(BaseModel):
    content_id: str
    group_id: str
    movie_id: int
    added_by: Optional[str] = None
    added_by_email: Optional[str] = None
    added_at: datetime

    model_config = {"from_attributes": True}


class GroupContentListOut(BaseModel):
    movies: list[GroupContentOut]
    count: int


class GroupDetailOut(GroupOut):
    owner_email: Optional[str] = None
    member_count: int
    members: list[GroupMemberOut] = []
    is_member: bool
    is_owner: bool
    content: Optional[list[GroupContentOut]] = None
