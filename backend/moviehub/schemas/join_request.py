"""Pydantic schemas for group join requests."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from moviehub.models.join_request import RequestStatus


class JoinRequestOut(BaseModel):
    request_id: str
    group_id: str
    user_id: str
    status: RequestStatus
    requested_at: datetime
    responded_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PendingRequestOut(JoinRequestOut):
    user_email: Optional[str] = None
    group_name: Optional[str] = None


class PendingRequestListOut(BaseModel):
    requests: list[PendingRequestOut]
    count: int
