"""Group, membership, join-request and group content API routes."""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from moviehub.config import settings
from moviehub.database import get_db
from moviehub.dependencies import get_current_user_id, get_optional_user_id
from moviehub.schemas.common import ApiResponse, Pagination
from moviehub.schemas.group import (
    GroupContentAdd,
    GroupContentListOut,
    GroupContentOut,
    GroupCreate,
    GroupDetailOut,
    GroupListOut,
    GroupOut,
    GroupSummaryOut,
    GroupUpdate,
)
from moviehub.schemas.join_request import JoinRequestOut, PendingRequestListOut, PendingRequestOut
from moviehub.services import group_service, join_request_service, membership_queries

router = APIRouter()


@router.post("/", response_model=ApiResponse[GroupOut], status_code=status.HTTP_201_CREATED)
def create_group(
    payload: GroupCreate,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create a new group. The creator becomes its owner."""
    group = group_service.create_group(db, principal_id, payload.name, payload.description)
    return ApiResponse(message="Group created successfully", data=GroupOut.model_validate(group))


@router.get("/", response_model=ApiResponse[GroupListOut])
def list_groups(
    page: int = Query(1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    principal_id: Optional[str] = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    """List groups newest first; membership flags are filled in for authenticated callers."""
    groups, total = membership_queries.list_groups(db, principal_id, page, limit)
    return ApiResponse(
        data=GroupListOut(
            groups=[GroupSummaryOut.model_validate(g) for g in groups],
            pagination=Pagination.build(page, limit, total),
        )
    )


@router.get("/notifications/requests", response_model=ApiResponse[PendingRequestListOut])
def list_pending_requests_for_owner(
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Pending join requests across every group the caller owns, newest first."""
    requests = join_request_service.list_pending_for_owner(db, principal_id)
    return ApiResponse(
        data=PendingRequestListOut(
            requests=[PendingRequestOut.model_validate(r) for r in requests],
            count=len(requests),
        )
    )


@router.get("/{group_id}", response_model=ApiResponse[GroupDetailOut])
def get_group(
    group_id: str,
    principal_id: Optional[str] = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    """Fetch a group with its members; content is only included for members."""
    details = membership_queries.get_group_details(db, principal_id, group_id)
    return ApiResponse(data=GroupDetailOut.model_validate(details))


@router.put("/{group_id}", response_model=ApiResponse[GroupOut])
def update_group(
    group_id: str,
    payload: GroupUpdate,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Update name and/or description (owner only, partial update)."""
    group = group_service.update_group(db, principal_id, group_id, payload.model_dump(exclude_unset=True))
    return ApiResponse(message="Group updated successfully", data=GroupOut.model_validate(group))


@router.delete("/{group_id}", response_model=ApiResponse[None])
def delete_group(
    group_id: str,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Delete a group and everything attached to it (owner only)."""
    group_service.delete_group(db, principal_id, group_id)
    return ApiResponse(message="Group deleted successfully")


@router.post("/{group_id}/join", response_model=ApiResponse[JoinRequestOut], status_code=status.HTTP_201_CREATED)
def request_to_join(
    group_id: str,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    jr = join_request_service.request_to_join(db, principal_id, group_id)
    return ApiResponse(message="Join request sent successfully", data=JoinRequestOut.model_validate(jr))


@router.get("/{group_id}/requests", response_model=ApiResponse[PendingRequestListOut])
def list_join_requests(
    group_id: str,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Pending join requests for one group, oldest first (owner only)."""
    requests = join_request_service.list_pending_for_group(db, principal_id, group_id)
    return ApiResponse(
        data=PendingRequestListOut(
            requests=[PendingRequestOut.model_validate(r) for r in requests],
            count=len(requests),
        )
    )


@router.post("/{group_id}/requests/{request_id}/approve", response_model=ApiResponse[JoinRequestOut])
def approve_join_request(
    group_id: str,
    request_id: str,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    jr = join_request_service.approve_request(db, principal_id, group_id, request_id)
    return ApiResponse(message="Join request approved successfully", data=JoinRequestOut.model_validate(jr))


@router.post("/{group_id}/requests/{request_id}/reject", response_model=ApiResponse[JoinRequestOut])
def reject_join_request(
    group_id: str,
    request_id: str,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    jr = join_request_service.reject_request(db, principal_id, group_id, request_id)
    return ApiResponse(message="Join request rejected successfully", data=JoinRequestOut.model_validate(jr))


@router.post("/{group_id}/movies", response_model=ApiResponse[GroupContentOut], status_code=status.HTTP_201_CREATED)
def add_movie(
    group_id: str,
    payload: GroupContentAdd,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Attach a movie to the group (owner only)."""
    content = group_service.add_content(db, principal_id, group_id, payload.movie_id)
    return ApiResponse(message="Movie added to group successfully", data=GroupContentOut.model_validate(content))


@router.get("/{group_id}/movies", response_model=ApiResponse[GroupContentListOut])
def list_movies(
    group_id: str,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Movies of the group (members only)."""
    movies = group_service.list_content(db, principal_id, group_id)
    return ApiResponse(
        data=GroupContentListOut(
            movies=[GroupContentOut.model_validate(m) for m in movies],
            count=len(movies),
        )
    )


@router.delete("/{group_id}/movies/{movie_id}", response_model=ApiResponse[None])
def remove_movie(
    group_id: str,
    movie_id: int,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    group_service.remove_content(db, principal_id, group_id, movie_id)
    return ApiResponse(message="Movie removed from group successfully")


@router.delete("/{group_id}/leave", response_model=ApiResponse[None])
def leave_group(
    group_id: str,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    group_service.leave_group(db, principal_id, group_id)
    return ApiResponse(message="Left group successfully")


@router.delete("/{group_id}/members/{user_id}", response_model=ApiResponse[None])
def remove_member(
    group_id: str,
    user_id: str,
    principal_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Remove a member from the group (owner only; the owner cannot be removed)."""
    group_service.remove_member(db, principal_id, group_id, user_id)
    return ApiResponse(message="Member removed from group successfully")
