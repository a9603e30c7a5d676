"""Membership projections for group listing and detail views.

Every value (member_count, movie_count, is_member, is_owner,
first_movie_id) is recomputed from the database on each call.
"""
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from moviehub.config import settings
from moviehub.errors import NotFound
from moviehub.models.group import Group, GroupContent, GroupMember, GroupRole
from moviehub.models.user import User
from moviehub.validation import check_pagination


def get_group_or_404(db: Session, group_id: str) -> Group:
    group = db.query(Group).filter(Group.group_id == group_id).first()
    if not group:
        raise NotFound("Group not found")
    return group


def get_membership(db: Session, group_id: str, user_id: Optional[str]) -> Optional[GroupMember]:
    if user_id is None:
        return None
    return (
        db.query(GroupMember)
        .filter(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
        .first()
    )


def _group_fields(group: Group) -> dict[str, Any]:
    return {
        "group_id": group.group_id,
        "name": group.name,
        "description": group.description,
        "owner_id": group.owner_id,
        "created_at": group.created_at,
        "updated_at": group.updated_at,
    }


def _member_count_column():
    return (
        select(func.count(GroupMember.user_id))
        .where(GroupMember.group_id == Group.group_id)
        .correlate(Group)
        .scalar_subquery()
    )


def _movie_count_column():
    return (
        select(func.count(GroupContent.movie_id))
        .where(GroupContent.group_id == Group.group_id)
        .correlate(Group)
        .scalar_subquery()
    )


def _first_movie_column():
    """Earliest-added movie of the group; the client uses it as the thumbnail key."""
    return (
        select(GroupContent.movie_id)
        .where(GroupContent.group_id == Group.group_id)
        .order_by(GroupContent.added_at.asc(), GroupContent.content_id)
        .limit(1)
        .correlate(Group)
        .scalar_subquery()
    )


def _principal_role_column(principal_id: str):
    return (
        select(GroupMember.role)
        .where(GroupMember.group_id == Group.group_id, GroupMember.user_id == principal_id)
        .correlate(Group)
        .scalar_subquery()
    )


def list_groups(
    db: Session,
    principal_id: Optional[str],
    page: int = 1,
    limit: int = settings.DEFAULT_PAGE_SIZE,
) -> tuple[list[dict[str, Any]], int]:
    """Return one page of group summaries (newest first) and the total group count."""
    check_pagination(page, limit)

    columns = [
        Group,
        User.email.label("owner_email"),
        _member_count_column().label("member_count"),
        _movie_count_column().label("movie_count"),
        _first_movie_column().label("first_movie_id"),
    ]
    if principal_id is not None:
        columns.append(_principal_role_column(principal_id).label("principal_role"))

    rows = (
        db.query(*columns)
        .outerjoin(User, User.user_id == Group.owner_id)
        .order_by(Group.created_at.desc(), Group.group_id)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    total = db.query(func.count(Group.group_id)).scalar() or 0

    groups = []
    for row in rows:
        role = getattr(row, "principal_role", None)
        summary = _group_fields(row.Group)
        summary.update(
            owner_email=row.owner_email,
            member_count=int(row.member_count or 0),
            movie_count=int(row.movie_count or 0),
            is_member=role is not None,
            is_owner=role == GroupRole.owner,
            first_movie_id=row.first_movie_id,
        )
        groups.append(summary)
    return groups, total


def content_rows(db: Session, group_id: str) -> list[dict[str, Any]]:
    """Movies attached to a group, newest first."""
    rows = (
        db.query(GroupContent, User.email.label("added_by_email"))
        .outerjoin(User, User.user_id == GroupContent.added_by)
        .filter(GroupContent.group_id == group_id)
        .order_by(GroupContent.added_at.desc(), GroupContent.content_id)
        .all()
    )
    return [
        {
            "content_id": content.content_id,
            "group_id": content.group_id,
            "movie_id": content.movie_id,
            "added_by": content.added_by,
            "added_by_email": added_by_email,
            "added_at": content.added_at,
        }
        for content, added_by_email in rows
    ]


def get_group_details(db: Session, principal_id: Optional[str], group_id: str) -> dict[str, Any]:
    """Group with members; content only when the principal is a member."""
    row = (
        db.query(Group, User.email.label("owner_email"))
        .outerjoin(User, User.user_id == Group.owner_id)
        .filter(Group.group_id == group_id)
        .first()
    )
    if row is None:
        raise NotFound("Group not found")
    group, owner_email = row

    member_count = (
        db.query(func.count(GroupMember.user_id))
        .filter(GroupMember.group_id == group_id)
        .scalar()
    )
    members = (
        db.query(GroupMember, User.email)
        .join(User, User.user_id == GroupMember.user_id)
        .filter(GroupMember.group_id == group_id)
        .order_by(GroupMember.joined_at.asc(), GroupMember.user_id)
        .all()
    )

    membership = get_membership(db, group_id, principal_id)
    is_member = membership is not None
    is_owner = is_member and membership.role == GroupRole.owner

    details = _group_fields(group)
    details.update(
        owner_email=owner_email,
        member_count=int(member_count or 0),
        members=[
            {"user_id": m.user_id, "email": email, "role": m.role, "joined_at": m.joined_at}
            for m, email in members
        ],
        is_member=is_member,
        is_owner=is_owner,
        content=content_rows(db, group_id) if is_member else None,
    )
    return details
