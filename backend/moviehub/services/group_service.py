"""Group domain service.

Responsibilities:
- Owner-only mutation: update, delete, content and member management
- The owner's membership is created with the group and never removed while it exists
- Input validation for names, descriptions and movie references
- Atomic cascade on delete (memberships, join requests, content)
"""
import logging
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from moviehub.database import utcnow
from moviehub.errors import Conflict, Forbidden, NoOp, NotFound, ValidationError
from moviehub.models.group import Group, GroupContent, GroupMember, GroupRole
from moviehub.services.membership_queries import content_rows, get_group_or_404, get_membership
from moviehub.validation import check_movie_id

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000


def _clean_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise ValidationError("Group name is required")
    name = name.strip()
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError(f"Group name must be {NAME_MAX_LENGTH} characters or less")
    return name


def _clean_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    description = description.strip()
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(f"Description must be {DESCRIPTION_MAX_LENGTH} characters or less")
    return description or None


def get_owned_group(db: Session, principal_id: str, group_id: str, action: str) -> Group:
    """Load a group and require the principal to own it; checked against stored state on every call."""
    group = get_group_or_404(db, group_id)
    if group.owner_id != principal_id:
        raise Forbidden(f"Only the group owner can {action}")
    return group


def create_group(db: Session, principal_id: str, name: Optional[str], description: Optional[str] = None) -> Group:
    """Create a group; the creator becomes its owner and first member."""
    group = Group(
        name=_clean_name(name),
        description=_clean_description(description),
        owner_id=principal_id,
    )
    db.add(group)
    db.flush()

    db.add(GroupMember(group_id=group.group_id, user_id=principal_id, role=GroupRole.owner))
    db.commit()
    db.refresh(group)
    logger.info("Created group '%s' (%s) owned by %s", group.name, group.group_id, principal_id)
    return group


def update_group(db: Session, principal_id: str, group_id: str, updates: dict[str, Any]) -> Group:
    """Apply the name/description keys present in ``updates``."""
    group = get_owned_group(db, principal_id, group_id, "update the group")

    changes: dict[str, Any] = {}
    if "name" in updates:
        changes["name"] = _clean_name(updates["name"])
    if "description" in updates:
        changes["description"] = _clean_description(updates["description"])
    if not changes:
        raise NoOp("No fields to update")

    for field, value in changes.items():
        setattr(group, field, value)
    group.updated_at = utcnow()
    db.commit()
    db.refresh(group)
    logger.info("Updated group %s (%s)", group_id, ", ".join(changes))
    return group


def delete_group(db: Session, principal_id: str, group_id: str) -> None:
    group = get_owned_group(db, principal_id, group_id, "delete the group")
    db.delete(group)
    db.commit()
    logger.info("Deleted group %s", group_id)


def add_content(db: Session, principal_id: str, group_id: str, movie_id: Any) -> GroupContent:
    movie_id = check_movie_id(movie_id)
    get_owned_group(db, principal_id, group_id, "add movies to this group")

    existing = (
        db.query(GroupContent)
        .filter(GroupContent.group_id == group_id, GroupContent.movie_id == movie_id)
        .first()
    )
    if existing:
        raise Conflict("Movie is already in this group")

    content = GroupContent(group_id=group_id, movie_id=movie_id, added_by=principal_id)
    db.add(content)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Movie is already in this group") from None
    db.refresh(content)
    logger.info("Added movie %d to group %s", movie_id, group_id)
    return content


def remove_content(db: Session, principal_id: str, group_id: str, movie_id: Any) -> None:
    movie_id = check_movie_id(movie_id)
    get_owned_group(db, principal_id, group_id, "remove movies from this group")

    content = (
        db.query(GroupContent)
        .filter(GroupContent.group_id == group_id, GroupContent.movie_id == movie_id)
        .first()
    )
    if not content:
        raise NotFound("Movie not found in group")
    db.delete(content)
    db.commit()
    logger.info("Removed movie %d from group %s", movie_id, group_id)


def list_content(db: Session, principal_id: str, group_id: str) -> list[dict[str, Any]]:
    """Group movies, visible to members only."""
    get_group_or_404(db, group_id)
    if get_membership(db, group_id, principal_id) is None:
        raise Forbidden("You must be a member of this group to view movies")
    return content_rows(db, group_id)


def remove_member(db: Session, principal_id: str, group_id: str, target_user_id: str) -> None:
    group = get_owned_group(db, principal_id, group_id, "remove members from this group")
    if target_user_id == group.owner_id:
        raise Forbidden("Group owner cannot remove themselves. Delete the group instead.")

    membership = get_membership(db, group_id, target_user_id)
    if membership is None:
        raise NotFound("User is not a member of this group")
    db.delete(membership)
    db.commit()
    logger.info("Removed user %s from group %s", target_user_id, group_id)


def leave_group(db: Session, principal_id: str, group_id: str) -> None:
    membership = get_membership(db, group_id, principal_id)
    if membership is None:
        raise NotFound("You are not a member of this group")
    if membership.role == GroupRole.owner:
        raise Forbidden("Group owner cannot leave the group. Delete the group instead.")
    db.delete(membership)
    db.commit()
    logger.info("User %s left group %s", principal_id, group_id)
