"""Join-request workflow: none -> pending -> approved | rejected.

Resolved requests are terminal and kept as history; a user may open a new
request later (after leaving or after a rejection).
"""
import logging
from typing import Any, Optional

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from moviehub.database import utcnow
from moviehub.errors import Conflict, InvalidState, NotFound
from moviehub.models.group import Group, GroupMember, GroupRole
from moviehub.models.join_request import JoinRequest, RequestStatus
from moviehub.models.user import User
from moviehub.services.group_service import get_owned_group
from moviehub.services.membership_queries import get_group_or_404, get_membership

logger = logging.getLogger(__name__)

_UPSERT_INSERTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


def _request_fields(jr: JoinRequest, user_email: Optional[str], group_name: Optional[str] = None) -> dict[str, Any]:
    return {
        "request_id": jr.request_id,
        "group_id": jr.group_id,
        "user_id": jr.user_id,
        "status": jr.status,
        "requested_at": jr.requested_at,
        "responded_at": jr.responded_at,
        "user_email": user_email,
        "group_name": group_name,
    }


def find_pending_request(db: Session, group_id: str, user_id: str) -> Optional[JoinRequest]:
    return (
        db.query(JoinRequest)
        .filter(
            JoinRequest.group_id == group_id,
            JoinRequest.user_id == user_id,
            JoinRequest.status == RequestStatus.pending,
        )
        .first()
    )


def request_to_join(db: Session, principal_id: str, group_id: str) -> JoinRequest:
    get_group_or_404(db, group_id)

    if get_membership(db, group_id, principal_id) is not None:
        raise Conflict("You are already a member of this group")

    if find_pending_request(db, group_id, principal_id):
        raise Conflict("You already have a pending join request for this group")

    jr = JoinRequest(group_id=group_id, user_id=principal_id, status=RequestStatus.pending)
    db.add(jr)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request won the partial unique index.
        db.rollback()
        raise Conflict("You already have a pending join request for this group") from None
    db.refresh(jr)
    logger.info("JoinRequest %s created for group %s by user %s", jr.request_id, group_id, principal_id)
    return jr


def _pending_request_for_action(db: Session, principal_id: str, group_id: str, request_id: str, action: str) -> JoinRequest:
    get_owned_group(db, principal_id, group_id, f"{action} requests")

    jr = (
        db.query(JoinRequest)
        .filter(JoinRequest.request_id == request_id, JoinRequest.group_id == group_id)
        .first()
    )
    if not jr:
        raise NotFound("Join request not found")
    if jr.status != RequestStatus.pending:
        raise InvalidState(f"Request has already been {jr.status.value}")
    return jr


def _ensure_membership(db: Session, group_id: str, user_id: str) -> None:
    """Insert a member row, tolerating one that already exists."""
    values = {"group_id": group_id, "user_id": user_id, "role": GroupRole.member}
    insert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
    if insert is not None:
        stmt = insert(GroupMember.__table__).values(**values).on_conflict_do_nothing(
            index_elements=["group_id", "user_id"]
        )
        db.execute(stmt)
        return

    try:
        with db.begin_nested():
            db.add(GroupMember(**values))
    except IntegrityError:
        logger.info("User %s was already a member of group %s", user_id, group_id)


def approve_request(db: Session, principal_id: str, group_id: str, request_id: str) -> JoinRequest:
    """Approve a pending request and add the requester as a member."""
    jr = _pending_request_for_action(db, principal_id, group_id, request_id, "approve")

    jr.status = RequestStatus.approved
    jr.responded_at = utcnow()
    db.flush()
    _ensure_membership(db, group_id, jr.user_id)
    db.commit()
    db.refresh(jr)
    logger.info("JoinRequest %s approved; user %s joined group %s", request_id, jr.user_id, group_id)
    return jr


def reject_request(db: Session, principal_id: str, group_id: str, request_id: str) -> JoinRequest:
    jr = _pending_request_for_action(db, principal_id, group_id, request_id, "reject")

    jr.status = RequestStatus.rejected
    jr.responded_at = utcnow()
    db.commit()
    db.refresh(jr)
    logger.info("JoinRequest %s rejected", request_id)
    return jr


def list_pending_for_group(db: Session, principal_id: str, group_id: str) -> list[dict[str, Any]]:
    """Owner's moderation queue for one group, oldest first."""
    get_owned_group(db, principal_id, group_id, "view join requests")

    rows = (
        db.query(JoinRequest, User.email)
        .join(User, User.user_id == JoinRequest.user_id)
        .filter(JoinRequest.group_id == group_id, JoinRequest.status == RequestStatus.pending)
        .order_by(JoinRequest.requested_at.asc(), JoinRequest.request_id)
        .all()
    )
    return [_request_fields(jr, email) for jr, email in rows]


def list_pending_for_owner(db: Session, principal_id: str) -> list[dict[str, Any]]:
    """Notification feed: pending requests across all groups the principal owns, newest first."""
    rows = (
        db.query(JoinRequest, User.email, Group.name)
        .join(Group, Group.group_id == JoinRequest.group_id)
        .join(User, User.user_id == JoinRequest.user_id)
        .filter(Group.owner_id == principal_id, JoinRequest.status == RequestStatus.pending)
        .order_by(JoinRequest.requested_at.desc(), JoinRequest.request_id)
        .all()
    )
    return [_request_fields(jr, email, group_name) for jr, email, group_name in rows]
