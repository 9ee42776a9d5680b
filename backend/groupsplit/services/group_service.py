"""
Group and membership management.
"""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import List
from sqlalchemy.orm import Session, joinedload
from groupsplit.core.config import settings
from groupsplit.core.exceptions import NotAMember, NotFound, ValidationError
from groupsplit.models.group import Group, GroupMembership, InviteLink
from groupsplit.models.user import User
from groupsplit.schemas.group import GroupCreate, MemberIdentifier

logger = logging.getLogger(__name__)


def check_group_access(db: Session, group_id: int, user_id: int,
                       message: str = "Not a member of this group") -> Group:
    """Return the group if the user belongs to it."""
    group = db.query(Group).filter(Group.id == group_id).first()
    if not group:
        raise NotFound("Group not found")

    membership = db.query(GroupMembership).filter(
        GroupMembership.group_id == group_id,
        GroupMembership.user_id == user_id
    ).first()
    if not membership:
        raise NotAMember(message)

    return group


def find_user(db: Session, identifier: MemberIdentifier) -> User:
    """Resolve a user by id, email or username."""
    if identifier.user_id is not None:
        user = db.query(User).filter(User.id == identifier.user_id).first()
        if not user:
            raise NotFound("User not found")
    elif identifier.email:
        user = db.query(User).filter(User.email == identifier.email.lower()).first()
        if not user:
            raise NotFound("User not found by email")
    else:
        user = db.query(User).filter(User.username == identifier.username).first()
        if not user:
            raise NotFound("User not found by username")
    return user


def create_group(db: Session, user_id: int, data: GroupCreate) -> Group:
    """Create a group with the caller as its first member."""
    group = Group(name=data.name, description=data.description, created_by=user_id)
    db.add(group)
    db.flush()

    db.add(GroupMembership(group_id=group.id, user_id=user_id, role="admin"))
    db.commit()
    db.refresh(group)

    logger.info(f"Group {group.id} created by user {user_id}")
    return group


def list_groups(db: Session, user_id: int) -> List[Group]:
    return db.query(Group).join(GroupMembership).filter(
        GroupMembership.user_id == user_id
    ).order_by(Group.id).all()


def list_members(db: Session, group_id: int, user_id: int) -> List[GroupMembership]:
    check_group_access(db, group_id, user_id)
    return db.query(GroupMembership).options(
        joinedload(GroupMembership.user)
    ).filter(
        GroupMembership.group_id == group_id
    ).order_by(GroupMembership.id).all()


def add_member(db: Session, group_id: int, user_id: int, identifier: MemberIdentifier) -> GroupMembership:
    check_group_access(db, group_id, user_id, message="Only group members can add others")
    target = find_user(db, identifier)

    existing = db.query(GroupMembership).filter(
        GroupMembership.group_id == group_id,
        GroupMembership.user_id == target.id
    ).first()
    if existing:
        raise ValidationError("User already in group")

    membership = GroupMembership(group_id=group_id, user_id=target.id, role="member")
    db.add(membership)
    db.commit()
    db.refresh(membership)

    logger.info(f"User {target.id} added to group {group_id} by user {user_id}")
    return membership


def remove_member(db: Session, group_id: int, user_id: int, target_user_id: int) -> None:
    check_group_access(db, group_id, user_id, message="Only group members can remove others")

    membership = db.query(GroupMembership).filter(
        GroupMembership.group_id == group_id,
        GroupMembership.user_id == target_user_id
    ).first()
    if not membership:
        raise NotFound("User is not in this group")

    db.delete(membership)
    db.commit()
    logger.info(f"User {target_user_id} removed from group {group_id} by user {user_id}")


def create_invite(db: Session, group_id: int, user_id: int) -> InviteLink:
    """Issue an invite code valid for INVITE_EXPIRE_HOURS and INVITE_MAX_USES joins."""
    check_group_access(db, group_id, user_id, message="Only group members can create invites")

    invite = InviteLink(
        group_id=group_id,
        created_by=user_id,
        invite_code=uuid.uuid4().hex,
        expires_at=datetime.now(timezone.utc) + timedelta(hours=settings.INVITE_EXPIRE_HOURS),
        max_uses=settings.INVITE_MAX_USES,
        current_uses=0
    )
    db.add(invite)
    db.commit()
    db.refresh(invite)
    return invite
