"""
Group and membership routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from groupsplit.db.session import get_db
from groupsplit.models.user import User
from groupsplit.schemas.group import (
    GroupCreate, GroupResponse, MemberIdentifier, MemberResponse, InviteResponse
)
from groupsplit.api.dependencies import get_current_user
from groupsplit.services import group_service

router = APIRouter(prefix="/groups", tags=["groups"])


def _member_response(membership) -> MemberResponse:
    return MemberResponse(
        user_id=membership.user_id,
        username=membership.user.username,
        email=membership.user.email,
        role=membership.role,
        joined_at=membership.created_at
    )


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    group_data: GroupCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new group."""
    return group_service.create_group(db, current_user.id, group_data)


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List all groups for current user."""
    return group_service.list_groups(db, current_user.id)


@router.get("/{group_id}/members", response_model=List[MemberResponse])
async def list_members(
    group_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    memberships = group_service.list_members(db, group_id, current_user.id)
    return [_member_response(m) for m in memberships]


@router.post("/{group_id}/members", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def add_member(
    group_id: int,
    identifier: MemberIdentifier,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add a user to the group by id, email or username."""
    membership = group_service.add_member(db, group_id, current_user.id, identifier)
    return _member_response(membership)


@router.delete("/{group_id}/members/{user_id}")
async def remove_member(
    group_id: int,
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    group_service.remove_member(db, group_id, current_user.id, user_id)
    return {"message": "Member removed"}


@router.post("/{group_id}/invites", response_model=InviteResponse, status_code=status.HTTP_201_CREATED)
async def create_invite(
    group_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create an invite link for the group."""
    return group_service.create_invite(db, group_id, current_user.id)
