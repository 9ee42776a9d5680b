"""
Group, membership and invite link models.
"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from groupsplit.db.base import BaseModel


class Group(BaseModel):
    """A named collection of members who share expenses."""
    __tablename__ = "groups"

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    memberships = relationship(
        "GroupMembership",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="GroupMembership.id"
    )
    expenses = relationship("Expense", back_populates="group", cascade="all, delete-orphan")
    settlements = relationship("Settlement", back_populates="group", cascade="all, delete-orphan")
    invite_links = relationship("InviteLink", back_populates="group", cascade="all, delete-orphan")


class GroupMembership(BaseModel):
    """Junction table for Group and User many-to-many relationship."""
    __tablename__ = "group_memberships"
    __table_args__ = (UniqueConstraint("group_id", "user_id", name="uq_group_membership"),)

    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default="member")

    # Relationships
    group = relationship("Group", back_populates="memberships")
    user = relationship("User", back_populates="memberships")


class InviteLink(BaseModel):
    """Shareable code letting someone join a group, limited in time and uses."""
    __tablename__ = "invite_links"

    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    invite_code = Column(String(64), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    max_uses = Column(Integer, nullable=True)
    current_uses = Column(Integer, nullable=False, default=0)

    group = relationship("Group", back_populates="invite_links")
