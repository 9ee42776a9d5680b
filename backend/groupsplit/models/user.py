"""
User model for authentication and member profiles.
"""
from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship
from groupsplit.db.base import BaseModel


class User(BaseModel):
    """User model; username doubles as the display name in balances."""
    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    memberships = relationship("GroupMembership", back_populates="user", cascade="all, delete-orphan")
    expenses_paid = relationship("Expense", foreign_keys="Expense.paid_by", back_populates="payer")
    expense_splits = relationship("ExpenseSplit", back_populates="user")
