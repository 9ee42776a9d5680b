"""
Expense model for tracking shared spending.
"""
from datetime import date as dt_date
from sqlalchemy import Column, String, Numeric, Date, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from groupsplit.db.base import BaseModel


class Expense(BaseModel):
    """Expense model representing a single cost paid by one member."""
    __tablename__ = "expenses"

    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    paid_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(50), nullable=True, default="general")
    date = Column(Date, nullable=False, default=dt_date.today, index=True)

    # Relationships
    group = relationship("Group", back_populates="expenses")
    payer = relationship("User", foreign_keys=[paid_by], back_populates="expenses_paid")
    splits = relationship(
        "ExpenseSplit",
        back_populates="expense",
        cascade="all, delete-orphan",
        order_by="ExpenseSplit.id"
    )


class ExpenseSplit(BaseModel):
    """One member's share of an expense."""
    __tablename__ = "expense_splits"

    expense_id = Column(Integer, ForeignKey("expenses.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)

    # Relationships
    expense = relationship("Expense", back_populates="splits")
    user = relationship("User", back_populates="expense_splits")
