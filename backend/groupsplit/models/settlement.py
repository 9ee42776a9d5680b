"""
Settlement model for the log of completed transfers.
"""
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
from groupsplit.db.base import BaseModel


class Settlement(BaseModel):
    """A transfer from one member to another that a group has acted upon."""
    __tablename__ = "settlements"

    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False, index=True)
    from_user = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    to_user = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Numeric(15, 2), nullable=False)
    status = Column(String(20), nullable=False, default="completed")
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    group = relationship("Group", back_populates="settlements")
    payer = relationship("User", foreign_keys=[from_user])
    payee = relationship("User", foreign_keys=[to_user])
