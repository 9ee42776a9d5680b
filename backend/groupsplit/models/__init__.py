"""Models package - Import all models for SQLAlchemy registration."""
from groupsplit.models.user import User
from groupsplit.models.group import Group, GroupMembership, InviteLink
from groupsplit.models.expense import Expense, ExpenseSplit
from groupsplit.models.settlement import Settlement

__all__ = [
    "User",
    "Group",
    "GroupMembership",
    "InviteLink",
    "Expense",
    "ExpenseSplit",
    "Settlement",
]
