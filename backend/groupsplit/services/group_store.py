"""
Storage access for group-scoped data.

``GroupStore`` is the only thing the settlement engine knows about the
database: a handful of reads and writes over a request-scoped SQLAlchemy
session. Tests swap in an in-memory object with the same methods.
"""
import logging
from datetime import datetime, timezone
from typing import List, Tuple
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from groupsplit.core.exceptions import GroupDataUnavailable, StorageError
from groupsplit.models.expense import Expense
from groupsplit.models.group import GroupMembership
from groupsplit.models.settlement import Settlement
from groupsplit.models.user import User

logger = logging.getLogger(__name__)


class GroupStore:
    """Reads and writes the rows the settlement engine needs."""

    def __init__(self, db: Session):
        self.db = db

    def is_member(self, group_id: int, user_id: int) -> bool:
        try:
            membership = self.db.query(GroupMembership).filter(
                GroupMembership.group_id == group_id,
                GroupMembership.user_id == user_id
            ).first()
        except SQLAlchemyError as e:
            logger.error(f"Membership check failed for group {group_id}: {e}", exc_info=True)
            raise GroupDataUnavailable("Failed to verify group membership")
        return membership is not None

    def get_members(self, group_id: int) -> List[Tuple[int, str]]:
        """Return ``(user_id, username)`` pairs in join order."""
        try:
            rows = self.db.query(GroupMembership.user_id, User.username).join(
                User, User.id == GroupMembership.user_id
            ).filter(
                GroupMembership.group_id == group_id
            ).order_by(GroupMembership.id).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch members of group {group_id}: {e}", exc_info=True)
            raise GroupDataUnavailable()
        return [(user_id, username) for user_id, username in rows]

    def get_expenses(self, group_id: int) -> List[Expense]:
        """Return the group's expenses with their splits loaded."""
        try:
            return self.db.query(Expense).options(
                selectinload(Expense.splits)
            ).filter(
                Expense.group_id == group_id
            ).order_by(Expense.id).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch expenses of group {group_id}: {e}", exc_info=True)
            raise GroupDataUnavailable()

    def get_user_group_ids(self, user_id: int) -> List[int]:
        try:
            rows = self.db.query(GroupMembership.group_id).filter(
                GroupMembership.user_id == user_id
            ).order_by(GroupMembership.id).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch groups of user {user_id}: {e}", exc_info=True)
            raise GroupDataUnavailable()
        return [group_id for (group_id,) in rows]

    def add_settlements(self, group_id: int, transfers) -> List[Settlement]:
        """Persist transfers as completed settlement records."""
        now = datetime.now(timezone.utc)
        records = [
            Settlement(
                group_id=group_id,
                from_user=t.from_user,
                to_user=t.to_user,
                amount=t.amount,
                status="completed",
                completed_at=now
            )
            for t in transfers
        ]
        try:
            self.db.add_all(records)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to store settlements for group {group_id}: {e}", exc_info=True)
            raise StorageError("Failed to store settlements")

        for record in records:
            self.db.refresh(record)
        return records

    def get_settlements(self, group_id: int) -> List[Settlement]:
        try:
            return self.db.query(Settlement).filter(
                Settlement.group_id == group_id
            ).order_by(Settlement.created_at.desc(), Settlement.id.desc()).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch settlements of group {group_id}: {e}", exc_info=True)
            raise GroupDataUnavailable()

    def delete_settlements(self, group_id: int) -> int:
        """Delete every settlement record of the group; returns the row count."""
        try:
            deleted = self.db.query(Settlement).filter(
                Settlement.group_id == group_id
            ).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to reset settlements of group {group_id}: {e}", exc_info=True)
            raise StorageError("Failed to reset settlements")
        return deleted
