"""
Expense service for expense-related business logic.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import List
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload
from groupsplit.core.exceptions import NotAMember, NotFound, ValidationError, StorageError
from groupsplit.core.utils import to_cents
from groupsplit.models.expense import Expense, ExpenseSplit
from groupsplit.schemas.expense import ExpenseCreate
from groupsplit.services.group_store import GroupStore

logger = logging.getLogger(__name__)

SPLIT_TOLERANCE = Decimal("0.01")


def _insert_splits(db: Session, expense_id: int, splits) -> None:
    for split in splits:
        db.add(ExpenseSplit(
            expense_id=expense_id,
            user_id=split.user_id,
            amount=to_cents(split.amount)
        ))
    db.commit()


def _delete_expense(db: Session, expense_id: int) -> None:
    """Compensating delete for an expense whose splits could not be written."""
    try:
        db.query(Expense).filter(Expense.id == expense_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Expense {expense_id} left without splits, cleanup failed: {e}", exc_info=True)


def get_expense(db: Session, expense_id: int) -> Expense:
    expense = db.query(Expense).options(
        joinedload(Expense.payer),
        selectinload(Expense.splits).joinedload(ExpenseSplit.user)
    ).filter(Expense.id == expense_id).first()
    if not expense:
        raise NotFound("Expense not found")
    return expense


def create_expense(db: Session, user_id: int, data: ExpenseCreate) -> Expense:
    """
    Create an expense paid by the caller, then its splits.

    Splits must add up to the amount within a cent, otherwise nothing is
    written. The two inserts are separate commits: if the splits fail the
    expense is deleted again. A crash between the two commits can still leave
    an expense without splits.
    """
    store = GroupStore(db)
    if not store.is_member(data.group_id, user_id):
        raise NotAMember()

    member_ids = {member_id for member_id, _ in store.get_members(data.group_id)}
    outsiders = sorted({split.user_id for split in data.splits} - member_ids)
    if outsiders:
        logger.warning(f"Rejected expense in group {data.group_id}: split users {outsiders} are not members")
        raise ValidationError("Split members must belong to the group")

    total_splits = sum((split.amount for split in data.splits), Decimal(0))
    if abs(total_splits - data.amount) > SPLIT_TOLERANCE:
        logger.warning(
            f"Rejected expense in group {data.group_id}: splits {total_splits} != amount {data.amount}"
        )
        raise ValidationError("Splits do not equal total amount")

    expense = Expense(
        group_id=data.group_id,
        paid_by=user_id,
        amount=to_cents(data.amount),
        description=data.description,
        category=data.category.lower() if data.category else "general",
        date=data.date or date.today()
    )
    try:
        db.add(expense)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating expense: {e}", exc_info=True)
        raise StorageError("Failed to create expense")

    expense_id = expense.id
    try:
        _insert_splits(db, expense_id, data.splits)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating expense splits: {e}", exc_info=True)
        _delete_expense(db, expense_id)
        raise StorageError("Failed to create expense splits")

    logger.info(f"Expense {expense_id} of {expense.amount} created in group {data.group_id} by user {user_id}")
    return get_expense(db, expense_id)


def list_expenses(db: Session, group_id: int, user_id: int) -> List[Expense]:
    """Expenses of a group, most recent date first."""
    if not GroupStore(db).is_member(group_id, user_id):
        raise NotAMember()

    return db.query(Expense).options(
        joinedload(Expense.payer),
        selectinload(Expense.splits).joinedload(ExpenseSplit.user)
    ).filter(
        Expense.group_id == group_id
    ).order_by(Expense.date.desc(), Expense.id.desc()).all()
