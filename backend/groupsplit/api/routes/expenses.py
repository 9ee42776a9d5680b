"""
Expense routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from groupsplit.db.session import get_db
from groupsplit.models.user import User
from groupsplit.models.expense import Expense
from groupsplit.schemas.expense import (
    ExpenseCreate, ExpenseResponse, ExpenseSplitResponse, ExpenseCreatedResponse
)
from groupsplit.api.dependencies import get_current_user
from groupsplit.services import expense_service

router = APIRouter(tags=["expenses"])


def _expense_response(expense: Expense) -> ExpenseResponse:
    return ExpenseResponse(
        id=expense.id,
        group_id=expense.group_id,
        paid_by=expense.paid_by,
        payer_username=expense.payer.username,
        amount=expense.amount,
        description=expense.description,
        category=expense.category,
        date=expense.date,
        splits=[
            ExpenseSplitResponse(
                user_id=split.user_id,
                username=split.user.username,
                amount=split.amount
            )
            for split in expense.splits
        ],
        created_at=expense.created_at
    )


@router.post("/create-expense", response_model=ExpenseCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense_data: ExpenseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record an expense paid by the caller, split among members."""
    expense = expense_service.create_expense(db, current_user.id, expense_data)
    return ExpenseCreatedResponse(expense=_expense_response(expense))


@router.get("/groups/{group_id}/expenses", response_model=List[ExpenseResponse])
async def list_expenses(
    group_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    expenses = expense_service.list_expenses(db, group_id, current_user.id)
    return [_expense_response(e) for e in expenses]
