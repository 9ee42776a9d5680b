"""
Pydantic schemas for Expense entity.
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date as dt_date, datetime
from decimal import Decimal
from groupsplit.schemas.common import Money


class SplitCreate(BaseModel):
    """One member's share in an expense being created."""
    user_id: int
    amount: Decimal = Field(ge=0, decimal_places=2)


class ExpenseCreate(BaseModel):
    """Schema for expense creation; the caller is the payer."""
    group_id: int
    amount: Decimal = Field(gt=0, decimal_places=2)
    description: str = ""
    category: Optional[str] = None
    date: Optional[dt_date] = None
    splits: List[SplitCreate] = Field(min_length=1)


class ExpenseSplitResponse(BaseModel):
    """Schema for expense split response."""
    user_id: int
    username: str
    amount: Money


class ExpenseResponse(BaseModel):
    """Schema for expense response."""
    id: int
    group_id: int
    paid_by: int
    payer_username: str
    amount: Money
    description: str
    category: Optional[str] = None
    date: dt_date
    splits: List[ExpenseSplitResponse] = []
    created_at: datetime


class ExpenseCreatedResponse(BaseModel):
    message: str = "Expense created successfully"
    expense: ExpenseResponse
