"""
Pydantic schemas for balances and settlements.
"""
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from groupsplit.schemas.common import Money


class MemberBalanceResponse(BaseModel):
    """A member's net position; positive means the group owes them."""
    user_id: int
    balance: Money
    username: str


class SettlementSuggestionResponse(BaseModel):
    """Schema for a single suggested transfer."""
    from_user: int
    to_user: int
    amount: Money
    from_username: str
    to_username: str


class BalancesResponse(BaseModel):
    balances: List[MemberBalanceResponse]


class SettlementPlanResponse(BaseModel):
    """Schema for compute-settlements response."""
    balances: List[MemberBalanceResponse]
    settlements: List[SettlementSuggestionResponse]
    total_transactions: int


class SettlementRecordResponse(BaseModel):
    """Schema for a persisted settlement record."""
    id: int
    group_id: int
    from_user: int
    to_user: int
    amount: Money
    status: str
    completed_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ConfirmSettlementsResponse(BaseModel):
    message: str
    settlements: List[SettlementRecordResponse]


class ResetSettlementsResponse(BaseModel):
    message: str = "Settlements reset"
    deleted: int
