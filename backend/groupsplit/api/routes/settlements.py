"""
Balance and settlement routes.
"""
from fastapi import APIRouter, Depends, status
from typing import List
from groupsplit.models.user import User
from groupsplit.schemas.common import GroupRequest
from groupsplit.schemas.settlement import (
    MemberBalanceResponse, SettlementSuggestionResponse, BalancesResponse,
    SettlementPlanResponse, SettlementRecordResponse, ConfirmSettlementsResponse,
    ResetSettlementsResponse
)
from groupsplit.api.dependencies import get_current_user, get_settlement_engine
from groupsplit.services.settlement_service import SettlementEngine

router = APIRouter(tags=["settlements"])


def _balance_response(balance) -> MemberBalanceResponse:
    return MemberBalanceResponse(
        user_id=balance.user_id,
        balance=balance.balance,
        username=balance.username
    )


@router.post("/compute-balances", response_model=BalancesResponse)
async def compute_balances(
    request: GroupRequest,
    current_user: User = Depends(get_current_user),
    engine: SettlementEngine = Depends(get_settlement_engine)
):
    """Net balance of every member of the group."""
    balances = engine.compute_balances(request.group_id, current_user.id)
    return BalancesResponse(balances=[_balance_response(b) for b in balances])


@router.post("/compute-settlements", response_model=SettlementPlanResponse)
async def compute_settlements(
    request: GroupRequest,
    current_user: User = Depends(get_current_user),
    engine: SettlementEngine = Depends(get_settlement_engine)
):
    """Balances plus the transfers that settle them."""
    plan = engine.compute_settlements(request.group_id, current_user.id)
    return SettlementPlanResponse(
        balances=[_balance_response(b) for b in plan.balances],
        settlements=[
            SettlementSuggestionResponse(
                from_user=t.from_user,
                to_user=t.to_user,
                amount=t.amount,
                from_username=t.from_username,
                to_username=t.to_username
            )
            for t in plan.settlements
        ],
        total_transactions=plan.total_transactions
    )


@router.post("/confirm-settlements", response_model=ConfirmSettlementsResponse,
             status_code=status.HTTP_201_CREATED)
async def confirm_settlements(
    request: GroupRequest,
    current_user: User = Depends(get_current_user),
    engine: SettlementEngine = Depends(get_settlement_engine)
):
    """Record the current settlement plan as completed transfers."""
    records = engine.confirm_settlements(request.group_id, current_user.id)
    return ConfirmSettlementsResponse(
        message=f"{len(records)} settlement(s) recorded",
        settlements=[SettlementRecordResponse.model_validate(r) for r in records]
    )


@router.post("/reset-settlements", response_model=ResetSettlementsResponse)
async def reset_settlements(
    request: GroupRequest,
    current_user: User = Depends(get_current_user),
    engine: SettlementEngine = Depends(get_settlement_engine)
):
    """Clear the group's settlement log. Expenses are not touched."""
    deleted = engine.reset_settlements(request.group_id, current_user.id)
    return ResetSettlementsResponse(deleted=deleted)


@router.get("/groups/{group_id}/settlements", response_model=List[SettlementRecordResponse])
async def settlement_history(
    group_id: int,
    current_user: User = Depends(get_current_user),
    engine: SettlementEngine = Depends(get_settlement_engine)
):
    return engine.settlement_history(group_id, current_user.id)
