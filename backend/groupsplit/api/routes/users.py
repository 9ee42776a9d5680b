"""
User routes.
"""
from fastapi import APIRouter, Depends
from groupsplit.models.user import User
from groupsplit.schemas.user import UserResponse, UserBalanceSummary
from groupsplit.api.dependencies import get_current_user, get_settlement_engine
from groupsplit.services.settlement_service import SettlementEngine

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return current_user


@router.get("/me/balance", response_model=UserBalanceSummary)
async def get_my_balance(
    current_user: User = Depends(get_current_user),
    engine: SettlementEngine = Depends(get_settlement_engine)
):
    """Sum of what the caller is owed and owes across all their groups."""
    return engine.summarize_user_balance(current_user.id)
