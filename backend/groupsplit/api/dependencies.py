"""
Shared route dependencies: caller identity and the settlement engine.
"""
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from groupsplit.core.exceptions import Unauthorized
from groupsplit.core.security import decode_access_token
from groupsplit.db.session import get_db
from groupsplit.models.user import User
from groupsplit.services.group_store import GroupStore
from groupsplit.services.settlement_service import SettlementEngine

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the caller from the bearer token."""
    if credentials is None:
        raise Unauthorized("No authorization header")

    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise Unauthorized("Unauthorized")

    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        raise Unauthorized("Unauthorized")
    return user


def get_settlement_engine(db: Session = Depends(get_db)) -> SettlementEngine:
    return SettlementEngine(GroupStore(db))
