"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from groupsplit.api.routes import auth, users, groups, expenses, settlements

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(groups.router)
api_router.include_router(expenses.router)
api_router.include_router(settlements.router)
