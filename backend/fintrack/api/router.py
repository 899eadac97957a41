"""
Main API router.
"""

from fastapi import APIRouter
from fintrack.api import recurring, transactions, plans

api_router = APIRouter()

api_router.include_router(recurring.router)
api_router.include_router(transactions.router)
api_router.include_router(plans.router)
