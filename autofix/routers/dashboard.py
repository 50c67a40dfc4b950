"""
Dashboard Endpoints

Headline metrics for the dashboard home screen.
"""

from fastapi import APIRouter, HTTPException

from autofix.models.schemas import DashboardStats
from autofix.services.shop_data import get_shop_data

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats():
    """
    Get dashboard metrics

    Returns:
    - **revenue**: Sum of completed budgets
    - **pendingBudgets**: Budgets awaiting approval
    - **activeServices**: Budgets in execution
    - **completedThisMonth**: Budgets completed since the start of the month (UTC)
    - **lowStockCount**: Parts below the low-stock threshold
    """
    try:
        return await get_shop_data().get_stats()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
