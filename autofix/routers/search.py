"""
Global Search Endpoint
"""

from fastapi import APIRouter, HTTPException, Query

from autofix.models.schemas import GlobalSearchResults
from autofix.services.shop_data import get_shop_data

router = APIRouter()


@router.get("/", response_model=GlobalSearchResults)
async def global_search(
    q: str = Query("", description="Search term")
):
    """
    Search clients (name, phone, email), vehicles (plate, make, model, owner)
    and budgets (client, vehicle)

    - **q**: Case-insensitive term; empty returns no results
    """
    try:
        return await get_shop_data().global_search(q)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
