"""
Budget Endpoints

Quotes/estimates: CRUD, status lifecycle, line items and the printable PDF.
"""

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import Response
from typing import List, Optional

from autofix.models.enums import BudgetStatus
from autofix.models.schemas import Budget, BudgetItemAdd, BudgetStatusUpdate
from autofix.services.pdf_reports import budget_filename, render_budget_pdf
from autofix.services.shop_data import get_shop_data

router = APIRouter()


@router.get("/", response_model=List[Budget])
async def list_budgets(
    status: Optional[BudgetStatus] = Query(None, description="Only budgets in this status"),
    q: Optional[str] = Query(None, description="Filter by client or vehicle name")
):
    """
    Get budgets, newest first

    - **status**: Optional status filter
    - **q**: Optional case-insensitive filter on client/vehicle name
    """
    try:
        budgets = await get_shop_data().get_budgets()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    if status:
        budgets = [b for b in budgets if b.status == status]
    if q:
        needle = q.lower()
        budgets = [
            b for b in budgets
            if needle in b.client_name.lower() or needle in b.vehicle_name.lower()
        ]
    return budgets


@router.post("/", response_model=Budget)
async def create_budget(budget: Budget):
    """
    Create a budget

    - **budget**: clientId and vehicleId (required), status, items, notes.
      Totals are computed by the server; empty names are filled from the client/vehicle.
    """
    try:
        return await get_shop_data().save_budget(budget.model_copy(update={"id": ""}))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{budget_id}", response_model=Budget)
async def get_budget(budget_id: str):
    """
    Get budget details

    - **budget_id**: Budget ID
    """
    try:
        budget = await get_shop_data().get_budget(budget_id)
        if budget is None:
            raise HTTPException(status_code=404, detail="Budget not found")
        return budget
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{budget_id}", response_model=Budget)
async def update_budget(budget_id: str, budget: Budget):
    """
    Update a budget (status changes follow the lifecycle)

    - **budget_id**: Budget ID
    """
    shop = get_shop_data()
    try:
        if await shop.get_budget(budget_id) is None:
            raise HTTPException(status_code=404, detail="Budget not found")
        return await shop.save_budget(budget.model_copy(update={"id": budget_id}))
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/{budget_id}/status", response_model=Budget)
async def update_budget_status(budget_id: str, request: BudgetStatusUpdate):
    """
    Move a budget to another status

    - **budget_id**: Budget ID
    - **status**: Pendente → Aprovado / Em Execução → Concluído, or Cancelado
    """
    try:
        budget = await get_shop_data().update_budget_status(budget_id, request.status)
        if budget is None:
            raise HTTPException(status_code=404, detail="Budget not found")
        return budget
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{budget_id}/items", response_model=Budget)
async def add_budget_item(budget_id: str, request: BudgetItemAdd):
    """
    Add a catalog part or service to a budget

    - **budget_id**: Budget ID
    - **type**: PART or SERVICE
    - **catalogId**: Part/service ID
    - **quantity**: Units
    """
    try:
        budget = await get_shop_data().add_budget_item(
            budget_id, request.type, request.catalog_id, request.quantity
        )
        if budget is None:
            raise HTTPException(status_code=404, detail="Budget not found")
        return budget
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{budget_id}/items/{item_id}", response_model=Budget)
async def remove_budget_item(budget_id: str, item_id: str):
    """
    Remove a line item from a budget

    - **budget_id**: Budget ID
    - **item_id**: Line item ID
    """
    try:
        budget = await get_shop_data().remove_budget_item(budget_id, item_id)
        if budget is None:
            raise HTTPException(status_code=404, detail="Budget not found")
        return budget
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{budget_id}")
async def delete_budget(budget_id: str):
    """
    Delete a budget

    - **budget_id**: Budget ID
    """
    try:
        if not await get_shop_data().delete_budget(budget_id):
            raise HTTPException(status_code=404, detail="Budget not found")
        return {"deleted": True, "id": budget_id}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{budget_id}/pdf")
async def download_budget_pdf(budget_id: str):
    """
    Printable quote for the customer

    - **budget_id**: Budget ID
    """
    shop = get_shop_data()
    try:
        budget = await shop.get_budget(budget_id)
        if budget is None:
            raise HTTPException(status_code=404, detail="Budget not found")
        settings = await shop.get_company_settings()
        content = render_budget_pdf(budget, settings)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{budget_filename(budget)}"'}
    )
