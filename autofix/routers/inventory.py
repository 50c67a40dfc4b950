"""
Inventory Management Endpoints

Parts (stocked items) and services (labor catalog).
"""

from fastapi import APIRouter, HTTPException, Query
from typing import List, Optional

from autofix.models.schemas import Part, Service
from autofix.services.shop_data import get_shop_data

router = APIRouter()


# =============================================================================
# PARTS
# =============================================================================

@router.get("/parts", response_model=List[Part])
async def list_parts(
    q: Optional[str] = Query(None, description="Filter by name or SKU")
):
    """
    Get all parts

    - **q**: Optional case-insensitive filter on name/SKU
    """
    try:
        parts = await get_shop_data().get_parts()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    if q:
        needle = q.lower()
        parts = [p for p in parts if needle in p.name.lower() or needle in p.sku.lower()]
    return parts


@router.get("/parts/low-stock", response_model=List[Part])
async def list_low_stock_parts(
    threshold: Optional[int] = Query(None, ge=0, description="Override the configured threshold")
):
    """
    Get parts below the low-stock threshold (reorder list)

    - **threshold**: Defaults to the company setting
    """
    try:
        return await get_shop_data().get_low_stock_parts(threshold)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/parts", response_model=Part)
async def create_part(part: Part):
    """
    Create a part

    - **part**: name, sku, price (sale), cost, stock
    """
    try:
        return await get_shop_data().save_part(part.model_copy(update={"id": ""}))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/parts/{part_id}", response_model=Part)
async def update_part(part_id: str, part: Part):
    """
    Update a part

    - **part_id**: Part ID
    """
    shop = get_shop_data()
    try:
        if await shop.get_part(part_id) is None:
            raise HTTPException(status_code=404, detail="Part not found")
        return await shop.save_part(part.model_copy(update={"id": part_id}))
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/parts/{part_id}")
async def delete_part(part_id: str):
    """
    Delete a part

    - **part_id**: Part ID
    """
    try:
        if not await get_shop_data().delete_part(part_id):
            raise HTTPException(status_code=404, detail="Part not found")
        return {"deleted": True, "id": part_id}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


# =============================================================================
# SERVICES
# =============================================================================

@router.get("/services", response_model=List[Service])
async def list_services(
    q: Optional[str] = Query(None, description="Filter by name")
):
    """
    Get all services

    - **q**: Optional case-insensitive filter on name
    """
    try:
        services = await get_shop_data().get_services()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    if q:
        services = [s for s in services if q.lower() in s.name.lower()]
    return services


@router.post("/services", response_model=Service)
async def create_service(service: Service):
    """
    Create a service

    - **service**: name, price, estimatedTime (minutes)
    """
    try:
        return await get_shop_data().save_service(service.model_copy(update={"id": ""}))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/services/{service_id}", response_model=Service)
async def update_service(service_id: str, service: Service):
    """
    Update a service

    - **service_id**: Service ID
    """
    shop = get_shop_data()
    try:
        if await shop.get_service(service_id) is None:
            raise HTTPException(status_code=404, detail="Service not found")
        return await shop.save_service(service.model_copy(update={"id": service_id}))
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/services/{service_id}")
async def delete_service(service_id: str):
    """
    Delete a service

    - **service_id**: Service ID
    """
    try:
        if not await get_shop_data().delete_service(service_id):
            raise HTTPException(status_code=404, detail="Service not found")
        return {"deleted": True, "id": service_id}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
