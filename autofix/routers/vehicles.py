"""
Vehicle Endpoints

CRUD operations for client vehicles, including damage photos.
"""

from fastapi import APIRouter, HTTPException, Query
from typing import List, Optional

from autofix.models.schemas import Vehicle
from autofix.services.shop_data import get_shop_data

router = APIRouter()


@router.get("/", response_model=List[Vehicle])
async def list_vehicles(
    q: Optional[str] = Query(None, description="Filter by plate, model or owner name")
):
    """
    Get all vehicles with owner names

    - **q**: Optional case-insensitive filter
    """
    try:
        vehicles = await get_shop_data().get_vehicles()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    if q:
        needle = q.lower()
        vehicles = [
            v for v in vehicles
            if needle in v.plate.lower()
            or needle in v.model.lower()
            or needle in (v.client_name or "").lower()
        ]
    return vehicles


@router.post("/", response_model=Vehicle)
async def create_vehicle(vehicle: Vehicle):
    """
    Create a vehicle for a client

    - **vehicle**: clientId, make, model, year, plate, mileage, damages
    """
    shop = get_shop_data()
    try:
        if await shop.get_client(vehicle.client_id) is None:
            raise HTTPException(status_code=400, detail="Client not found")
        return await shop.save_vehicle(vehicle.model_copy(update={"id": ""}))
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{vehicle_id}", response_model=Vehicle)
async def get_vehicle(vehicle_id: str):
    """
    Get vehicle details

    - **vehicle_id**: Vehicle ID
    """
    try:
        vehicle = await get_shop_data().get_vehicle(vehicle_id)
        if vehicle is None:
            raise HTTPException(status_code=404, detail="Vehicle not found")
        return vehicle
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{vehicle_id}", response_model=Vehicle)
async def update_vehicle(vehicle_id: str, vehicle: Vehicle):
    """
    Update a vehicle (damage list is replaced as sent)

    - **vehicle_id**: Vehicle ID
    """
    shop = get_shop_data()
    try:
        if await shop.get_vehicle(vehicle_id) is None:
            raise HTTPException(status_code=404, detail="Vehicle not found")
        return await shop.save_vehicle(vehicle.model_copy(update={"id": vehicle_id}))
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{vehicle_id}")
async def delete_vehicle(vehicle_id: str):
    """
    Delete a vehicle

    - **vehicle_id**: Vehicle ID
    """
    try:
        if not await get_shop_data().delete_vehicle(vehicle_id):
            raise HTTPException(status_code=404, detail="Vehicle not found")
        return {"deleted": True, "id": vehicle_id}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
