"""
Client Endpoints

CRUD operations for clients and their budget history.
"""

from fastapi import APIRouter, HTTPException
from typing import List

from autofix.models.schemas import Budget, Client
from autofix.services.shop_data import get_shop_data

router = APIRouter()


@router.get("/", response_model=List[Client])
async def list_clients():
    """
    Get all clients with their vehicles
    """
    try:
        return await get_shop_data().get_clients()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/", response_model=Client)
async def create_client(client: Client):
    """
    Create a new client

    - **client**: Name (required), phone, email. Vehicles are added via /api/vehicles.
    """
    try:
        return await get_shop_data().save_client(client.model_copy(update={"id": ""}))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{client_id}", response_model=Client)
async def get_client(client_id: str):
    """
    Get client details

    - **client_id**: Client ID
    """
    try:
        client = await get_shop_data().get_client(client_id)
        if client is None:
            raise HTTPException(status_code=404, detail="Client not found")
        return client
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/{client_id}", response_model=Client)
async def update_client(client_id: str, client: Client):
    """
    Update client details

    - **client_id**: Client ID
    - **client**: New name, phone, email
    """
    shop = get_shop_data()
    try:
        if await shop.get_client(client_id) is None:
            raise HTTPException(status_code=404, detail="Client not found")
        return await shop.save_client(client.model_copy(update={"id": client_id}))
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{client_id}")
async def delete_client(client_id: str):
    """
    Delete a client

    - **client_id**: Client ID
    """
    try:
        if not await get_shop_data().delete_client(client_id):
            raise HTTPException(status_code=404, detail="Client not found")
        return {"deleted": True, "id": client_id}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{client_id}/history", response_model=List[Budget])
async def get_client_history(client_id: str):
    """
    Get a client's budgets, newest first

    - **client_id**: Client ID
    """
    try:
        return await get_shop_data().get_client_history(client_id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
