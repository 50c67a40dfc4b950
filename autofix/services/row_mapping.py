"""
Row Mapping

Translates between API models (camelCase on the wire) and database rows
(snake_case columns). JSON columns (vehicle damages, budget items) keep the
camelCase keys the dashboard sends.
"""

from typing import Optional, Dict, Any, List
from datetime import datetime

from autofix.models.enums import BudgetStatus
from autofix.models.schemas import (
    Budget,
    BudgetLineItem,
    Client,
    CompanySettings,
    Part,
    Service,
    Vehicle,
    VehicleDamage,
)

UNKNOWN_CLIENT_NAME = "Desconhecido"


def clean_id(row: Dict[str, Any]) -> Dict[str, Any]:
    """Drop an empty id so the database generates a UUID"""
    data = dict(row)
    if not data.get("id"):
        data.pop("id", None)
    return data


# ============== Clients ==============

def client_from_row(row: Dict[str, Any]) -> Client:
    """Map a clients row (optionally with embedded vehicles) to a Client"""
    return Client(
        id=row["id"],
        name=row.get("name") or "",
        phone=row.get("phone") or "",
        email=row.get("email") or "",
        vehicles=[vehicle_from_row(v) for v in (row.get("vehicles") or [])]
    )


def client_to_row(client: Client) -> Dict[str, Any]:
    """Client columns only; vehicles are saved separately"""
    return clean_id({
        "id": client.id,
        "name": client.name,
        "phone": client.phone,
        "email": client.email
    })


# ============== Vehicles ==============

def vehicle_from_row(row: Dict[str, Any]) -> Vehicle:
    """Map a vehicles row (optionally with embedded clients(name))"""
    client_name = None
    if "clients" in row:
        owner = row.get("clients") or {}
        client_name = owner.get("name") or UNKNOWN_CLIENT_NAME

    return Vehicle(
        id=row["id"],
        client_id=row.get("client_id") or "",
        make=row.get("make") or "",
        model=row.get("model") or "",
        year=row.get("year") or 0,
        plate=row.get("plate") or "",
        mileage=row.get("mileage") or 0,
        damages=[VehicleDamage.model_validate(d) for d in (row.get("damages") or [])],
        client_name=client_name
    )


def vehicle_to_row(vehicle: Vehicle) -> Dict[str, Any]:
    """clientName is display-only and never stored"""
    return clean_id({
        "id": vehicle.id,
        "client_id": vehicle.client_id,
        "make": vehicle.make,
        "model": vehicle.model,
        "year": vehicle.year,
        "plate": vehicle.plate,
        "mileage": vehicle.mileage,
        "damages": [d.model_dump(by_alias=True) for d in vehicle.damages]
    })


# ============== Inventory ==============

def part_from_row(row: Dict[str, Any]) -> Part:
    # Columns match the model field names
    return Part(
        id=row["id"],
        name=row.get("name") or "",
        sku=row.get("sku") or "",
        price=row.get("price") or 0,
        cost=row.get("cost") or 0,
        stock=row.get("stock") or 0
    )


def part_to_row(part: Part) -> Dict[str, Any]:
    return clean_id(part.model_dump())


def service_from_row(row: Dict[str, Any]) -> Service:
    return Service(
        id=row["id"],
        name=row.get("name") or "",
        price=row.get("price") or 0,
        estimated_time=row.get("estimated_time") or 0
    )


def service_to_row(service: Service) -> Dict[str, Any]:
    return clean_id({
        "id": service.id,
        "name": service.name,
        "price": service.price,
        "estimated_time": service.estimated_time
    })


# ============== Budgets ==============

def budget_from_row(row: Dict[str, Any]) -> Budget:
    """Map a budgets row to a Budget"""
    return Budget(
        id=row["id"],
        client_id=row.get("client_id") or "",
        client_name=row.get("client_name") or "",
        vehicle_id=row.get("vehicle_id") or "",
        vehicle_name=row.get("vehicle_name") or "",
        status=BudgetStatus(row.get("status") or BudgetStatus.PENDING.value),
        date_created=row.get("date_created"),
        total_amount=row.get("total_amount") or 0,
        items=[BudgetLineItem.model_validate(i) for i in (row.get("items") or [])],
        notes=row.get("notes") or ""
    )


def budget_to_row(budget: Budget) -> Dict[str, Any]:
    """Budget columns; client/vehicle names are denormalized for history"""
    date_created: Optional[datetime] = budget.date_created
    return clean_id({
        "id": budget.id,
        "client_id": budget.client_id,
        "client_name": budget.client_name,
        "vehicle_id": budget.vehicle_id,
        "vehicle_name": budget.vehicle_name,
        "status": budget.status.value,
        "date_created": date_created.isoformat() if date_created else None,
        "total_amount": budget.total_amount,
        "items": [i.model_dump(by_alias=True, mode="json") for i in budget.items],
        "notes": budget.notes
    })


# ============== Settings ==============

def settings_from_row(row: Dict[str, Any]) -> CompanySettings:
    return CompanySettings(
        name=row.get("name") or "",
        address=row.get("address") or "",
        phone=row.get("phone") or "",
        email=row.get("email") or "",
        website=row.get("website") or "",
        responsible_name=row.get("responsible_name") or "",
        logo_url=row.get("logo_url") or "",
        low_stock_threshold=row.get("low_stock_threshold") if row.get("low_stock_threshold") is not None else 10,
        primary_color=row.get("primary_color")
    )


def settings_to_row(settings: CompanySettings, existing_id: Optional[str] = None) -> Dict[str, Any]:
    """Settings columns, keeping the id of the existing single row"""
    row = {
        "name": settings.name,
        "address": settings.address,
        "phone": settings.phone,
        "email": settings.email,
        "website": settings.website,
        "responsible_name": settings.responsible_name,
        "logo_url": settings.logo_url,
        "low_stock_threshold": settings.low_stock_threshold,
        "primary_color": settings.primary_color
    }
    if existing_id:
        row["id"] = existing_id
    return row


def rows_to(mapper, rows: Optional[List[Dict[str, Any]]]) -> list:
    """Apply a row mapper over a (possibly empty) result set"""
    return [mapper(r) for r in (rows or [])]
