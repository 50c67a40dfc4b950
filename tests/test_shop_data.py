"""
Tests for ShopDataService against the in-memory Supabase fake.
"""

from datetime import datetime, timezone

import pytest

from autofix.models.enums import BudgetStatus, LineItemType
from autofix.models.schemas import Budget, BudgetLineItem, Client, CompanySettings, Part, Vehicle
from autofix.services.shop_data import DEFAULT_COMPANY_NAME


# ============== Clients / Vehicles ==============

@pytest.mark.asyncio
async def test_clients_sorted_with_vehicles(shop):
    clients = await shop.get_clients()

    assert [c.name for c in clients] == ["João Souza", "Maria Silva"]
    assert [v.id for v in clients[1].vehicles] == ["v1"]


@pytest.mark.asyncio
async def test_save_client_assigns_id(shop):
    saved = await shop.save_client(Client(name="Pedro Lima", phone="11 90000-1111"))

    assert saved.id
    assert (await shop.get_client(saved.id)).phone == "11 90000-1111"


@pytest.mark.asyncio
async def test_delete_client(shop):
    assert await shop.delete_client("c2")
    assert await shop.get_client("c2") is None
    assert not await shop.delete_client("c2")


@pytest.mark.asyncio
async def test_client_history_newest_first(shop, seeded_db):
    seeded_db.seed("budgets", [{
        "id": "b3", "client_id": "c1", "client_name": "Maria Silva", "vehicle_id": "v1",
        "vehicle_name": "Honda Civic (2020)", "status": "Cancelado",
        "date_created": "2026-04-01T00:00:00+00:00", "total_amount": 0, "items": []
    }])

    history = await shop.get_client_history("c1")

    assert [b.id for b in history] == ["b3", "b1"]


@pytest.mark.asyncio
async def test_vehicles_carry_owner_name(shop):
    vehicle = await shop.get_vehicle("v1")

    assert vehicle.client_name == "Maria Silva"
    assert vehicle.plate == "ABC1D23"


@pytest.mark.asyncio
async def test_save_vehicle_with_damages(shop):
    saved = await shop.save_vehicle(Vehicle(
        client_id="c2", make="Fiat", model="Palio", year=2010,
        damages=[{"id": "d1", "imageUrl": "data:image/png;base64,AAAA", "description": "Amassado"}]
    ))

    fetched = await shop.get_vehicle(saved.id)
    assert fetched.damages[0].description == "Amassado"
    assert fetched.client_name == "João Souza"


# ============== Inventory ==============

@pytest.mark.asyncio
async def test_low_stock_uses_settings_threshold(shop):
    assert [p.id for p in await shop.get_low_stock_parts()] == ["p1"]

    await shop.save_company_settings(CompanySettings(name="Oficina", low_stock_threshold=30))
    assert [p.id for p in await shop.get_low_stock_parts()] == ["p1", "p2"]
    assert [p.id for p in await shop.get_low_stock_parts(threshold=1)] == []


@pytest.mark.asyncio
async def test_save_and_delete_part(shop):
    saved = await shop.save_part(Part(name="Correia Dentada", sku="CD-7", price=210, cost=120, stock=6))

    assert saved.id in [p.id for p in await shop.get_parts()]
    assert await shop.delete_part(saved.id)


# ============== Budgets ==============

@pytest.mark.asyncio
async def test_save_budget_fills_names_and_totals(shop):
    saved = await shop.save_budget(Budget(
        client_id="c1",
        vehicle_id="v1",
        total_amount=1,
        items=[BudgetLineItem(type=LineItemType.PART, name="Filtro", quantity=2, unit_price=45)]
    ))

    assert saved.id
    assert saved.client_name == "Maria Silva"
    assert saved.vehicle_name == "Honda Civic (2020)"
    assert saved.status == BudgetStatus.PENDING
    assert saved.total_amount == 90
    assert saved.items[0].total == 90
    assert saved.items[0].id
    assert saved.date_created is not None


@pytest.mark.asyncio
async def test_save_budget_rejects_vehicle_of_other_client(shop):
    with pytest.raises(ValueError, match="does not belong"):
        await shop.save_budget(Budget(client_id="c1", vehicle_id="v2"))


@pytest.mark.asyncio
async def test_save_budget_requires_client_and_vehicle(shop):
    with pytest.raises(ValueError):
        await shop.save_budget(Budget(client_id="c1"))


@pytest.mark.asyncio
async def test_save_budget_enforces_lifecycle(shop):
    budget = await shop.get_budget("b2")

    with pytest.raises(ValueError, match="Cannot change budget status"):
        await shop.save_budget(budget.model_copy(update={"status": BudgetStatus.PENDING}))


@pytest.mark.asyncio
async def test_update_budget_status(shop):
    approved = await shop.update_budget_status("b1", BudgetStatus.APPROVED)
    assert approved.status == BudgetStatus.APPROVED

    same = await shop.update_budget_status("b1", BudgetStatus.APPROVED)
    assert same.status == BudgetStatus.APPROVED

    with pytest.raises(ValueError):
        await shop.update_budget_status("b2", BudgetStatus.PENDING)

    assert await shop.update_budget_status("missing", BudgetStatus.APPROVED) is None


@pytest.mark.asyncio
async def test_add_and_remove_budget_items(shop):
    budget = await shop.add_budget_item("b1", LineItemType.PART, "p2", quantity=2)

    assert budget.total_amount == 485
    added = budget.items[-1]
    assert added.name == "Pastilha de Freio"
    assert added.unit_price == 180

    budget = await shop.remove_budget_item("b1", "i1")
    assert [i.name for i in budget.items] == ["Troca de Óleo", "Pastilha de Freio"]
    assert budget.total_amount == 440


@pytest.mark.asyncio
async def test_budget_item_errors(shop):
    assert await shop.add_budget_item("missing", LineItemType.PART, "p1") is None

    with pytest.raises(ValueError, match="not found"):
        await shop.add_budget_item("b1", LineItemType.SERVICE, "p1")
    with pytest.raises(ValueError, match="not found"):
        await shop.remove_budget_item("b1", "nope")
    with pytest.raises(ValueError, match="items cannot change"):
        await shop.add_budget_item("b2", LineItemType.PART, "p1")


# ============== Dashboard / Reports ==============

@pytest.mark.asyncio
async def test_stats(shop):
    stats = await shop.get_stats(now=datetime(2026, 3, 20, tzinfo=timezone.utc))

    assert stats.revenue == 360
    assert stats.pending_budgets == 1
    assert stats.active_services == 0
    assert stats.completed_this_month == 1
    assert stats.low_stock_count == 1


@pytest.mark.asyncio
async def test_report_summary_date_range(shop):
    summary = await shop.get_report_summary(start=datetime(2026, 3, 12, tzinfo=timezone.utc))

    assert summary.budget_count == 1
    assert summary.financial.total_revenue == 360
    assert summary.inventory.low_stock_count == 1


# ============== Settings / Search ==============

@pytest.mark.asyncio
async def test_settings_default_then_single_row(shop, seeded_db):
    assert (await shop.get_company_settings()).name == DEFAULT_COMPANY_NAME

    await shop.save_company_settings(CompanySettings(name="Oficina A"))
    await shop.save_company_settings(CompanySettings(name="Oficina B", primary_color="#10b981"))

    settings = await shop.get_company_settings()
    assert settings.name == "Oficina B"
    assert settings.primary_color == "#10b981"
    assert len(seeded_db.tables["settings"]) == 1


@pytest.mark.asyncio
async def test_global_search(shop):
    results = await shop.global_search("CIVIC")

    assert results.clients == []
    assert [v.id for v in results.vehicles] == ["v1"]
    assert [b.id for b in results.budgets] == ["b1"]

    results = await shop.global_search("maria")
    assert [c.id for c in results.clients] == ["c1"]

    empty = await shop.global_search("   ")
    assert empty.clients == [] and empty.vehicles == [] and empty.budgets == []


# ============== Budget integrity ==============

@pytest.mark.asyncio
async def test_closed_budget_items_cannot_change(shop):
    budget = await shop.get_budget("b2")
    rewritten = budget.model_copy(update={
        "items": [BudgetLineItem(type=LineItemType.PART, name="Pastilha de Freio", quantity=100, unit_price=100)]
    })

    with pytest.raises(ValueError, match="items cannot change"):
        await shop.save_budget(rewritten)

    assert (await shop.get_budget("b2")).total_amount == 360


@pytest.mark.asyncio
async def test_closed_budget_keeps_stored_total_on_note_edit(shop):
    budget = await shop.get_budget("b2")

    saved = await shop.save_budget(budget.model_copy(update={"notes": "Garantia de 90 dias", "total_amount": 1}))

    assert saved.notes == "Garantia de 90 dias"
    assert saved.total_amount == 360
    assert [i.id for i in saved.items] == ["i3"]


@pytest.mark.asyncio
async def test_vehicle_ownership_checked_even_with_names(shop):
    with pytest.raises(ValueError, match="does not belong"):
        await shop.save_budget(Budget(
            client_id="c1", client_name="Maria Silva",
            vehicle_id="v2", vehicle_name="Fiat Uno (2012)"
        ))


@pytest.mark.asyncio
async def test_changing_vehicle_refreshes_name(shop, seeded_db):
    seeded_db.seed("vehicles", [
        {"id": "v3", "client_id": "c1", "make": "Toyota", "model": "Corolla", "year": 2018,
         "plate": "TOY2E18", "mileage": 30000, "damages": []},
    ])
    budget = await shop.get_budget("b1")

    saved = await shop.save_budget(budget.model_copy(update={"vehicle_id": "v3"}))

    assert saved.vehicle_name == "Toyota Corolla (2018)"
    assert saved.client_name == "Maria Silva"


@pytest.mark.asyncio
async def test_get_part_and_service(shop):
    assert (await shop.get_part("p1")).sku == "FO-001"
    assert await shop.get_part("missing") is None
    assert (await shop.get_service("s1")).estimated_time == 30
    assert await shop.get_service("missing") is None
