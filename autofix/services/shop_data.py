"""
Shop Data Service

Single data-access object for the dashboard. Wraps Supabase queries and
translates between API models and table rows (see row_mapping).

Database Schema (create in Supabase Dashboard):
-----------------------------------------------

CREATE TABLE clients (
    id UUID DEFAULT gen_random_uuid() PRIMARY KEY,
    name TEXT NOT NULL,
    phone TEXT DEFAULT '',
    email TEXT DEFAULT ''
);

CREATE TABLE vehicles (
    id UUID DEFAULT gen_random_uuid() PRIMARY KEY,
    client_id UUID NOT NULL REFERENCES clients(id) ON DELETE CASCADE,
    make TEXT NOT NULL,
    model TEXT NOT NULL,
    year INTEGER,
    plate TEXT DEFAULT '',
    mileage INTEGER DEFAULT 0,
    damages JSONB DEFAULT '[]'         -- [{id, imageUrl, description, dateAdded}]
);

CREATE TABLE parts (
    id UUID DEFAULT gen_random_uuid() PRIMARY KEY,
    name TEXT NOT NULL,
    sku TEXT DEFAULT '',
    price NUMERIC(12,2) DEFAULT 0,     -- sale price
    cost NUMERIC(12,2) DEFAULT 0,
    stock INTEGER DEFAULT 0
);

CREATE TABLE services (
    id UUID DEFAULT gen_random_uuid() PRIMARY KEY,
    name TEXT NOT NULL,
    price NUMERIC(12,2) DEFAULT 0,
    estimated_time INTEGER DEFAULT 0   -- minutes
);

CREATE TABLE budgets (
    id UUID DEFAULT gen_random_uuid() PRIMARY KEY,
    client_id UUID REFERENCES clients(id) ON DELETE SET NULL,
    client_name TEXT,
    vehicle_id UUID REFERENCES vehicles(id) ON DELETE SET NULL,
    vehicle_name TEXT,
    status TEXT NOT NULL DEFAULT 'Pendente',
    date_created TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    total_amount NUMERIC(12,2) DEFAULT 0,
    items JSONB DEFAULT '[]',          -- [{id, type, name, quantity, unitPrice, total}]
    notes TEXT
);

CREATE TABLE settings (
    id UUID DEFAULT gen_random_uuid() PRIMARY KEY,
    name TEXT,
    address TEXT,
    phone TEXT,
    email TEXT,
    website TEXT,
    responsible_name TEXT,
    logo_url TEXT,
    low_stock_threshold INTEGER DEFAULT 10,
    primary_color TEXT
);

CREATE INDEX idx_budgets_date ON budgets(date_created DESC);
CREATE INDEX idx_budgets_client ON budgets(client_id);
"""

import os
import logging
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from supabase import Client as SupabaseClient

from autofix.models.enums import BudgetStatus, LineItemType
from autofix.models.schemas import (
    Budget,
    Client,
    CompanySettings,
    DashboardStats,
    GlobalSearchResults,
    Part,
    ReportSummary,
    Service,
    Vehicle,
)
from autofix.services import analytics
from autofix.services.budget_calculator import (
    find_catalog_entry,
    is_open,
    line_item_from_catalog,
    recalculate_budget,
    same_line_items,
    validate_transition,
    vehicle_label,
)
from autofix.services.row_mapping import (
    budget_from_row,
    budget_to_row,
    client_from_row,
    client_to_row,
    part_from_row,
    part_to_row,
    rows_to,
    service_from_row,
    service_to_row,
    settings_from_row,
    settings_to_row,
    vehicle_from_row,
    vehicle_to_row,
)
from autofix.services.supabase_client import get_supabase_client

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_NAME = "AutoFix Oficina Mecânica"


class ShopDataService:
    """
    Data access for clients, vehicles, inventory, budgets and settings.

    No caching, retries or transactions: every call is a direct query and
    backend errors propagate to the caller.
    """

    def __init__(self, supabase: Optional[SupabaseClient] = None):
        self.supabase = supabase or get_supabase_client()

        # Table names (configurable)
        self.clients_table = os.getenv("AUTOFIX_CLIENTS_TABLE", "clients")
        self.vehicles_table = os.getenv("AUTOFIX_VEHICLES_TABLE", "vehicles")
        self.parts_table = os.getenv("AUTOFIX_PARTS_TABLE", "parts")
        self.services_table = os.getenv("AUTOFIX_SERVICES_TABLE", "services")
        self.budgets_table = os.getenv("AUTOFIX_BUDGETS_TABLE", "budgets")
        self.settings_table = os.getenv("AUTOFIX_SETTINGS_TABLE", "settings")

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _upsert_one(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Upsert a row and return the stored representation"""
        result = self.supabase.table(table).upsert(row).execute()
        if not result.data:
            raise RuntimeError(f"Upsert into {table} returned no data")
        return result.data[0]

    def _delete(self, table: str, entity_id: str) -> bool:
        """Delete by id; True when a row was removed"""
        result = self.supabase.table(table) \
            .delete() \
            .eq("id", entity_id) \
            .execute()
        deleted = bool(result.data)
        logger.info(f"[ShopData] Delete {table}/{entity_id}: {'ok' if deleted else 'not found'}")
        return deleted

    def _get_one(self, table: str, entity_id: str, columns: str = "*") -> Optional[Dict[str, Any]]:
        result = self.supabase.table(table) \
            .select(columns) \
            .eq("id", entity_id) \
            .limit(1) \
            .execute()
        if result.data:
            return result.data[0]
        return None

    # =========================================================================
    # CLIENTS
    # =========================================================================

    def _client_columns(self) -> str:
        return f"*, vehicles:{self.vehicles_table}(*)"

    async def get_clients(self) -> List[Client]:
        """All clients with their vehicles"""
        result = self.supabase.table(self.clients_table) \
            .select(self._client_columns()) \
            .order("name") \
            .execute()
        return rows_to(client_from_row, result.data)

    async def get_client(self, client_id: str) -> Optional[Client]:
        row = self._get_one(self.clients_table, client_id, self._client_columns())
        return client_from_row(row) if row else None

    async def save_client(self, client: Client) -> Client:
        """
        Create or update client details.

        Vehicles are saved through save_vehicle.
        """
        saved = self._upsert_one(self.clients_table, client_to_row(client))
        logger.info(f"[ShopData] Saved client {saved['id']}")
        return client_from_row(saved)

    async def delete_client(self, client_id: str) -> bool:
        return self._delete(self.clients_table, client_id)

    async def get_client_history(self, client_id: str) -> List[Budget]:
        """A client's budgets, newest first"""
        result = self.supabase.table(self.budgets_table) \
            .select("*") \
            .eq("client_id", client_id) \
            .order("date_created", desc=True) \
            .execute()
        return rows_to(budget_from_row, result.data)

    # =========================================================================
    # VEHICLES
    # =========================================================================

    def _vehicle_columns(self) -> str:
        return f"*, clients:{self.clients_table}(name)"

    async def get_vehicles(self) -> List[Vehicle]:
        """All vehicles with the owner's name"""
        result = self.supabase.table(self.vehicles_table) \
            .select(self._vehicle_columns()) \
            .execute()
        return rows_to(vehicle_from_row, result.data)

    async def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        row = self._get_one(self.vehicles_table, vehicle_id, self._vehicle_columns())
        return vehicle_from_row(row) if row else None

    async def save_vehicle(self, vehicle: Vehicle) -> Vehicle:
        saved = self._upsert_one(self.vehicles_table, vehicle_to_row(vehicle))
        logger.info(f"[ShopData] Saved vehicle {saved['id']} for client {saved.get('client_id')}")
        return vehicle_from_row(saved)

    async def delete_vehicle(self, vehicle_id: str) -> bool:
        return self._delete(self.vehicles_table, vehicle_id)

    # =========================================================================
    # INVENTORY
    # =========================================================================

    async def get_parts(self) -> List[Part]:
        result = self.supabase.table(self.parts_table) \
            .select("*") \
            .order("name") \
            .execute()
        return rows_to(part_from_row, result.data)

    async def get_part(self, part_id: str) -> Optional[Part]:
        row = self._get_one(self.parts_table, part_id)
        return part_from_row(row) if row else None

    async def save_part(self, part: Part) -> Part:
        saved = self._upsert_one(self.parts_table, part_to_row(part))
        logger.info(f"[ShopData] Saved part {saved['id']} (stock={saved.get('stock')})")
        return part_from_row(saved)

    async def delete_part(self, part_id: str) -> bool:
        return self._delete(self.parts_table, part_id)

    async def get_low_stock_parts(self, threshold: Optional[int] = None) -> List[Part]:
        """
        Parts below the low-stock threshold

        Args:
            threshold: Override; defaults to the company setting
        """
        if threshold is None:
            threshold = await self.get_low_stock_threshold()

        result = self.supabase.table(self.parts_table) \
            .select("*") \
            .lt("stock", threshold) \
            .order("stock") \
            .execute()
        return rows_to(part_from_row, result.data)

    async def get_services(self) -> List[Service]:
        result = self.supabase.table(self.services_table) \
            .select("*") \
            .order("name") \
            .execute()
        return rows_to(service_from_row, result.data)

    async def get_service(self, service_id: str) -> Optional[Service]:
        row = self._get_one(self.services_table, service_id)
        return service_from_row(row) if row else None

    async def save_service(self, service: Service) -> Service:
        saved = self._upsert_one(self.services_table, service_to_row(service))
        logger.info(f"[ShopData] Saved service {saved['id']}")
        return service_from_row(saved)

    async def delete_service(self, service_id: str) -> bool:
        return self._delete(self.services_table, service_id)

    # =========================================================================
    # BUDGETS
    # =========================================================================

    async def get_budgets(self) -> List[Budget]:
        """All budgets, newest first"""
        result = self.supabase.table(self.budgets_table) \
            .select("*") \
            .order("date_created", desc=True) \
            .execute()
        return rows_to(budget_from_row, result.data)

    async def get_budget(self, budget_id: str) -> Optional[Budget]:
        row = self._get_one(self.budgets_table, budget_id)
        return budget_from_row(row) if row else None

    async def _fill_names(self, budget: Budget, existing: Optional[Budget] = None) -> Budget:
        """
        Check the client/vehicle references and resolve the denormalized names.

        Names are filled when empty or when the referenced id changed.

        Raises:
            ValueError if the client or vehicle is unknown or the vehicle
            belongs to another client
        """
        client = await self.get_client(budget.client_id)
        if client is None:
            raise ValueError(f"Client {budget.client_id} not found")

        vehicle = await self.get_vehicle(budget.vehicle_id)
        if vehicle is None:
            raise ValueError(f"Vehicle {budget.vehicle_id} not found")
        if vehicle.client_id != budget.client_id:
            raise ValueError(f"Vehicle {budget.vehicle_id} does not belong to client {budget.client_id}")

        updates: Dict[str, Any] = {}
        if not budget.client_name or (existing and existing.client_id != budget.client_id):
            updates["client_name"] = client.name
        if not budget.vehicle_name or (existing and existing.vehicle_id != budget.vehicle_id):
            updates["vehicle_name"] = vehicle_label(vehicle)

        return budget.model_copy(update=updates) if updates else budget

    async def save_budget(self, budget: Budget) -> Budget:
        """
        Create or update a budget.

        Line and budget totals are recomputed, client/vehicle references
        checked, and status changes on existing budgets checked against the
        lifecycle. Completed and Canceled budgets keep their stored items and
        total.

        Returns:
            The stored budget
        Raises:
            ValueError on unknown client/vehicle, an illegal status change or
            an item change on a closed budget
        """
        if not budget.client_id or not budget.vehicle_id:
            raise ValueError("Budget requires a client and a vehicle")

        existing = await self.get_budget(budget.id) if budget.id else None
        if existing is not None:
            validate_transition(existing.status, budget.status)

        if budget.date_created is None:
            budget = budget.model_copy(update={"date_created": datetime.now(timezone.utc)})

        budget = await self._fill_names(budget, existing)

        if existing is not None and not is_open(existing.status):
            if not same_line_items(budget.items, existing.items):
                raise ValueError(
                    f"Budget is {BudgetStatus.to_label(existing.status.value)}; items cannot change"
                )
            budget = budget.model_copy(update={
                "items": existing.items,
                "total_amount": existing.total_amount
            })
        else:
            budget = recalculate_budget(budget)

        saved = self._upsert_one(self.budgets_table, budget_to_row(budget))
        logger.info(
            f"[ShopData] Saved budget {saved['id']} "
            f"({saved.get('status')}, total={saved.get('total_amount')})"
        )
        return budget_from_row(saved)

    async def update_budget_status(self, budget_id: str, status: BudgetStatus) -> Optional[Budget]:
        """
        Move a budget to another status

        Returns:
            Updated budget, or None if it does not exist
        Raises:
            ValueError on an illegal transition
        """
        existing = await self.get_budget(budget_id)
        if existing is None:
            return None

        validate_transition(existing.status, status)
        if existing.status == status:
            return existing

        result = self.supabase.table(self.budgets_table) \
            .update({"status": status.value}) \
            .eq("id", budget_id) \
            .execute()

        logger.info(f"[ShopData] Budget {budget_id}: {existing.status.value} -> {status.value}")
        return budget_from_row(result.data[0]) if result.data else None

    async def add_budget_item(
        self,
        budget_id: str,
        item_type: LineItemType,
        catalog_id: str,
        quantity: float = 1
    ) -> Optional[Budget]:
        """
        Add a catalog part or service to a budget at its sale price

        Returns:
            Updated budget, or None if the budget does not exist
        Raises:
            ValueError if the budget is closed or the catalog entry is unknown
        """
        budget = await self.get_budget(budget_id)
        if budget is None:
            return None
        if not is_open(budget.status):
            raise ValueError(f"Budget is {BudgetStatus.to_label(budget.status.value)}; items cannot change")

        catalog = await self.get_parts() if item_type == LineItemType.PART else await self.get_services()
        entry = find_catalog_entry(catalog, catalog_id)
        if entry is None:
            raise ValueError(f"{item_type.value} {catalog_id} not found")

        item = line_item_from_catalog(entry, quantity)
        return await self.save_budget(budget.model_copy(update={"items": budget.items + [item]}))

    async def remove_budget_item(self, budget_id: str, item_id: str) -> Optional[Budget]:
        """
        Returns:
            Updated budget, or None if the budget does not exist
        Raises:
            ValueError if the budget is closed or has no such item
        """
        budget = await self.get_budget(budget_id)
        if budget is None:
            return None
        if not is_open(budget.status):
            raise ValueError(f"Budget is {BudgetStatus.to_label(budget.status.value)}; items cannot change")

        items = [i for i in budget.items if i.id != item_id]
        if len(items) == len(budget.items):
            raise ValueError(f"Line item {item_id} not found on budget")

        return await self.save_budget(budget.model_copy(update={"items": items}))

    async def delete_budget(self, budget_id: str) -> bool:
        return self._delete(self.budgets_table, budget_id)

    # =========================================================================
    # DASHBOARD
    # =========================================================================

    async def get_stats(self, now: Optional[datetime] = None) -> DashboardStats:
        """Dashboard headline metrics (see analytics.dashboard_stats)"""
        budgets = await self.get_budgets()
        parts = await self.get_parts()
        threshold = await self.get_low_stock_threshold()
        return analytics.dashboard_stats(budgets, parts, threshold, now=now)

    async def get_report_summary(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None
    ) -> ReportSummary:
        """Management report data for an optional date range"""
        budgets = await self.get_budgets()
        parts = await self.get_parts()
        threshold = await self.get_low_stock_threshold()
        return analytics.build_report_summary(budgets, parts, threshold, start=start, end=end)

    # =========================================================================
    # SETTINGS
    # =========================================================================

    def _settings_row(self) -> Optional[Dict[str, Any]]:
        result = self.supabase.table(self.settings_table) \
            .select("*") \
            .limit(1) \
            .execute()
        return result.data[0] if result.data else None

    async def get_company_settings(self) -> CompanySettings:
        """The settings row, or defaults when none has been saved yet"""
        row = self._settings_row()
        if row is None:
            return CompanySettings(name=DEFAULT_COMPANY_NAME)
        return settings_from_row(row)

    async def get_low_stock_threshold(self) -> int:
        settings = await self.get_company_settings()
        return settings.low_stock_threshold or analytics.DEFAULT_LOW_STOCK_THRESHOLD

    async def save_company_settings(self, settings: CompanySettings) -> CompanySettings:
        """Update the single settings row (insert it the first time)"""
        existing = self._settings_row()
        existing_id = existing.get("id") if existing else None

        saved = self._upsert_one(self.settings_table, settings_to_row(settings, existing_id))
        logger.info(f"[ShopData] Saved company settings ({'update' if existing_id else 'insert'})")
        return settings_from_row(saved)

    # =========================================================================
    # SEARCH
    # =========================================================================

    async def global_search(self, term: str) -> GlobalSearchResults:
        """
        Case-insensitive substring search across clients, vehicles and budgets
        """
        needle = (term or "").strip().lower()
        if not needle:
            return GlobalSearchResults()

        def matches(*fields: Optional[str]) -> bool:
            return any(needle in (f or "").lower() for f in fields)

        clients = [c for c in await self.get_clients() if matches(c.name, c.phone, c.email)]
        vehicles = [
            v for v in await self.get_vehicles()
            if matches(v.plate, v.make, v.model, v.client_name)
        ]
        budgets = [
            b for b in await self.get_budgets()
            if matches(b.client_name, b.vehicle_name)
        ]

        return GlobalSearchResults(clients=clients, vehicles=vehicles, budgets=budgets)


# Singleton instance
_shop_data: Optional[ShopDataService] = None


def get_shop_data() -> ShopDataService:
    """Get or create shop data service"""
    global _shop_data
    if _shop_data is None:
        _shop_data = ShopDataService()
    return _shop_data
