"""Shared fixtures: an in-memory stand-in for the Supabase query builder."""

import copy
import re
import uuid
from io import BytesIO
from typing import Any, Dict, List, Optional

import pytest

from autofix.services import shop_data as shop_data_module
from autofix.services.shop_data import ShopDataService


_EMBED_RE = re.compile(r"(\w+):(\w+)\(([^)]*)\)")


class FakeResult:
    def __init__(self, data: List[Dict[str, Any]]):
        self.data = data
        self.count = len(data)


class FakeQuery:
    """Chainable query supporting the calls the service makes"""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.rows = db.tables.setdefault(table, [])
        self.action = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters = []
        self.order_by: Optional[tuple] = None
        self.limit_n: Optional[int] = None

    # Actions
    def select(self, columns: str = "*", count: Optional[str] = None):
        self.action, self.columns = "select", columns
        return self

    def upsert(self, payload):
        self.action, self.payload = "upsert", payload
        return self

    def insert(self, payload):
        self.action, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.action, self.payload = "update", payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    # Modifiers
    def eq(self, column, value):
        self.filters.append(lambda r: r.get(column) == value)
        return self

    def lt(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r.get(column) < value)
        return self

    def gte(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r.get(column) >= value)
        return self

    def order(self, column, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def limit(self, n: int):
        self.limit_n = n
        return self

    # Execution
    def _matching(self) -> List[Dict[str, Any]]:
        return [r for r in self.rows if all(f(r) for f in self.filters)]

    def _embed(self, row: Dict[str, Any]) -> Dict[str, Any]:
        out = dict(row)
        for alias, table, cols in _EMBED_RE.findall(self.columns):
            others = self.db.tables.get(table, [])
            fk = f"{table[:-1]}_id"
            if fk in row:
                match = next((o for o in others if o.get("id") == row.get(fk)), None)
                if match is not None and cols.strip() != "*":
                    match = {c.strip(): match.get(c.strip()) for c in cols.split(",")}
                out[alias] = copy.deepcopy(match)
            else:
                back_fk = f"{self.table_name[:-1]}_id"
                out[alias] = [copy.deepcopy(o) for o in others if o.get(back_fk) == row.get("id")]
        return out

    def _write(self, payload) -> List[Dict[str, Any]]:
        rows = payload if isinstance(payload, list) else [payload]
        written = []
        for row in rows:
            row = dict(row)
            if not row.get("id"):
                row["id"] = str(uuid.uuid4())
            existing = next((r for r in self.rows if r.get("id") == row["id"]), None)
            if existing is not None and self.action == "upsert":
                existing.update(row)
                written.append(existing)
            else:
                self.rows.append(row)
                written.append(row)
        return written

    def execute(self) -> FakeResult:
        if self.action in ("upsert", "insert"):
            return FakeResult(copy.deepcopy(self._write(self.payload)))

        matched = self._matching()
        if self.action == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResult(copy.deepcopy(matched))
        if self.action == "delete":
            for row in matched:
                self.rows.remove(row)
            return FakeResult(copy.deepcopy(matched))

        if self.order_by:
            column, desc = self.order_by
            matched = sorted(
                matched,
                key=lambda r: (r.get(column) is None, r.get(column) if r.get(column) is not None else 0),
                reverse=desc
            )
        if self.limit_n is not None:
            matched = matched[:self.limit_n]
        return FakeResult([self._embed(copy.deepcopy(r)) for r in matched])


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def seed(self, table: str, rows: List[Dict[str, Any]]) -> None:
        self.tables.setdefault(table, []).extend(copy.deepcopy(rows))


def extract_pdf_text(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF byte string using pypdf."""
    from pypdf import PdfReader

    reader = PdfReader(BytesIO(pdf_bytes))
    return "\n".join((page.extract_text() or "") for page in reader.pages)


@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def seeded_db(fake_db: FakeSupabase) -> FakeSupabase:
    """A small shop: one client with a car, two parts, one service, two budgets"""
    fake_db.seed("clients", [
        {"id": "c1", "name": "Maria Silva", "phone": "11 99999-0000", "email": "maria@example.com"},
        {"id": "c2", "name": "João Souza", "phone": "", "email": ""},
    ])
    fake_db.seed("vehicles", [
        {"id": "v1", "client_id": "c1", "make": "Honda", "model": "Civic", "year": 2020,
         "plate": "ABC1D23", "mileage": 45000, "damages": []},
        {"id": "v2", "client_id": "c2", "make": "Fiat", "model": "Uno", "year": 2012,
         "plate": "XYZ9K87", "mileage": 120000, "damages": []},
    ])
    fake_db.seed("parts", [
        {"id": "p1", "name": "Filtro de Óleo", "sku": "FO-001", "price": 45.0, "cost": 20.0, "stock": 3},
        {"id": "p2", "name": "Pastilha de Freio", "sku": "PF-010", "price": 180.0, "cost": 90.0, "stock": 25},
    ])
    fake_db.seed("services", [
        {"id": "s1", "name": "Troca de Óleo", "price": 80.0, "estimated_time": 30},
    ])
    fake_db.seed("budgets", [
        {"id": "b1", "client_id": "c1", "client_name": "Maria Silva", "vehicle_id": "v1",
         "vehicle_name": "Honda Civic (2020)", "status": "Pendente",
         "date_created": "2026-03-10T12:00:00+00:00", "total_amount": 125.0,
         "items": [
             {"id": "i1", "type": "PART", "name": "Filtro de Óleo", "quantity": 1, "unitPrice": 45.0, "total": 45.0},
             {"id": "i2", "type": "SERVICE", "name": "Troca de Óleo", "quantity": 1, "unitPrice": 80.0, "total": 80.0},
         ],
         "notes": ""},
        {"id": "b2", "client_id": "c2", "client_name": "João Souza", "vehicle_id": "v2",
         "vehicle_name": "Fiat Uno (2012)", "status": "Concluído",
         "date_created": "2026-03-15T09:30:00+00:00", "total_amount": 360.0,
         "items": [
             {"id": "i3", "type": "PART", "name": "Pastilha de Freio", "quantity": 2, "unitPrice": 180.0, "total": 360.0},
         ],
         "notes": "Cliente aguardou no local"},
    ])
    return fake_db


@pytest.fixture
def shop(seeded_db: FakeSupabase) -> ShopDataService:
    return ShopDataService(supabase=seeded_db)


@pytest.fixture
def use_shop(shop: ShopDataService, monkeypatch) -> ShopDataService:
    """Route get_shop_data() to the in-memory service"""
    monkeypatch.setattr(shop_data_module, "_shop_data", shop)
    return shop
