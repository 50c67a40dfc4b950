"""
Budget Calculator Service

Line item totals, budget totals and status lifecycle checks.
Monetary values are in reais, rounded to 2 decimals.
"""

import uuid
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union

from autofix.models.enums import BudgetStatus, LineItemType, STATUS_TRANSITIONS
from autofix.models.schemas import Budget, BudgetLineItem, Part, Service, Vehicle

CENT = Decimal("0.01")


def new_line_item_id() -> str:
    """Short random id for a line item (unique within its budget)"""
    return uuid.uuid4().hex[:9]


def to_cents(value: Decimal) -> float:
    """Round half up to cents"""
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


def calculate_line_total(item: BudgetLineItem) -> float:
    """quantity x unit price"""
    return to_cents(Decimal(str(item.quantity)) * Decimal(str(item.unit_price)))


def calculate_budget_total(items: List[BudgetLineItem]) -> float:
    """Sum of line totals"""
    return to_cents(sum((Decimal(str(i.total)) for i in items), Decimal("0")))


def line_item_from_catalog(entry: Union[Part, Service], quantity: float = 1) -> BudgetLineItem:
    """
    Build a line item from a catalog part or service

    Args:
        entry: Part or Service
        quantity: Units (parts) or times performed (services)

    Returns:
        Line item priced at the catalog sale price
    """
    item_type = LineItemType.PART if isinstance(entry, Part) else LineItemType.SERVICE
    item = BudgetLineItem(
        id=new_line_item_id(),
        type=item_type,
        name=entry.name,
        quantity=quantity,
        unit_price=entry.price
    )
    item.total = calculate_line_total(item)
    return item


def recalculate_budget(budget: Budget) -> Budget:
    """
    Recompute every line total and the budget total.

    Line items without an id get one. Returns a new Budget; the input is
    not modified.
    """
    items = []
    for item in budget.items:
        fixed = item.model_copy()
        if not fixed.id:
            fixed.id = new_line_item_id()
        fixed.total = calculate_line_total(fixed)
        items.append(fixed)

    return budget.model_copy(update={
        "items": items,
        "total_amount": calculate_budget_total(items)
    })


def can_transition(current: BudgetStatus, target: BudgetStatus) -> bool:
    """Check a status move against the budget lifecycle"""
    if current == target:
        return True
    return target in STATUS_TRANSITIONS.get(current, set())


def validate_transition(current: BudgetStatus, target: BudgetStatus) -> None:
    """
    Raises:
        ValueError if the move is not allowed
    """
    if not can_transition(current, target):
        raise ValueError(
            f"Cannot change budget status from {BudgetStatus.to_label(current.value)} "
            f"to {BudgetStatus.to_label(target.value)}"
        )


def vehicle_label(vehicle: Vehicle) -> str:
    """Display name stored on budgets, e.g. 'Honda Civic (2020)'"""
    return f"{vehicle.make} {vehicle.model} ({vehicle.year})"


def is_open(status: BudgetStatus) -> bool:
    """Budget still moves through the lifecycle"""
    return bool(STATUS_TRANSITIONS.get(status))


def find_catalog_entry(entries: List, entry_id: str) -> Optional[Union[Part, Service]]:
    """Look up a part/service by id"""
    for entry in entries:
        if entry.id == entry_id:
            return entry
    return None


def same_line_items(a: List[BudgetLineItem], b: List[BudgetLineItem]) -> bool:
    """Compare line items by content (ids and stored totals ignored)"""
    def key(items):
        return [(i.type, i.name, i.quantity, i.unit_price) for i in items]
    return key(a) == key(b)
