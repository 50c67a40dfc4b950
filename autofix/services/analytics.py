"""
Analytics Service

Aggregations behind the dashboard and the management report:
- Financial summary (revenue, potential revenue, average ticket, conversion)
- Budget status distribution for charts
- Inventory valuation and low-stock detection
- Date-range filtering of budgets

All functions are pure and work on already-fetched lists.
"""

from typing import Iterable, List, Optional
from datetime import datetime, timedelta, timezone

from autofix.models.enums import BudgetStatus
from autofix.models.schemas import (
    Budget,
    DashboardStats,
    FinancialSummary,
    InventorySummary,
    Part,
    ReportSummary,
    StatusCount,
)

DEFAULT_LOW_STOCK_THRESHOLD = 10

# Statuses that count as earned revenue in reports
REALIZED_STATUSES = {BudgetStatus.COMPLETED, BudgetStatus.APPROVED}


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with stored timestamps"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_month(now: Optional[datetime] = None) -> datetime:
    """First instant of the current month (UTC)"""
    now = as_utc(now or datetime.now(timezone.utc))
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def filter_budgets_by_date(
    budgets: Iterable[Budget],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None
) -> List[Budget]:
    """
    Keep budgets created within [start, end] (both inclusive, both optional).
    Budgets without a creation date are kept only when no bound is given.
    """
    if start is None and end is None:
        return list(budgets)

    start_utc = as_utc(start) if start else None
    end_utc = as_utc(end) if end else None

    result = []
    for budget in budgets:
        if budget.date_created is None:
            continue
        created = as_utc(budget.date_created)
        if start_utc and created < start_utc:
            continue
        if end_utc and created > end_utc:
            continue
        result.append(budget)
    return result


def financial_summary(budgets: List[Budget]) -> FinancialSummary:
    """Revenue indicators over the given budgets"""
    realized = [b for b in budgets if b.status in REALIZED_STATUSES]
    pending = [b for b in budgets if b.status == BudgetStatus.PENDING]

    revenue = sum(b.total_amount for b in realized)
    potential = sum(b.total_amount for b in pending)

    return FinancialSummary(
        total_revenue=round(revenue, 2),
        potential_revenue=round(potential, 2),
        average_ticket=round(revenue / (len(realized) or 1), 2),
        conversion_rate=round(len(realized) / (len(budgets) or 1) * 100, 1)
    )


def status_distribution(budgets: List[Budget]) -> List[StatusCount]:
    """One entry per status (enum order), zero counts included"""
    counts = {status: 0 for status in BudgetStatus}
    for budget in budgets:
        counts[budget.status] += 1

    return [
        StatusCount(name=status, value=count, fill=BudgetStatus.chart_color(status))
        for status, count in counts.items()
    ]


def low_stock_parts(parts: List[Part], threshold: int) -> List[Part]:
    """Parts strictly below the threshold"""
    return [p for p in parts if p.stock < threshold]


def inventory_summary(parts: List[Part], threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> InventorySummary:
    """Stock units, valuation at cost and at sale price, reorder list"""
    low = low_stock_parts(parts, threshold)
    return InventorySummary(
        total_items=sum(p.stock for p in parts),
        total_cost=round(sum(p.cost * p.stock for p in parts), 2),
        total_sale_value=round(sum(p.price * p.stock for p in parts), 2),
        low_stock_count=len(low),
        low_stock_items=low
    )


def dashboard_stats(
    budgets: List[Budget],
    parts: List[Part],
    threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    now: Optional[datetime] = None
) -> DashboardStats:
    """
    Dashboard headline metrics.

    Args:
        budgets: All budgets
        parts: All parts
        threshold: Low-stock threshold from settings
        now: Reference time for "this month" (defaults to current UTC time)

    Returns:
        Revenue from completed budgets, pending and in-progress counts,
        completed this month, low-stock part count
    """
    month_start = start_of_month(now)
    completed = [b for b in budgets if b.status == BudgetStatus.COMPLETED]

    return DashboardStats(
        revenue=round(sum(b.total_amount for b in completed), 2),
        pending_budgets=sum(1 for b in budgets if b.status == BudgetStatus.PENDING),
        active_services=sum(1 for b in budgets if b.status == BudgetStatus.IN_PROGRESS),
        completed_this_month=len(filter_budgets_by_date(completed, start=month_start)),
        low_stock_count=len(low_stock_parts(parts, threshold))
    )


def build_report_summary(
    budgets: List[Budget],
    parts: List[Part],
    threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None
) -> ReportSummary:
    """Management report data; the date range applies to budgets only"""
    selected = filter_budgets_by_date(budgets, start, end)
    return ReportSummary(
        start=start,
        end=end,
        budget_count=len(selected),
        financial=financial_summary(selected),
        status_distribution=status_distribution(selected),
        inventory=inventory_summary(parts, threshold)
    )


def parse_range_bound(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """
    Parse a report range bound ("YYYY-MM-DD" or full ISO 8601 timestamp).

    A plain date used as the end bound covers that whole day.

    Raises:
        ValueError on an unparseable value
    """
    if not value:
        return None
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if end_of_day and len(value) == 10:
        parsed = parsed + timedelta(days=1) - timedelta(microseconds=1)
    return as_utc(parsed)
