"""
Pydantic Models for Request/Response Validation

Attributes are snake_case; JSON payloads use the dashboard's camelCase names.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict
from datetime import datetime

from autofix.models.enums import BudgetStatus, LineItemType


class ApiModel(BaseModel):
    """Base model serialized with camelCase keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Vehicle Models
class VehicleDamage(ApiModel):
    """Damage photo/description attached to a vehicle"""
    id: str = ""
    image_url: str = Field(default="", description="Base64 data URL of the photo")
    description: str = ""
    date_added: Optional[str] = None


class Vehicle(ApiModel):
    """Customer vehicle"""
    id: str = ""
    client_id: str = Field(..., min_length=1)
    make: str
    model: str
    year: int
    plate: str = ""
    mileage: int = Field(default=0, ge=0)
    damages: List[VehicleDamage] = []
    client_name: Optional[str] = Field(None, description="Owner name (read-only, from join)")


# Client Models
class Client(ApiModel):
    """Shop customer"""
    id: str = ""
    name: str = Field(..., min_length=1)
    phone: str = ""
    email: str = ""
    vehicles: List[Vehicle] = []


# Inventory Models
class Part(ApiModel):
    """Stocked part"""
    id: str = ""
    name: str = Field(..., min_length=1)
    sku: str = ""
    price: float = Field(default=0, ge=0, description="Sale price")
    cost: float = Field(default=0, ge=0)
    stock: int = 0


class Service(ApiModel):
    """Catalog service (labor)"""
    id: str = ""
    name: str = Field(..., min_length=1)
    price: float = Field(default=0, ge=0)
    estimated_time: int = Field(default=0, ge=0, description="Minutes")


# Budget Models
class BudgetLineItem(ApiModel):
    """One part or service entry on a budget"""
    id: str = ""
    type: LineItemType
    name: str
    quantity: float = Field(default=1, gt=0)
    unit_price: float = Field(default=0, ge=0)
    total: float = 0


class Budget(ApiModel):
    """Quote/estimate for a client's vehicle"""
    id: str = ""
    client_id: str = ""
    client_name: str = ""
    vehicle_id: str = ""
    vehicle_name: str = ""
    status: BudgetStatus = BudgetStatus.PENDING
    date_created: Optional[datetime] = None
    total_amount: float = 0
    items: List[BudgetLineItem] = []
    notes: Optional[str] = ""


class BudgetStatusUpdate(ApiModel):
    """Request to move a budget to another status"""
    status: BudgetStatus


class BudgetItemAdd(ApiModel):
    """Request to add a catalog part/service to a budget"""
    type: LineItemType
    catalog_id: str = Field(..., min_length=1, description="Part or service ID")
    quantity: float = Field(default=1, gt=0)


# Settings Models
class CompanySettings(ApiModel):
    """Shop identity and preferences (single row)"""
    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    website: str = ""
    responsible_name: str = ""
    logo_url: Optional[str] = Field("", description="Base64 data URL")
    low_stock_threshold: int = Field(default=10, ge=0)
    primary_color: Optional[str] = Field(None, description="Dashboard base color (hex)")


class ThemeResponse(ApiModel):
    """Color ramp derived from the base color"""
    base_color: str
    shades: Dict[str, str]
    css: str


# Dashboard / Report Models
class DashboardStats(ApiModel):
    """Dashboard headline metrics"""
    revenue: float
    pending_budgets: int
    active_services: int
    completed_this_month: int
    low_stock_count: int = 0


class FinancialSummary(ApiModel):
    """Budget revenue indicators"""
    total_revenue: float
    potential_revenue: float
    average_ticket: float
    conversion_rate: float = Field(..., description="Percentage of budgets approved or completed")


class StatusCount(ApiModel):
    """Budgets per status, with chart color"""
    name: BudgetStatus
    value: int
    fill: str


class InventorySummary(ApiModel):
    """Stock indicators"""
    total_items: int
    total_cost: float
    total_sale_value: float
    low_stock_count: int
    low_stock_items: List[Part] = []


class ReportSummary(ApiModel):
    """Management report data"""
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    budget_count: int
    financial: FinancialSummary
    status_distribution: List[StatusCount]
    inventory: InventorySummary


# Search Models
class GlobalSearchResults(ApiModel):
    """Matches across clients, vehicles and budgets"""
    clients: List[Client] = []
    vehicles: List[Vehicle] = []
    budgets: List[Budget] = []


# AI Advisor Models
class DiagnosisRequest(ApiModel):
    """Request for an AI diagnosis"""
    vehicle_info: str = Field(..., min_length=1, description="Make, model, year")
    symptoms: str = Field(..., min_length=1, description="Reported symptoms/noises")


class DiagnosisResponse(ApiModel):
    """AI diagnosis text (returned as-is)"""
    diagnosis: str
    model: str
