"""
AutoFix Status Codes and Enums

Standardized constants for values stored in the shop database.
Budget status values are stored as their Portuguese labels.
"""

from enum import Enum
from typing import Dict, Set


class BudgetStatus(str, Enum):
    """Budget (quote) lifecycle status"""
    PENDING = "Pendente"
    APPROVED = "Aprovado"
    IN_PROGRESS = "Em Execução"
    COMPLETED = "Concluído"
    CANCELED = "Cancelado"

    @classmethod
    def to_label(cls, status: str) -> str:
        labels = {
            "Pendente": "Pending",
            "Aprovado": "Approved",
            "Em Execução": "In Progress",
            "Concluído": "Completed",
            "Cancelado": "Canceled"
        }
        return labels.get(status, f"Unknown ({status})")

    @classmethod
    def chart_color(cls, status: "BudgetStatus") -> str:
        """Hex color used for this status in report charts"""
        colors = {
            cls.APPROVED: "#22c55e",
            cls.PENDING: "#eab308",
            cls.COMPLETED: "#3b82f6",
            cls.CANCELED: "#ef4444",
            cls.IN_PROGRESS: "#a855f7"
        }
        return colors.get(status, "#cccccc")


# Allowed moves between statuses. Completed and Canceled are terminal.
STATUS_TRANSITIONS: Dict[BudgetStatus, Set[BudgetStatus]] = {
    BudgetStatus.PENDING: {
        BudgetStatus.APPROVED,
        BudgetStatus.IN_PROGRESS,
        BudgetStatus.CANCELED,
    },
    BudgetStatus.APPROVED: {
        BudgetStatus.IN_PROGRESS,
        BudgetStatus.COMPLETED,
        BudgetStatus.CANCELED,
    },
    BudgetStatus.IN_PROGRESS: {
        BudgetStatus.COMPLETED,
        BudgetStatus.CANCELED,
    },
    BudgetStatus.COMPLETED: set(),
    BudgetStatus.CANCELED: set(),
}


class LineItemType(str, Enum):
    """Budget line item kinds"""
    PART = "PART"
    SERVICE = "SERVICE"

    @classmethod
    def to_label(cls, item_type: str) -> str:
        labels = {
            "PART": "Peça",
            "SERVICE": "Serviço"
        }
        return labels.get(item_type, item_type)
