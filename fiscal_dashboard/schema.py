"""Core data schema for activity records and dashboard output."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Union

OBLIGATIONS_CATEGORY = "Obrigações"


class Status(str, Enum):
    """Workflow status of an activity record."""

    PENDING = "Pendente"
    OPEN = "Em aberto"
    IN_PREPARATION = "Em preparação"
    IN_PROGRESS = "Em andamento"
    COMPLETED = "Concluído"
    COMPLETED_LATE = "Concluído em atraso"
    APPROVED = "Aprovado"
    REJECTED = "Rejeitado"

    @classmethod
    def parse(cls, raw: Union[str, "Status"]) -> "Status":
        """Resolve a status from its label, member name or English name."""

        if isinstance(raw, cls):
            return raw
        key = str(raw).strip().casefold()
        for status in cls:
            if key in (status.value.casefold(), status.name.casefold()):
                return status
        if key in _ENGLISH_NAMES:
            return _ENGLISH_NAMES[key]
        raise ValueError(f"Unknown status '{raw}'")

    @property
    def is_completed(self) -> bool:
        return self in COMPLETED_STATUSES


_ENGLISH_NAMES = {
    "pending": Status.PENDING,
    "open": Status.OPEN,
    "inpreparation": Status.IN_PREPARATION,
    "inprogress": Status.IN_PROGRESS,
    "completed": Status.COMPLETED,
    "completedlate": Status.COMPLETED_LATE,
    "approved": Status.APPROVED,
    "rejected": Status.REJECTED,
}

COMPLETED_STATUSES = frozenset({Status.COMPLETED, Status.COMPLETED_LATE})


@dataclass(frozen=True)
class Responsible:
    """Collaborator a record is assigned to."""

    id: str
    name: str


@dataclass(frozen=True)
class Collaborator:
    """Department member who can be assigned activities."""

    id: str
    name: str
    email: str = ""
    department: str = ""

    def as_responsible(self) -> Responsible:
        return Responsible(id=self.id, name=self.name)


@dataclass(frozen=True)
class ActivityRecord:
    """Normalized activity record; every date is already a calendar date."""

    id: Optional[str]
    title: str
    category: str
    status: Status
    reference_date: Optional[date] = None
    legal_deadline: Optional[date] = None
    company_deadline: Optional[date] = None
    completed_on: Optional[date] = None
    responsible: Optional[Responsible] = None
    subcategory: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def is_completed(self) -> bool:
        return self.status.is_completed

    @property
    def is_open(self) -> bool:
        return not self.is_completed and self.completed_on is None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "subcategory": self.subcategory,
            "status": self.status.value,
            "referenceDate": _iso(self.reference_date),
            "legalDeadline": _iso(self.legal_deadline),
            "companyDeadline": _iso(self.company_deadline),
            "completionDate": _iso(self.completed_on),
            "responsible": (
                {"id": self.responsible.id, "name": self.responsible.name} if self.responsible else None
            ),
            "priority": self.priority,
        }


@dataclass(frozen=True)
class Category:
    """Taxonomy entry managed from the admin screen."""

    id: Optional[str]
    name: str
    subcategories: tuple[str, ...] = ()


@dataclass
class MonthlyBucket:
    """Delivery counts for one reference month."""

    year: int
    month_number: int
    month: str
    on_time: int = 0
    late: int = 0
    overdue_unfulfilled: int = 0

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "onTime": self.on_time,
            "late": self.late,
            "overdueUnfulfilled": self.overdue_unfulfilled,
        }


@dataclass
class DashboardMetrics:
    """Aggregated KPIs backing the dashboard."""

    total: int = 0
    pending_count: int = 0
    on_time_count: int = 0
    overdue_or_at_risk_count: int = 0
    compliance_rate: Union[float, str] = "N/A"
    status_distribution: dict[str, int] = field(default_factory=dict)
    delivery_trend: list[MonthlyBucket] = field(default_factory=list)
    critical_items: list[ActivityRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "pendingCount": self.pending_count,
            "onTimeCount": self.on_time_count,
            "overdueOrAtRiskCount": self.overdue_or_at_risk_count,
            "complianceRate": self.compliance_rate,
            "statusDistribution": dict(self.status_distribution),
            "deliveryTrend": [bucket.to_dict() for bucket in self.delivery_trend],
            "criticalItems": [record.to_dict() for record in self.critical_items],
        }


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None
