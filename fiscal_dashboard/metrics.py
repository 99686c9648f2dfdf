"""Dashboard KPI aggregation."""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from fiscal_dashboard.dates import evaluation_date, month_key, month_label
from fiscal_dashboard.schema import OBLIGATIONS_CATEGORY, ActivityRecord, DashboardMetrics, MonthlyBucket, Status

NOT_AVAILABLE = "N/A"
DEFAULT_CRITICAL_LIMIT = 5


def is_on_time(record: ActivityRecord) -> bool:
    """Completed records count as on time unless their dates show a late delivery."""

    if record.status is not Status.COMPLETED:
        return False
    if record.completed_on is None or record.company_deadline is None:
        return True
    return record.completed_on <= record.company_deadline


def is_overdue(record: ActivityRecord, today: date) -> bool:
    return record.is_open and record.company_deadline is not None and record.company_deadline < today


def compliance_rate(on_time: int, completed: int) -> Union[float, str]:
    """Share of completed records delivered on time, as a one-decimal percentage."""

    if completed == 0:
        return NOT_AVAILABLE
    value = Decimal(on_time * 100) / Decimal(completed)
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def delivery_trend(records: Iterable[ActivityRecord], today: date) -> list[MonthlyBucket]:
    """Group records by reference month, oldest month first."""

    buckets: dict[tuple[int, int], MonthlyBucket] = {}
    for record in records:
        if record.reference_date is None:
            continue
        key = month_key(record.reference_date)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = MonthlyBucket(year=key[0], month_number=key[1], month=month_label(record.reference_date))
            buckets[key] = bucket

        if record.is_completed:
            if is_on_time(record):
                bucket.on_time += 1
            else:
                bucket.late += 1
        elif is_overdue(record, today):
            bucket.overdue_unfulfilled += 1

    return [buckets[key] for key in sorted(buckets)]


def critical_items(
    records: Iterable[ActivityRecord], limit: int = DEFAULT_CRITICAL_LIMIT
) -> list[ActivityRecord]:
    """Open records with a company deadline, nearest (or most overdue) first.

    A negative ``limit`` is treated as zero.
    """

    candidates = [record for record in records if record.is_open and record.company_deadline is not None]
    candidates.sort(key=lambda record: record.company_deadline)
    return candidates[: max(0, limit)]


def compute_metrics(
    records: Iterable[ActivityRecord],
    now: Union[date, datetime],
    category: Optional[str] = OBLIGATIONS_CATEGORY,
    critical_limit: int = DEFAULT_CRITICAL_LIMIT,
) -> DashboardMetrics:
    """Compute the dashboard KPIs for the records in scope at ``now``.

    ``category=None`` aggregates every record regardless of category.
    """

    scoped = [record for record in records if category is None or record.category == category]
    if not scoped:
        return DashboardMetrics()

    today = evaluation_date(now)

    status_distribution: dict[str, int] = {}
    pending = 0
    completed = 0
    on_time = 0
    at_risk = 0
    for record in scoped:
        status_distribution[record.status.value] = status_distribution.get(record.status.value, 0) + 1
        if record.is_completed:
            completed += 1
            if is_on_time(record):
                on_time += 1
            if record.status is Status.COMPLETED_LATE:
                at_risk += 1
        else:
            pending += 1
            if is_overdue(record, today):
                at_risk += 1

    return DashboardMetrics(
        total=len(scoped),
        pending_count=pending,
        on_time_count=on_time,
        overdue_or_at_risk_count=at_risk,
        compliance_rate=compliance_rate(on_time, completed),
        status_distribution=status_distribution,
        delivery_trend=delivery_trend(scoped, today),
        critical_items=critical_items(scoped, critical_limit),
    )
