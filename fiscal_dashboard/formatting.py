"""Display helpers for dashboard values."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from fiscal_dashboard.dates import INVALID_DATE_LABEL, days_between, evaluation_date


def deadline_badge(deadline: Optional[date], now: Union[date, datetime]) -> str:
    """Countdown label shown next to a critical item."""

    if deadline is None:
        return INVALID_DATE_LABEL
    days = days_between(evaluation_date(now), deadline)
    if days == 0:
        return "Hoje!"
    if days < 0:
        return f"{abs(days)} dias atrasado"
    return f"{days} dia(s)"


def status_shares(distribution: dict[str, int], total: int) -> dict[str, float]:
    """Percentage of the total held by each status, one decimal."""

    if total <= 0:
        return {status: 0.0 for status in distribution}
    return {status: round(count / total * 100.0, 1) for status, count in distribution.items()}


def format_compliance(rate: Union[float, str]) -> str:
    if isinstance(rate, str):
        return rate
    return f"{rate:.1f}%"
