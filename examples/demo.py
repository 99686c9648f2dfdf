"""Demo script for fiscal-dashboard."""

import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fiscal_dashboard.adapters.json_adapter import parse
from fiscal_dashboard.formatting import deadline_badge, format_compliance
from fiscal_dashboard.metrics import compute_metrics
from fiscal_dashboard.store import InMemoryActivityStore, default_categories


def main() -> None:
    store = InMemoryActivityStore(parse("examples/sample_activities.json"), default_categories())
    today = date(2025, 7, 15)
    metrics = compute_metrics(store.list_activities(), today)
    print("Total:", metrics.total, "Pending:", metrics.pending_count)
    print("Compliance:", format_compliance(metrics.compliance_rate))
    print("Trend:", [bucket.to_dict() for bucket in metrics.delivery_trend])
    for record in metrics.critical_items:
        print(" -", record.title, deadline_badge(record.company_deadline, today))


if __name__ == "__main__":
    main()
