"""Compute dashboard metrics from a CSV/JSON activity file."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fiscal_dashboard.adapters import csv_adapter, json_adapter
from fiscal_dashboard.config import get_settings
from fiscal_dashboard.log import get_logger, setup_logging
from fiscal_dashboard.metrics import compute_metrics

logger = get_logger("run_dashboard")


def _load_records(path: Path):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(str(path))
    if suffix == ".json":
        return json_adapter.parse(str(path))
    raise ValueError("Unsupported input format, expected .csv or .json")


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Compute fiscal dashboard metrics")
    parser.add_argument("--data", required=True, help="Path to CSV/JSON activities file")
    parser.add_argument("--now", type=date.fromisoformat, default=None, help="Evaluation date (YYYY-MM-DD)")
    parser.add_argument("--category", default=settings.category, help="Category in scope ('' for all)")
    args = parser.parse_args()

    setup_logging()
    now = args.now or date.today()
    records = _load_records(Path(args.data))
    logger.info("Loaded %d records from %s", len(records), args.data)

    metrics = compute_metrics(
        records,
        now,
        category=args.category or None,
        critical_limit=settings.critical_limit,
    )
    report = metrics.to_dict()
    report["evaluatedOn"] = now.isoformat()

    print(json.dumps(report, indent=2, ensure_ascii=False))

    outputs_dir = Path("outputs")
    outputs_dir.mkdir(parents=True, exist_ok=True)
    out_path = outputs_dir / "dashboard_metrics.json"
    out_path.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"Saved dashboard metrics to {out_path}")


if __name__ == "__main__":
    main()
