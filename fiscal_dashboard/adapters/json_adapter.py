"""JSON adapter for activity records."""

from __future__ import annotations

import json

from fiscal_dashboard.adapters.mapping import record_from_mapping
from fiscal_dashboard.schema import ActivityRecord


def parse(file_path: str) -> list[ActivityRecord]:
    """Parse JSON file into activity records."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")

    return [record_from_mapping(item, f"Item {i}") for i, item in enumerate(payload, start=1)]
