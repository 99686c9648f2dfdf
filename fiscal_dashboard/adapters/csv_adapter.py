"""CSV adapter for activity records."""

from __future__ import annotations

import csv

from fiscal_dashboard.adapters.mapping import record_from_mapping
from fiscal_dashboard.schema import ActivityRecord


def parse(file_path: str) -> list[ActivityRecord]:
    """Parse CSV file into a list of activity records.

    Responsible collaborators are read from ``responsavel_id`` / ``responsavel_nome``
    columns (or their English names).
    """

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        records: list[ActivityRecord] = []
        for row_number, row in enumerate(reader, start=2):
            records.append(record_from_mapping(row, f"Row {row_number}"))
        return records
