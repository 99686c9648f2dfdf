import json
from datetime import date, datetime, timedelta, timezone

from fiscal_dashboard.adapters.json_adapter import parse as parse_json
from fiscal_dashboard.metrics import compute_metrics
from fiscal_dashboard.schema import ActivityRecord, Status

NOW = date(2025, 7, 15)


def obligation(record_id, status, deadline=None, done=None, reference=None, category="Obrigações"):
    return ActivityRecord(
        id=record_id,
        title=f"Obrigação {record_id}",
        category=category,
        status=status,
        company_deadline=deadline,
        completed_on=done,
        reference_date=reference,
    )


def test_completed_and_late_scenario():
    records = [
        obligation("a", Status.COMPLETED, date(2025, 5, 14), date(2025, 5, 10)),
        obligation("b", Status.COMPLETED_LATE, date(2025, 6, 17), date(2025, 6, 20)),
    ]
    metrics = compute_metrics(records, NOW)
    assert metrics.total == 2
    assert metrics.on_time_count == 1
    assert metrics.overdue_or_at_risk_count == 1
    assert metrics.compliance_rate == 50.0


def test_empty_input():
    metrics = compute_metrics([], NOW)
    assert metrics.total == 0
    assert metrics.compliance_rate == "N/A"
    assert metrics.critical_items == []
    assert metrics.delivery_trend == []
    assert metrics.status_distribution == {}


def test_open_overdue_record_is_at_risk_and_critical():
    overdue = obligation("late", Status.PENDING, NOW - timedelta(days=3))
    metrics = compute_metrics([overdue], NOW)
    assert metrics.overdue_or_at_risk_count == 1
    assert metrics.critical_items == [overdue]
    assert metrics.compliance_rate == "N/A"


def test_category_filter_and_pending_invariant():
    records = [
        obligation("a", Status.PENDING, date(2025, 8, 1)),
        obligation("b", Status.COMPLETED, date(2025, 7, 1), date(2025, 6, 30)),
        obligation("c", Status.APPROVED),
        obligation("d", Status.COMPLETED_LATE),
        obligation("x", Status.PENDING, date(2025, 7, 1), category="Agenda"),
    ]
    metrics = compute_metrics(records, NOW)
    completed = sum(1 for r in records[:4] if r.is_completed)
    assert metrics.total == 4
    assert metrics.pending_count + completed == metrics.total
    assert metrics.status_distribution == {"Pendente": 1, "Concluído": 1, "Aprovado": 1, "Concluído em atraso": 1}

    everything = compute_metrics(records, NOW, category=None)
    assert everything.total == 5


def test_completed_after_deadline_is_not_on_time_nor_at_risk():
    record = obligation("a", Status.COMPLETED, date(2025, 7, 1), date(2025, 7, 3))
    metrics = compute_metrics([record], NOW)
    assert metrics.on_time_count == 0
    assert metrics.overdue_or_at_risk_count == 0
    assert metrics.compliance_rate == 0.0


def test_at_risk_counts_late_status_and_open_overdue_only():
    records = [
        obligation("late", Status.COMPLETED_LATE, date(2025, 7, 1), date(2025, 7, 3)),
        obligation("dated-late", Status.COMPLETED, date(2025, 7, 1), date(2025, 7, 3)),
        obligation("overdue", Status.IN_PREPARATION, date(2025, 7, 10)),
        obligation("upcoming", Status.PENDING, date(2025, 7, 20)),
    ]
    assert compute_metrics(records, NOW).overdue_or_at_risk_count == 2


def test_compliance_rate_stays_within_bounds():
    records = [
        obligation("a", Status.COMPLETED, date(2025, 7, 1), date(2025, 6, 28)),
        obligation("b", Status.COMPLETED, date(2025, 7, 1), date(2025, 7, 2)),
        obligation("c", Status.COMPLETED_LATE, date(2025, 6, 1), date(2025, 6, 9)),
        obligation("d", Status.COMPLETED),
        obligation("e", Status.PENDING, date(2025, 7, 1)),
        obligation("f", Status.REJECTED),
    ]
    for size in range(1, len(records) + 1):
        rate = compute_metrics(records[:size], NOW).compliance_rate
        assert 0.0 <= rate <= 100.0
    assert compute_metrics(records, NOW).compliance_rate == 50.0
    assert compute_metrics(records[4:], NOW).compliance_rate == "N/A"


def test_malformed_dates_keep_record_in_totals(tmp_path):
    path = tmp_path / "activities.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "bad",
                    "titulo": "DCTF",
                    "categoria": "Obrigações",
                    "status": "Pendente",
                    "PrazoLimiteEmpresa": "bad",
                    "DataReferencia": "bad",
                },
                {
                    "id": "ok",
                    "titulo": "GIA ST",
                    "categoria": "Obrigações",
                    "status": "Pendente",
                    "PrazoLimiteEmpresa": "2025-07-10",
                    "DataReferencia": "2025-06-01",
                },
            ]
        ),
        encoding="utf-8",
    )
    metrics = compute_metrics(parse_json(str(path)), NOW)
    assert metrics.total == 2
    assert metrics.pending_count == 2
    assert metrics.status_distribution == {"Pendente": 2}
    assert metrics.overdue_or_at_risk_count == 1
    assert [bucket.to_dict() for bucket in metrics.delivery_trend] == [
        {"month": "jun/25", "onTime": 0, "late": 0, "overdueUnfulfilled": 1}
    ]
    assert [record.id for record in metrics.critical_items] == ["ok"]


def test_negative_critical_limit_returns_no_items():
    record = obligation("a", Status.PENDING, date(2025, 7, 20))
    assert compute_metrics([record], NOW, critical_limit=-1).critical_items == []


def test_compliance_rounds_half_up():
    records = [obligation(str(i), Status.COMPLETED) for i in range(1)]
    records += [obligation(f"l{i}", Status.COMPLETED_LATE) for i in range(15)]
    assert compute_metrics(records, NOW).compliance_rate == 6.3


def test_critical_items_sorted_and_truncated():
    deadlines = [date(2025, 7, day) for day in (30, 2, 20, 16, 15, 10, 25)]
    records = [obligation(f"o{i}", Status.IN_PROGRESS, d) for i, d in enumerate(deadlines)]
    records.append(obligation("nodate", Status.PENDING))
    records.append(obligation("done", Status.COMPLETED, date(2025, 7, 1)))

    critical = compute_metrics(records, NOW).critical_items
    assert len(critical) == 5
    assert [r.company_deadline for r in critical] == sorted(r.company_deadline for r in critical)
    assert critical[0].company_deadline == date(2025, 7, 2)
    assert all(r.is_open for r in critical)


def test_record_with_completion_date_is_not_open():
    record = obligation("a", Status.APPROVED, date(2025, 7, 1), date(2025, 6, 30))
    metrics = compute_metrics([record], NOW)
    assert metrics.pending_count == 1
    assert metrics.overdue_or_at_risk_count == 0
    assert metrics.critical_items == []


def test_delivery_trend_buckets_are_chronological():
    records = [
        obligation("a", Status.COMPLETED, reference=date(2025, 1, 1)),
        obligation("b", Status.COMPLETED_LATE, reference=date(2024, 12, 1)),
        obligation("c", Status.PENDING, date(2025, 7, 1), reference=date(2025, 1, 5)),
        obligation("d", Status.PENDING, date(2025, 8, 1), reference=date(2025, 1, 9)),
        obligation("e", Status.PENDING),
    ]
    trend = [bucket.to_dict() for bucket in compute_metrics(records, NOW).delivery_trend]
    assert trend == [
        {"month": "dez/24", "onTime": 0, "late": 1, "overdueUnfulfilled": 0},
        {"month": "jan/25", "onTime": 1, "late": 0, "overdueUnfulfilled": 1},
    ]


def test_deadline_today_is_not_overdue_at_any_hour():
    record = obligation("a", Status.PENDING, date(2025, 6, 17))
    for now in (
        datetime(2025, 6, 17, 0, 0),
        datetime(2025, 6, 17, 23, 59),
        datetime(2025, 6, 17, 23, 0, tzinfo=timezone(timedelta(hours=-3))),
        datetime(2025, 6, 17, 0, 30, tzinfo=timezone(timedelta(hours=9))),
    ):
        metrics = compute_metrics([record], now)
        assert metrics.overdue_or_at_risk_count == 0
        assert metrics.critical_items == [record]

    assert compute_metrics([record], date(2025, 6, 18)).overdue_or_at_risk_count == 1


def test_aggregation_is_idempotent():
    records = [
        obligation("a", Status.PENDING, date(2025, 7, 20), reference=date(2025, 6, 1)),
        obligation("b", Status.PENDING, date(2025, 7, 20), reference=date(2025, 6, 1)),
        obligation("c", Status.COMPLETED, date(2025, 7, 10), date(2025, 7, 9), date(2025, 6, 1)),
    ]
    first = compute_metrics(records, NOW)
    second = compute_metrics(records, NOW)
    assert first == second
    assert [r.id for r in first.critical_items] == ["a", "b"]


def test_to_dict_uses_output_field_names():
    record = obligation("a", Status.PENDING, date(2025, 7, 20), reference=date(2025, 6, 1))
    payload = compute_metrics([record], NOW).to_dict()
    assert set(payload) == {
        "total",
        "pendingCount",
        "onTimeCount",
        "overdueOrAtRiskCount",
        "complianceRate",
        "statusDistribution",
        "deliveryTrend",
        "criticalItems",
    }
    assert payload["criticalItems"][0]["companyDeadline"] == "2025-07-20"
    assert payload["complianceRate"] == "N/A"
