"""Streamlit dashboard for fiscal-dashboard."""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path
from typing import Any, Optional

from fiscal_dashboard.adapters import csv_adapter, json_adapter
from fiscal_dashboard.config import get_settings
from fiscal_dashboard.dates import format_date
from fiscal_dashboard.formatting import deadline_badge, format_compliance, status_shares
from fiscal_dashboard.log import get_logger
from fiscal_dashboard.metrics import compute_metrics
from fiscal_dashboard.store import InMemoryActivityStore, default_categories, default_collaborators

logger = get_logger(__name__)

DEMO_DATASET = "examples/sample_activities.json"


def _parse_records_from_path(file_path: str) -> list:
    suffix = Path(file_path).suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(file_path)
    if suffix == ".json":
        return json_adapter.parse(file_path)
    raise ValueError("Unsupported file type. Please use .csv or .json")


def _parse_uploaded(uploaded_file) -> list:
    suffix = Path(uploaded_file.name).suffix.lower()
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    try:
        return _parse_records_from_path(temp_path)
    finally:
        Path(temp_path).unlink(missing_ok=True)


def run_dashboard(store: InMemoryActivityStore, now: date, category: Optional[str]) -> dict[str, Any]:
    """Compute everything the dashboard page renders."""

    settings = get_settings()
    metrics = compute_metrics(store.list_activities(), now, category=category, critical_limit=settings.critical_limit)
    return {
        "kpis": {
            "total": metrics.total,
            "pending": metrics.pending_count,
            "on_time": metrics.on_time_count,
            "at_risk": metrics.overdue_or_at_risk_count,
            "compliance": format_compliance(metrics.compliance_rate),
        },
        "status_distribution": metrics.status_distribution,
        "status_shares": status_shares(metrics.status_distribution, metrics.total),
        "trend": [bucket.to_dict() for bucket in metrics.delivery_trend],
        "critical": [
            {
                "title": record.title,
                "deadline": format_date(record.company_deadline),
                "responsible": record.responsible.name if record.responsible else "N/A",
                "badge": deadline_badge(record.company_deadline, now),
            }
            for record in metrics.critical_items
        ],
        "history": [
            {
                "title": record.title,
                "status": record.status.value,
                "completed": format_date(record.completed_on),
                "responsible": record.responsible.name if record.responsible else "N/A",
            }
            for record in store.list_history()
            if category is None or record.category == category
        ],
    }


def main() -> None:
    import streamlit as st

    settings = get_settings()
    st.set_page_config(page_title="Painel Fiscal", layout="wide")
    st.title("Página Inicial - Visão Geral")

    with st.sidebar:
        st.header("Controles")
        uploaded = st.file_uploader("Arquivo de atividades", type=["csv", "json"])
        use_demo = st.checkbox("Usar dados de exemplo", value=True)
        now = st.date_input("Data de referência", value=date.today())
        only_category = st.checkbox(f"Somente '{settings.category}'", value=True)
        run = st.button("Atualizar painel", type="primary")

    if not run:
        st.info("Configure the sidebar and click **Atualizar painel**.")
        return

    try:
        if use_demo:
            records = _parse_records_from_path(DEMO_DATASET)
        elif uploaded is not None:
            records = _parse_uploaded(uploaded)
        else:
            st.error("Please upload a CSV/JSON file or enable the demo dataset.")
            return

        store = InMemoryActivityStore(records, default_categories(), default_collaborators())
        result = run_dashboard(store, now, settings.category if only_category else None)

        st.subheader("Indicadores Chave de Obrigações Fiscais")
        kpis = result["kpis"]
        c1, c2, c3, c4, c5 = st.columns(5)
        c1.metric("Total de Obrigações", kpis["total"])
        c2.metric("Pendentes", kpis["pending"])
        c3.metric("Concluídas no Prazo", kpis["on_time"])
        c4.metric("Com Atraso / Risco", kpis["at_risk"])
        c5.metric("Conformidade", kpis["compliance"])

        left, right = st.columns([1, 2])
        with left:
            st.subheader("Distribuição de Status")
            if result["status_distribution"]:
                for status, count in result["status_distribution"].items():
                    share = result["status_shares"][status]
                    st.write(f"{status}: {count} ({share:.1f}%)")
                    st.progress(min(1.0, share / 100.0))
            else:
                st.write("Sem dados de distribuição para exibir.")

        with right:
            st.subheader("Tendência de Entregas Mensais")
            if result["trend"]:
                st.bar_chart(
                    {
                        "No Prazo": [bucket["onTime"] for bucket in result["trend"]],
                        "Com Atraso": [bucket["late"] for bucket in result["trend"]],
                        "Não Entregue (Vencido)": [bucket["overdueUnfulfilled"] for bucket in result["trend"]],
                    }
                )
                st.caption(" | ".join(bucket["month"] for bucket in result["trend"]))
            else:
                st.write("Sem dados de tendência para exibir.")

        st.subheader("Obrigações Críticas")
        if result["critical"]:
            st.table(result["critical"])
        else:
            st.write("Nenhuma obrigação crítica encontrada no momento.")

        st.subheader("Histórico de Atividades")
        if result["history"]:
            st.table(result["history"])
        else:
            st.write("Nenhuma atividade concluída.")

    except ValueError as exc:
        st.error(f"Input error: {exc}")
    except Exception:
        logger.exception("Dashboard rendering failed")
        st.error("Something went wrong while building the dashboard. Please verify the input format.")


if __name__ == "__main__":
    main()
