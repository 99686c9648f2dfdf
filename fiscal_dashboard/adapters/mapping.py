"""Field mapping from raw activity dicts to ActivityRecord."""

from __future__ import annotations

from typing import Any, Optional

from fiscal_dashboard.dates import parse_date
from fiscal_dashboard.schema import ActivityRecord, Responsible, Status

_TITLE_KEYS = ("titulo", "title")
_CATEGORY_KEYS = ("categoria", "category")
_SUBCATEGORY_KEYS = ("subcategoria", "subcategory")
_DESCRIPTION_KEYS = ("descricao", "description")
_PRIORITY_KEYS = ("Prioridade", "priority")
_REFERENCE_KEYS = ("DataReferencia", "referenceDate", "reference_date")
_LEGAL_DEADLINE_KEYS = ("PrazoLegal", "legalDeadline", "legal_deadline")
_COMPANY_DEADLINE_KEYS = ("PrazoLimiteEmpresa", "companyDeadline", "company_deadline")
_COMPLETION_KEYS = (
    "DataConclusao",
    "DataEnvioEfetiva",
    "DataResolucaoEfetiva",
    "actualSubmissionDate",
    "completionTimestamp",
    "completed_on",
)
_START_KEYS = ("DataInicio", "startDate")
_END_KEYS = ("DataFim", "endDate")
_RESPONSIBLE_KEYS = ("responsavel_FK", "responsible")
_RESPONSIBLE_ID_KEYS = ("responsavel_id", "responsible_id")
_RESPONSIBLE_NAME_KEYS = ("responsavel_nome", "responsible_name")


def _first(item: dict, keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = item.get(key)
        if value not in (None, ""):
            return value
    return None


def _text(item: dict, keys: tuple[str, ...]) -> Optional[str]:
    value = _first(item, keys)
    return str(value).strip() if value is not None else None


def _responsible(item: dict) -> Optional[Responsible]:
    raw = _first(item, _RESPONSIBLE_KEYS)
    if isinstance(raw, dict):
        responsible_id = raw.get("id")
        name = raw.get("NomeCompleto") or raw.get("name") or ""
    else:
        responsible_id = raw if raw is not None else _first(item, _RESPONSIBLE_ID_KEYS)
        name = _first(item, _RESPONSIBLE_NAME_KEYS) or ""
    if responsible_id in (None, ""):
        return None
    return Responsible(id=str(responsible_id).strip(), name=str(name).strip())


def record_from_mapping(item: dict, label: str) -> ActivityRecord:
    """Build a record from a raw dict; ``label`` prefixes error messages (e.g. ``Row 3``)."""

    if not isinstance(item, dict):
        raise ValueError(f"{label}: expected an object")

    raw_id = item.get("id")
    if raw_id in (None, ""):
        raise ValueError(f"{label}: missing required fields ['id']")
    raw_status = item.get("status")
    if raw_status in (None, ""):
        raise ValueError(f"{label}: missing required fields ['status']")

    try:
        status = Status.parse(raw_status)
    except ValueError as exc:
        raise ValueError(f"{label}: invalid status '{raw_status}'") from exc

    return ActivityRecord(
        id=str(raw_id).strip(),
        title=_text(item, _TITLE_KEYS) or "",
        category=_text(item, _CATEGORY_KEYS) or "",
        status=status,
        reference_date=parse_date(_first(item, _REFERENCE_KEYS)),
        legal_deadline=parse_date(_first(item, _LEGAL_DEADLINE_KEYS)),
        company_deadline=parse_date(_first(item, _COMPANY_DEADLINE_KEYS)),
        completed_on=parse_date(_first(item, _COMPLETION_KEYS)),
        responsible=_responsible(item),
        subcategory=_text(item, _SUBCATEGORY_KEYS),
        description=_text(item, _DESCRIPTION_KEYS),
        priority=_text(item, _PRIORITY_KEYS),
        start_date=parse_date(_first(item, _START_KEYS)),
        end_date=parse_date(_first(item, _END_KEYS)),
    )
