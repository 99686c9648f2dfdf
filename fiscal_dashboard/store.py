"""Activity repository used by the dashboard screens."""

from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Protocol

from fiscal_dashboard.log import get_logger
from fiscal_dashboard.schema import ActivityRecord, Category, Collaborator, Status

logger = get_logger(__name__)


class ActivityStore(Protocol):
    """Storage interface the dashboard layers depend on."""

    def list_activities(
        self,
        status: Optional[Status] = None,
        responsible: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[ActivityRecord]: ...

    def save_activity(self, record: ActivityRecord) -> ActivityRecord: ...

    def delete_activity(self, activity_id: str) -> bool: ...

    def list_history(self, responsible: Optional[str] = None) -> list[ActivityRecord]: ...

    def list_collaborators(self) -> list[Collaborator]: ...

    def list_categories(self) -> list[Category]: ...

    def save_category(self, category: Category) -> Category: ...


def default_categories() -> list[Category]:
    """Default taxonomy of the fiscal department."""

    return [
        Category(
            "cat1",
            "Obrigações",
            ("GIA ST", "SPED Fiscal", "SPED Contribuições", "DCTF", "DEFIS", "ECF", "RAIS", "Outra Obrigação"),
        ),
        Category(
            "cat2",
            "Agenda",
            ("Reunião Interna", "Reunião Externa", "Fechamento", "Alinhamento", "Capacitação", "Evento", "Feriado"),
        ),
        Category("cat3", "Pagamento", ("Impostos Federais", "Impostos Estaduais", "Fornecedores", "Taxas")),
        Category(
            "cat4",
            "Encaminhamento",
            ("Verificação de Apuração", "Solicitação de Crédito", "Ajuste Contábil", "Suporte TI"),
        ),
        Category(
            "cat5",
            "Atividade Extra",
            ("Projeto Interno", "Relatório Ad-hoc", "Análise de Viabilidade", "Outra Atividade"),
        ),
        Category(
            "cat6",
            "Checklist",
            ("Item de Fechamento Fiscal", "Item de Fechamento Contábil", "Onboarding RH"),
        ),
    ]


def default_collaborators() -> list[Collaborator]:
    """Default roster used to assign and filter activities."""

    return [
        Collaborator("user1", "João Silva", "joao.silva@example.com", "Fiscal"),
        Collaborator("user2", "Maria Oliveira", "maria.oliveira@example.com", "Contabilidade"),
        Collaborator("user3", "Carlos Pereira", "carlos.pereira@example.com", "RH"),
        Collaborator("user4", "Ana Costa", "ana.costa@example.com", "Fiscal"),
        Collaborator("user5", "Lucas Mendes", "lucas.mendes@example.com", "TI"),
        Collaborator("user6", "Sofia Alves", "sofia.alves@example.com", "Jurídico"),
        Collaborator("user7", "Eneide Santos", "eneide.santos@example.com", "Fiscal"),
        Collaborator("user8", "Matheus Gomes", "matheus.gomes@example.com", "Fiscal"),
        Collaborator("user9", "Rutenberg Lima", "rutenberg.lima@example.com", "Fiscal"),
        Collaborator("user10", "Zélia Castro", "zelia.castro@example.com", "Coordenação Fiscal"),
        Collaborator("user11", "Juliana Paes", "juliana.paes@example.com", "Contabilidade"),
    ]


def _sort_date(record: ActivityRecord) -> Optional[date]:
    return record.company_deadline or record.end_date or record.start_date


def _sort_key(record: ActivityRecord) -> tuple[bool, date]:
    value = _sort_date(record)
    return (value is None, value or date.min)


def _matches_search(record: ActivityRecord, term: str) -> bool:
    needle = term.casefold()
    return needle in record.title.casefold() or needle in (record.description or "").casefold()


class InMemoryActivityStore:
    """Process-local store holding records, categories and collaborators per instance."""

    def __init__(
        self,
        records: Iterable[ActivityRecord] = (),
        categories: Iterable[Category] = (),
        collaborators: Iterable[Collaborator] = (),
    ):
        self._records: list[ActivityRecord] = list(records)
        self._categories: list[Category] = list(categories)
        self._collaborators: list[Collaborator] = list(collaborators)
        self._activity_ids = itertools.count(len(self._records) + 1)
        self._category_ids = itertools.count(len(self._categories) + 1)

    def list_activities(
        self,
        status: Optional[Status] = None,
        responsible: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[ActivityRecord]:
        """Return matching records ordered by their deadline, undated records last."""

        records = list(self._records)
        if status is not None:
            wanted = Status.parse(status)
            records = [record for record in records if record.status is wanted]
        if responsible:
            records = [record for record in records if record.responsible and record.responsible.id == responsible]
        if category:
            records = [record for record in records if record.category == category]
        if search:
            records = [record for record in records if _matches_search(record, search)]
        return sorted(records, key=_sort_key)

    def save_activity(self, record: ActivityRecord) -> ActivityRecord:
        """Update the record with the same id, or append it as a new record."""

        if record.id:
            for index, existing in enumerate(self._records):
                if existing.id == record.id:
                    self._records[index] = record
                    logger.debug("Updated activity %s", record.id)
                    return record
        else:
            record = replace(record, id=self._next_id("atv", self._activity_ids, {r.id for r in self._records}))

        self._records.append(record)
        logger.debug("Created activity %s", record.id)
        return record

    def delete_activity(self, activity_id: str) -> bool:
        before = len(self._records)
        self._records = [record for record in self._records if record.id != activity_id]
        removed = len(self._records) < before
        if removed:
            logger.debug("Deleted activity %s", activity_id)
        return removed

    def list_history(self, responsible: Optional[str] = None) -> list[ActivityRecord]:
        """Completed records, most recently completed first, undated completions last."""

        records = [record for record in self._records if record.is_completed]
        if responsible:
            records = [record for record in records if record.responsible and record.responsible.id == responsible]
        dated = sorted(
            (record for record in records if record.completed_on is not None),
            key=lambda record: record.completed_on,
            reverse=True,
        )
        return dated + [record for record in records if record.completed_on is None]

    def list_collaborators(self) -> list[Collaborator]:
        return list(self._collaborators)

    def list_categories(self) -> list[Category]:
        return list(self._categories)

    def save_category(self, category: Category) -> Category:
        if category.id:
            for index, existing in enumerate(self._categories):
                if existing.id == category.id:
                    self._categories[index] = category
                    return category
        else:
            category = replace(
                category, id=self._next_id("cat", self._category_ids, {c.id for c in self._categories})
            )

        self._categories.append(category)
        return category

    @staticmethod
    def _next_id(prefix: str, counter, taken: set) -> str:
        while True:
            candidate = f"{prefix}{next(counter)}"
            if candidate not in taken:
                return candidate
