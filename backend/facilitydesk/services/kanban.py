"""Kanban board: cases bucketed by status, and drag-to-move transitions."""

import logging
from typing import TYPE_CHECKING, Iterable, Mapping, Optional

from facilitydesk.schemas.entities import CASE_STATUSES, Case, CaseStatus

if TYPE_CHECKING:
    from facilitydesk.sync.store import CaseStore

logger = logging.getLogger(__name__)

# Column id -> display title
STATUS_COLUMNS: dict[str, str] = {
    CaseStatus.REPORTED.value: "Rapporterad",
    CaseStatus.IN_PROGRESS.value: "Pågår",
    CaseStatus.DONE.value: "Klar",
    CaseStatus.CLOSED.value: "Stängd",
}

# Any status may move to any other status
UNRESTRICTED: Mapping[CaseStatus, frozenset[CaseStatus]] = {
    status: frozenset(CASE_STATUSES) for status in CASE_STATUSES
}


def group_by_status(cases: Iterable[Case]) -> dict[str, list[Case]]:
    """Partition cases into the four fixed columns, keeping input order."""
    columns: dict[str, list[Case]] = {status.value: [] for status in CASE_STATUSES}
    for case in cases:
        columns[case.status.value].append(case)
    return columns


def board_columns(cases: Iterable[Case]) -> list[dict]:
    grouped = group_by_status(cases)
    return [
        {
            "id": column_id,
            "title": title,
            "count": len(grouped[column_id]),
            "cases": [c.to_dict() for c in grouped[column_id]],
        }
        for column_id, title in STATUS_COLUMNS.items()
    ]


class KanbanBoard:
    """Drag state for one board. Only a drop on a column moves a case."""

    def __init__(
        self,
        store: "CaseStore",
        transitions: Mapping[CaseStatus, frozenset[CaseStatus]] = UNRESTRICTED,
    ):
        self.store = store
        self.transitions = transitions
        self.active_id: Optional[str] = None

    def drag_start(self, case_id: str) -> None:
        self.active_id = case_id

    def allows(self, current: CaseStatus, target: CaseStatus) -> bool:
        return target in self.transitions.get(current, frozenset())

    async def drag_end(self, case_id: str, over_id: Optional[str]) -> bool:
        """Finish a drag; True only when a status update was issued and succeeded."""
        self.active_id = None
        if over_id not in STATUS_COLUMNS:
            # Dropped outside a column, or on a card
            return False

        target = CaseStatus(over_id)
        case = self.store.get(case_id)
        if case is not None and not self.allows(case.status, target):
            logger.info(f"Transition {case.status.value} -> {target.value} not allowed for {case_id}")
            return False
        return await self.store.update_status(case_id, target)
