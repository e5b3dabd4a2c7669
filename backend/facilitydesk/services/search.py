"""Global search over the loaded snapshots, and the capped server-side lookup."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from facilitydesk.core.errors import DataAccessError, handle_api_error
from facilitydesk.schemas.entities import Case, MaintenancePlan, Task

if TYPE_CHECKING:
    from facilitydesk.db.repositories.base import DataSource

logger = logging.getLogger(__name__)

RESULT_TYPES = ("case", "task", "maintenance")
MIN_QUERY_LENGTH = 2


@dataclass(frozen=True)
class SearchResult:
    id: str
    type: str
    title: str
    status: str
    href: str
    description: Optional[str] = None
    priority: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "href": self.href,
        }


def _hit(needle: str, *fields: Optional[str]) -> bool:
    return any(f and needle in f.lower() for f in fields)


def search_snapshots(
    query: str,
    cases: Iterable[Case],
    tasks: Iterable[Task],
    plans: Iterable[MaintenancePlan],
    types: Optional[Iterable[str]] = None,
    min_length: int = MIN_QUERY_LENGTH,
) -> list[SearchResult]:
    """Case-insensitive substring search; cases, then tasks, then plans."""
    if len(query) < min_length:
        return []
    wanted = set(types) if types is not None else set(RESULT_TYPES)
    needle = query.lower()
    results: list[SearchResult] = []

    if "case" in wanted:
        for c in cases:
            if _hit(needle, c.title, c.description, c.category.value):
                results.append(SearchResult(
                    id=c.id, type="case", title=c.title,
                    description=c.description or None,
                    status=c.status.value, priority=c.priority.value,
                    href=f"/cases/{c.id}",
                ))
    if "task" in wanted:
        for t in tasks:
            if _hit(needle, t.description):
                results.append(SearchResult(
                    id=t.id, type="task", title=t.description,
                    status=t.status.value, href=f"/tasks/{t.id}",
                ))
    if "maintenance" in wanted:
        for m in plans:
            if _hit(needle, m.title, m.description):
                results.append(SearchResult(
                    id=m.id, type="maintenance", title=m.title,
                    description=m.description or None,
                    status="active", priority=m.priority.value,
                    href=f"/maintenance/{m.id}",
                ))
    return results


async def server_search(data_source: "DataSource", query: str, limit: int = 5) -> dict[str, list[dict]]:
    """Capped lookup against the backend; a failure yields empty groups."""
    empty = {"cases": [], "tasks": [], "maintenance": [], "properties": []}
    if not query.strip():
        return empty
    try:
        found = await data_source.search(query, limit)
    except DataAccessError as e:
        handle_api_error(e, "Global search")
        return empty
    return {group: [r.to_dict() for r in rows] for group, rows in found.items()}
