"""Dashboard overview: the recent-activity lists and table counts."""

import logging
from typing import TYPE_CHECKING, Sequence

from facilitydesk.core.errors import DataAccessError, handle_api_error
from facilitydesk.schemas.entities import Record

if TYPE_CHECKING:
    from facilitydesk.db.repositories.base import DataSource

logger = logging.getLogger(__name__)

COUNTED_TABLES = ("properties", "cases", "tasks", "maintenance_plans")


def recent_items(
    cases: Sequence[Record],
    tasks: Sequence[Record],
    plans: Sequence[Record],
    limit: int = 5,
) -> dict[str, list[dict]]:
    """Head of each snapshot, already in its store's sort order."""
    return {
        "cases": [c.to_dict() for c in cases[:limit]],
        "tasks": [t.to_dict() for t in tasks[:limit]],
        "maintenance_plans": [p.to_dict() for p in plans[:limit]],
    }


async def counts_overview(data_source: "DataSource") -> dict[str, int]:
    """Row count per table; a failing table reports 0."""
    repos = data_source.repositories()
    counts = {}
    for table in COUNTED_TABLES:
        try:
            counts[table] = await repos[table].count()
        except DataAccessError as e:
            handle_api_error(e, f"Counting {table}")
            counts[table] = 0
    return counts
