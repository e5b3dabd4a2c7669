"""List filtering and sorting for the case table."""

from datetime import date, datetime, time, timezone
from typing import Iterable, Optional

from facilitydesk.schemas.entities import Case
from facilitydesk.schemas.forms import CaseFilters, SortDirection, SortField


def _as_bound(value: date | datetime) -> datetime:
    """Date-only bounds mean midnight UTC of that day."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _contains(haystack: Optional[str], needle: str) -> bool:
    return bool(haystack) and needle in haystack.lower()


def filter_cases(cases: Iterable[Case], filters: CaseFilters) -> list[Case]:
    """Keep cases matching every active filter, in input order."""
    result = list(cases)

    query = (filters.query or "").strip().lower()
    if query:
        result = [
            c for c in result
            if _contains(c.title, query)
            or _contains(c.description, query)
            or _contains(c.category.value, query)
        ]
    if filters.status:
        result = [c for c in result if c.status == filters.status]
    if filters.priority:
        result = [c for c in result if c.priority == filters.priority]
    if filters.category:
        result = [c for c in result if c.category == filters.category]
    if filters.date_from is not None:
        lower = _as_bound(filters.date_from)
        result = [c for c in result if c.created_at >= lower]
    if filters.date_to is not None:
        upper = _as_bound(filters.date_to)
        result = [c for c in result if c.created_at <= upper]
    return result


def sort_cases(
    cases: Iterable[Case],
    field: SortField = "created_at",
    direction: SortDirection = "desc",
) -> list[Case]:
    """Stable sort on one column; enum columns compare by stored value."""

    def key(case: Case):
        value = getattr(case, field)
        return getattr(value, "value", value)

    return sorted(cases, key=key, reverse=direction == "desc")
