"""Chart series for the dashboard: cases per week, status split, handling time."""

import math
from collections import Counter
from datetime import datetime, timezone
from typing import Iterable

from facilitydesk.schemas.entities import CASE_STATUSES, Case, CaseStatus

from .kanban import STATUS_COLUMNS

SECONDS_PER_DAY = 86400


def week_key(moment: datetime) -> str:
    """``YYYY-W##`` with weeks counted from Jan 1 (Sunday-based), in UTC."""
    moment = moment.astimezone(timezone.utc) if moment.tzinfo else moment.replace(tzinfo=timezone.utc)
    jan1 = datetime(moment.year, 1, 1, tzinfo=timezone.utc)
    days = (moment - jan1).total_seconds() / SECONDS_PER_DAY
    jan1_weekday = (jan1.weekday() + 1) % 7  # Sunday = 0
    week = math.ceil((days + jan1_weekday + 1) / 7)
    return f"{moment.year}-W{week:02d}"


def group_by_week(cases: Iterable[Case]) -> list[dict]:
    counts = Counter(week_key(c.created_at) for c in cases)
    return [{"week": week, "count": counts[week]} for week in sorted(counts)]


def status_distribution(cases: Iterable[Case]) -> list[dict]:
    counts = Counter(c.status for c in cases)
    return [
        {"key": status.value, "name": STATUS_COLUMNS[status.value], "value": counts.get(status, 0)}
        for status in CASE_STATUSES
    ]


def average_handling_days(cases: Iterable[Case]) -> float:
    """Mean days from creation to last update over finished cases."""
    finished = [c for c in cases if c.status in (CaseStatus.DONE, CaseStatus.CLOSED)]
    if not finished:
        return 0
    total = 0.0
    for case in finished:
        end = case.updated_at or case.created_at
        total += max(0.0, (end - case.created_at).total_seconds() / SECONDS_PER_DAY)
    return round(total / len(finished), 1)


def chart_summary(cases: Iterable[Case]) -> dict:
    cases = list(cases)
    return {
        "per_week": group_by_week(cases),
        "status_distribution": status_distribution(cases),
        "average_handling_days": average_handling_days(cases),
    }
