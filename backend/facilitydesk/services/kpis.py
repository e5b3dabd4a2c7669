"""Dashboard KPIs and the item sets behind each KPI tile."""

from datetime import datetime, time, timedelta, timezone, tzinfo
from enum import Enum
from typing import Iterable, Optional, Sequence

from facilitydesk.schemas.entities import (
    Case,
    CaseStatus,
    MaintenancePlan,
    Record,
    Task,
    TaskStatus,
)

OPEN_STATUSES = (CaseStatus.REPORTED, CaseStatus.IN_PROGRESS)


class KpiKind(str, Enum):
    OPEN_CASES = "open_cases"
    OVERDUE_TASKS = "overdue_tasks"
    COMPLETED_THIS_WEEK = "completed_this_week"


KPI_DETAILS: dict[KpiKind, dict[str, str]] = {
    KpiKind.OPEN_CASES: {
        "title": "Öppna Ärenden",
        "description": "Visa alla öppna ärenden som behöver hanteras",
    },
    KpiKind.OVERDUE_TASKS: {
        "title": "Försenade Uppgifter",
        "description": "Visa alla försenade uppgifter som kräver omedelbar uppmärksamhet",
    },
    KpiKind.COMPLETED_THIS_WEEK: {
        "title": "Slutförda Denna Vecka",
        "description": "Visa alla uppgifter som slutfördes denna vecka",
    },
}


def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now(timezone.utc)


def is_open(case: Case) -> bool:
    return case.status in OPEN_STATUSES


def is_overdue(task: Task, now: Optional[datetime] = None) -> bool:
    return (
        task.due_date is not None
        and task.due_date < _now(now)
        and task.status != TaskStatus.COMPLETED
    )


def week_bounds(now: datetime, tz: tzinfo) -> tuple[datetime, datetime]:
    """Monday 00:00:00.000 to Sunday 23:59:59.999 of the week holding ``now``."""
    local = now.astimezone(tz)
    monday = local.date() - timedelta(days=local.weekday())
    start = datetime.combine(monday, time.min, tzinfo=tz)
    end = datetime.combine(monday + timedelta(days=6), time(23, 59, 59, 999000), tzinfo=tz)
    return start, end


def is_this_week(moment: datetime, now: Optional[datetime] = None,
                 tz: tzinfo = timezone.utc) -> bool:
    start, end = week_bounds(_now(now), tz)
    return start <= moment <= end


def completed_this_week(task: Task, now: Optional[datetime] = None,
                        tz: tzinfo = timezone.utc) -> bool:
    return task.completed_at is not None and is_this_week(task.completed_at, now, tz)


def kpi_items(
    kind: KpiKind,
    cases: Iterable[Case],
    tasks: Iterable[Task],
    now: Optional[datetime] = None,
    tz: tzinfo = timezone.utc,
) -> list[Record]:
    now = _now(now)
    if kind == KpiKind.OPEN_CASES:
        return [c for c in cases if is_open(c)]
    if kind == KpiKind.OVERDUE_TASKS:
        return [t for t in tasks if is_overdue(t, now)]
    if kind == KpiKind.COMPLETED_THIS_WEEK:
        return [t for t in tasks if completed_this_week(t, now, tz)]
    return []


def dashboard_stats(
    cases: Sequence[Case],
    tasks: Sequence[Task],
    plans: Sequence[MaintenancePlan],
    now: Optional[datetime] = None,
    tz: tzinfo = timezone.utc,
) -> dict[str, int]:
    now = _now(now)
    return {
        "open_cases": sum(1 for c in cases if is_open(c)),
        "overdue_tasks": sum(1 for t in tasks if is_overdue(t, now)),
        "completed_this_week": sum(1 for t in tasks if completed_this_week(t, now, tz)),
        "total_cases": len(cases),
        "total_tasks": len(tasks),
        "total_maintenance_plans": len(plans),
    }
