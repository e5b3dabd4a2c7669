"""Record builders for tests that do not need a database."""

import itertools
from datetime import date, datetime, timezone

from facilitydesk.schemas.entities import (
    Case,
    CaseCategory,
    CasePriority,
    CaseStatus,
    Frequency,
    MaintenancePlan,
    PlanPriority,
    Property,
    Task,
    TaskStatus,
)

BASE_TIME = datetime(2025, 3, 12, 10, 0, tzinfo=timezone.utc)  # a Wednesday

_ids = itertools.count(1)


def _next_id(prefix: str) -> str:
    return f"{prefix}-{next(_ids)}"


def make_case(**overrides) -> Case:
    values = dict(
        id=_next_id("case"),
        property_id="prop-1",
        unit_id=None,
        title="Stopp i avlopp",
        description="Vattnet rinner inte undan",
        category=CaseCategory.PLUMBING,
        priority=CasePriority.NORMAL,
        status=CaseStatus.REPORTED,
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    )
    values.update(overrides)
    return Case(**values)


def make_task(**overrides) -> Task:
    values = dict(
        id=_next_id("task"),
        description="Byt packning",
        status=TaskStatus.PENDING,
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    )
    values.update(overrides)
    return Task(**values)


def make_plan(**overrides) -> MaintenancePlan:
    values = dict(
        id=_next_id("plan"),
        property_id="prop-1",
        title="Filterbyte",
        description="Byt filter i aggregat",
        frequency=Frequency.QUARTERLY,
        next_due_date=date(2025, 1, 31),
        estimated_duration_hours=2,
        priority=PlanPriority.NORMAL,
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    )
    values.update(overrides)
    return MaintenancePlan(**values)


def make_property(**overrides) -> Property:
    values = dict(
        id="prop-1",
        name="Kvarteret Eken",
        address="Storgatan 5, 411 01 Göteborg",
        created_at=BASE_TIME,
    )
    values.update(overrides)
    return Property(**values)
