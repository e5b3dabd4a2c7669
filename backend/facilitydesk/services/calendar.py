"""Maintenance calendar: recurring plans expanded into dated events."""

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import Iterable, Mapping, Optional, Union

from dateutil.relativedelta import relativedelta

from facilitydesk.schemas.entities import Frequency, MaintenancePlan, Property

FREQUENCY_MONTHS: dict[Frequency, int] = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.BIANNUAL: 6,
    Frequency.ANNUAL: 12,
}

FREQUENCY_LABELS: dict[Frequency, str] = {
    Frequency.MONTHLY: "Månadsvis",
    Frequency.QUARTERLY: "Kvartalsvis",
    Frequency.BIANNUAL: "Halvårsvis",
    Frequency.ANNUAL: "Årligen",
}

EVENT_DURATION = timedelta(hours=24)


def frequency_months(frequency) -> int:
    """Months between occurrences; unknown frequencies count as annual."""
    try:
        return FREQUENCY_MONTHS[Frequency(frequency)]
    except ValueError:
        return 12


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    plan_id: str
    title: str
    start: datetime
    end: datetime
    frequency: Union[Frequency, str]
    description: str
    overdue: bool
    property_id: str
    property_name: Optional[str] = None
    property_address: Optional[str] = None

    def to_dict(self) -> dict:
        frequency = getattr(self.frequency, "value", self.frequency)
        return {
            "id": self.id,
            "plan_id": self.plan_id,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "frequency": frequency,
            "frequency_label": FREQUENCY_LABELS.get(frequency, frequency),
            "description": self.description,
            "overdue": self.overdue,
            "property_id": self.property_id,
            "property_name": self.property_name,
            "property_address": self.property_address,
        }


def plan_start(plan: MaintenancePlan, tz: tzinfo = timezone.utc) -> datetime:
    """First occurrence: next_due_date at local midnight, else creation time."""
    if plan.next_due_date is not None:
        return datetime.combine(plan.next_due_date, time.min, tzinfo=tz)
    return plan.created_at


def expand_plan(
    plan: MaintenancePlan,
    occurrences: int = 6,
    now: Optional[datetime] = None,
    tz: tzinfo = timezone.utc,
    prop: Optional[Property] = None,
) -> list[CalendarEvent]:
    now = now or datetime.now(timezone.utc)
    start = plan_start(plan, tz)
    step = frequency_months(plan.frequency)
    events = []
    for i in range(occurrences):
        # Offset from the first occurrence so month-end days do not drift
        begins = start + relativedelta(months=step * i)
        # Real elapsed time; a DST change day is still 24 h long
        ends = (begins.astimezone(timezone.utc) + EVENT_DURATION).astimezone(begins.tzinfo)
        events.append(
            CalendarEvent(
                id=f"{plan.id}-{i}",
                plan_id=plan.id,
                title=plan.title,
                start=begins,
                end=ends,
                frequency=plan.frequency,
                description=plan.description or "",
                overdue=begins < now,
                property_id=plan.property_id,
                property_name=prop.name if prop else None,
                property_address=prop.address if prop else None,
            )
        )
    return events


def maintenance_events(
    plans: Iterable[MaintenancePlan],
    properties: Optional[Mapping[str, Property]] = None,
    property_id: Optional[str] = None,
    now: Optional[datetime] = None,
    tz: tzinfo = timezone.utc,
    occurrences: int = 6,
) -> list[CalendarEvent]:
    """Events for every plan (optionally one property), sorted by start.

    When ``properties`` is given, plans whose property is not in it are
    left off the calendar.
    """
    now = now or datetime.now(timezone.utc)
    events: list[CalendarEvent] = []
    for plan in plans:
        if property_id and plan.property_id != property_id:
            continue
        prop = None
        if properties is not None:
            prop = properties.get(plan.property_id)
            if prop is None:
                continue
        events.extend(expand_plan(plan, occurrences, now, tz, prop))
    events.sort(key=lambda e: e.start)
    return events
