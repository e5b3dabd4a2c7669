"""Demo dataset served when the service runs without a database."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from facilitydesk.schemas.entities import (
    Case,
    CaseCategory,
    CasePriority,
    CaseStatus,
    Frequency,
    MaintenancePlan,
    PlanPriority,
    Property,
    Role,
    Task,
    TaskStatus,
    Unit,
    User,
)


def build_fixture_dataset(now: Optional[datetime] = None) -> dict[str, list]:
    """Rows per table, timestamped relative to ``now``."""
    now = now or datetime.now(timezone.utc)

    properties = [
        Property(
            id="prop-1",
            name="Newsec Demo Fastighet",
            address="Exempelgatan 1, 111 11 Stockholm",
            created_at=now,
        ),
    ]
    units = [
        Unit(id="unit-1", property_id="prop-1", unit_number="A12", type="lägenhet",
             size=72, created_at=now),
    ]
    users = [
        User(id="dev-user", name="Demo Användare", email="demo@newsec.se",
             role=Role.MANAGER, created_at=now),
    ]

    def case(id, title, description, category, priority, status, assigned_to):
        return Case(
            id=id, property_id="prop-1", unit_id="unit-1", title=title,
            description=description, category=category, priority=priority,
            status=status, created_at=now, updated_at=now,
            assigned_to=assigned_to, created_by="dev-user",
        )

    cases = [
        case("case-1", "Värmeproblem i trapphuset", "Kallt på plan 3",
             CaseCategory.HEATING, CasePriority.NORMAL, CaseStatus.REPORTED, None),
        case("case-2", "Trasig belysning garage", "Lampor slocknar intermittent",
             CaseCategory.ELECTRICAL, CasePriority.HIGH, CaseStatus.IN_PROGRESS, "dev-user"),
        case("case-3", "Läckande kran i lokal", "Droppar under disk",
             CaseCategory.PLUMBING, CasePriority.LOW, CaseStatus.DONE, "dev-user"),
    ]
    tasks = [
        Task(id="task-1", case_id="case-2", assigned_to="dev-user",
             description="Byt drivdon i armatur", status=TaskStatus.IN_PROGRESS,
             due_date=now + timedelta(days=2), created_at=now, updated_at=now),
        Task(id="task-2", case_id=None, assigned_to="dev-user",
             description="Rondera allmänutrymmen", status=TaskStatus.PENDING,
             due_date=now + timedelta(days=1), created_at=now, updated_at=now),
    ]
    plans = [
        MaintenancePlan(
            id="maint-1", property_id="prop-1", title="OVK kontroll",
            description="Årlig ventilationskontroll", frequency=Frequency.ANNUAL,
            next_due_date=(now + timedelta(days=180)).date(),
            estimated_duration_hours=4, assigned_to="dev-user",
            priority=PlanPriority.NORMAL, created_at=now, updated_at=now,
        ),
    ]

    return {
        "properties": properties,
        "units": units,
        "users": users,
        "cases": cases,
        "tasks": tasks,
        "maintenance_plans": plans,
        "case_comments": [],
    }
