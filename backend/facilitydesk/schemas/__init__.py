"""Pydantic schemas: snapshot records and request bodies."""

from .entities import (
    CASE_STATUSES,
    Case,
    CaseCategory,
    CaseComment,
    CasePriority,
    CaseStatus,
    Frequency,
    MaintenancePlan,
    PlanPriority,
    Property,
    Record,
    Role,
    Task,
    TaskStatus,
    Unit,
    User,
)

__all__ = [
    "CASE_STATUSES",
    "Case",
    "CaseCategory",
    "CaseComment",
    "CasePriority",
    "CaseStatus",
    "Frequency",
    "MaintenancePlan",
    "PlanPriority",
    "Property",
    "Record",
    "Role",
    "Task",
    "TaskStatus",
    "Unit",
    "User",
]
