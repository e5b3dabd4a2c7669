"""Request bodies and filter models for the dashboard API."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .entities import (
    CaseCategory,
    CasePriority,
    CaseStatus,
    Frequency,
    PlanPriority,
    TaskStatus,
)


class CaseCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    property_id: str = Field(min_length=1)
    unit_id: Optional[str] = None
    category: CaseCategory
    priority: CasePriority
    assigned_to: Optional[str] = None

    @field_validator("description", "unit_id", "assigned_to")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class MaintenancePlanCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    property_id: str = Field(min_length=1)
    frequency: Frequency
    next_due_date: date
    estimated_duration_hours: float = Field(ge=0.5)
    assigned_to: Optional[str] = None
    priority: PlanPriority = PlanPriority.NORMAL

    @field_validator("description", "assigned_to")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class TaskCreate(BaseModel):
    description: str = Field(min_length=1)
    case_id: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[datetime] = None
    assigned_to: Optional[str] = None


class CommentCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("comment must not be empty")
        return value


class StatusUpdate(BaseModel):
    status: CaseStatus


class KanbanMove(BaseModel):
    case_id: str
    column_id: str  # any drop target id; unknown ids are ignored


SortField = Literal["title", "created_at", "priority", "status", "category"]
SortDirection = Literal["asc", "desc"]


class CaseFilters(BaseModel):
    """Active list filters; a field left as None imposes no constraint."""

    status: Optional[CaseStatus] = None
    priority: Optional[CasePriority] = None
    category: Optional[CaseCategory] = None
    date_from: Optional[date | datetime] = None
    date_to: Optional[date | datetime] = None
    query: Optional[str] = None
