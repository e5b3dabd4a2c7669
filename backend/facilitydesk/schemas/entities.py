"""Entity records held in the dashboard's snapshots.

Records are immutable: a change produces a new record via ``model_copy``.
Enum values are the values stored in the database.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "förvaltare"
    CARETAKER = "skötare"


class CaseCategory(str, Enum):
    PLUMBING = "VVS"
    ELECTRICAL = "El"
    LOCKS = "Lås"
    HEATING = "Värme"
    VENTILATION = "Ventilation"
    OTHER = "Övrigt"


class CasePriority(str, Enum):
    LOW = "låg"
    NORMAL = "normal"
    HIGH = "hög"
    URGENT = "akut"


class CaseStatus(str, Enum):
    REPORTED = "reported"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    CLOSED = "closed"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Frequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    BIANNUAL = "biannual"
    ANNUAL = "annual"


class PlanPriority(str, Enum):
    LOW = "låg"
    NORMAL = "normal"
    HIGH = "hög"


# Fixed display order used by the board, the charts and the status picker.
CASE_STATUSES: tuple[CaseStatus, ...] = (
    CaseStatus.REPORTED,
    CaseStatus.IN_PROGRESS,
    CaseStatus.DONE,
    CaseStatus.CLOSED,
)


class Record(BaseModel):
    """Base for snapshot records; naive timestamps are read as UTC."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("*", mode="after")
    @classmethod
    def _assume_utc(cls, value):
        # SQLite hands back naive datetimes even for timezone-aware columns
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class Property(Record):
    id: str
    name: str
    address: str
    created_at: datetime


class Unit(Record):
    id: str
    property_id: str
    unit_number: str
    type: Optional[str] = None
    size: Optional[float] = None
    created_at: datetime


class User(Record):
    id: str
    role: Role
    name: str
    email: str
    created_at: datetime


class Case(Record):
    id: str
    property_id: str
    unit_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    category: CaseCategory
    priority: CasePriority
    status: CaseStatus
    created_at: datetime
    updated_at: datetime
    assigned_to: Optional[str] = None
    created_by: Optional[str] = None


class Task(Record):
    id: str
    case_id: Optional[str] = None
    description: str
    status: TaskStatus
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    assigned_to: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class MaintenancePlan(Record):
    id: str
    property_id: str
    title: str
    description: Optional[str] = None
    # Rows written by other clients may carry a frequency outside the enum
    frequency: Union[Frequency, str] = Field(union_mode="left_to_right")
    next_due_date: Optional[date] = None
    estimated_duration_hours: float
    assigned_to: Optional[str] = None
    priority: PlanPriority
    created_at: datetime
    updated_at: datetime


class CaseComment(Record):
    id: str
    case_id: str
    author_id: Optional[str] = None
    content: str
    created_at: datetime
