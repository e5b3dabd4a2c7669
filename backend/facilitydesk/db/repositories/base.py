"""Repository interface and the DataSource bundle the dashboard reads through.

A repository is the only path to a table. Reads return immutable records;
writes return the stored record and announce the change on the hub. Any
backend failure surfaces as DataAccessError.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, Sequence, TypeVar

from facilitydesk.core.errors import DataAccessError
from facilitydesk.core.realtime import ChangeEvent, ChangeHub, ChangeKind
from facilitydesk.schemas.entities import (
    Case,
    CaseComment,
    MaintenancePlan,
    Property,
    Record,
    Task,
    Unit,
    User,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)


class EntityRepository(ABC, Generic[R]):
    """CRUD for one table."""

    table: str
    record_type: type[R]
    search_fields: tuple[str, ...] = ()

    def __init__(self, table: str, record_type: type[R], hub: ChangeHub,
                 search_fields: Sequence[str] = ()):
        self.table = table
        self.record_type = record_type
        self.hub = hub
        self.search_fields = tuple(search_fields)

    @abstractmethod
    async def list(self, order_by: Optional[str] = None, descending: bool = False,
                   **equals: Any) -> list[R]:
        """All rows matching the equality filters, optionally ordered."""

    @abstractmethod
    async def get_by_id(self, row_id: str) -> Optional[R]:
        ...

    @abstractmethod
    async def create(self, data: dict) -> R:
        ...

    @abstractmethod
    async def update(self, row_id: str, changes: dict) -> Optional[R]:
        """Apply changes; None when the row does not exist."""

    @abstractmethod
    async def delete(self, row_id: str) -> bool:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    async def search(self, query: str, limit: int = 5) -> list[R]:
        """Rows whose search fields contain ``query``, case-insensitive."""

    @abstractmethod
    async def exists(self) -> bool:
        """Whether the backing table is present at all."""

    async def _announce(self, kind: ChangeKind, row_id: Optional[str]) -> None:
        await self.hub.publish(ChangeEvent(table=self.table, kind=kind, row_id=row_id))

    def _check_fields(self, names) -> None:
        unknown = [n for n in names if n not in self.record_type.model_fields]
        if unknown:
            raise DataAccessError(
                f"Unknown column(s) on {self.table}: {', '.join(unknown)}", table=self.table
            )


class DataSource:
    """The seven repositories the dashboard works against."""

    def __init__(
        self,
        properties: EntityRepository[Property],
        units: EntityRepository[Unit],
        users: EntityRepository[User],
        cases: EntityRepository[Case],
        tasks: EntityRepository[Task],
        maintenance_plans: EntityRepository[MaintenancePlan],
        comments: EntityRepository[CaseComment],
        kind: str = "sql",
    ):
        self.properties = properties
        self.units = units
        self.users = users
        self.cases = cases
        self.tasks = tasks
        self.maintenance_plans = maintenance_plans
        self.comments = comments
        self.kind = kind

    def repositories(self) -> dict[str, EntityRepository]:
        return {
            repo.table: repo
            for repo in (
                self.properties, self.units, self.users, self.cases,
                self.tasks, self.maintenance_plans, self.comments,
            )
        }

    async def search(self, query: str, limit: int = 5) -> dict[str, list[Record]]:
        """Server-side lookup across the searchable tables, ``limit`` per type."""
        return {
            "cases": await self.cases.search(query, limit),
            "tasks": await self.tasks.search(query, limit),
            "maintenance": await self.maintenance_plans.search(query, limit),
            "properties": await self.properties.search(query, limit),
        }


# Columns matched by free-text search, per table
SEARCH_FIELDS: dict[str, tuple[str, ...]] = {
    "properties": ("name", "address"),
    "units": ("unit_number",),
    "users": ("name", "email"),
    "cases": ("title", "description"),
    "tasks": ("description",),
    "maintenance_plans": ("title", "description"),
    "case_comments": ("content",),
}
