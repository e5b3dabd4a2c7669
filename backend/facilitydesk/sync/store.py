"""Entity stores: the cached, refreshable snapshot of one table.

A store is refreshed wholesale (refetch and replace) on mount and on every
change notification. Writes go straight to the repository; a failed write
leaves the snapshot untouched and raises a user-facing notification
instead of an exception.
"""

import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar, Union

from facilitydesk.core.errors import DataAccessError, handle_api_error
from facilitydesk.core.notifier import Notifier
from facilitydesk.db.repositories.base import EntityRepository
from facilitydesk.schemas.entities import (
    Case,
    CaseStatus,
    MaintenancePlan,
    Record,
    Task,
)
from facilitydesk.schemas.forms import CaseCreate, MaintenancePlanCreate, TaskCreate

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)
T = TypeVar("T")


class EntityStore(Generic[R]):
    """Snapshot of one table in a fixed sort order."""

    label = "items"
    order_by = "created_at"
    descending = True

    def __init__(self, repo: EntityRepository[R], notifier: Optional[Notifier] = None):
        self.repo = repo
        self.notifier = notifier
        self._items: list[R] = []
        self.loading = True
        self.mounted = False
        self._generation = 0

    @property
    def table(self) -> str:
        return self.repo.table

    @property
    def items(self) -> list[R]:
        return list(self._items)

    def get(self, row_id: str) -> Optional[R]:
        for item in self._items:
            if item.id == row_id:
                return item
        return None

    def mount(self) -> None:
        self.mounted = True

    def unmount(self) -> None:
        # Responses still in flight belong to a dead generation
        self.mounted = False
        self._generation += 1

    async def refresh(self) -> bool:
        """Refetch the whole table; True when the snapshot was replaced."""
        self._generation += 1
        generation = self._generation
        self.loading = True
        try:
            rows = await self.repo.list(order_by=self.order_by, descending=self.descending)
        except DataAccessError as e:
            # Reads only log; the previous snapshot stays
            handle_api_error(e, f"Loading {self.label}")
            if generation == self._generation:
                self.loading = False
            return False

        if not self.mounted or generation != self._generation:
            logger.debug(f"Discarding stale {self.label} response (generation {generation})")
            return False

        self._items = rows
        self.loading = False
        return True

    # ── Writes ────────────────────────────────────────────────────────

    async def _write(self, context: str, op: Callable[..., Awaitable[T]], *args) -> Optional[T]:
        try:
            return await op(*args)
        except DataAccessError as e:
            handle_api_error(e, context, self.notifier)
            return None

    def _not_found(self, context: str, row_id: str) -> None:
        handle_api_error(f"{self.label.capitalize()} {row_id} not found", context, self.notifier)

    def _success(self, message: str) -> None:
        if self.notifier is not None:
            self.notifier.success(message)

    async def _create(self, context: str, data: dict) -> Optional[R]:
        record = await self._write(context, self.repo.create, data)
        if record is not None:
            # No local insert; the change notification refetches
            logger.info(f"Created {self.repo.table} row {record.id}")
        return record

    async def _delete(self, context: str, row_id: str) -> bool:
        deleted = await self._write(context, self.repo.delete, row_id)
        if deleted is None:
            return False
        if not deleted:
            self._not_found(context, row_id)
            return False
        self._items = [item for item in self._items if item.id != row_id]
        return True


class CaseStore(EntityStore[Case]):
    label = "cases"

    async def update_status(self, case_id: str, status: Union[CaseStatus, str]) -> bool:
        context = "Updating case status"
        try:
            status = CaseStatus(status)
        except ValueError:
            handle_api_error(f"Unknown status {status!r}", context, self.notifier)
            return False

        try:
            updated = await self.repo.update(case_id, {"status": status})
        except DataAccessError as e:
            handle_api_error(e, context, self.notifier)
            return False
        if updated is None:
            self._not_found(context, case_id)
            return False

        # Merge only what changed; the rest of the snapshot row stays as fetched
        self._items = [
            item.model_copy(update={"status": updated.status, "updated_at": updated.updated_at})
            if item.id == case_id else item
            for item in self._items
        ]
        return True

    async def create(self, form: CaseCreate, created_by: Optional[str] = None) -> Optional[Case]:
        data = form.model_dump()
        data.update(status=CaseStatus.REPORTED, created_by=created_by)
        case = await self._create("Creating case", data)
        if case is not None:
            self._success("Case created")
        return case

    async def delete(self, case_id: str) -> bool:
        deleted = await self._delete("Deleting case", case_id)
        if deleted:
            self._success("Case deleted")
        return deleted


class TaskStore(EntityStore[Task]):
    label = "tasks"

    async def create(self, form: TaskCreate) -> Optional[Task]:
        task = await self._create("Creating task", form.model_dump())
        if task is not None:
            self._success("Task created")
        return task


class MaintenanceStore(EntityStore[MaintenancePlan]):
    label = "maintenance plans"
    order_by = "next_due_date"
    descending = False

    async def create(self, form: MaintenancePlanCreate) -> Optional[MaintenancePlan]:
        plan = await self._create("Creating maintenance plan", form.model_dump())
        if plan is not None:
            self._success("Maintenance plan created")
        return plan

    async def delete(self, plan_id: str) -> bool:
        deleted = await self._delete("Deleting maintenance plan", plan_id)
        if deleted:
            self._success("Maintenance plan deleted")
        return deleted
