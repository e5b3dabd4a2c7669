"""In-memory repositories seeded from the fixture dataset.

Used when the service runs without a database (demos, front-end work)
and by tests that need a backend which can be made to fail on demand.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Sequence

from pydantic import ValidationError

from facilitydesk.core.errors import DataAccessError
from facilitydesk.core.realtime import ChangeHub, ChangeKind
from facilitydesk.schemas import entities

from .base import SEARCH_FIELDS, DataSource, EntityRepository, R

logger = logging.getLogger(__name__)


def _sort_key(value):
    # None sorts first ascending, like SQL NULLS FIRST on sqlite
    if value is None:
        return (0, "")
    return (1, getattr(value, "value", value))


class FixtureRepository(EntityRepository[R]):
    """A list of records behind the repository interface.

    ``available=False`` models a table the backend does not have; every
    call then fails the way the SQL repository would.
    """

    def __init__(
        self,
        table: str,
        record_type: type[R],
        rows: Iterable[R],
        hub: ChangeHub,
        search_fields: Sequence[str] = (),
        available: bool = True,
    ):
        super().__init__(table, record_type, hub, search_fields)
        self._rows: dict[str, R] = {row.id: row for row in rows}
        self.available = available
        self.fail_with: Optional[str] = None

    def _guard(self, action: str) -> None:
        if not self.available:
            raise DataAccessError(f'relation "{self.table}" does not exist', table=self.table)
        if self.fail_with:
            raise DataAccessError(f"{action} on {self.table} failed: {self.fail_with}", table=self.table)

    def _to_record(self, values: dict) -> R:
        try:
            return self.record_type.model_validate(values)
        except ValidationError as e:
            raise DataAccessError(f"Invalid row for {self.table}: {e}", table=self.table) from e

    @staticmethod
    def _matches(record, equals: dict) -> bool:
        for name, expected in equals.items():
            actual = getattr(record, name)
            if getattr(actual, "value", actual) != getattr(expected, "value", expected):
                return False
        return True

    async def list(self, order_by: Optional[str] = None, descending: bool = False,
                   **equals: Any) -> list[R]:
        self._guard("list")
        self._check_fields(equals)
        rows = [r for r in self._rows.values() if self._matches(r, equals)]
        if order_by:
            self._check_fields([order_by])
            rows.sort(key=lambda r: _sort_key(getattr(r, order_by)), reverse=descending)
        return rows

    async def get_by_id(self, row_id: str) -> Optional[R]:
        self._guard("get")
        return self._rows.get(row_id)

    async def count(self) -> int:
        self._guard("count")
        return len(self._rows)

    async def search(self, query: str, limit: int = 5) -> list[R]:
        self._guard("search")
        if not self.search_fields or not query:
            return []
        needle = query.lower()
        hits = []
        for row in self._rows.values():
            if any(needle in (getattr(row, f) or "").lower() for f in self.search_fields):
                hits.append(row)
                if len(hits) >= limit:
                    break
        return hits

    async def exists(self) -> bool:
        if self.fail_with:
            raise DataAccessError(f"probe on {self.table} failed: {self.fail_with}", table=self.table)
        return self.available

    async def create(self, data: dict) -> R:
        self._guard("insert")
        self._check_fields(data)
        now = datetime.now(timezone.utc)
        values = {"id": uuid.uuid4().hex, "created_at": now}
        if "updated_at" in self.record_type.model_fields:
            values["updated_at"] = now
        values.update(data)
        record = self._to_record(values)
        self._rows[record.id] = record
        await self._announce(ChangeKind.INSERT, record.id)
        return record

    async def update(self, row_id: str, changes: dict) -> Optional[R]:
        self._guard("update")
        self._check_fields(changes)
        current = self._rows.get(row_id)
        if current is None:
            return None
        values = current.model_dump()
        values.update(changes)
        if "updated_at" in self.record_type.model_fields:
            values["updated_at"] = datetime.now(timezone.utc)
        record = self._to_record(values)
        self._rows[row_id] = record
        await self._announce(ChangeKind.UPDATE, row_id)
        return record

    async def delete(self, row_id: str) -> bool:
        self._guard("delete")
        if self._rows.pop(row_id, None) is None:
            return False
        await self._announce(ChangeKind.DELETE, row_id)
        return True


def build_fixture_data_source(
    hub: ChangeHub,
    dataset: Optional[dict[str, list]] = None,
    unavailable: Iterable[str] = (),
) -> DataSource:
    """Repositories over ``dataset`` (the demo dataset by default)."""
    from facilitydesk.fixtures import build_fixture_dataset

    data = dataset if dataset is not None else build_fixture_dataset()
    missing = set(unavailable)

    def repo(table, record_type):
        return FixtureRepository(
            table, record_type, data.get(table, []), hub,
            search_fields=SEARCH_FIELDS.get(table, ()),
            available=table not in missing,
        )

    return DataSource(
        properties=repo("properties", entities.Property),
        units=repo("units", entities.Unit),
        users=repo("users", entities.User),
        cases=repo("cases", entities.Case),
        tasks=repo("tasks", entities.Task),
        maintenance_plans=repo("maintenance_plans", entities.MaintenancePlan),
        comments=repo("case_comments", entities.CaseComment),
        kind="fixture",
    )
