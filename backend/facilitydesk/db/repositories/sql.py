"""SQL repositories: async SQLAlchemy against the store of record."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Sequence

from pydantic import ValidationError
from sqlalchemy import delete, func, inspect as sa_inspect, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from facilitydesk.core.errors import DataAccessError
from facilitydesk.core.realtime import ChangeHub, ChangeKind
from facilitydesk.db import models
from facilitydesk.db.engine import Base
from facilitydesk.schemas import entities

from .base import SEARCH_FIELDS, DataSource, EntityRepository, R

logger = logging.getLogger(__name__)


class SqlRepository(EntityRepository[R]):
    """Typed CRUD for one ORM model; rows leave as pydantic records."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        model: type[Base],
        record_type: type[R],
        hub: ChangeHub,
        search_fields: Sequence[str] = (),
    ):
        super().__init__(model.__tablename__, record_type, hub, search_fields)
        self.session_factory = session_factory
        self.model = model

    @asynccontextmanager
    async def _session(self, action: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self.session_factory() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"{action} on {self.table} failed: {e}")
            raise DataAccessError(f"{action} on {self.table} failed: {e}", table=self.table) from e

    def _column(self, name: str):
        column = getattr(self.model, name, None)
        if column is None:
            raise DataAccessError(f"Unknown column {name} on {self.table}", table=self.table)
        return column

    def _to_record(self, row) -> R:
        try:
            return self.record_type.model_validate(row)
        except ValidationError as e:
            raise DataAccessError(f"Unreadable row in {self.table}: {e}", table=self.table) from e

    @staticmethod
    def _plain(data: dict) -> dict:
        # Enum members are stored by value
        return {k: getattr(v, "value", v) for k, v in data.items()}

    # ── Reads ─────────────────────────────────────────────────────────

    async def list(self, order_by: Optional[str] = None, descending: bool = False,
                   **equals: Any) -> list[R]:
        stmt = select(self.model)
        for name, value in self._plain(equals).items():
            stmt = stmt.where(self._column(name) == value)
        if order_by:
            column = self._column(order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        async with self._session("list") as session:
            result = await session.execute(stmt)
            return [self._to_record(row) for row in result.scalars().all()]

    async def get_by_id(self, row_id: str) -> Optional[R]:
        async with self._session("get") as session:
            row = await session.get(self.model, row_id)
            return self._to_record(row) if row is not None else None

    async def count(self) -> int:
        async with self._session("count") as session:
            result = await session.execute(select(func.count()).select_from(self.model))
            return result.scalar_one()

    async def search(self, query: str, limit: int = 5) -> list[R]:
        if not self.search_fields or not query:
            return []
        pattern = f"%{query}%"
        stmt = (
            select(self.model)
            .where(or_(*(self._column(f).ilike(pattern) for f in self.search_fields)))
            .limit(limit)
        )
        async with self._session("search") as session:
            result = await session.execute(stmt)
            return [self._to_record(row) for row in result.scalars().all()]

    async def exists(self) -> bool:
        async with self._session("probe") as session:
            conn = await session.connection()
            return await conn.run_sync(
                lambda sync_conn: sa_inspect(sync_conn).has_table(self.table)
            )

    # ── Writes ────────────────────────────────────────────────────────

    async def create(self, data: dict) -> R:
        self._check_fields(data)
        async with self._session("insert") as session:
            row = self.model(**self._plain(data))
            session.add(row)
            await session.commit()
            await session.refresh(row)
            record = self._to_record(row)
        await self._announce(ChangeKind.INSERT, record.id)
        return record

    async def update(self, row_id: str, changes: dict) -> Optional[R]:
        self._check_fields(changes)
        async with self._session("update") as session:
            row = await session.get(self.model, row_id)
            if row is None:
                return None
            for name, value in self._plain(changes).items():
                setattr(row, name, value)
            await session.commit()
            await session.refresh(row)
            record = self._to_record(row)
        await self._announce(ChangeKind.UPDATE, row_id)
        return record

    async def delete(self, row_id: str) -> bool:
        async with self._session("delete") as session:
            result = await session.execute(
                delete(self.model).where(self._column("id") == row_id)
            )
            await session.commit()
            deleted = result.rowcount > 0
        if deleted:
            await self._announce(ChangeKind.DELETE, row_id)
        return deleted


def build_sql_data_source(
    session_factory: async_sessionmaker[AsyncSession],
    hub: ChangeHub,
) -> DataSource:
    def repo(model, record_type):
        return SqlRepository(
            session_factory, model, record_type, hub,
            search_fields=SEARCH_FIELDS.get(model.__tablename__, ()),
        )

    return DataSource(
        properties=repo(models.Property, entities.Property),
        units=repo(models.Unit, entities.Unit),
        users=repo(models.User, entities.User),
        cases=repo(models.Case, entities.Case),
        tasks=repo(models.Task, entities.Task),
        maintenance_plans=repo(models.MaintenancePlan, entities.MaintenancePlan),
        comments=repo(models.CaseComment, entities.CaseComment),
        kind="sql",
    )
