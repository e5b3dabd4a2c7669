"""In-process change notification hub.

Every successful write in the data layer publishes a ChangeEvent for its
table. Subscribers are told *that* something changed, never what; they
refetch. Callbacks run as independent asyncio tasks so a slow or failing
consumer never blocks the writer.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

ChangeCallback = Callable[["ChangeEvent"], Awaitable[None]]

ALL_TABLES = "*"


class ChangeKind(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    kind: ChangeKind
    row_id: str | None = None
    at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "table": self.table,
            "kind": self.kind.value,
            "row_id": self.row_id,
            "at": self.at.isoformat(),
        }


class Subscription:
    def __init__(self, hub: "ChangeHub", table: str, callback: ChangeCallback):
        self._hub = hub
        self.table = table
        self.callback = callback
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self._hub._remove(self)


class ChangeHub:
    """One logical channel per table plus a wildcard channel."""

    def __init__(self):
        self._subs: dict[str, list[Subscription]] = {}
        self._pending: set[asyncio.Task] = set()
        self._closed = False

    def subscribe(self, table: str, callback: ChangeCallback) -> Subscription:
        sub = Subscription(self, table, callback)
        self._subs.setdefault(table, []).append(sub)
        logger.info(f"Subscribed to changes on {table}")
        return sub

    def subscribe_all(self, callback: ChangeCallback) -> Subscription:
        return self.subscribe(ALL_TABLES, callback)

    def _remove(self, sub: Subscription) -> None:
        subs = self._subs.get(sub.table, [])
        if sub in subs:
            subs.remove(sub)
            logger.info(f"Unsubscribed from changes on {sub.table}")
        if not subs:
            self._subs.pop(sub.table, None)

    def subscriber_count(self, table: str | None = None) -> int:
        if table is None:
            return sum(len(s) for s in self._subs.values())
        return len(self._subs.get(table, []))

    async def publish(self, event: ChangeEvent) -> None:
        if self._closed:
            return
        targets = self._subs.get(event.table, []) + self._subs.get(ALL_TABLES, [])
        for sub in list(targets):
            if sub.active:
                self.spawn(self._dispatch(sub, event))

    def spawn(self, coro: Awaitable[None]) -> asyncio.Task:
        """Run a coroutine as a tracked task; drain() and close() see it."""
        task = asyncio.ensure_future(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _dispatch(self, sub: Subscription, event: ChangeEvent) -> None:
        if not sub.active:
            return
        try:
            await sub.callback(event)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(
                f"Change subscriber for {sub.table} failed on {event.kind.value} {event.table}"
            )

    async def drain(self) -> None:
        """Wait until every dispatched callback (and any it triggers) finishes."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        self._closed = True
        for task in list(self._pending):
            task.cancel()
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        self._pending.clear()
        self._subs.clear()
