"""Keeps an EntityStore current with the change hub."""

import logging
from typing import Optional

from facilitydesk.core.realtime import ChangeEvent, ChangeHub, Subscription
from facilitydesk.sync.store import EntityStore

logger = logging.getLogger(__name__)


class LiveSync:
    """One subscription per store; every event means refetch everything."""

    def __init__(self, hub: ChangeHub, store: EntityStore):
        self.hub = hub
        self.store = store
        self._subscription: Optional[Subscription] = None

    @property
    def active(self) -> bool:
        return self._subscription is not None

    async def start(self) -> None:
        if self.active:
            return
        self.store.mount()
        self._subscription = self.hub.subscribe(self.store.table, self._on_change)
        await self.store.refresh()

    async def _on_change(self, event: ChangeEvent) -> None:
        logger.debug(f"{event.kind.value} on {event.table}; refreshing {self.store.label}")
        await self.store.refresh()

    async def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        self.store.unmount()
