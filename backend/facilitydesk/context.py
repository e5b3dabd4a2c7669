"""Composition root: wires the data source, stores, sync and auth together.

Everything that would otherwise be a global (the hub, the stores, the
auth provider) lives on one DashboardContext built at startup and handed
to request handlers through ``app.state``.
"""

import logging
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from facilitydesk.config import AppConfig
from facilitydesk.core.auth import AuthProvider, build_auth_provider
from facilitydesk.core.notifier import Notification, Notifier
from facilitydesk.core.realtime import ChangeEvent, ChangeHub, Subscription
from facilitydesk.core.websocket import ConnectionManager
from facilitydesk.db.capabilities import Capabilities, probe_capabilities
from facilitydesk.db.repositories import (
    DataSource,
    build_fixture_data_source,
    build_sql_data_source,
)
from facilitydesk.services.kanban import KanbanBoard
from facilitydesk.sync import CaseStore, LiveSync, MaintenanceStore, TaskStore

logger = logging.getLogger(__name__)


class DashboardContext:
    def __init__(
        self,
        config: AppConfig,
        hub: ChangeHub,
        data_source: DataSource,
        auth: AuthProvider,
        notifier: Optional[Notifier] = None,
    ):
        self.config = config
        self.hub = hub
        self.data_source = data_source
        self.auth = auth
        self.notifier = notifier or Notifier(history=config.NOTIFICATION_HISTORY)
        self.connections = ConnectionManager()
        self.tz = ZoneInfo(config.TIMEZONE)

        self.cases = CaseStore(data_source.cases, self.notifier)
        self.tasks = TaskStore(data_source.tasks, self.notifier)
        self.maintenance = MaintenanceStore(data_source.maintenance_plans, self.notifier)
        self.syncs = [LiveSync(hub, store) for store in (self.cases, self.tasks, self.maintenance)]
        self.kanban = KanbanBoard(self.cases)

        self.capabilities = Capabilities()
        self._forwarder: Optional[Subscription] = None
        self.started = False

    @property
    def loading(self) -> bool:
        return self.cases.loading or self.tasks.loading or self.maintenance.loading

    async def start(self) -> None:
        if self.started:
            return
        self.capabilities = await probe_capabilities(self.data_source)
        await self.auth.start()
        for sync in self.syncs:
            await sync.start()
        self._forwarder = self.hub.subscribe_all(self._forward_change)
        self.notifier.add_listener(self._forward_notification)
        self.started = True
        logger.info(
            f"Dashboard context started ({self.data_source.kind} data source, "
            f"{len(self.cases.items)} cases, {len(self.tasks.items)} tasks, "
            f"{len(self.maintenance.items)} plans)"
        )

    async def stop(self) -> None:
        if self._forwarder is not None:
            self._forwarder.cancel()
            self._forwarder = None
        self.notifier.remove_listener(self._forward_notification)
        for sync in self.syncs:
            await sync.stop()
        await self.auth.stop()
        # Let in-flight refreshes finish; unmounted stores discard them
        await self.hub.drain()
        await self.hub.close()
        self.started = False
        logger.info("Dashboard context stopped")

    async def _forward_change(self, event: ChangeEvent) -> None:
        await self.connections.broadcast({"type": "change", **event.to_dict()})

    def _forward_notification(self, note: Notification) -> None:
        # Listeners are sync; hand the send to the hub's task tracking
        self.hub.spawn(self.connections.broadcast({"type": "notification", **note.to_dict()}))


def build_context(
    config: AppConfig,
    hub: Optional[ChangeHub] = None,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> DashboardContext:
    """Pick the data source and auth strategy once, from configuration."""
    hub = hub or ChangeHub()
    if config.USE_FIXTURES:
        logger.info("Using in-memory fixture data")
        data_source = build_fixture_data_source(hub)
    else:
        if session_factory is None:
            from facilitydesk.db.engine import async_session_factory
            session_factory = async_session_factory
        data_source = build_sql_data_source(session_factory, hub)
    auth = build_auth_provider(config, data_source.users, hub)
    return DashboardContext(config, hub, data_source, auth)
