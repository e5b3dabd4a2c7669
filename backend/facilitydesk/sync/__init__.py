from .live import LiveSync
from .store import CaseStore, EntityStore, MaintenanceStore, TaskStore

__all__ = ["CaseStore", "EntityStore", "LiveSync", "MaintenanceStore", "TaskStore"]
