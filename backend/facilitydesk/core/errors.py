"""Error types and the shared failure handler.

Nothing in the dashboard is fatal: backend failures are caught at the store
or service boundary, logged, and turned into a user-facing notification.
"""

import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from facilitydesk.core.notifier import Notifier

logger = logging.getLogger(__name__)


class DataAccessError(Exception):
    """A read or write against the backing store failed."""

    def __init__(self, message: str, table: str | None = None):
        super().__init__(message)
        self.table = table


class FeatureUnsupported(DataAccessError):
    """The backend lacks an optional table the feature depends on."""


def describe_error(error: object) -> str:
    if isinstance(error, BaseException):
        return str(error) or error.__class__.__name__
    if isinstance(error, str):
        return error
    message = getattr(error, "message", None)
    if message:
        return str(message)
    return "An error occurred"


def handle_api_error(
    error: object,
    context: str = "Operation",
    notifier: Optional["Notifier"] = None,
) -> None:
    """Log a failed backend call and, for writes, tell the user."""
    message = describe_error(error)
    logger.error(f"Error in {context}: {message}")
    if notifier is not None:
        notifier.error(f"{context} failed", message)
