"""Optional backend features, probed once at startup."""

import logging
from dataclasses import dataclass

from facilitydesk.core.errors import DataAccessError
from facilitydesk.db.repositories.base import DataSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Capabilities:
    comments: bool = False

    def to_dict(self) -> dict:
        return {"comments": self.comments}


async def probe_capabilities(data_source: DataSource) -> Capabilities:
    """Check which optional tables exist. Never raises."""
    table = data_source.comments.table
    try:
        comments = await data_source.comments.exists()
        reason = "table not found"
    except DataAccessError as e:
        comments = False
        reason = str(e)
    if comments:
        logger.info("Case comments supported")
    else:
        logger.warning(f"Case comments unsupported ({table}: {reason})")
    return Capabilities(comments=comments)
