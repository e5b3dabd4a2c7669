"""Case detail view: the case with everything hanging off it, plus comments."""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from facilitydesk.core.errors import DataAccessError, FeatureUnsupported
from facilitydesk.db.capabilities import Capabilities
from facilitydesk.schemas.entities import Case, CaseComment, Property, Task, Unit, User

if TYPE_CHECKING:
    from facilitydesk.db.repositories.base import DataSource

logger = logging.getLogger(__name__)

UNSUPPORTED_MESSAGE = "The case_comments table is missing; create it to enable comments."


@dataclass
class CaseDetail:
    case: Case
    property: Optional[Property] = None
    unit: Optional[Unit] = None
    assigned_user: Optional[User] = None
    tasks: list[Task] = field(default_factory=list)
    comments: list[CaseComment] = field(default_factory=list)
    comments_supported: bool = True

    def to_dict(self) -> dict:
        return {
            "case": self.case.to_dict(),
            "property": self.property.to_dict() if self.property else None,
            "unit": self.unit.to_dict() if self.unit else None,
            "assigned_user": self.assigned_user.to_dict() if self.assigned_user else None,
            "tasks": [t.to_dict() for t in self.tasks],
            "comments": [c.to_dict() for c in self.comments],
            "comments_supported": self.comments_supported,
        }


async def load_case_detail(
    data_source: "DataSource",
    case_id: str,
    capabilities: Capabilities,
) -> Optional[CaseDetail]:
    """None when the case does not exist. Comment read failures only log."""
    case = await data_source.cases.get_by_id(case_id)
    if case is None:
        return None

    detail = CaseDetail(case=case, comments_supported=capabilities.comments)
    if case.assigned_to:
        detail.assigned_user = await data_source.users.get_by_id(case.assigned_to)
    if case.property_id:
        detail.property = await data_source.properties.get_by_id(case.property_id)
    if case.unit_id:
        detail.unit = await data_source.units.get_by_id(case.unit_id)
    detail.tasks = await data_source.tasks.list(
        order_by="created_at", descending=True, case_id=case_id
    )

    if capabilities.comments:
        try:
            detail.comments = await list_comments(data_source, case_id, capabilities)
        except DataAccessError as e:
            logger.error(f"Error loading comments for case {case_id}: {e}")
    return detail


async def list_comments(
    data_source: "DataSource",
    case_id: str,
    capabilities: Capabilities,
) -> list[CaseComment]:
    if not capabilities.comments:
        raise FeatureUnsupported(UNSUPPORTED_MESSAGE, table="case_comments")
    return await data_source.comments.list(
        order_by="created_at", descending=True, case_id=case_id
    )


async def add_comment(
    data_source: "DataSource",
    case_id: str,
    content: str,
    author_id: Optional[str],
    capabilities: Capabilities,
) -> CaseComment:
    if not capabilities.comments:
        raise FeatureUnsupported(UNSUPPORTED_MESSAGE, table="case_comments")
    return await data_source.comments.create(
        {"case_id": case_id, "author_id": author_id, "content": content}
    )
