"""Tests for kanban grouping and drag-and-drop status transitions."""

import pytest

from facilitydesk.schemas.entities import CaseStatus
from facilitydesk.services.kanban import KanbanBoard, board_columns, group_by_status
from facilitydesk.sync.store import CaseStore
from tests.factories import make_case


def test_group_by_status_has_four_fixed_buckets():
    assert list(group_by_status([])) == ["reported", "in_progress", "done", "closed"]


def test_group_by_status_partitions_and_keeps_order():
    a = make_case(status=CaseStatus.DONE)
    b = make_case(status=CaseStatus.REPORTED)
    c = make_case(status=CaseStatus.DONE)
    grouped = group_by_status([a, b, c])

    assert grouped["done"] == [a, c]
    assert grouped["reported"] == [b]
    assert sum(len(v) for v in grouped.values()) == 3


def test_board_columns_titles_and_counts():
    columns = board_columns([make_case(status=CaseStatus.CLOSED)])
    assert [c["title"] for c in columns] == ["Rapporterad", "Pågår", "Klar", "Stängd"]
    assert [c["count"] for c in columns] == [0, 0, 0, 1]


class RecordingStore:
    """Stands in for CaseStore and records update calls."""

    def __init__(self, cases):
        self.cases = {c.id: c for c in cases}
        self.calls = []

    def get(self, case_id):
        return self.cases.get(case_id)

    async def update_status(self, case_id, status):
        self.calls.append((case_id, status))
        return True


@pytest.mark.asyncio
async def test_drop_on_column_issues_exactly_one_update():
    case = make_case()
    store = RecordingStore([case])
    board = KanbanBoard(store)

    board.drag_start(case.id)
    assert board.active_id == case.id
    assert await board.drag_end(case.id, "done") is True
    assert store.calls == [(case.id, CaseStatus.DONE)]
    assert board.active_id is None


@pytest.mark.asyncio
@pytest.mark.parametrize("over_id", [None, "somewhere", "case-2"])
async def test_drop_outside_a_column_does_nothing(over_id):
    case = make_case()
    store = RecordingStore([case])
    board = KanbanBoard(store)

    board.drag_start(case.id)
    assert await board.drag_end(case.id, over_id) is False
    assert store.calls == []
    assert board.active_id is None


@pytest.mark.asyncio
async def test_restricted_transition_table_blocks_moves():
    case = make_case(status=CaseStatus.REPORTED)
    store = RecordingStore([case])
    only_forward = {
        CaseStatus.REPORTED: frozenset({CaseStatus.IN_PROGRESS}),
    }
    board = KanbanBoard(store, transitions=only_forward)

    assert await board.drag_end(case.id, "closed") is False
    assert await board.drag_end(case.id, "in_progress") is True
    assert store.calls == [(case.id, CaseStatus.IN_PROGRESS)]


@pytest.mark.asyncio
async def test_drag_end_updates_store_snapshot(fixture_source, hub):
    store = CaseStore(fixture_source.cases)
    store.mount()
    await store.refresh()
    board = KanbanBoard(store)

    assert await board.drag_end("case-1", "closed") is True
    assert store.get("case-1").status == CaseStatus.CLOSED
    assert group_by_status(store.items)["closed"][0].id == "case-1"
