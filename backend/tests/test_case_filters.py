"""Tests for case list filtering and sorting."""

from datetime import date, datetime, timedelta, timezone

from facilitydesk.schemas.entities import CaseCategory, CasePriority, CaseStatus
from facilitydesk.schemas.forms import CaseFilters
from facilitydesk.services.case_filters import filter_cases, sort_cases
from tests.factories import BASE_TIME, make_case


def test_no_filters_keeps_everything_in_order():
    cases = [make_case(), make_case(), make_case()]
    assert filter_cases(cases, CaseFilters()) == cases


def test_status_priority_category_are_conjunctive():
    match = make_case(status=CaseStatus.IN_PROGRESS, priority=CasePriority.HIGH,
                      category=CaseCategory.ELECTRICAL)
    wrong_status = make_case(status=CaseStatus.DONE, priority=CasePriority.HIGH,
                             category=CaseCategory.ELECTRICAL)
    wrong_category = make_case(status=CaseStatus.IN_PROGRESS, priority=CasePriority.HIGH,
                               category=CaseCategory.PLUMBING)
    filters = CaseFilters(status="in_progress", priority="hög", category="El")

    assert filter_cases([wrong_status, match, wrong_category], filters) == [match]


def test_query_matches_title_description_and_category_case_insensitively():
    by_title = make_case(title="Trasig DÖRR", description=None)
    by_description = make_case(title="Annat", description="dörren kärvar")
    by_category = make_case(title="Annat", description=None, category=CaseCategory.LOCKS)
    miss = make_case(title="Annat", description="inget")

    assert filter_cases([by_title, by_description, miss], CaseFilters(query="dörr")) == [
        by_title, by_description,
    ]
    assert filter_cases([by_category, miss], CaseFilters(query="lås")) == [by_category]


def test_date_only_bounds_mean_midnight_utc():
    day = date(2025, 3, 12)
    midnight = datetime(2025, 3, 12, tzinfo=timezone.utc)
    on_midnight = make_case(created_at=midnight)
    later_that_day = make_case(created_at=midnight + timedelta(hours=9))
    day_before = make_case(created_at=midnight - timedelta(seconds=1))

    cases = [day_before, on_midnight, later_that_day]
    assert filter_cases(cases, CaseFilters(date_from=day)) == [on_midnight, later_that_day]
    # date_to on the same day excludes anything after 00:00
    assert filter_cases(cases, CaseFilters(date_to=day)) == [day_before, on_midnight]


def test_timestamp_bounds_are_inclusive():
    case = make_case(created_at=BASE_TIME)
    filters = CaseFilters(date_from=BASE_TIME, date_to=BASE_TIME)
    assert filter_cases([case], filters) == [case]


def test_sort_by_title_both_directions():
    b, a, c = make_case(title="B"), make_case(title="A"), make_case(title="C")
    assert [x.title for x in sort_cases([b, a, c], "title", "asc")] == ["A", "B", "C"]
    assert [x.title for x in sort_cases([b, a, c], "title", "desc")] == ["C", "B", "A"]


def test_sort_by_created_at_newest_first_by_default():
    old = make_case(created_at=BASE_TIME - timedelta(days=2))
    new = make_case(created_at=BASE_TIME)
    assert sort_cases([old, new]) == [new, old]


def test_sort_is_stable_for_ties():
    first = make_case(status=CaseStatus.DONE)
    second = make_case(status=CaseStatus.DONE)
    other = make_case(status=CaseStatus.CLOSED)

    assert sort_cases([first, other, second], "status", "asc") == [other, first, second]
    assert sort_cases([first, other, second], "status", "desc") == [first, second, other]


def test_filter_and_sort_do_not_touch_input():
    cases = [make_case(title="B"), make_case(title="A")]
    snapshot = list(cases)
    sort_cases(filter_cases(cases, CaseFilters(query="a")), "title", "asc")
    assert cases == snapshot


def test_sorting_a_sorted_list_keeps_its_order():
    cases = [
        make_case(title="Dörr", priority=CasePriority.HIGH, created_at=BASE_TIME),
        make_case(title="Avlopp", priority=CasePriority.LOW, created_at=BASE_TIME - timedelta(days=1)),
        make_case(title="Belysning", priority=CasePriority.HIGH, created_at=BASE_TIME - timedelta(days=3)),
        make_case(title="Avlopp", priority=CasePriority.NORMAL, created_at=BASE_TIME - timedelta(days=2)),
    ]
    for field in ("title", "created_at", "priority", "status", "category"):
        for direction in ("asc", "desc"):
            once = sort_cases(cases, field, direction)
            assert sort_cases(once, field, direction) == once
