import datetime

import pytest

from models import TimeInterval
from scheduler.conflicts import ConflictDetector, intervals_overlap
from tests.helpers import MONDAY, at, make_booking


def iv(start_h, start_m, end_h, end_m) -> TimeInterval:
    return TimeInterval(start=at(MONDAY, start_h, start_m), end=at(MONDAY, end_h, end_m))


@pytest.fixture()
def detector() -> ConflictDetector:
    return ConflictDetector()


@pytest.mark.parametrize(
    "existing, candidate, expected",
    [
        # touching boundaries are adjacent, not overlapping
        (iv(10, 0, 11, 0), iv(11, 0, 12, 0), False),
        (iv(10, 0, 11, 0), iv(9, 0, 10, 0), False),
        # partial overlaps
        (iv(10, 0, 11, 0), iv(10, 30, 11, 30), True),
        (iv(10, 0, 11, 0), iv(9, 30, 10, 30), True),
        # containment both ways
        (iv(10, 0, 12, 0), iv(10, 30, 11, 0), True),
        (iv(10, 30, 11, 0), iv(10, 0, 12, 0), True),
        # identical
        (iv(10, 0, 11, 0), iv(10, 0, 11, 0), True),
        # disjoint
        (iv(8, 0, 9, 0), iv(12, 0, 13, 0), False),
        # one minute of overlap is enough
        (iv(10, 0, 11, 1), iv(11, 0, 12, 0), True),
    ],
)
def test_has_conflict(detector, existing, candidate, expected):
    assert detector.has_conflict([existing], candidate) is expected


@pytest.mark.parametrize(
    "a, b",
    [
        (iv(10, 0, 11, 0), iv(11, 0, 12, 0)),
        (iv(10, 0, 11, 0), iv(10, 30, 11, 30)),
        (iv(9, 0, 17, 0), iv(12, 0, 12, 30)),
        (iv(9, 0, 10, 0), iv(15, 0, 16, 0)),
        (iv(10, 0, 11, 0), iv(10, 0, 11, 0)),
    ],
)
def test_overlap_is_symmetric(detector, a, b):
    assert detector.has_conflict([a], b) == detector.has_conflict([b], a)


def test_intervals_overlap_uses_strict_comparison():
    s = at(MONDAY, 10)
    e = at(MONDAY, 11)
    assert not intervals_overlap(s, e, e, e + datetime.timedelta(hours=1))
    assert not intervals_overlap(e, e + datetime.timedelta(hours=1), s, e)
    assert intervals_overlap(s, e, s, e)


def test_identical_bookings_conflict(detector):
    first = make_booking("room_a", at(MONDAY, 10), at(MONDAY, 11), notes="x")
    second = make_booking("room_a", at(MONDAY, 10), at(MONDAY, 11), notes="x")
    assert detector.has_conflict([first], second)


def test_find_conflicts_returns_overlapping_subset_in_order(detector):
    existing = [
        make_booking("room_a", at(MONDAY, 9), at(MONDAY, 10), id="b1"),
        make_booking("room_a", at(MONDAY, 10), at(MONDAY, 11), id="b2"),
        make_booking("room_a", at(MONDAY, 11), at(MONDAY, 12), id="b3"),
        make_booking("room_a", at(MONDAY, 12), at(MONDAY, 13), id="b4"),
    ]
    found = detector.find_conflicts(existing, iv(10, 30, 12, 0))
    assert [b.id for b in found] == ["b2", "b3"]


def test_empty_existing_never_conflicts(detector):
    assert not detector.has_conflict([], iv(10, 0, 11, 0))
    assert detector.find_conflicts([], iv(10, 0, 11, 0)) == []


def test_detector_does_not_filter_by_room(detector):
    # Callers pre-filter by room; the detector compares times only
    other_room = make_booking("room_b", at(MONDAY, 10), at(MONDAY, 11))
    candidate = make_booking("room_a", at(MONDAY, 10), at(MONDAY, 11))
    assert detector.has_conflict([other_room], candidate)
