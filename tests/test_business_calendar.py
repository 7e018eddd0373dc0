import datetime

import pytest
from pydantic import ValidationError

from models import BusinessHoursSpec, DEFAULT_BUSINESS_HOURS, day_index
from scheduler.business_calendar import BusinessCalendar
from tests.helpers import MONDAY, SUNDAY, at


def test_day_index_starts_on_sunday():
    assert day_index(SUNDAY) == 0
    assert day_index(MONDAY) == 1
    assert day_index(MONDAY + datetime.timedelta(days=5)) == 6


@pytest.mark.parametrize(
    "offset, expected",
    [
        (0, (9, 20)),   # Monday
        (3, (9, 20)),   # Thursday
        (4, (9, 16)),   # Friday
        (5, (9, 16)),   # Saturday
        (6, None),      # Sunday
    ],
)
def test_default_hours(calendar, offset, expected):
    assert calendar.hours_for(MONDAY + datetime.timedelta(days=offset)) == expected


def test_is_open(calendar):
    assert calendar.is_open(MONDAY)
    assert not calendar.is_open(SUNDAY)


def test_open_interval(calendar):
    opening = calendar.open_interval(MONDAY)
    assert opening.start == at(MONDAY, 9)
    assert opening.end == at(MONDAY, 20)
    assert calendar.open_interval(SUNDAY) is None


def test_open_minutes(calendar):
    assert calendar.open_minutes(MONDAY) == 11 * 60
    assert calendar.open_minutes(MONDAY + datetime.timedelta(days=4)) == 7 * 60
    assert calendar.open_minutes(SUNDAY) == 0


def test_missing_day_is_closed():
    calendar = BusinessCalendar(BusinessHoursSpec(hours={1: (8, 12)}))
    assert calendar.is_open(MONDAY)
    assert not calendar.is_open(MONDAY + datetime.timedelta(days=1))


def test_closing_at_midnight():
    calendar = BusinessCalendar(BusinessHoursSpec(hours={1: (18, 24)}))
    opening = calendar.open_interval(MONDAY)
    assert opening.end == datetime.datetime(2025, 3, 4, 0, 0)


@pytest.mark.parametrize("span", [(12, 9), (9, 9), (-1, 5), (9, 25)])
def test_invalid_hours_rejected(span):
    with pytest.raises(ValidationError):
        BusinessHoursSpec(hours={1: span})


def test_invalid_day_rejected():
    with pytest.raises(ValidationError):
        BusinessHoursSpec(hours={7: (9, 17)})


def test_spec_accepts_json_keys():
    spec = BusinessHoursSpec(hours={"0": None, "1": [10, 18]})
    assert spec.hours[1] == (10, 18)
    assert spec.hours[0] is None


def test_default_spec_closes_sunday_only():
    closed = [day for day, span in DEFAULT_BUSINESS_HOURS.hours.items() if span is None]
    assert closed == [0]
