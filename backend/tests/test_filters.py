"""
Tests for the occurrence date filter: parsing, validation and matching.
"""

from datetime import date, datetime, timedelta

import pytest

from dance_schedule.core.errors import (
    InvalidAfterDateError,
    InvalidBeforeDateError,
    InvalidRangeError,
)
from dance_schedule.domain import OccurrenceFilter

MAY = datetime(2024, 5, 1)
JUNE = datetime(2024, 6, 1)


def test_default_filter_is_unrestricted():
    f = OccurrenceFilter()
    assert f.is_unrestricted
    assert f.applies(datetime(1970, 1, 1))
    assert f.applies(datetime(2999, 12, 31))


@pytest.mark.parametrize(
    "before, after",
    [(None, None), (JUNE, None), (None, MAY), (JUNE, MAY)],
)
def test_applies_matches_exclusive_bounds(before, after):
    f = OccurrenceFilter(before=before, after=after)
    for start in [MAY - timedelta(days=1), MAY, MAY + timedelta(days=15), JUNE, JUNE + timedelta(seconds=1)]:
        expected = (before is None or start < before) and (after is None or start > after)
        assert f.applies(start) == expected


def test_bounds_are_exclusive():
    f = OccurrenceFilter(before=JUNE, after=MAY)
    assert not f.applies(JUNE)
    assert not f.applies(MAY)


def test_upcoming_starts_after_local_midnight():
    f = OccurrenceFilter.upcoming(today=date(2024, 6, 1))
    assert f.after == datetime(2024, 6, 1, 0, 0)
    assert f.before is None
    assert not f.applies(datetime(2024, 6, 1, 0, 0))
    assert f.applies(datetime(2024, 6, 1, 0, 0, 1))


def test_upcoming_defaults_to_today():
    f = OccurrenceFilter.upcoming()
    assert f.after == datetime.combine(date.today(), datetime.min.time())


def test_from_query_parses_both_bounds():
    f = OccurrenceFilter.from_query({"after": "2024-05-01T00:00:00", "before": "2024-06-01T00:00:00"})
    assert f == OccurrenceFilter(before=JUNE, after=MAY)


def test_from_query_inverted_range_fails():
    with pytest.raises(InvalidRangeError):
        OccurrenceFilter.from_query({"after": "2024-06-01T00:00:00", "before": "2024-05-01T00:00:00"})


def test_equal_bounds_are_an_invalid_range():
    with pytest.raises(InvalidRangeError):
        OccurrenceFilter(before=JUNE, after=JUNE)


@pytest.mark.parametrize("raw", ["2024-06-01", "2024-06-01 10:00:00", "tomorrow", ""])
def test_from_query_malformed_before(raw):
    with pytest.raises(InvalidBeforeDateError):
        OccurrenceFilter.from_query({"before": raw})


@pytest.mark.parametrize("raw", ["2024-13-01T00:00:00", "01.06.2024", "2024-06-01T25:00:00"])
def test_from_query_malformed_after(raw):
    with pytest.raises(InvalidAfterDateError):
        OccurrenceFilter.from_query({"after": raw})


def test_from_query_without_bounds_uses_default():
    upcoming = OccurrenceFilter.upcoming(today=date(2024, 6, 1))
    assert OccurrenceFilter.from_query({}, default=lambda: upcoming) == upcoming
    assert OccurrenceFilter.from_query({}) == OccurrenceFilter()


def test_from_query_with_one_bound_ignores_default():
    f = OccurrenceFilter.from_query({"before": "2024-06-01T00:00:00"}, default=OccurrenceFilter.upcoming)
    assert f == OccurrenceFilter(before=JUNE)


def test_predicate_agrees_with_applies():
    f = OccurrenceFilter(before=JUNE, after=MAY)
    predicate = f.to_predicate()
    for start in [MAY, MAY + timedelta(hours=1), JUNE - timedelta(hours=1), JUNE]:
        assert predicate.matches({"start": start}) == f.applies(start)


def test_query_parameters_round_trip():
    f = OccurrenceFilter(before=JUNE, after=MAY)
    assert f.to_query() == {"before": "2024-06-01T00:00:00", "after": "2024-05-01T00:00:00"}
    assert OccurrenceFilter.from_query(f.to_query()) == f
