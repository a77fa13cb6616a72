"""Unit tests for chamber_events.calendar.recurrence.

Covers:
- rule variants and describe()
- week_index_of()
- rule_from_anchor()
- validate_recurrence() error ordering
- collect_validation_errors()
"""

from datetime import datetime

import pytest

from chamber_events.calendar.recurrence import (
    MonthlyDayOfMonth,
    MonthlyDayOfWeek,
    Weekly,
    collect_validation_errors,
    rule_from_anchor,
    validate_recurrence,
    week_index_of,
)
from chamber_events.exceptions import (
    InvalidSeriesBound,
    MissingMonthlyType,
    MissingRecurrenceType,
    RecurrenceValidationError,
)

pytestmark = pytest.mark.unit


class TestRuleVariants:
    """Tests for the rule dataclasses."""

    def test_describe(self):
        assert Weekly(weekday=0).describe() == "Weekly on Monday"
        assert MonthlyDayOfMonth(day=31).describe() == "Monthly on day 31"
        assert MonthlyDayOfWeek(week_index=2, weekday=1).describe() == "Monthly on the 2nd Tuesday"
        assert MonthlyDayOfWeek(week_index=5, weekday=4).describe() == "Monthly on the 5th Friday"

    @pytest.mark.parametrize(
        "factory",
        [
            lambda: Weekly(weekday=7),
            lambda: MonthlyDayOfMonth(day=0),
            lambda: MonthlyDayOfMonth(day=32),
            lambda: MonthlyDayOfWeek(week_index=0, weekday=1),
            lambda: MonthlyDayOfWeek(week_index=6, weekday=1),
            lambda: MonthlyDayOfWeek(week_index=1, weekday=-1),
        ],
    )
    def test_out_of_range_values_rejected(self, factory):
        """Invalid combinations cannot be constructed."""
        with pytest.raises(ValueError):
            factory()

    def test_rules_are_value_objects(self):
        assert Weekly(weekday=2) == Weekly(weekday=2)
        assert MonthlyDayOfWeek(2, 1) != MonthlyDayOfWeek(3, 1)


@pytest.mark.parametrize(
    "day,expected",
    [(1, 1), (7, 1), (8, 2), (14, 2), (15, 3), (21, 3), (22, 4), (28, 4), (29, 5), (31, 5)],
)
def test_week_index_of(day: int, expected: int) -> None:
    """Week index is ceil(day / 7), capped at 5."""
    assert week_index_of(day) == expected


class TestRuleFromAnchor:
    """Tests for deriving the rule from the anchor date."""

    def test_weekly_uses_anchor_weekday(self):
        # 2025-01-08 is a Wednesday
        assert rule_from_anchor("weekly", None, datetime(2025, 1, 8)) == Weekly(weekday=2)

    def test_monthly_day_of_month(self):
        rule = rule_from_anchor("monthly", "dayOfMonth", datetime(2025, 1, 31))
        assert rule == MonthlyDayOfMonth(day=31)

    def test_monthly_day_of_week(self):
        # 2025-01-14 is the 2nd Tuesday
        rule = rule_from_anchor("monthly", "dayOfWeek", datetime(2025, 1, 14))
        assert rule == MonthlyDayOfWeek(week_index=2, weekday=1)

    def test_weekly_ignores_stray_monthly_type(self):
        rule = rule_from_anchor("weekly", "dayOfMonth", datetime(2025, 1, 6))
        assert rule == Weekly(weekday=0)

    def test_missing_type_raises(self):
        with pytest.raises(MissingRecurrenceType) as exc_info:
            rule_from_anchor(None, None, datetime(2025, 1, 6), event_id="abc")
        assert exc_info.value.event_id == "abc"

    def test_monthly_without_subtype_raises(self):
        with pytest.raises(MissingMonthlyType):
            rule_from_anchor("monthly", None, datetime(2025, 1, 6))

    def test_unsupported_type_raises(self):
        with pytest.raises(MissingRecurrenceType, match="unsupported"):
            rule_from_anchor("yearly", None, datetime(2025, 1, 6))


class TestValidateRecurrence:
    """Tests for validate_recurrence()."""

    def test_non_recurring_event_has_no_rule(self, event_factory):
        event = event_factory(1, datetime(2025, 1, 6, 9, 0))
        assert validate_recurrence(event) is None

    def test_valid_weekly_series(self, event_factory):
        event = event_factory(
            1,
            datetime(2025, 1, 6, 9, 0),
            end_date=datetime(2025, 2, 3),
            recurring=True,
            recurrence_type="weekly",
        )
        assert validate_recurrence(event) == Weekly(weekday=0)

    def test_missing_recurrence_group(self, event_factory):
        event = event_factory(1, datetime(2025, 1, 6), end_date=datetime(2025, 2, 3), recurring=True)
        with pytest.raises(MissingRecurrenceType):
            validate_recurrence(event)

    def test_missing_monthly_type(self, event_factory):
        event = event_factory(
            1,
            datetime(2025, 1, 6),
            end_date=datetime(2025, 2, 3),
            recurring=True,
            recurrence_type="monthly",
        )
        with pytest.raises(MissingMonthlyType):
            validate_recurrence(event)

    def test_missing_end_date(self, event_factory):
        event = event_factory(1, datetime(2025, 1, 6), recurring=True, recurrence_type="weekly")
        with pytest.raises(InvalidSeriesBound, match="no end date"):
            validate_recurrence(event)

    def test_end_before_start(self, event_factory):
        event = event_factory(
            1,
            datetime(2025, 1, 6),
            end_date=datetime(2025, 1, 5),
            recurring=True,
            recurrence_type="weekly",
        )
        with pytest.raises(InvalidSeriesBound, match="before it starts"):
            validate_recurrence(event)

    def test_end_on_anchor_day_is_valid(self, event_factory):
        """The bound is compared by calendar date, so an earlier time that day is fine."""
        event = event_factory(
            1,
            datetime(2025, 1, 6, 18, 0),
            end_date=datetime(2025, 1, 6, 0, 0),
            recurring=True,
            recurrence_type="weekly",
        )
        assert validate_recurrence(event) == Weekly(weekday=0)

    def test_type_is_checked_before_bound(self, event_factory):
        """A record missing both type and end date reports the missing type."""
        event = event_factory(1, datetime(2025, 1, 6), recurring=True)
        with pytest.raises(MissingRecurrenceType):
            validate_recurrence(event)


def test_collect_validation_errors(event_factory) -> None:
    """Only failing events appear in the result, keyed by id."""
    events = [
        event_factory("ok", datetime(2025, 1, 6)),
        event_factory("no-type", datetime(2025, 1, 6), end_date=datetime(2025, 2, 1), recurring=True),
        event_factory(
            "no-end", datetime(2025, 1, 6), recurring=True, recurrence_type="weekly"
        ),
    ]

    errors = collect_validation_errors(events)

    assert set(errors) == {"no-type", "no-end"}
    assert all(isinstance(e, RecurrenceValidationError) for e in errors.values())
    assert isinstance(errors["no-end"], InvalidSeriesBound)
