"""Tests for recurrence rules, presets, formatting and parsing."""

import pytest

from todo_recur.recurrence import (
    InvalidRecurrenceError,
    REPEAT_DAILY,
    REPEAT_NONE,
    REPEAT_WEEKDAYS,
    RecurrenceParser,
    RepeatMonthly,
    RepeatWeekly,
    Weekday,
    format_rule,
    has_repeat,
    is_daily,
    is_monthly,
    is_none,
    is_weekdays_only,
    is_weekly,
    rule_from_dict,
    rule_to_dict,
    weekly,
)


class TestWeekday:
    """Test weekday ordinals and labels."""

    def test_sunday_is_zero(self):
        assert Weekday.SUNDAY.ordinal == 0
        assert Weekday.SATURDAY.ordinal == 6
        assert Weekday.WEDNESDAY.label == "Wed"

    def test_from_ordinal(self):
        assert Weekday.from_ordinal(1) is Weekday.MONDAY

    def test_from_ordinal_out_of_range(self):
        with pytest.raises(InvalidRecurrenceError):
            Weekday.from_ordinal(7)

    def test_from_date(self):
        from datetime import date
        assert Weekday.from_date(date(2024, 1, 10)) is Weekday.WEDNESDAY
        assert Weekday.from_date(date(2024, 1, 14)) is Weekday.SUNDAY


class TestPredicates:
    """Test tag predicates and preset detection."""

    def test_tags(self):
        assert is_none(REPEAT_NONE)
        assert is_none(None)
        assert is_weekly(REPEAT_DAILY)
        assert is_monthly(RepeatMonthly(10))
        assert not is_weekly(RepeatMonthly(10))

    def test_has_repeat(self):
        assert not has_repeat(None)
        assert not has_repeat(REPEAT_NONE)
        assert has_repeat(REPEAT_WEEKDAYS)
        assert has_repeat(RepeatMonthly(1))

    def test_daily(self):
        assert is_daily(RepeatWeekly(frozenset(Weekday)))
        assert is_daily(REPEAT_DAILY)
        assert not is_daily(REPEAT_WEEKDAYS)
        assert not is_daily(RepeatMonthly(1))

    def test_weekdays_only(self):
        assert is_weekdays_only(weekly([
            Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY,
        ]))
        assert not is_weekdays_only(weekly([
            Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY,
            Weekday.FRIDAY, Weekday.SATURDAY,
        ]))
        assert not is_weekdays_only(weekly([
            Weekday.SUNDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY,
        ]))

    def test_duplicate_days_collapse(self):
        rule = weekly([Weekday.MONDAY, Weekday.MONDAY, Weekday.FRIDAY])
        assert rule.ordinals == [1, 5]

    def test_insertion_order_irrelevant(self):
        assert weekly([Weekday.FRIDAY, Weekday.MONDAY]) == weekly([Weekday.MONDAY, Weekday.FRIDAY])


class TestFormatRule:
    """Test display strings."""

    def test_none(self):
        assert format_rule(None) == "None"
        assert format_rule(REPEAT_NONE) == "None"

    def test_presets_win_over_day_list(self):
        assert format_rule(REPEAT_DAILY) == "Daily"
        assert format_rule(REPEAT_WEEKDAYS) == "Weekdays"

    def test_weekly_days_in_ordinal_order(self):
        rule = weekly([Weekday.WEDNESDAY, Weekday.SUNDAY, Weekday.MONDAY])
        assert format_rule(rule) == "Weekly: Sun, Mon, Wed"

    @pytest.mark.parametrize("day", list(Weekday))
    def test_english_day_names_come_from_weekday(self, day):
        assert format_rule(weekly([day])) == f"Weekly: {day.label}"

    def test_monthly(self):
        assert format_rule(RepeatMonthly(10)) == "Monthly on day 10"

    def test_japanese_labels(self):
        assert format_rule(REPEAT_NONE, "ja") == "なし"
        assert format_rule(REPEAT_DAILY, "ja") == "毎日"
        assert format_rule(REPEAT_WEEKDAYS, "ja") == "平日"
        assert format_rule(weekly([Weekday.MONDAY, Weekday.WEDNESDAY]), "ja") == "毎週 月・水"
        assert format_rule(RepeatMonthly(10), "ja") == "毎月 10日"

    def test_unknown_locale_falls_back_to_english(self):
        assert format_rule(REPEAT_DAILY, "xx") == "Daily"


class TestSerialization:
    """Test rule dictionaries used by storage."""

    def test_to_dict(self):
        assert rule_to_dict(None) is None
        assert rule_to_dict(REPEAT_NONE) == {"type": "none"}
        assert rule_to_dict(weekly([Weekday.WEDNESDAY, Weekday.MONDAY])) == {"type": "weekly", "days": [1, 3]}
        assert rule_to_dict(RepeatMonthly(31)) == {"type": "monthly", "day_of_month": 31}

    def test_from_dict(self):
        assert rule_from_dict(None) is None
        assert rule_from_dict({"type": "none"}) == REPEAT_NONE
        assert rule_from_dict({"type": "weekly", "days": [0, 1, 2, 3, 4, 5, 6]}) == REPEAT_DAILY
        assert rule_from_dict({"type": "monthly", "day_of_month": 10}) == RepeatMonthly(10)

    def test_unknown_tag_rejected(self):
        with pytest.raises(InvalidRecurrenceError):
            rule_from_dict({"type": "yearly"})

    def test_malformed_payload_rejected(self):
        with pytest.raises(InvalidRecurrenceError):
            rule_from_dict({"type": "weekly", "days": "mon"})
        with pytest.raises(InvalidRecurrenceError):
            rule_from_dict({"type": "monthly", "day_of_month": "10"})
        with pytest.raises(InvalidRecurrenceError):
            rule_from_dict(["weekly"])


class TestRecurrenceParser:
    """Test parsing of user-entered patterns."""

    @pytest.mark.parametrize("text", ["daily", "every day", "Everyday"])
    def test_daily(self, text):
        assert RecurrenceParser.parse(text) == REPEAT_DAILY

    def test_weekdays(self):
        assert RecurrenceParser.parse("weekdays") == REPEAT_WEEKDAYS

    def test_none(self):
        assert RecurrenceParser.parse("none") == REPEAT_NONE

    def test_weekly_list(self):
        assert RecurrenceParser.parse("weekly:mon,wed") == weekly([Weekday.MONDAY, Weekday.WEDNESDAY])

    def test_every_day_names(self):
        rule = RecurrenceParser.parse("every monday and friday")
        assert rule == weekly([Weekday.MONDAY, Weekday.FRIDAY])

    def test_japanese_day_names(self):
        assert RecurrenceParser.parse("weekly:月・水") == weekly([Weekday.MONDAY, Weekday.WEDNESDAY])

    def test_monthly(self):
        assert RecurrenceParser.parse("monthly:10") == RepeatMonthly(10)
        assert RecurrenceParser.parse("monthly on the 31st") == RepeatMonthly(31)

    @pytest.mark.parametrize("text", ["monthly:0", "monthly:32", "monthly:-1"])
    def test_day_of_month_validated(self, text):
        with pytest.raises(InvalidRecurrenceError):
            RecurrenceParser.parse(text)

    def test_unknown_weekday(self):
        with pytest.raises(InvalidRecurrenceError) as exc_info:
            RecurrenceParser.parse("every funday")
        assert exc_info.value.suggestions

    def test_unknown_pattern(self):
        with pytest.raises(InvalidRecurrenceError):
            RecurrenceParser.parse("fortnightly")
