"""Tests for natural language due-date parsing."""

from datetime import date

import pytest

from todo_recur.parser import SmartDateParser


class TestSmartDateParser:
    """Test the smart date parser."""

    def setup_method(self):
        # Friday 2024-03-15
        self.parser = SmartDateParser(today=lambda: date(2024, 3, 15))

    def test_parse_today(self):
        assert self.parser.parse("today") == date(2024, 3, 15)

    def test_parse_tomorrow(self):
        assert self.parser.parse("Tomorrow") == date(2024, 3, 16)

    def test_parse_yesterday(self):
        assert self.parser.parse("yesterday") == date(2024, 3, 14)

    def test_parse_next_week(self):
        assert self.parser.parse("next week") == date(2024, 3, 22)

    def test_parse_end_of_week(self):
        assert self.parser.parse("end of week") == date(2024, 3, 16)

    def test_parse_iso_date(self):
        assert self.parser.parse("2024-12-25") == date(2024, 12, 25)

    def test_parse_slash_dates(self):
        assert self.parser.parse("2024/1/5") == date(2024, 1, 5)
        assert self.parser.parse("12/25/2024") == date(2024, 12, 25)

    def test_invalid_iso_date(self):
        assert self.parser.parse("2024-02-30") is None

    def test_parse_weekday_name(self):
        result = self.parser.parse("next friday")
        assert result is not None
        assert result.weekday() == 4
        assert result > date(2024, 3, 15)

    @pytest.mark.parametrize("text", ["", "invalid-date"])
    def test_parse_invalid(self, text):
        assert self.parser.parse(text) is None
