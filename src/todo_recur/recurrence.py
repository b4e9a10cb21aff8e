"""
Recurrence rules for Todo Recur

A rule is one of three immutable values: ``RepeatNone``, ``RepeatWeekly``
(a set of weekdays) or ``RepeatMonthly`` (a fixed day of the month). The
"daily" and "weekdays" presets are ordinary weekly rules exposed as
constants and recognised by the ``is_daily`` / ``is_weekdays_only``
predicates.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Union


class InvalidRecurrenceError(ValueError):
    """Raised when a recurrence rule cannot be built from user input or stored data."""

    def __init__(self, message: str, value: Any = None, suggestions: Optional[List[str]] = None):
        self.value = value
        self.suggestions = suggestions or []
        super().__init__(message)


class Weekday(Enum):
    """Days of the week, ordered Sunday=0 ... Saturday=6."""
    SUNDAY = (0, "Sun")
    MONDAY = (1, "Mon")
    TUESDAY = (2, "Tue")
    WEDNESDAY = (3, "Wed")
    THURSDAY = (4, "Thu")
    FRIDAY = (5, "Fri")
    SATURDAY = (6, "Sat")

    def __init__(self, ordinal: int, label: str):
        self.ordinal = ordinal
        self.label = label

    @classmethod
    def from_ordinal(cls, ordinal: int) -> "Weekday":
        for day in cls:
            if day.ordinal == ordinal:
                return day
        raise InvalidRecurrenceError(f"Invalid weekday ordinal: {ordinal!r}", ordinal,
                                     ["Use 0 (Sunday) through 6 (Saturday)"])

    @classmethod
    def from_date(cls, day) -> "Weekday":
        """Weekday of a date or datetime."""
        return cls.from_ordinal((day.weekday() + 1) % 7)


@dataclass(frozen=True)
class RepeatNone:
    """No recurrence."""
    type = "none"


@dataclass(frozen=True)
class RepeatWeekly:
    """Repeat on every listed weekday."""
    days: FrozenSet[Weekday] = field(default_factory=frozenset)
    type = "weekly"

    def __post_init__(self):
        object.__setattr__(self, "days", frozenset(self.days))

    def sorted_days(self) -> List[Weekday]:
        return sorted(self.days, key=lambda day: day.ordinal)

    @property
    def ordinals(self) -> List[int]:
        return [day.ordinal for day in self.sorted_days()]


@dataclass(frozen=True)
class RepeatMonthly:
    """Repeat on a fixed day of every month."""
    day_of_month: int
    type = "monthly"


RecurrenceRule = Union[RepeatNone, RepeatWeekly, RepeatMonthly]

WEEKDAY_SET = frozenset({
    Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY,
})

REPEAT_NONE = RepeatNone()
REPEAT_DAILY = RepeatWeekly(frozenset(Weekday))
REPEAT_WEEKDAYS = RepeatWeekly(WEEKDAY_SET)


def is_none(rule: Optional[RecurrenceRule]) -> bool:
    return rule is None or isinstance(rule, RepeatNone)


def is_weekly(rule: Optional[RecurrenceRule]) -> bool:
    return isinstance(rule, RepeatWeekly)


def is_monthly(rule: Optional[RecurrenceRule]) -> bool:
    return isinstance(rule, RepeatMonthly)


def has_repeat(rule: Optional[RecurrenceRule]) -> bool:
    """True for weekly and monthly rules."""
    return is_weekly(rule) or is_monthly(rule)


def is_daily(rule: Optional[RecurrenceRule]) -> bool:
    """True when a weekly rule covers all seven days."""
    return is_weekly(rule) and {day.ordinal for day in rule.days} == set(range(7))


def is_weekdays_only(rule: Optional[RecurrenceRule]) -> bool:
    """True when a weekly rule is exactly Monday through Friday."""
    if not is_weekly(rule) or len(rule.days) != 5:
        return False
    return all(day.ordinal not in (0, 6) for day in rule.days)


# Display labels per locale; without a "days" entry the Weekday labels are used
LABELS: Dict[str, Dict[str, Any]] = {
    "en": {
        "none": "None",
        "daily": "Daily",
        "weekdays": "Weekdays",
        "weekly": "Weekly: {days}",
        "monthly": "Monthly on day {day}",
        "separator": ", ",
    },
    "ja": {
        "none": "なし",
        "daily": "毎日",
        "weekdays": "平日",
        "weekly": "毎週 {days}",
        "monthly": "毎月 {day}日",
        "separator": "・",
        "days": ("日", "月", "火", "水", "木", "金", "土"),
    },
}


def format_rule(rule: Optional[RecurrenceRule], locale: str = "en") -> str:
    """Render a rule for display.

    The daily and weekdays presets are checked before generic weekly
    formatting, so those day sets are never shown as a raw list.
    """
    labels = LABELS.get(locale, LABELS["en"])

    if is_none(rule):
        return labels["none"]
    if is_daily(rule):
        return labels["daily"]
    if is_weekdays_only(rule):
        return labels["weekdays"]
    if is_weekly(rule):
        if not rule.days:
            # An empty day set never produces an occurrence
            return labels["none"]
        day_names = labels.get("days")
        day_labels = [day_names[day.ordinal] if day_names else day.label for day in rule.sorted_days()]
        return labels["weekly"].format(days=labels["separator"].join(day_labels))
    if is_monthly(rule):
        return labels["monthly"].format(day=rule.day_of_month)
    return labels["none"]


def rule_to_dict(rule: Optional[RecurrenceRule]) -> Optional[Dict[str, Any]]:
    """Serialize a rule for storage."""
    if rule is None:
        return None
    if is_weekly(rule):
        return {"type": "weekly", "days": rule.ordinals}
    if is_monthly(rule):
        return {"type": "monthly", "day_of_month": rule.day_of_month}
    return {"type": "none"}


def rule_from_dict(data: Optional[Dict[str, Any]]) -> Optional[RecurrenceRule]:
    """Deserialize a stored rule, rejecting unknown tags and malformed payloads."""
    if data is None:
        return None
    if not isinstance(data, dict):
        raise InvalidRecurrenceError(f"Recurrence rule must be a mapping, got {type(data).__name__}", data)

    rule_type = data.get("type")
    if rule_type == "none":
        return REPEAT_NONE
    if rule_type == "weekly":
        days = data.get("days")
        if not isinstance(days, list) or not all(isinstance(d, int) and not isinstance(d, bool) for d in days):
            raise InvalidRecurrenceError("Weekly rule needs a list of weekday ordinals", data)
        return RepeatWeekly(frozenset(Weekday.from_ordinal(d) for d in days))
    if rule_type == "monthly":
        day = data.get("day_of_month")
        if not isinstance(day, int) or isinstance(day, bool):
            raise InvalidRecurrenceError("Monthly rule needs an integer day_of_month", data)
        return RepeatMonthly(day)

    raise InvalidRecurrenceError(f"Unknown recurrence type: {rule_type!r}", data,
                                 ["Use one of: none, weekly, monthly"])


class RecurrenceParser:
    """Parses recurrence patterns typed by the user"""

    DAY_NAMES = {
        "sun": Weekday.SUNDAY, "sunday": Weekday.SUNDAY, "日": Weekday.SUNDAY,
        "mon": Weekday.MONDAY, "monday": Weekday.MONDAY, "月": Weekday.MONDAY,
        "tue": Weekday.TUESDAY, "tues": Weekday.TUESDAY, "tuesday": Weekday.TUESDAY, "火": Weekday.TUESDAY,
        "wed": Weekday.WEDNESDAY, "wednesday": Weekday.WEDNESDAY, "水": Weekday.WEDNESDAY,
        "thu": Weekday.THURSDAY, "thur": Weekday.THURSDAY, "thurs": Weekday.THURSDAY,
        "thursday": Weekday.THURSDAY, "木": Weekday.THURSDAY,
        "fri": Weekday.FRIDAY, "friday": Weekday.FRIDAY, "金": Weekday.FRIDAY,
        "sat": Weekday.SATURDAY, "saturday": Weekday.SATURDAY, "土": Weekday.SATURDAY,
    }

    PATTERNS = {
        r'^(none|never|no repeat)$': lambda m: REPEAT_NONE,
        r'^(daily|every ?day)$': lambda m: REPEAT_DAILY,
        r'^(weekdays|every weekday)$': lambda m: REPEAT_WEEKDAYS,
        r'^weekly:\s*(.+)$': lambda m: RecurrenceParser.weekly(m.group(1)),
        r'^monthly:\s*(-?\d+)$': lambda m: RecurrenceParser.monthly(m.group(1)),
        r'^(?:monthly|every month) on (?:the |day )?(-?\d+)(?:st|nd|rd|th)?$':
            lambda m: RecurrenceParser.monthly(m.group(1)),
        r'^every (.+)$': lambda m: RecurrenceParser.weekly(m.group(1)),
    }

    @classmethod
    def day_names_to_days(cls, text: str) -> FrozenSet[Weekday]:
        """Convert "mon, wed and fri" into a set of weekdays"""
        tokens = [t for t in re.split(r"[\s,/・]+|\band\b", text) if t]
        days = set()
        for token in tokens:
            day = cls.DAY_NAMES.get(token)
            if day is None:
                raise InvalidRecurrenceError(
                    f"Unknown weekday: {token!r}", token,
                    ["Use day names such as mon, tue, wed or monday"],
                )
            days.add(day)
        return frozenset(days)

    @classmethod
    def weekly(cls, text: str) -> RepeatWeekly:
        days = cls.day_names_to_days(text)
        if not days:
            raise InvalidRecurrenceError("A weekly rule needs at least one weekday", text)
        return RepeatWeekly(days)

    @staticmethod
    def monthly(text: str) -> RepeatMonthly:
        day = int(text)
        if not 1 <= day <= 31:
            raise InvalidRecurrenceError(f"Day of month must be between 1 and 31, got {day}", day)
        return RepeatMonthly(day)

    @classmethod
    def parse(cls, pattern_str: str) -> RecurrenceRule:
        """Parse a recurrence pattern such as "weekdays" or "monthly on the 10th"."""
        text = (pattern_str or "").lower().strip()

        for regex, build in cls.PATTERNS.items():
            match = re.match(regex, text)
            if match:
                return build(match)

        raise InvalidRecurrenceError(
            f"Invalid recurrence pattern: {pattern_str!r}", pattern_str,
            ["daily", "weekdays", "weekly:mon,wed", "monthly:10", "none"],
        )


def weekly(days: Iterable[Weekday]) -> RepeatWeekly:
    """Build a weekly rule from any iterable of weekdays."""
    return RepeatWeekly(frozenset(days))
