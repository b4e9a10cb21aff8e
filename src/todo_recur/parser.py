"""Natural language due-date parsing for Todo Recur."""

import re
from datetime import date, datetime, timedelta
from typing import Callable, Optional

import parsedatetime


class SmartDateParser:
    """Intelligent date parser using natural language."""

    def __init__(self, today: Optional[Callable[[], date]] = None):
        self.cal = parsedatetime.Calendar()
        self.today = today or date.today
        # Common relative date patterns
        self.patterns = {
            'today': lambda: self.today(),
            'tomorrow': lambda: self.today() + timedelta(days=1),
            'yesterday': lambda: self.today() - timedelta(days=1),
            'next week': lambda: self.today() + timedelta(weeks=1),
            'end of week': self._end_of_week,
        }

    def _end_of_week(self) -> date:
        """Get end of current week (Saturday, since weeks start on Sunday)."""
        today = self.today()
        days_until_saturday = (5 - today.weekday()) % 7
        return today + timedelta(days=days_until_saturday)

    def parse(self, date_str: str) -> Optional[date]:
        """Parse a natural language date string into a calendar date."""
        if not date_str:
            return None

        date_str = date_str.lower().strip()

        if date_str in self.patterns:
            return self.patterns[date_str]()

        # Explicit formats first so parsedatetime never reinterprets them
        patterns = [
            (r'^(\d{4}-\d{2}-\d{2})$', '%Y-%m-%d'),
            (r'^(\d{4}/\d{1,2}/\d{1,2})$', '%Y/%m/%d'),
            (r'^(\d{2}/\d{2}/\d{4})$', '%m/%d/%Y'),
        ]
        for pattern, fmt in patterns:
            if re.match(pattern, date_str):
                try:
                    return datetime.strptime(date_str, fmt).date()
                except ValueError:
                    return None

        source = datetime.combine(self.today(), datetime.min.time())
        time_struct, parse_status = self.cal.parse(date_str, source)
        if parse_status > 0:
            return datetime(*time_struct[:6]).date()

        return None
