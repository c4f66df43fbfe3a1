"""Date utilities and the clock capability injected into extraction"""

from datetime import date
from typing import Optional, Protocol


class Clock(Protocol):
    def today(self) -> date: ...


class SystemClock:
    """Reads the local calendar date"""

    def today(self) -> date:
        return date.today()


class FixedClock:
    """Always returns the same date (tests, replays)"""

    def __init__(self, fixed: date):
        self.fixed = fixed

    def today(self) -> date:
        return self.fixed


def parse_day_first(day: str, month: str, year: str) -> Optional[date]:
    """Build a date from DD, MM, YYYY parts, None if it is not a real calendar day"""
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None
