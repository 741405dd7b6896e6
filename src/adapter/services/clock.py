from datetime import date
from src.app.services.clock import Clock


class SystemClock(Clock):
    """Clock reading the local system date"""

    def today(self) -> date:
        return date.today()


class FixedClock(Clock):
    """Clock pinned to one date (scheduled jobs re-run for a past day, tests)"""

    def __init__(self, fixed_date: date):
        self.fixed_date = fixed_date

    def today(self) -> date:
        return self.fixed_date
