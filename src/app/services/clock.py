"""Clock Interface

Supplies "today" for the overdue overlay so it can be fixed in tests.
"""

from abc import ABC, abstractmethod
from datetime import date


class Clock(ABC):

    @abstractmethod
    def today(self) -> date:
        """Current calendar date"""
        pass
