"""Performance Day Enum"""

from enum import StrEnum
from typing import Optional


class Day(StrEnum):
    """Performance days in calendar order."""

    WOENSDAG = 'woensdag'
    DONDERDAG = 'donderdag'
    VRIJDAG = 'vrijdag'

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional['Day']:
        """Lenient lookup for persisted day names ('Woensdag ', '', None)."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    @classmethod
    def last(cls) -> 'Day':
        return list(cls)[-1]
