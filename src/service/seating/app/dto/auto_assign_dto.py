"""Auto-assign run DTOs"""

import attrs

from src.service.seating.domain.enum.day import Day


@attrs.define(frozen=True)
class UnplacedGuest:
    guest_id: int
    name: str
    reason: str


@attrs.define(frozen=True)
class DayTotals:
    day: Day
    assigned: int
    capacity: int


@attrs.define
class AutoAssignResult:
    placed_count: int = 0
    unplaced: list[UnplacedGuest] = attrs.field(factory=list)
    day_totals: list[DayTotals] = attrs.field(factory=list)
    preference_count: int = 0

    @property
    def unplaced_count(self) -> int:
        return len(self.unplaced)
