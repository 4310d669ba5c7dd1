"""Blocked seat value object."""

from typing import Optional

import attrs

from src.service.seating.domain.enum.day import Day


@attrs.define(frozen=True)
class BlockedSeat:
    """A seat taken out of availability by an operator (1-based row and seat)."""

    day: Day
    row: int
    seat_number: int
    reason: Optional[str] = None

    def same_coordinate(self, *, day: Day, row: int, seat_number: int) -> bool:
        return self.day == day and self.row == row and self.seat_number == seat_number
