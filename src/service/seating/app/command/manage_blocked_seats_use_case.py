"""
Manage Blocked Seats Use Case - operator actions on the blocked-seat registry

The registry is painted into fresh day matrices at the start of every
seating run; these actions only change the registry itself.
"""

from typing import Optional

from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.seating.app.interface.i_seating_store import ISeatingStore
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.value_object.blocked_seat import BlockedSeat
from src.service.seating.domain.value_object.venue_layout import THEATER_LAYOUT, VenueLayout


class ManageBlockedSeatsUseCase:
    def __init__(self, *, seating_store: ISeatingStore, venue: VenueLayout = THEATER_LAYOUT) -> None:
        self.seating_store = seating_store
        self.venue = venue

    @Logger.io
    async def block_seat(
        self, *, day: Day, row: int, seat_number: int, reason: Optional[str] = None
    ) -> BlockedSeat:
        """
        Block one seat (1-based row and seat).

        Re-blocking a seat replaces its reason.

        Raises:
            DomainError: If the coordinate is outside the venue
        """
        if not self.venue.contains(row=row, seat_number=seat_number):
            raise DomainError(f'Seat {row}-{seat_number} does not exist in the venue')

        blocked_seat = BlockedSeat(day=day, row=row, seat_number=seat_number, reason=reason)
        await self.seating_store.block_seat(blocked_seat=blocked_seat)
        Logger.base.info(f'⛔ [BLOCK] {day} row {row} seat {seat_number} blocked ({reason or "-"})')
        return blocked_seat

    @Logger.io
    async def unblock_seat(self, *, day: Day, row: int, seat_number: int) -> None:
        """
        Raises:
            NotFoundError: If the seat was not blocked
        """
        if not await self.seating_store.unblock_seat(day=day, row=row, seat_number=seat_number):
            raise NotFoundError(f'Seat {row}-{seat_number} on {day} is not blocked')
        Logger.base.info(f'✅ [BLOCK] {day} row {row} seat {seat_number} released')

    @Logger.io
    async def unblock_all_seats(self) -> None:
        await self.seating_store.unblock_all_seats()
        Logger.base.info('✅ [BLOCK] All blocked seats released')
