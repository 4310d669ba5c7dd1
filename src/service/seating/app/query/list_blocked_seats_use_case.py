from typing import Optional

from src.platform.logging.loguru_io import Logger
from src.service.seating.app.interface.i_seating_store import ISeatingStore
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.value_object.blocked_seat import BlockedSeat


class ListBlockedSeatsUseCase:
    def __init__(self, *, seating_store: ISeatingStore) -> None:
        self.seating_store = seating_store

    @Logger.io
    async def list_blocked_seats(self, *, day: Optional[Day] = None) -> list[BlockedSeat]:
        blocked_seats = await self.seating_store.get_blocked_seats(day=day)
        return sorted(blocked_seats, key=lambda seat: (list(Day).index(seat.day), seat.row, seat.seat_number))
