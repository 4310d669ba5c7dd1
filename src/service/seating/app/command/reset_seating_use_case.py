from src.platform.logging.loguru_io import Logger
from src.service.seating.app.interface.i_seating_store import ISeatingStore
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.value_object.day_assignment import DaySeating
from src.service.seating.domain.value_object.seat_matrix import SeatMatrix
from src.service.seating.domain.value_object.venue_layout import THEATER_LAYOUT, VenueLayout


class ResetSeatingUseCase:
    """Empty every day matrix and zero the day totals (blocked-seat registry untouched)."""

    def __init__(self, *, seating_store: ISeatingStore, venue: VenueLayout = THEATER_LAYOUT) -> None:
        self.seating_store = seating_store
        self.venue = venue

    @Logger.io
    async def reset_seating(self) -> None:
        for day in Day:
            await self.seating_store.set_seats_for_day(
                day=day, matrix=SeatMatrix.empty(day=day, venue=self.venue)
            )
        await self.seating_store.update_day_assignments(
            assignments=DaySeating.fresh(capacity=self.venue.total_capacity)
        )
        Logger.base.info(
            f'🧹 [RESET] Seating reset, {self.venue.total_capacity} seats per day available'
        )
