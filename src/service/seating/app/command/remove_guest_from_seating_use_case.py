"""
Remove Guest From Seating Use Case

Clears a guest's seats on every day and drops their assignment records, so
the day totals stay equal to the seats actually handed out.
"""

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.seating.app.interface.i_seating_store import ISeatingStore
from src.service.seating.domain.enum.day import Day


class RemoveGuestFromSeatingUseCase:
    def __init__(self, *, seating_store: ISeatingStore) -> None:
        self.seating_store = seating_store

    @Logger.io
    async def remove_guest_from_seating(self, *, guest_id: int) -> list[Day]:
        """
        Returns:
            The days the guest was removed from

        Raises:
            NotFoundError: If the guest holds no seat and no assignment on any day
        """
        assignments = await self.seating_store.get_day_assignments()
        removed_days: list[Day] = []

        for day in Day:
            matrix = await self.seating_store.get_seats_for_day(day=day)
            cleared = matrix.remove_guest(guest_id)
            record = assignments[day].remove(guest_id)
            if cleared:
                await self.seating_store.set_seats_for_day(day=day, matrix=matrix)
            if cleared or record is not None:
                removed_days.append(day)

        if not removed_days:
            raise NotFoundError(f'Guest {guest_id} is not seated')

        await self.seating_store.update_day_assignments(assignments=assignments)
        Logger.base.info(
            f'🗑️ [REMOVE] Guest {guest_id} removed from {", ".join(removed_days)}'
        )
        return removed_days
