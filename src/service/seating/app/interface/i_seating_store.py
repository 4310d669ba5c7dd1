"""
Seating Store Interface

Key-value collaborator holding the roster, one seat matrix per day, the day
assignment totals, settings and the blocked-seat registry. Every day matrix
is read and rewritten as a whole.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.service.seating.domain.entity.guest_entity import Guest
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.priority_matrix_domain import PriorityOverrides
from src.service.seating.domain.value_object.algorithm_settings import AlgorithmSettings
from src.service.seating.domain.value_object.blocked_seat import BlockedSeat
from src.service.seating.domain.value_object.day_assignment import DaySeating
from src.service.seating.domain.value_object.seat_matrix import SeatMatrix


class ISeatingStore(ABC):
    @abstractmethod
    async def get_seats_for_day(self, *, day: Day) -> SeatMatrix:
        """
        Fetch the seat matrix of a day.

        A day without a stored matrix gets an empty, venue-shaped matrix,
        which is written back before returning.
        """
        pass

    @abstractmethod
    async def set_seats_for_day(self, *, day: Day, matrix: SeatMatrix) -> None:
        pass

    @abstractmethod
    async def get_day_assignments(self) -> DaySeating:
        """Assignment totals per day; all days empty at full capacity when missing."""
        pass

    @abstractmethod
    async def update_day_assignments(self, *, assignments: DaySeating) -> None:
        pass

    @abstractmethod
    async def get_blocked_seats(self, *, day: Optional[Day] = None) -> list[BlockedSeat]:
        pass

    @abstractmethod
    async def block_seat(self, *, blocked_seat: BlockedSeat) -> None:
        """Add a blocked seat, replacing an entry for the same coordinate."""
        pass

    @abstractmethod
    async def unblock_seat(self, *, day: Day, row: int, seat_number: int) -> bool:
        """Remove a blocked seat; returns False when it was not blocked."""
        pass

    @abstractmethod
    async def unblock_all_seats(self) -> None:
        pass

    @abstractmethod
    async def get_settings(self) -> AlgorithmSettings:
        pass

    @abstractmethod
    async def get_guests(self) -> list[Guest]:
        pass

    @abstractmethod
    async def get_priority_overrides(self) -> PriorityOverrides:
        """Manual seat priorities: row index → seat index → priority (0-based)."""
        pass

    @abstractmethod
    async def set_seating_status(self, *, is_done: bool, **extra: int) -> None:
        """Record run progress, e.g. guests_to_process / processed_guests."""
        pass
