"""
Priority Matrix Generator

Base seat priorities from hall geometry. Lower is better:
    priority = (distance from the row's center column + 1) × row multiplier
where the multiplier is 0.5 inside the ideal row band and 1.0 elsewhere.
Manual overrides replace single seats and leave the rest computed.
"""

from typing import Mapping, Optional

from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.value_object.algorithm_settings import AlgorithmSettings
from src.service.seating.domain.value_object.blocked_seat import BlockedSeat
from src.service.seating.domain.value_object.seat_matrix import SeatCell, SeatMatrix
from src.service.seating.domain.value_object.venue_layout import VenueLayout


# row index (0-based) -> seat index (0-based) -> priority
PriorityOverrides = Mapping[int, Mapping[int, float]]

IDEAL_ROW_MULTIPLIER = 0.5


def seat_priority(*, seat_index: int, row_capacity: int, row_number: int, settings: AlgorithmSettings) -> float:
    center = row_capacity // 2
    multiplier = IDEAL_ROW_MULTIPLIER if settings.in_ideal_band(row_number) else 1.0
    return (abs(seat_index - center) + 1) * multiplier


def generate_priority_matrix(
    *,
    day: Day,
    venue: VenueLayout,
    settings: AlgorithmSettings,
    overrides: Optional[PriorityOverrides] = None,
    blocked_seats: Optional[list[BlockedSeat]] = None,
) -> SeatMatrix:
    """Fresh, guest-free matrix for `day` with priorities and blocked seats painted in."""
    overrides = overrides or {}
    matrix = SeatMatrix.empty(day=day, venue=venue)
    for row_index, row in enumerate(venue.rows):
        row_overrides = overrides.get(row_index, {})
        matrix.rows[row_index] = [
            SeatCell(
                seat_number=seat_index + 1,
                priority=row_overrides.get(
                    seat_index,
                    seat_priority(
                        seat_index=seat_index,
                        row_capacity=row.capacity,
                        row_number=row.number,
                        settings=settings,
                    ),
                ),
            )
            for seat_index in range(row.capacity)
        ]
    if blocked_seats:
        matrix.apply_blocked_seats(blocked_seats)
    return matrix
