"""Venue layout value objects."""

from typing import Optional

import attrs


@attrs.define(frozen=True)
class RowLayout:
    """
    One row of the hall (Value Object).

    Rows are numbered from 1 at the stage; `capacity` is the number of seats.
    """

    number: int
    capacity: int
    is_balcony: bool = False
    wheelchair_note: Optional[str] = None


@attrs.define(frozen=True)
class VenueLayout:
    """
    Static row/seat capacity map of the hall (Value Object).

    The layout never changes during a run; every day matrix is shaped by it.
    """

    rows: tuple[RowLayout, ...]

    @property
    def total_capacity(self) -> int:
        return sum(row.capacity for row in self.rows)

    @property
    def ground_floor_capacity(self) -> int:
        return sum(row.capacity for row in self.rows if not row.is_balcony)

    def row(self, number: int) -> RowLayout:
        return self.rows[number - 1]

    def contains(self, *, row: int, seat_number: int) -> bool:
        return 1 <= row <= len(self.rows) and 1 <= seat_number <= self.rows[row - 1].capacity

    @classmethod
    def from_capacities(
        cls, capacities: list[int], *, balcony_rows: int = 0, wheelchair: Optional[dict[int, str]] = None
    ) -> 'VenueLayout':
        """Build a layout whose last `balcony_rows` rows are balcony."""
        wheelchair = wheelchair or {}
        first_balcony = len(capacities) - balcony_rows + 1
        return cls(
            rows=tuple(
                RowLayout(
                    number=number,
                    capacity=capacity,
                    is_balcony=number >= first_balcony,
                    wheelchair_note=wheelchair.get(number),
                )
                for number, capacity in enumerate(capacities, start=1)
            )
        )


# Main hall: 16 ground-floor rows, 6 balcony rows
THEATER_LAYOUT = VenueLayout.from_capacities(
    [19, 24, 27, 30, 31, 32, 35, 36, 37, 38, 13, 13, 13, 13, 12, 12, 38, 39, 39, 39, 39, 39],
    balcony_rows=6,
    wheelchair={15: '2 stoelen voor 1 rolstoel'},
)
