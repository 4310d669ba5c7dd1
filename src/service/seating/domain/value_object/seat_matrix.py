"""
Seat matrix for a single performance day.

A matrix is a list of rows; each row is a list of SeatCell. Speculative group
moves run on a transaction: the scratch copy is mutated freely and only
replaces the live rows on commit. Leaving the block without committing
discards every change.
"""

from typing import Iterator, Optional

import attrs

from src.service.seating.domain.entity.guest_entity import Guest
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.value_object.blocked_seat import BlockedSeat
from src.service.seating.domain.value_object.venue_layout import VenueLayout


@attrs.define
class SeatCell:
    seat_number: int  # 1-based within the row
    priority: float = 1.0
    guest: Optional[Guest] = None
    together: bool = False
    blocked: bool = False
    reason: Optional[str] = None

    @property
    def is_free(self) -> bool:
        return self.guest is None and not self.blocked

    def assign(self, guest: Guest, *, together: bool) -> None:
        self.guest = guest
        self.together = together

    def clear(self) -> None:
        self.guest = None
        self.together = False

    def copy(self) -> 'SeatCell':
        return attrs.evolve(self)


@attrs.define(frozen=True)
class SeatBlock:
    """A contiguous run of seats in one row (0-based indices)."""

    row_index: int
    start: int
    length: int

    @property
    def indices(self) -> range:
        return range(self.start, self.start + self.length)

    @property
    def row_number(self) -> int:
        return self.row_index + 1


@attrs.define
class SeatMatrix:
    day: Day
    rows: list[list[SeatCell]]
    balcony_rows: frozenset[int] = frozenset()  # 0-based row indices

    @classmethod
    def empty(cls, *, day: Day, venue: VenueLayout) -> 'SeatMatrix':
        return cls(
            day=day,
            rows=[
                [SeatCell(seat_number=n) for n in range(1, row.capacity + 1)]
                for row in venue.rows
            ],
            balcony_rows=frozenset(i for i, row in enumerate(venue.rows) if row.is_balcony),
        )

    # ---------- queries ----------

    def is_balcony(self, row_index: int) -> bool:
        return row_index in self.balcony_rows

    def cells(self, block: SeatBlock) -> list[SeatCell]:
        return self.rows[block.row_index][block.start : block.start + block.length]

    def block_fits(self, block: SeatBlock) -> bool:
        row = self.rows[block.row_index]
        return block.start >= 0 and block.start + block.length <= len(row)

    def block_is_free(self, block: SeatBlock) -> bool:
        return self.block_fits(block) and all(cell.is_free for cell in self.cells(block))

    def block_has_blocked_seat(self, block: SeatBlock) -> bool:
        return any(cell.blocked for cell in self.cells(block))

    def average_priority(self, block: SeatBlock) -> float:
        cells = self.cells(block)
        return sum(cell.priority for cell in cells) / len(cells)

    def iter_cells(self) -> Iterator[tuple[int, int, SeatCell]]:
        for row_index, row in enumerate(self.rows):
            for seat_index, cell in enumerate(row):
                yield row_index, seat_index, cell

    def seats_of(self, guest_id: int) -> list[tuple[int, int]]:
        return [
            (row_index, seat_index)
            for row_index, seat_index, cell in self.iter_cells()
            if cell.guest is not None and cell.guest.id == guest_id
        ]

    def is_seated(self, guest_id: int) -> bool:
        return any(cell.guest is not None and cell.guest.id == guest_id for _, _, cell in self.iter_cells())

    def location_of(self, guest_id: int) -> Optional[SeatBlock]:
        """Contiguous span a guest occupies (first row found)."""
        seats = self.seats_of(guest_id)
        if not seats:
            return None
        row_index = seats[0][0]
        indices = [seat for row, seat in seats if row == row_index]
        return SeatBlock(row_index=row_index, start=min(indices), length=max(indices) - min(indices) + 1)

    def seated_guests(self) -> list[Guest]:
        """Distinct seated guests in row-major order of their first seat."""
        seen: dict[int, Guest] = {}
        for _, _, cell in self.iter_cells():
            if cell.guest is not None and cell.guest.id not in seen:
                seen[cell.guest.id] = cell.guest
        return list(seen.values())

    def occupancy(self, *, ground_floor_only: bool = False) -> float:
        """Occupied share of seats in percent."""
        total = occupied = 0
        for row_index, _, cell in self.iter_cells():
            if ground_floor_only and self.is_balcony(row_index):
                continue
            total += 1
            occupied += cell.guest is not None
        return occupied / total * 100 if total else 0.0

    # ---------- mutations ----------

    def assign_block(self, block: SeatBlock, guest: Guest, *, together: bool) -> None:
        for cell in self.cells(block):
            cell.assign(guest, together=together)

    def mark_together(self, guest_id: int) -> None:
        for row_index, seat_index in self.seats_of(guest_id):
            self.rows[row_index][seat_index].together = True

    def remove_guest(self, guest_id: int) -> int:
        seats = self.seats_of(guest_id)
        for row_index, seat_index in seats:
            self.rows[row_index][seat_index].clear()
        return len(seats)

    def apply_blocked_seats(self, blocked_seats: list[BlockedSeat]) -> None:
        for blocked in blocked_seats:
            if blocked.day != self.day:
                continue
            row_index, seat_index = blocked.row - 1, blocked.seat_number - 1
            if 0 <= row_index < len(self.rows) and 0 <= seat_index < len(self.rows[row_index]):
                cell = self.rows[row_index][seat_index]
                cell.blocked = True
                cell.reason = blocked.reason or 'Blocked'

    def unblock_all(self) -> None:
        for _, _, cell in self.iter_cells():
            cell.blocked = False
            cell.reason = None

    def copy(self) -> 'SeatMatrix':
        return SeatMatrix(
            day=self.day,
            rows=[[cell.copy() for cell in row] for row in self.rows],
            balcony_rows=self.balcony_rows,
        )

    def transaction(self) -> 'SeatMatrixTransaction':
        return SeatMatrixTransaction(self)


class SeatMatrixTransaction:
    """
    Snapshot-on-entry scratch matrix.

    Usage:
        with matrix.transaction() as tx:
            tx.scratch.assign_block(...)
            if ok:
                tx.commit()
    """

    def __init__(self, target: SeatMatrix) -> None:
        self._target = target
        self.scratch = target.copy()
        self.committed = False

    def __enter__(self) -> 'SeatMatrixTransaction':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # Uncommitted scratch state is simply dropped with the transaction
        return None

    def commit(self) -> None:
        if self.committed:
            raise RuntimeError('Seat matrix transaction already committed')
        self._target.rows = self.scratch.rows
        self.committed = True
