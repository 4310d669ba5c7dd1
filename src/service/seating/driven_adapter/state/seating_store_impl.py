"""
Seating Store Implementation

Kvrocks-based store for the roster, day matrices, day totals, settings,
blocked seats and run status. Every value is one JSON blob (orjson) and is
read and rewritten as a whole.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from opentelemetry import trace
import orjson
from pydantic import TypeAdapter

from src.platform.logging.loguru_io import Logger
from src.platform.state.kvrocks_client import kvrocks_client
from src.service.seating.app.interface.i_seating_store import ISeatingStore
from src.service.seating.domain.entity.guest_entity import Guest
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.priority_matrix_domain import PriorityOverrides
from src.service.seating.domain.value_object.algorithm_settings import AlgorithmSettings
from src.service.seating.domain.value_object.blocked_seat import BlockedSeat
from src.service.seating.domain.value_object.day_assignment import DaySeating
from src.service.seating.domain.value_object.seat_matrix import SeatMatrix
from src.service.seating.domain.value_object.venue_layout import THEATER_LAYOUT, VenueLayout
from src.service.seating.driven_adapter.state.key_str_generator import (
    make_blocked_seats_key,
    make_day_assignments_key,
    make_guests_key,
    make_priority_matrix_key,
    make_seating_status_key,
    make_seats_key,
    make_settings_key,
)
from src.service.seating.driven_adapter.state.seating_state_schema import (
    AlgorithmSettingsSchema,
    BlockedSeatSchema,
    GuestSchema,
    SeatCellSchema,
    SeatingStatusSchema,
    day_seating_from_json,
    day_seating_to_json,
)


_MATRIX_ADAPTER = TypeAdapter(list[list[SeatCellSchema]])
_GUESTS_ADAPTER = TypeAdapter(list[GuestSchema])
_BLOCKED_SEATS_ADAPTER = TypeAdapter(list[BlockedSeatSchema])


def _override_priority(entry: Any) -> Optional[float]:
    if isinstance(entry, dict):
        entry = entry.get('priority')
    return float(entry) if isinstance(entry, (int, float)) else None


def _indexed(container: Any) -> list[tuple[int, Any]]:
    """Rows and seats are stored as lists or as objects keyed by index."""
    if isinstance(container, list):
        return list(enumerate(container))
    if isinstance(container, dict):
        return [(int(key), value) for key, value in container.items() if str(key).isdigit()]
    return []


class SeatingStoreImpl(ISeatingStore):
    """
    Kvrocks-based seating store.

    Storage Format (all JSON strings):
        guests           list of guests (Dutch field names)
        seats:{day}      rows of {stoel, guest, priority, together, blocked, reason}
        dayAssignments   {day: {seats: [{guestId, seats, assignedDay}], capacity, assigned}}
        settings         camelCase algorithm settings
        blockedSeats     list of {day, row, seatNumber, reason} (1-based)
        priorityMatrix   manual priorities, rows of {priority} (null = computed)
        seatingStatus    {isDone, lastUpdated, guestsToProcess, processedGuests}
    """

    def __init__(self, *, venue: VenueLayout = THEATER_LAYOUT) -> None:
        self.venue = venue
        self.tracer = trace.get_tracer(__name__)

    async def _get_json(self, key: str) -> Any:
        client = kvrocks_client.get_client()
        raw = await client.get(key)
        if raw is None:
            return None
        return orjson.loads(raw)

    async def _set_json(self, key: str, value: Any) -> None:
        client = kvrocks_client.get_client()
        await client.set(key, orjson.dumps(value))

    # ========== Seat matrices ==========

    async def get_seats_for_day(self, *, day: Day) -> SeatMatrix:
        with self.tracer.start_as_current_span(
            'seating_store.get_seats_for_day', attributes={'seating.day': str(day)}
        ):
            data = await self._get_json(make_seats_key(day=day))
            if data is None:
                matrix = SeatMatrix.empty(day=day, venue=self.venue)
                await self.set_seats_for_day(day=day, matrix=matrix)
                Logger.base.info(f'🆕 [STORE] Initialized empty seat matrix for {day}')
                return matrix

            rows = _MATRIX_ADAPTER.validate_python(data)
            return SeatMatrix(
                day=day,
                rows=[[cell.to_entity() for cell in row] for row in rows],
                balcony_rows=frozenset(
                    index for index, row in enumerate(self.venue.rows) if row.is_balcony
                ),
            )

    async def set_seats_for_day(self, *, day: Day, matrix: SeatMatrix) -> None:
        with self.tracer.start_as_current_span(
            'seating_store.set_seats_for_day', attributes={'seating.day': str(day)}
        ):
            await self._set_json(
                make_seats_key(day=day),
                [
                    [
                        SeatCellSchema.from_entity(cell).model_dump(by_alias=True, mode='json')
                        for cell in row
                    ]
                    for row in matrix.rows
                ],
            )

    # ========== Day assignments ==========

    async def get_day_assignments(self) -> DaySeating:
        data = await self._get_json(make_day_assignments_key())
        if not data:
            return DaySeating.fresh(capacity=self.venue.total_capacity)
        return day_seating_from_json(data, capacity=self.venue.total_capacity)

    async def update_day_assignments(self, *, assignments: DaySeating) -> None:
        await self._set_json(make_day_assignments_key(), day_seating_to_json(assignments))

    # ========== Blocked seats ==========

    async def get_blocked_seats(self, *, day: Optional[Day] = None) -> list[BlockedSeat]:
        data = await self._get_json(make_blocked_seats_key())
        if not data:
            return []
        blocked_seats = [schema.to_entity() for schema in _BLOCKED_SEATS_ADAPTER.validate_python(data)]
        if day is not None:
            return [seat for seat in blocked_seats if seat.day == day]
        return blocked_seats

    async def _write_blocked_seats(self, blocked_seats: list[BlockedSeat]) -> None:
        await self._set_json(
            make_blocked_seats_key(),
            [
                BlockedSeatSchema.from_entity(seat).model_dump(by_alias=True, mode='json')
                for seat in blocked_seats
            ],
        )

    async def block_seat(self, *, blocked_seat: BlockedSeat) -> None:
        blocked_seats = [
            seat
            for seat in await self.get_blocked_seats()
            if not seat.same_coordinate(
                day=blocked_seat.day, row=blocked_seat.row, seat_number=blocked_seat.seat_number
            )
        ]
        blocked_seats.append(blocked_seat)
        await self._write_blocked_seats(blocked_seats)

    async def unblock_seat(self, *, day: Day, row: int, seat_number: int) -> bool:
        blocked_seats = await self.get_blocked_seats()
        remaining = [
            seat
            for seat in blocked_seats
            if not seat.same_coordinate(day=day, row=row, seat_number=seat_number)
        ]
        if len(remaining) == len(blocked_seats):
            return False
        await self._write_blocked_seats(remaining)
        return True

    async def unblock_all_seats(self) -> None:
        await self._write_blocked_seats([])

    # ========== Settings / roster ==========

    async def get_settings(self) -> AlgorithmSettings:
        data = await self._get_json(make_settings_key())
        return AlgorithmSettingsSchema.model_validate(data or {}).to_entity()

    async def get_guests(self) -> list[Guest]:
        data = await self._get_json(make_guests_key())
        if not data:
            return []
        return [schema.to_entity() for schema in _GUESTS_ADAPTER.validate_python(data)]

    async def get_priority_overrides(self) -> PriorityOverrides:
        data = await self._get_json(make_priority_matrix_key())
        overrides: dict[int, dict[int, float]] = {}
        for row_index, row in _indexed(data):
            for seat_index, entry in _indexed(row):
                priority = _override_priority(entry)
                if priority is not None:
                    overrides.setdefault(row_index, {})[seat_index] = priority
        return overrides

    # ========== Run status ==========

    async def set_seating_status(self, *, is_done: bool, **extra: int) -> None:
        status = SeatingStatusSchema(
            is_done=is_done, last_updated=datetime.now(timezone.utc), **extra
        )
        await self._set_json(
            make_seating_status_key(),
            status.model_dump(by_alias=True, mode='json', exclude_none=True),
        )
