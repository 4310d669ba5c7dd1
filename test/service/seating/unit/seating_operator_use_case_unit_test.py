"""
Unit tests for operator use cases

- ManageBlockedSeatsUseCase: block / unblock / unblock all
- ListBlockedSeatsUseCase: sorted by day, row, seat
- RemoveGuestFromSeatingUseCase: clears seats and totals on every day
- ResetSeatingUseCase: empty matrices and zeroed totals, registry untouched
"""

from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import DomainError, NotFoundError
from src.service.seating.app.command.manage_blocked_seats_use_case import (
    ManageBlockedSeatsUseCase,
)
from src.service.seating.app.command.remove_guest_from_seating_use_case import (
    RemoveGuestFromSeatingUseCase,
)
from src.service.seating.app.command.reset_seating_use_case import ResetSeatingUseCase
from src.service.seating.app.interface.i_seating_store import ISeatingStore
from src.service.seating.app.query.list_blocked_seats_use_case import ListBlockedSeatsUseCase
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.value_object.blocked_seat import BlockedSeat
from src.service.seating.domain.value_object.seat_matrix import SeatBlock, SeatMatrix
from src.service.seating.domain.value_object.venue_layout import VenueLayout
from test.service.seating.seating_test_helpers import InMemorySeatingStore, guest_grid, make_guest


VENUE = VenueLayout.from_capacities([4, 4])


class TestManageBlockedSeats:
    @pytest.fixture
    def mock_store(self):
        return AsyncMock(spec=ISeatingStore)

    @pytest.fixture
    def use_case(self, mock_store):
        return ManageBlockedSeatsUseCase(seating_store=mock_store, venue=VENUE)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_block_seat(self, use_case, mock_store):
        blocked = await use_case.block_seat(day=Day.WOENSDAG, row=2, seat_number=4, reason='camera')

        assert blocked == BlockedSeat(day=Day.WOENSDAG, row=2, seat_number=4, reason='camera')
        mock_store.block_seat.assert_awaited_once_with(blocked_seat=blocked)

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize('row,seat_number', [(0, 1), (3, 1), (1, 5), (2, 0)])
    async def test_seat_outside_the_venue_is_rejected(self, use_case, mock_store, row, seat_number):
        with pytest.raises(DomainError):
            await use_case.block_seat(day=Day.WOENSDAG, row=row, seat_number=seat_number)

        mock_store.block_seat.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unblocking_a_free_seat_raises_not_found(self, use_case, mock_store):
        mock_store.unblock_seat.return_value = False

        with pytest.raises(NotFoundError):
            await use_case.unblock_seat(day=Day.WOENSDAG, row=1, seat_number=1)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unblock_all(self, use_case, mock_store):
        await use_case.unblock_all_seats()

        mock_store.unblock_all_seats.assert_awaited_once()


class TestListBlockedSeats:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sorted_by_day_row_and_seat(self):
        store = InMemorySeatingStore(
            venue=VENUE,
            blocked_seats=[
                BlockedSeat(day=Day.VRIJDAG, row=1, seat_number=1),
                BlockedSeat(day=Day.WOENSDAG, row=2, seat_number=1),
                BlockedSeat(day=Day.WOENSDAG, row=1, seat_number=3),
                BlockedSeat(day=Day.DONDERDAG, row=1, seat_number=2),
            ],
        )
        use_case = ListBlockedSeatsUseCase(seating_store=store)

        listed = await use_case.list_blocked_seats()

        assert [(s.day, s.row, s.seat_number) for s in listed] == [
            (Day.WOENSDAG, 1, 3),
            (Day.WOENSDAG, 2, 1),
            (Day.DONDERDAG, 1, 2),
            (Day.VRIJDAG, 1, 1),
        ]
        assert len(await use_case.list_blocked_seats(day=Day.WOENSDAG)) == 2


class TestRemoveGuestFromSeating:
    @pytest.fixture
    def store(self):
        store = InMemorySeatingStore(venue=VENUE)
        guest = make_guest(1, tickets=2)
        other = make_guest(2, tickets=1)
        matrix = SeatMatrix.empty(day=Day.DONDERDAG, venue=VENUE)
        matrix.assign_block(SeatBlock(row_index=0, start=1, length=2), guest, together=False)
        matrix.assign_block(SeatBlock(row_index=1, start=0, length=1), other, together=False)
        store.matrices[Day.DONDERDAG] = matrix
        store.day_assignments[Day.DONDERDAG].record(guest_id=1, seats=2, day=Day.DONDERDAG)
        store.day_assignments[Day.DONDERDAG].record(guest_id=2, seats=1, day=Day.DONDERDAG)
        return store

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_guest_is_removed_from_seats_and_totals(self, store):
        use_case = RemoveGuestFromSeatingUseCase(seating_store=store)

        days = await use_case.remove_guest_from_seating(guest_id=1)

        assert days == [Day.DONDERDAG]
        assert guest_grid(store.matrices[Day.DONDERDAG]) == [
            [None, None, None, None],
            [2, None, None, None],
        ]
        assignment = store.day_assignments[Day.DONDERDAG]
        assert assignment.assigned == 1
        assert not assignment.has_guest(1)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_guest_raises_not_found(self, store):
        use_case = RemoveGuestFromSeatingUseCase(seating_store=store)

        with pytest.raises(NotFoundError):
            await use_case.remove_guest_from_seating(guest_id=42)

        assert store.day_assignments[Day.DONDERDAG].assigned == 3


class TestResetSeating:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reset_empties_every_day_but_keeps_blocked_seats(self):
        blocked = [BlockedSeat(day=Day.WOENSDAG, row=1, seat_number=1)]
        store = InMemorySeatingStore(venue=VENUE, blocked_seats=list(blocked))
        matrix = SeatMatrix.empty(day=Day.WOENSDAG, venue=VENUE)
        matrix.assign_block(SeatBlock(row_index=0, start=0, length=2), make_guest(1), together=False)
        store.matrices[Day.WOENSDAG] = matrix
        store.day_assignments[Day.WOENSDAG].record(guest_id=1, seats=2, day=Day.WOENSDAG)
        use_case = ResetSeatingUseCase(seating_store=store, venue=VENUE)

        await use_case.reset_seating()

        for day in Day:
            assert not store.matrices[day].seated_guests()
            assert store.day_assignments[day].assigned == 0
            assert store.day_assignments[day].capacity == 8
        assert store.blocked_seats == blocked
