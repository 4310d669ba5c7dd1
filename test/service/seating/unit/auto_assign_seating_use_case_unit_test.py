"""
Unit tests for AutoAssignSeatingUseCase

Test focus:
- Full run: every valid guest placed, day totals equal the recorded seats
- Mutual pairs and teacher pairs end up side by side
- Higher tiers are placed first when capacity runs out
- Guests with no valid day are reported unplaced
- Second-choice fallback when the first day is full
- Re-running the same input yields the same seating
- Unexpected store failures surface as UnknownSeatingError
"""

from unittest.mock import AsyncMock

import pytest

from src.service.seating.app.command.auto_assign_seating_use_case import AutoAssignSeatingUseCase
from src.service.seating.app.command.place_guest_on_day_use_case import PlaceGuestOnDayUseCase
from src.service.seating.app.command.resolve_blocked_seat_conflict_use_case import (
    ResolveBlockedSeatConflictUseCase,
)
from src.service.seating.app.interface.i_seating_store import ISeatingStore
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.seating_error import UnknownSeatingError
from src.service.seating.domain.value_object.algorithm_settings import AlgorithmSettings
from src.service.seating.domain.value_object.blocked_seat import BlockedSeat
from src.service.seating.domain.value_object.venue_layout import VenueLayout
from src.service.seating.driven_adapter.prompt.scripted_operator_prompt import (
    ScriptedOperatorPrompt,
)
from test.service.seating.seating_test_helpers import InMemorySeatingStore, guest_grid, make_guest


VENUE = VenueLayout.from_capacities([8, 8, 8, 8])


def _build(store, *, venue=VENUE, answers=None):
    prompt = ScriptedOperatorPrompt(answers=answers)
    resolver = ResolveBlockedSeatConflictUseCase(seating_store=store, operator_prompt=prompt)
    place_guest = PlaceGuestOnDayUseCase(seating_store=store, resolve_conflict_use_case=resolver)
    return AutoAssignSeatingUseCase(
        seating_store=store, place_guest_use_case=place_guest, venue=venue
    )


def _adjacent(matrix, first_id, second_id):
    first = matrix.location_of(first_id)
    second = matrix.location_of(second_id)
    if first is None or second is None or first.row_index != second.row_index:
        return False
    return first.start + first.length == second.start or second.start + second.length == first.start


@pytest.fixture
def roster():
    return [
        make_guest(1, tickets=2, is_honoree=True),
        make_guest(2, tickets=3, first=Day.VRIJDAG, is_performer=True),
        make_guest(3, tickets=1, is_teacher=True, email='t3@school.nl', preferred_emails='t4@school.nl'),
        make_guest(4, tickets=1, is_teacher=True, email='t4@school.nl', preferred_emails='T3@school.nl'),
        make_guest(5, tickets=2, student_number=500, preferred_student_number='600'),
        make_guest(6, tickets=2, student_number=600, preferred_student_number='500'),
        make_guest(7, tickets=4, second=Day.DONDERDAG),
        make_guest(8, tickets=2, first=None),
    ]


class TestAutoAssignSeating:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_full_run(self, roster):
        # Arrange
        store = InMemorySeatingStore(venue=VENUE, settings=AlgorithmSettings(), guests=roster)
        use_case = _build(store)

        # Act
        result = await use_case.auto_assign_seating(guests=roster)

        # Assert: counts
        assert result.placed_count == 7
        assert [(g.guest_id, g.reason) for g in result.unplaced] == [(8, 'no valid preferred day')]
        assert result.preference_count == 2

        # Assert: day totals equal recorded seats and match the matrices
        for day in Day:
            assignment = store.day_assignments[day]
            assert assignment.assigned == sum(r.seats for r in assignment.records)
            assert assignment.assigned <= assignment.capacity
            occupied = sum(
                1 for _, _, cell in store.matrices[day].iter_cells() if cell.guest is not None
            )
            assert occupied == assignment.assigned

        # Assert: everyone on exactly one of their preferred days
        for guest in roster[:7]:
            days = [day for day in Day if store.matrices[day].is_seated(guest.id)]
            assert days == [store.day_assignments.day_of(guest.id)]
            assert days[0] in guest.preferred_days
            assert len(store.matrices[days[0]].seats_of(guest.id)) == guest.ticket_count

        # Assert: pairs side by side
        woensdag = store.matrices[Day.WOENSDAG]
        assert _adjacent(woensdag, 5, 6)
        assert all(woensdag.rows[r][s].together for r, s in woensdag.seats_of(5) + woensdag.seats_of(6))
        assert _adjacent(woensdag, 3, 4)
        assert store.matrices[Day.VRIJDAG].is_seated(2)

        # Assert: run status
        assert store.statuses[0] == {'is_done': False, 'guests_to_process': 8}
        assert store.statuses[-1] == {'is_done': True, 'processed_guests': 8}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_rerun_is_idempotent(self, roster):
        store = InMemorySeatingStore(venue=VENUE, settings=AlgorithmSettings(), guests=roster)
        use_case = _build(store)

        await use_case.auto_assign_seating(guests=roster)
        first_run = {day: guest_grid(store.matrices[day]) for day in Day}
        await use_case.auto_assign_seating(guests=roster)
        second_run = {day: guest_grid(store.matrices[day]) for day in Day}

        assert first_run == second_run
        assert store.day_assignments[Day.WOENSDAG].assigned == sum(
            guest.ticket_count for guest in roster if guest.id in (1, 3, 4, 5, 6, 7)
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_performing_teacher_keeps_colleague_preference(self):
        # Arrange: a teacher who also performs and a colleague who ask for each other
        performer = make_guest(
            1, tickets=1, is_teacher=True, is_performer=True,
            email='p@school.nl', preferred_emails='t@school.nl',
        )
        colleague = make_guest(
            2, tickets=1, is_teacher=True, email='t@school.nl', preferred_emails='p@school.nl'
        )
        guests = [performer, colleague]
        store = InMemorySeatingStore(venue=VENUE, settings=AlgorithmSettings(), guests=guests)
        use_case = _build(store)

        # Act
        result = await use_case.auto_assign_seating(guests=guests)

        # Assert
        assert result.placed_count == 2
        assert result.preference_count == 1
        assert _adjacent(store.matrices[Day.WOENSDAG], performer.id, colleague.id)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_honoree_wins_the_last_seats(self):
        # Arrange: the regular guest registered first, only one group fits
        venue = VenueLayout.from_capacities([4])
        regular = make_guest(1, tickets=4, registered_minute=0)
        honoree = make_guest(2, tickets=4, registered_minute=30, is_honoree=True)
        store = InMemorySeatingStore(venue=venue, settings=AlgorithmSettings(), guests=[regular, honoree])
        use_case = _build(store, venue=venue)

        # Act
        result = await use_case.auto_assign_seating(guests=[regular, honoree])

        # Assert
        assert store.matrices[Day.WOENSDAG].is_seated(honoree.id)
        assert [g.guest_id for g in result.unplaced] == [regular.id]
        assert 'Not enough capacity' in result.unplaced[0].reason

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_second_choice_day_when_first_is_full(self):
        venue = VenueLayout.from_capacities([4])
        early = make_guest(1, tickets=4, registered_minute=0)
        late = make_guest(2, tickets=2, second=Day.DONDERDAG, registered_minute=10)
        store = InMemorySeatingStore(venue=venue, settings=AlgorithmSettings(), guests=[early, late])
        use_case = _build(store, venue=venue)

        result = await use_case.auto_assign_seating(guests=[early, late])

        assert result.placed_count == 2
        assert store.day_assignments.day_of(late.id) == Day.DONDERDAG
        assert [t.assigned for t in result.day_totals] == [4, 2, 0]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_blocked_seats_are_painted_in_and_never_used(self):
        venue = VenueLayout.from_capacities([4])
        guest = make_guest(1, tickets=2)
        blocked = [BlockedSeat(day=Day.WOENSDAG, row=1, seat_number=n) for n in (3, 4)]
        store = InMemorySeatingStore(
            venue=venue, settings=AlgorithmSettings(), guests=[guest], blocked_seats=blocked
        )
        use_case = _build(store, venue=venue)

        result = await use_case.auto_assign_seating(guests=[guest])

        assert result.placed_count == 1
        matrix = store.matrices[Day.WOENSDAG]
        assert guest_grid(matrix) == [[1, 1, None, None]]
        assert matrix.rows[0][2].blocked and matrix.rows[0][3].blocked

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cancelled_conflict_keeps_guest_off_the_second_day(self):
        # Arrange: only blocked seats stand in the way on the first day
        venue = VenueLayout.from_capacities([4])
        guest = make_guest(1, tickets=2, second=Day.DONDERDAG)
        blocked = [BlockedSeat(day=Day.WOENSDAG, row=1, seat_number=n) for n in (2, 3)]
        store = InMemorySeatingStore(
            venue=venue, settings=AlgorithmSettings(), guests=[guest], blocked_seats=blocked
        )
        use_case = _build(store, venue=venue, answers=['cancel'])

        # Act
        result = await use_case.auto_assign_seating(guests=[guest])

        # Assert
        assert result.placed_count == 0
        assert not store.matrices[Day.DONDERDAG].is_seated(guest.id)
        assert 'Blocked seats' in result.unplaced[0].reason

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_conflict_retry_moves_guest_to_second_day(self):
        venue = VenueLayout.from_capacities([4])
        guest = make_guest(1, tickets=2, second=Day.DONDERDAG)
        blocked = [BlockedSeat(day=Day.WOENSDAG, row=1, seat_number=n) for n in (2, 3)]
        store = InMemorySeatingStore(
            venue=venue, settings=AlgorithmSettings(), guests=[guest], blocked_seats=blocked
        )
        use_case = _build(store, venue=venue, answers=['try_second_day'])

        result = await use_case.auto_assign_seating(guests=[guest])

        assert result.placed_count == 1
        assert store.day_assignments.day_of(guest.id) == Day.DONDERDAG

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_store_failure_is_wrapped(self):
        store = AsyncMock(spec=ISeatingStore)
        store.get_settings.side_effect = RuntimeError('connection refused')
        use_case = _build(store)

        with pytest.raises(UnknownSeatingError) as exc_info:
            await use_case.auto_assign_seating(guests=[make_guest(1)])

        assert isinstance(exc_info.value.cause, RuntimeError)
        assert 'connection refused' in exc_info.value.message
