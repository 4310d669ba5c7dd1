"""
Unit tests for SeatAssigner

Test focus:
- One-directional preference: seated next to the target, only the guest is marked together
- Mutual preference: joint block for an unseated pair, both marked together
- Joint relocation never uses a block containing a blocked seat
- VIP occupants are never displaced; regular occupants are re-seated
- Teacher pairs: row order and blocked-seat checks
"""

import pytest

from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.priority_matrix_domain import generate_priority_matrix
from src.service.seating.domain.seat_assigner_domain import SeatAssigner
from src.service.seating.domain.value_object.algorithm_settings import AlgorithmSettings
from src.service.seating.domain.value_object.blocked_seat import BlockedSeat
from src.service.seating.domain.value_object.seat_matrix import SeatBlock
from src.service.seating.domain.value_object.seating_preference import SeatingPreference
from src.service.seating.domain.value_object.venue_layout import VenueLayout
from test.service.seating.seating_test_helpers import FRONT_ROW_SETTINGS, make_guest


def _matrix(capacities, *, blocked_seats=None, settings=FRONT_ROW_SETTINGS):
    return generate_priority_matrix(
        day=Day.WOENSDAG,
        venue=VenueLayout.from_capacities(capacities),
        settings=settings,
        blocked_seats=blocked_seats,
    )


def _adjacent(matrix, first_id, second_id):
    first = matrix.location_of(first_id)
    second = matrix.location_of(second_id)
    if first is None or second is None or first.row_index != second.row_index:
        return False
    return first.start + first.length == second.start or second.start + second.length == first.start


class TestPreferenceSeating:
    @pytest.fixture
    def assigner(self):
        return SeatAssigner(settings=FRONT_ROW_SETTINGS)

    @pytest.mark.unit
    def test_one_directional_preference_sits_next_to_target(self, assigner):
        # Arrange: B already seated in the center of a 10-seat row
        matrix = _matrix([10])
        a = make_guest(1)
        b = make_guest(2)
        matrix.assign_block(SeatBlock(row_index=0, start=4, length=2), b, together=False)
        preference = SeatingPreference(guest=a, preferred_guest=b, is_mutual=False)

        # Act
        outcome = assigner.try_assign_seats(
            matrix, guest=a, ticket_count=2, max_priority=1.8, preferences=[preference]
        )

        # Assert
        assert outcome.success
        assert outcome.block == SeatBlock(row_index=0, start=2, length=2)
        assert _adjacent(matrix, a.id, b.id)
        assert all(matrix.rows[0][i].together for i in (2, 3))
        assert not any(matrix.rows[0][i].together for i in (4, 5))

    @pytest.mark.unit
    def test_mutual_neighbour_marks_both_together(self, assigner):
        matrix = _matrix([10])
        a = make_guest(1)
        b = make_guest(2)
        matrix.assign_block(SeatBlock(row_index=0, start=4, length=2), b, together=False)
        preference = SeatingPreference(guest=a, preferred_guest=b, is_mutual=True)

        outcome = assigner.try_assign_seats(
            matrix, guest=a, ticket_count=2, max_priority=1.8, preferences=[preference]
        )

        assert outcome.success
        assert all(matrix.rows[0][i].together for i in (2, 3, 4, 5))

    @pytest.mark.unit
    def test_unseated_mutual_pair_gets_a_joint_block(self, assigner):
        matrix = _matrix([10])
        a = make_guest(1)
        b = make_guest(2)
        preference = SeatingPreference(guest=a, preferred_guest=b, is_mutual=True)

        outcome = assigner.try_assign_seats(
            matrix,
            guest=a,
            ticket_count=2,
            max_priority=1.8,
            preferences=[preference],
            remaining_capacity=10,
        )

        assert outcome.success
        assert [guest.id for guest in outcome.co_placed] == [b.id]
        assert _adjacent(matrix, a.id, b.id)
        seated = [cell for cell in matrix.rows[0] if cell.guest is not None]
        assert len(seated) == 4
        assert all(cell.together for cell in seated)

    @pytest.mark.unit
    def test_joint_block_requires_capacity_for_both(self, assigner):
        matrix = _matrix([10])
        a = make_guest(1)
        b = make_guest(2)
        preference = SeatingPreference(guest=a, preferred_guest=b, is_mutual=True)

        outcome = assigner.try_assign_seats(
            matrix,
            guest=a,
            ticket_count=2,
            max_priority=1.8,
            preferences=[preference],
            remaining_capacity=3,
        )

        # Falls back to plain seating without the partner
        assert outcome.success
        assert outcome.co_placed == ()
        assert not matrix.is_seated(b.id)
        assert 'capacity' in outcome.preference_note

    @pytest.mark.unit
    def test_target_seated_on_another_day_is_not_relocated(self, assigner):
        matrix = _matrix([10])
        a = make_guest(1)
        b = make_guest(2)
        preference = SeatingPreference(guest=a, preferred_guest=b, is_mutual=True)

        outcome = assigner.try_assign_seats(
            matrix,
            guest=a,
            ticket_count=2,
            max_priority=1.8,
            preferences=[preference],
            seated_guest_ids={b.id},
        )

        assert outcome.success
        assert outcome.co_placed == ()
        assert not matrix.is_seated(b.id)

    @pytest.mark.unit
    def test_joint_block_never_contains_a_blocked_seat(self, assigner):
        # Every 4-seat block of a 5-seat row contains the blocked middle seat
        matrix = _matrix([5], blocked_seats=[BlockedSeat(day=Day.WOENSDAG, row=1, seat_number=3)])
        a = make_guest(1)
        b = make_guest(2)
        preference = SeatingPreference(guest=a, preferred_guest=b, is_mutual=True)

        outcome = assigner.try_assign_seats(
            matrix, guest=a, ticket_count=2, max_priority=100, preferences=[preference]
        )

        assert outcome.co_placed == ()
        assert not matrix.is_seated(b.id)
        assert matrix.rows[0][2].guest is None
        assert matrix.rows[0][2].blocked is True

    @pytest.mark.unit
    def test_vip_skips_guest_preferences(self, assigner):
        matrix = _matrix([10])
        performer = make_guest(1, is_performer=True)
        b = make_guest(2)
        preference = SeatingPreference(guest=performer, preferred_guest=b, is_mutual=True)

        outcome = assigner.try_assign_seats(
            matrix, guest=performer, ticket_count=2, max_priority=10, preferences=[preference]
        )

        assert outcome.success
        assert outcome.co_placed == ()
        assert not matrix.is_seated(b.id)

    @pytest.mark.unit
    def test_already_seated_guest_is_not_seated_twice(self, assigner):
        matrix = _matrix([10])
        a = make_guest(1)
        matrix.assign_block(SeatBlock(row_index=0, start=0, length=2), a, together=False)

        outcome = assigner.try_assign_seats(
            matrix, guest=a, ticket_count=2, max_priority=10, preferences=[]
        )

        assert not outcome.success
        assert len(matrix.seats_of(a.id)) == 2


class TestRelocationWithOccupants:
    @pytest.mark.unit
    def test_relocation_rolls_back_when_occupant_cannot_be_reseated(self):
        # Arrange: both joint blocks displace a group that has nowhere else to go
        assigner = SeatAssigner(settings=FRONT_ROW_SETTINGS)
        matrix = _matrix([4, 4])
        occupant = make_guest(9, tickets=1)
        matrix.assign_block(SeatBlock(row_index=0, start=1, length=1), occupant, together=False)
        matrix.assign_block(SeatBlock(row_index=1, start=0, length=4), make_guest(8, tickets=4), together=False)
        a = make_guest(1)
        b = make_guest(2)
        preference = SeatingPreference(guest=a, preferred_guest=b, is_mutual=True)

        # Act
        outcome = assigner.try_assign_seats(
            matrix, guest=a, ticket_count=2, max_priority=100, preferences=[preference]
        )

        # Assert: nobody moved, A falls back to the free pair of seats on its own
        assert outcome.success
        assert outcome.co_placed == ()
        assert outcome.preference_note
        assert matrix.seats_of(occupant.id) == [(0, 1)]
        assert len(matrix.seats_of(8)) == 4
        assert matrix.seats_of(a.id) == [(0, 2), (0, 3)]
        assert not matrix.is_seated(b.id)

    @pytest.mark.unit
    def test_occupant_moves_when_there_is_room(self):
        assigner = SeatAssigner(settings=FRONT_ROW_SETTINGS)
        matrix = _matrix([4, 4])
        occupant = make_guest(9, tickets=1)
        matrix.assign_block(SeatBlock(row_index=0, start=1, length=1), occupant, together=False)
        matrix.assign_block(SeatBlock(row_index=1, start=0, length=3), make_guest(8, tickets=3), together=False)
        a = make_guest(1)
        b = make_guest(2)
        preference = SeatingPreference(guest=a, preferred_guest=b, is_mutual=True)

        outcome = assigner.try_assign_seats(
            matrix, guest=a, ticket_count=2, max_priority=100, preferences=[preference]
        )

        assert outcome.success
        assert [guest.id for guest in outcome.co_placed] == [b.id]
        assert matrix.seats_of(occupant.id) == [(1, 3)]
        assert {row for row, _ in matrix.seats_of(a.id) + matrix.seats_of(b.id)} == {0}

    @pytest.mark.unit
    def test_vip_occupant_is_never_displaced(self):
        assigner = SeatAssigner(settings=FRONT_ROW_SETTINGS)
        matrix = _matrix([4, 4])
        honoree = make_guest(9, tickets=1, is_honoree=True)
        matrix.assign_block(SeatBlock(row_index=0, start=1, length=1), honoree, together=False)
        matrix.assign_block(SeatBlock(row_index=1, start=0, length=3), make_guest(8, tickets=3), together=False)
        a = make_guest(1)
        b = make_guest(2)
        preference = SeatingPreference(guest=a, preferred_guest=b, is_mutual=True)

        assigner.try_assign_seats(
            matrix, guest=a, ticket_count=2, max_priority=100, preferences=[preference]
        )

        assert matrix.seats_of(honoree.id) == [(0, 1)]
        assert not matrix.is_seated(b.id)


class TestTeacherPairs:
    @pytest.mark.unit
    def test_rows_run_back_to_front_then_around_center(self):
        assigner = SeatAssigner(settings=AlgorithmSettings())

        assert assigner.teacher_pair_rows() == [8, 7, 6, 5, 4]

    @pytest.mark.unit
    def test_pair_is_seated_side_by_side_in_the_first_row(self):
        assigner = SeatAssigner(settings=AlgorithmSettings())
        matrix = _matrix([10] * 8, settings=AlgorithmSettings())
        first = make_guest(1, tickets=1, is_teacher=True)
        second = make_guest(2, tickets=1, is_teacher=True)

        block = assigner.try_assign_teacher_pair(matrix, first=first, second=second)

        assert block == SeatBlock(row_index=7, start=4, length=2)
        assert matrix.seats_of(first.id) == [(7, 4)]
        assert matrix.seats_of(second.id) == [(7, 5)]
        assert matrix.rows[7][4].together and matrix.rows[7][5].together

    @pytest.mark.unit
    def test_pair_avoids_blocked_seats(self):
        assigner = SeatAssigner(settings=AlgorithmSettings())
        matrix = _matrix(
            [10] * 8,
            settings=AlgorithmSettings(),
            blocked_seats=[BlockedSeat(day=Day.WOENSDAG, row=8, seat_number=5)],
        )
        first = make_guest(1, tickets=1, is_teacher=True)
        second = make_guest(2, tickets=1, is_teacher=True)

        block = assigner.try_assign_teacher_pair(matrix, first=first, second=second)

        assert block == SeatBlock(row_index=7, start=5, length=2)
        assert matrix.rows[7][4].guest is None

    @pytest.mark.unit
    def test_seated_teacher_is_not_paired_again(self):
        assigner = SeatAssigner(settings=AlgorithmSettings())
        matrix = _matrix([10] * 8, settings=AlgorithmSettings())
        first = make_guest(1, tickets=1, is_teacher=True)
        second = make_guest(2, tickets=1, is_teacher=True)
        matrix.assign_block(SeatBlock(row_index=0, start=0, length=1), first, together=False)

        assert assigner.try_assign_teacher_pair(matrix, first=first, second=second) is None
