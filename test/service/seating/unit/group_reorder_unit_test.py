"""
Unit tests for group reordering helpers

Test focus:
- Which seated groups count as movable (size ratio, first-choice rule, VIPs)
- Exact-fill combinations and the smallest covering window fallback
"""

import pytest

from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.group_reorder_domain import (
    MovableGroup,
    find_group_combination,
    movable_groups,
)
from src.service.seating.domain.value_object.seat_matrix import SeatBlock, SeatMatrix
from src.service.seating.domain.value_object.venue_layout import VenueLayout
from test.service.seating.seating_test_helpers import make_guest


def _group(guest_id, seats, *, on_first_choice_day=False):
    return MovableGroup(
        guest=make_guest(guest_id, tickets=seats), seats=seats, on_first_choice_day=on_first_choice_day
    )


class TestMovableGroups:
    @pytest.mark.unit
    def test_movable_groups_are_filtered_and_ordered(self):
        # Arrange: one 30-seat row, guests packed from the left
        matrix = SeatMatrix.empty(day=Day.WOENSDAG, venue=VenueLayout.from_capacities([30]))
        seated = [
            make_guest(1, tickets=2, first=Day.WOENSDAG),  # first choice, tiny: movable
            make_guest(2, tickets=4, first=Day.WOENSDAG),  # first choice, too big
            make_guest(3, tickets=3, first=Day.DONDERDAG),  # movable
            make_guest(4, tickets=1, first=Day.DONDERDAG),  # movable
            make_guest(5, tickets=1, first=Day.DONDERDAG, is_honoree=True),  # VIP
            make_guest(6, tickets=7, first=Day.DONDERDAG),  # larger than 1.5x the need
        ]
        start = 0
        for guest in seated:
            matrix.assign_block(
                SeatBlock(row_index=0, start=start, length=guest.ticket_count), guest, together=False
            )
            start += guest.ticket_count

        # Act
        groups = movable_groups(matrix, ticket_count=4)

        # Assert: second-choice groups first, then by size
        assert [(g.guest.id, g.seats, g.on_first_choice_day) for g in groups] == [
            (4, 1, False),
            (3, 3, False),
            (1, 2, True),
        ]


class TestFindGroupCombination:
    @pytest.mark.unit
    def test_exact_fill_from_the_first_start(self):
        groups = [_group(1, 1), _group(2, 3), _group(3, 2, on_first_choice_day=True)]

        chosen = find_group_combination(groups, target=4)

        assert [g.guest.id for g in chosen] == [1, 2]

    @pytest.mark.unit
    def test_exact_fill_from_a_later_start(self):
        groups = [_group(1, 1), _group(2, 3), _group(3, 2, on_first_choice_day=True)]

        chosen = find_group_combination(groups, target=5)

        assert [g.guest.id for g in chosen] == [2, 3]

    @pytest.mark.unit
    def test_smallest_covering_window_when_no_exact_fill(self):
        groups = [_group(1, 3), _group(2, 3), _group(3, 5)]

        chosen = find_group_combination(groups, target=4)

        assert [g.guest.id for g in chosen] == [3]

    @pytest.mark.unit
    def test_max_groups_limits_the_exact_search(self):
        groups = [_group(1, 1), _group(2, 1), _group(3, 2)]

        chosen = find_group_combination(groups, target=4, max_groups=2)

        # Exact fill needs all three; the window fallback still covers the need
        assert sum(g.seats for g in chosen) >= 4

    @pytest.mark.unit
    def test_none_when_groups_cannot_cover_the_need(self):
        assert find_group_combination([_group(1, 1), _group(2, 1)], target=3) is None
        assert find_group_combination([], target=1) is None
