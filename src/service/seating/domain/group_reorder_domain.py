"""
Group reordering helpers for the blocked-seat conflict protocol.

Small, non-VIP groups already seated on the day may be lifted out to make room
for a guest. Groups sitting on their second-choice day are moved first, then
the smallest.
"""

from typing import Optional

import attrs

from src.service.seating.domain.entity.guest_entity import Guest
from src.service.seating.domain.value_object.seat_matrix import SeatMatrix


MAX_GROUP_RATIO = 1.5  # a movable group holds at most 1.5x the seats needed
FIRST_CHOICE_MAX_GROUP = 3  # groups on their first-choice day move only when tiny
WINDOW_LIMIT = 8
EXTENDED_GROUP_LIMIT = 16


@attrs.define(frozen=True)
class MovableGroup:
    guest: Guest
    seats: int
    on_first_choice_day: bool


def movable_groups(matrix: SeatMatrix, *, ticket_count: int) -> list[MovableGroup]:
    groups: list[MovableGroup] = []
    for guest in matrix.seated_guests():
        if guest.is_vip:
            continue
        seats = len(matrix.seats_of(guest.id))
        if seats > ticket_count * MAX_GROUP_RATIO:
            continue
        on_first_choice = guest.first_choice_day == matrix.day
        if on_first_choice and seats > FIRST_CHOICE_MAX_GROUP:
            continue
        groups.append(MovableGroup(guest=guest, seats=seats, on_first_choice_day=on_first_choice))

    groups.sort(key=lambda group: (group.on_first_choice_day, group.seats))
    return groups


def find_group_combination(
    groups: list[MovableGroup], *, target: int, max_groups: int = 12
) -> Optional[list[MovableGroup]]:
    """
    Pick groups whose seats together cover `target`.

    First an exact fill over the first `max_groups` groups, greedily from each
    starting point. Failing that, the contiguous window (up to 8 groups) over
    a longer list with the smallest total that still covers the need.
    """
    candidates = groups[:max_groups]
    for start in range(len(candidates)):
        chosen: list[MovableGroup] = []
        size = 0
        for group in candidates[start:]:
            if size + group.seats <= target:
                chosen.append(group)
                size += group.seats
                if size == target:
                    return chosen

    extended = groups[: max(max_groups, EXTENDED_GROUP_LIMIT)]
    best: Optional[list[MovableGroup]] = None
    best_size = 0
    for width in range(1, WINDOW_LIMIT + 1):
        for start in range(len(extended) - width + 1):
            window = extended[start : start + width]
            size = sum(group.seats for group in window)
            if size >= target and (best is None or size < best_size):
                best, best_size = window, size
    return best
