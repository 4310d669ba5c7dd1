"""
Plain seat selection.

For every row the finder starts at the block centered in the row and probes
outward, alternating left and right. A block qualifies when all its seats
are free and unblocked and its average priority is within the threshold.
Ground-floor and balcony candidates are ranked separately by score; balcony
candidates are used only when the ground floor is full enough or offers
nothing.
"""

from typing import Container, Iterator, Optional

import attrs

from src.service.seating.domain.entity.guest_entity import Guest
from src.service.seating.domain.value_object.algorithm_settings import AlgorithmSettings
from src.service.seating.domain.value_object.seat_matrix import SeatBlock, SeatMatrix


BASE_SCORE = 100
IDEAL_ROW_BONUS = 50
IDEAL_ROW_DISTANCE_PENALTY = 5
OUTSIDE_ROW_DISTANCE_PENALTY = 10
CENTER_DISTANCE_PENALTY = 5
OFFSET_PENALTY = 10


@attrs.define(frozen=True)
class SeatCandidate:
    block: SeatBlock
    score: float
    average_priority: float
    is_balcony: bool
    offset: int = 0


def calculate_seat_score(
    *, row_number: int, seat_index: int, row_length: int, settings: AlgorithmSettings, is_balcony: bool
) -> float:
    """Desirability of a block starting at `seat_index`; higher is better, never below 0."""
    score: float = BASE_SCORE
    if is_balcony:
        score -= settings.balcony_penalty

    if settings.in_ideal_band(row_number):
        score += IDEAL_ROW_BONUS
        score -= abs(row_number - settings.ideal_center_row) * IDEAL_ROW_DISTANCE_PENALTY
    else:
        distance = min(
            abs(row_number - settings.ideal_row_start), abs(row_number - settings.ideal_row_end)
        )
        score -= distance * OUTSIDE_ROW_DISTANCE_PENALTY

    if settings.prefer_center_seats:
        score -= abs(seat_index - row_length // 2) * CENTER_DISTANCE_PENALTY

    return max(0.0, score)


def centered_start(row_length: int, ticket_count: int) -> int:
    return row_length // 2 - ticket_count // 2


def radiate_from_center(row_length: int, ticket_count: int) -> Iterator[tuple[int, int]]:
    """Yield (offset, start) pairs: center first, then left/right alternating."""
    if ticket_count > row_length:
        return
    center = centered_start(row_length, ticket_count)
    yield 0, center
    for offset in range(1, max(center, row_length - ticket_count - center) + 1):
        if center - offset >= 0:
            yield offset, center - offset
        if center + offset + ticket_count <= row_length:
            yield offset, center + offset


def count_orphaned_seats(matrix: SeatMatrix, block: SeatBlock) -> int:
    """Free seats that would be left isolated (a run of exactly one) next to the block."""
    row = matrix.rows[block.row_index]

    def is_free(index: int) -> bool:
        return 0 <= index < len(row) and row[index].is_free

    orphans = 0
    left, right = block.start - 1, block.start + block.length
    if is_free(left) and not is_free(left - 1):
        orphans += 1
    if is_free(right) and not is_free(right + 1):
        orphans += 1
    return orphans


def score_block(
    matrix: SeatMatrix, block: SeatBlock, *, guest: Guest, settings: AlgorithmSettings, offset: int = 0
) -> float:
    is_balcony = matrix.is_balcony(block.row_index)
    score = calculate_seat_score(
        row_number=block.row_number,
        seat_index=block.start,
        row_length=len(matrix.rows[block.row_index]),
        settings=settings,
        is_balcony=is_balcony,
    )
    score -= offset * OFFSET_PENALTY
    score -= count_orphaned_seats(matrix, block) * settings.orphan_seat_penalty
    if guest.is_vip and is_balcony:
        score -= settings.balcony_penalty * 2
    return score


def find_seat_candidates(
    matrix: SeatMatrix,
    *,
    guest: Guest,
    ticket_count: int,
    max_priority: float,
    settings: AlgorithmSettings,
    allowed_rows: Optional[Container[int]] = None,
) -> list[SeatCandidate]:
    ground_floor: list[SeatCandidate] = []
    balcony: list[SeatCandidate] = []

    for row_index, row in enumerate(matrix.rows):
        if allowed_rows is not None and row_index + 1 not in allowed_rows:
            continue
        for offset, start in radiate_from_center(len(row), ticket_count):
            block = SeatBlock(row_index=row_index, start=start, length=ticket_count)
            if not matrix.block_is_free(block):
                continue
            average = matrix.average_priority(block)
            if average > max_priority:
                continue
            candidate = SeatCandidate(
                block=block,
                score=score_block(matrix, block, guest=guest, settings=settings, offset=offset),
                average_priority=average,
                is_balcony=matrix.is_balcony(row_index),
                offset=offset,
            )
            (balcony if candidate.is_balcony else ground_floor).append(candidate)

    # sort is stable: equal scores keep row-major, center-out order
    ground_floor.sort(key=lambda c: -c.score)
    balcony.sort(key=lambda c: -c.score)

    use_balcony = (
        not ground_floor
        or matrix.occupancy(ground_floor_only=True) >= settings.use_balcony_threshold
    )
    return ground_floor + balcony if use_balcony else ground_floor


def try_normal_seating(
    matrix: SeatMatrix,
    *,
    guest: Guest,
    ticket_count: int,
    max_priority: float,
    settings: AlgorithmSettings,
    allowed_rows: Optional[Container[int]] = None,
) -> Optional[SeatBlock]:
    """Seat `guest` on the best qualifying block; returns the block or None."""
    for candidate in find_seat_candidates(
        matrix,
        guest=guest,
        ticket_count=ticket_count,
        max_priority=max_priority,
        settings=settings,
        allowed_rows=allowed_rows,
    ):
        # Re-validate at commit time, group logic may have moved people meanwhile
        if matrix.block_is_free(candidate.block):
            matrix.assign_block(candidate.block, guest, together=False)
            return candidate.block
    return None
