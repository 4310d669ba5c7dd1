"""
Seat Assigner - matrix-level placement for one guest at one threshold.

Dispatch:
    no recorded preference, or VIP → plain seating (teachers still seek colleagues)
    preference, shared first day   → next to the preferred guest, or a joint
                                     block for both, or (mutual only) move
                                     other groups out of the way
    anything else                  → plain seating

Every displacement runs inside a SeatMatrixTransaction and is committed only
when every displaced group found a new seat.
"""

from typing import AbstractSet, Container, Optional

import attrs

from src.platform.logging.loguru_io import Logger
from src.service.seating.domain.entity.guest_entity import Guest
from src.service.seating.domain.seat_finder_domain import score_block, try_normal_seating
from src.service.seating.domain.value_object.algorithm_settings import AlgorithmSettings
from src.service.seating.domain.value_object.seat_matrix import SeatBlock, SeatMatrix
from src.service.seating.domain.value_object.seating_preference import SeatingPreference
from src.service.seating.domain.value_object.threshold_policy import (
    DEFAULT_THRESHOLD_POLICY,
    ThresholdPolicy,
)


@attrs.define(frozen=True)
class AssignOutcome:
    success: bool
    block: Optional[SeatBlock] = None
    co_placed: tuple[Guest, ...] = ()  # preferred guests seated in the same move
    preference_note: Optional[str] = None  # why the preference could not be honored

    @classmethod
    def failed(cls, note: Optional[str] = None) -> 'AssignOutcome':
        return cls(success=False, preference_note=note)


class SeatAssigner:
    def __init__(
        self, *, settings: AlgorithmSettings, policy: ThresholdPolicy = DEFAULT_THRESHOLD_POLICY
    ) -> None:
        self.settings = settings
        self.policy = policy

    def try_assign_seats(
        self,
        matrix: SeatMatrix,
        *,
        guest: Guest,
        ticket_count: int,
        max_priority: float,
        preferences: list[SeatingPreference],
        allowed_rows: Optional[Container[int]] = None,
        seated_guest_ids: AbstractSet[int] = frozenset(),
        remaining_capacity: Optional[int] = None,
    ) -> AssignOutcome:
        if matrix.is_seated(guest.id):
            return AssignOutcome.failed()

        threshold = max_priority * self.policy.tier_factor(guest.tier)
        preference = next((p for p in preferences if p.guest.id == guest.id), None)

        note: Optional[str] = None
        if self._honors_preference(guest, preference):
            allowance = self.policy.preference_allowance
            if preference.is_teacher_preference:
                allowance *= self.settings.teacher_preference_weight
            outcome = self._try_preference(
                matrix,
                guest=guest,
                ticket_count=ticket_count,
                preference=preference,
                max_priority=threshold * allowance,
                seated_guest_ids=seated_guest_ids,
                remaining_capacity=remaining_capacity,
            )
            if outcome.success:
                return outcome
            note = outcome.preference_note

        block = try_normal_seating(
            matrix,
            guest=guest,
            ticket_count=ticket_count,
            max_priority=threshold,
            settings=self.settings,
            allowed_rows=allowed_rows,
        )
        if block is None:
            return AssignOutcome.failed(note)
        return AssignOutcome(success=True, block=block, preference_note=note)

    # ========== Preference-aware placement ==========

    def _honors_preference(self, guest: Guest, preference: Optional[SeatingPreference]) -> bool:
        """VIPs skip preference seating, except teachers asking for a colleague."""
        if preference is None or not self.settings.prioritize_preferences:
            return False
        return not guest.is_vip or preference.is_teacher_preference

    def _try_preference(
        self,
        matrix: SeatMatrix,
        *,
        guest: Guest,
        ticket_count: int,
        preference: SeatingPreference,
        max_priority: float,
        seated_guest_ids: AbstractSet[int],
        remaining_capacity: Optional[int],
    ) -> AssignOutcome:
        target = preference.preferred_guest
        if not (guest.first_choice_day == matrix.day == target.first_choice_day):
            return AssignOutcome.failed(
                f'{guest.full_name} and {target.full_name} do not share {matrix.day} as first choice'
            )

        allowance = max_priority * (self.policy.mutual_allowance if preference.is_mutual else 1)
        target_block = matrix.location_of(target.id)

        if target_block is not None:
            block = self._free_block_next_to(
                matrix, target_block=target_block, ticket_count=ticket_count, max_priority=allowance
            )
            if block is not None:
                matrix.assign_block(block, guest, together=True)
                if preference.is_mutual:
                    matrix.mark_together(target.id)
                Logger.base.info(
                    f'💑 [PREFERENCE] {guest.full_name} seated next to {target.full_name} '
                    f'(row {block.row_number})'
                )
                return AssignOutcome(success=True, block=block)

            if preference.is_mutual:
                block = self._move_others_next_to(
                    matrix,
                    guest=guest,
                    target=target,
                    target_block=target_block,
                    ticket_count=ticket_count,
                    max_priority=allowance * self.policy.move_others_allowance,
                )
                if block is not None:
                    return AssignOutcome(success=True, block=block)
            return AssignOutcome.failed(f'no room next to {target.full_name}')

        if target.id in seated_guest_ids:
            return AssignOutcome.failed(f'{target.full_name} is already seated on another day')
        if remaining_capacity is not None and ticket_count + target.ticket_count > remaining_capacity:
            return AssignOutcome.failed(f'not enough capacity left to seat {target.full_name} as well')

        block = self._relocate_pair(
            matrix,
            guest=guest,
            preference=preference,
            ticket_count=ticket_count,
            max_priority=allowance,
        )
        if block is None:
            return AssignOutcome.failed(f'no joint block found for {guest.full_name} and {target.full_name}')
        return AssignOutcome(success=True, block=block, co_placed=(target,))

    def _free_block_next_to(
        self, matrix: SeatMatrix, *, target_block: SeatBlock, ticket_count: int, max_priority: float
    ) -> Optional[SeatBlock]:
        for block in self._neighbour_blocks(target_block, ticket_count):
            if not matrix.block_fits(block) or matrix.block_has_blocked_seat(block):
                continue
            if matrix.block_is_free(block) and matrix.average_priority(block) <= max_priority:
                return block
        return None

    @staticmethod
    def _neighbour_blocks(target_block: SeatBlock, ticket_count: int) -> list[SeatBlock]:
        return [
            SeatBlock(
                row_index=target_block.row_index,
                start=target_block.start - ticket_count,
                length=ticket_count,
            ),
            SeatBlock(
                row_index=target_block.row_index,
                start=target_block.start + target_block.length,
                length=ticket_count,
            ),
        ]

    def _occupants(self, matrix: SeatMatrix, block: SeatBlock) -> list[Guest]:
        seen: dict[int, Guest] = {}
        for cell in matrix.cells(block):
            if cell.guest is not None:
                seen.setdefault(cell.guest.id, cell.guest)
        return list(seen.values())

    def _reseat_displaced(self, scratch: SeatMatrix, displaced: dict[int, tuple[Guest, int]], max_priority: float) -> bool:
        reseat_threshold = max_priority * self.policy.displaced_reseat_allowance
        for moved_guest, seats in displaced.values():
            if try_normal_seating(
                scratch,
                guest=moved_guest,
                ticket_count=seats,
                max_priority=reseat_threshold,
                settings=self.settings,
            ) is None:
                Logger.base.debug(f'🔁 [RELOCATE] could not re-seat {moved_guest.full_name}')
                return False
        return True

    def _relocate_pair(
        self,
        matrix: SeatMatrix,
        *,
        guest: Guest,
        preference: SeatingPreference,
        ticket_count: int,
        max_priority: float,
    ) -> Optional[SeatBlock]:
        """Find a joint block for guest + preferred guest, moving at most a few non-VIP groups."""
        target = preference.preferred_guest
        total = ticket_count + target.ticket_count

        options: list[tuple[int, float, SeatBlock, list[Guest]]] = []
        for row_index, row in enumerate(matrix.rows):
            for start in range(0, len(row) - total + 1):
                block = SeatBlock(row_index=row_index, start=start, length=total)
                if matrix.block_has_blocked_seat(block):
                    continue
                if matrix.average_priority(block) > max_priority:
                    continue
                occupants = self._occupants(matrix, block)
                score = score_block(matrix, block, guest=guest, settings=self.settings)
                options.append((len(occupants), score, block, occupants))

        options.sort(key=lambda option: (option[0], -option[1]))

        for moves, _, block, occupants in options:
            if moves > self.settings.max_moves_for_preference:
                break
            if any(occupant.is_vip for occupant in occupants):
                continue

            with matrix.transaction() as tx:
                displaced = {
                    occupant.id: (occupant, tx.scratch.remove_guest(occupant.id))
                    for occupant in occupants
                }
                target_part = SeatBlock(row_index=block.row_index, start=block.start, length=target.ticket_count)
                guest_part = SeatBlock(
                    row_index=block.row_index,
                    start=block.start + target.ticket_count,
                    length=ticket_count,
                )
                tx.scratch.assign_block(target_part, target, together=preference.is_mutual)
                tx.scratch.assign_block(guest_part, guest, together=True)

                if not self._reseat_displaced(tx.scratch, displaced, max_priority):
                    continue
                tx.commit()

            Logger.base.info(
                f'🔁 [RELOCATE] {guest.full_name} + {target.full_name} seated together in '
                f'row {block.row_number} ({moves} group(s) moved)'
            )
            return guest_part
        return None

    def _move_others_next_to(
        self,
        matrix: SeatMatrix,
        *,
        guest: Guest,
        target: Guest,
        target_block: SeatBlock,
        ticket_count: int,
        max_priority: float,
    ) -> Optional[SeatBlock]:
        """Mutual pairs only: displace non-VIP groups sitting right next to the preferred guest."""
        for block in self._neighbour_blocks(target_block, ticket_count):
            if not matrix.block_fits(block) or matrix.block_has_blocked_seat(block):
                continue
            if matrix.average_priority(block) > max_priority:
                continue
            occupants = self._occupants(matrix, block)
            if not occupants or any(occupant.is_vip for occupant in occupants):
                continue

            with matrix.transaction() as tx:
                displaced = {
                    occupant.id: (occupant, tx.scratch.remove_guest(occupant.id))
                    for occupant in occupants
                }
                tx.scratch.assign_block(block, guest, together=True)
                tx.scratch.mark_together(target.id)
                if not self._reseat_displaced(tx.scratch, displaced, max_priority):
                    continue
                tx.commit()

            Logger.base.info(
                f'🔁 [MOVE] moved {len(occupants)} group(s) to seat {guest.full_name} '
                f'next to {target.full_name}'
            )
            return block
        return None

    # ========== Teacher pairs ==========

    def teacher_pair_rows(self) -> list[int]:
        """Ideal band shifted two rows back (back-to-front), then rows around its center."""
        start, end = self.settings.ideal_row_start + 2, self.settings.ideal_row_end + 2
        rows = list(range(end, start - 1, -1))
        center = (start + end) // 2
        for offset in range(1, self.settings.max_vip_row_deviation + 1):
            for row_number in (center + offset, center - offset):
                if row_number >= 1 and row_number not in rows:
                    rows.append(row_number)
        return rows

    def try_assign_teacher_pair(
        self, matrix: SeatMatrix, *, first: Guest, second: Guest
    ) -> Optional[SeatBlock]:
        if matrix.is_seated(first.id) or matrix.is_seated(second.id):
            return None

        total = first.ticket_count + second.ticket_count
        for row_number in self.teacher_pair_rows():
            row_index = row_number - 1
            if row_index >= len(matrix.rows):
                continue
            row_length = len(matrix.rows[row_index])
            center, half = row_length // 2, total // 2
            for offset in range(center + 1):
                for start in (center - half - offset, center + offset):
                    block = SeatBlock(row_index=row_index, start=start, length=total)
                    if not matrix.block_is_free(block):
                        continue
                    matrix.assign_block(
                        SeatBlock(row_index=row_index, start=start, length=first.ticket_count),
                        first,
                        together=True,
                    )
                    matrix.assign_block(
                        SeatBlock(
                            row_index=row_index,
                            start=start + first.ticket_count,
                            length=second.ticket_count,
                        ),
                        second,
                        together=True,
                    )
                    return block
        return None
