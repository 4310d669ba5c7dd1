"""
Place Guest On Day Use Case - single-guest placement with threshold escalation
"""

from typing import Container, Iterator, Optional

from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.seating.app.command.resolve_blocked_seat_conflict_use_case import (
    ResolveBlockedSeatConflictUseCase,
)
from src.service.seating.app.dto.placement_dto import PlacementResult, SeatingContext
from src.service.seating.app.interface.i_seating_store import ISeatingStore
from src.service.seating.domain.entity.guest_entity import Guest
from src.service.seating.domain.enum.conflict import ConflictChoice
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.seat_assigner_domain import AssignOutcome, SeatAssigner
from src.service.seating.domain.seating_error import (
    BlockedSeatConflictError,
    CapacityError,
    PreferenceConflictError,
    SeatingError,
    SeatingErrorCode,
)
from src.service.seating.domain.value_object.seat_matrix import SeatMatrix
from src.service.seating.domain.value_object.threshold_policy import EscalationPolicy


class PlaceGuestOnDayUseCase:
    """
    Place one guest on one day.

    Flow:
    1. Capacity check (hard failure, nothing is touched)
    2. Load the day matrix
    3. Escalate thresholds:
       - VIP on a preferred day: ideal band ± deviation, then the whole hall
       - everyone else: standard sequence scaled by the day multiplier
    4. Persist matrix + record assignment on success
    5. Otherwise hand over to the blocked-seat conflict protocol

    Dependencies:
    - seating_store: day matrices and blocked seats
    - resolve_conflict_use_case: operator-driven blocked-seat conflicts
    """

    def __init__(
        self,
        *,
        seating_store: ISeatingStore,
        resolve_conflict_use_case: ResolveBlockedSeatConflictUseCase,
    ) -> None:
        self.seating_store = seating_store
        self.resolve_conflict_use_case = resolve_conflict_use_case
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def place_guest_on_day(
        self, *, guest: Guest, day: Day, context: SeatingContext
    ) -> PlacementResult:
        with self.tracer.start_as_current_span(
            'use_case.place_guest_on_day',
            attributes={
                'guest.id': guest.id,
                'guest.tier': guest.tier.name,
                'guest.ticket_count': guest.ticket_count,
                'seating.day': str(day),
            },
        ):
            # ========== Step 1: Capacity ==========
            assignment = context.day_assignments[day]
            if not assignment.can_fit(guest.ticket_count):
                error = CapacityError(
                    day=day, requested=guest.ticket_count, remaining=assignment.remaining
                )
                Logger.base.warning(f'🚫 [PLACE] {guest.full_name}: {error.message}')
                return PlacementResult.failed(day, error)

            # ========== Step 2: Load matrix ==========
            matrix = await self.seating_store.get_seats_for_day(day=day)
            assigner = SeatAssigner(settings=context.settings, policy=context.policy)

            # ========== Step 3: Escalate ==========
            outcome = self._escalate(
                assigner, matrix, guest=guest, day=day, context=context
            )

            # ========== Step 4: Commit ==========
            if outcome.success:
                return await self._commit(matrix, guest=guest, day=day, outcome=outcome, context=context)

            # ========== Step 5: Blocked-seat conflict ==========
            return await self._resolve_conflict(matrix, guest=guest, day=day, context=context)

    def _escalation_steps(
        self, *, guest: Guest, day: Day, context: SeatingContext
    ) -> Iterator[tuple[float, Optional[Container[int]]]]:
        """Yield (threshold, allowed rows) in the order they are tried."""
        policy = context.policy
        last_day_performer = (
            guest.is_performer and guest.first_choice_day == Day.last() and day == Day.last()
        )

        def sequence(escalation: EscalationPolicy) -> list[float]:
            if last_day_performer:
                return escalation.thresholds_from(policy.last_day_performer_start)
            return escalation.thresholds()

        if guest.is_vip and day in guest.preferred_days:
            vip_band = context.settings.vip_row_band
            for threshold in sequence(policy.vip_restricted):
                yield threshold, vip_band
            for threshold in sequence(policy.vip_broadened):
                yield threshold, None
            return

        multiplier = policy.day_multiplier(
            is_performer=guest.is_performer,
            day=day,
            first_choice=guest.first_choice_day,
            second_choice=guest.second_choice_day,
        )
        for threshold in sequence(policy.standard):
            yield threshold * multiplier, None

    def _escalate(
        self,
        assigner: SeatAssigner,
        matrix: SeatMatrix,
        *,
        guest: Guest,
        day: Day,
        context: SeatingContext,
    ) -> AssignOutcome:
        remaining = context.day_assignments[day].remaining
        preferences = context.preferences_for(guest)
        note: Optional[str] = None

        for threshold, allowed_rows in self._escalation_steps(guest=guest, day=day, context=context):
            outcome = assigner.try_assign_seats(
                matrix,
                guest=guest,
                ticket_count=guest.ticket_count,
                max_priority=threshold,
                preferences=preferences,
                allowed_rows=allowed_rows,
                seated_guest_ids=context.seated_guest_ids,
                remaining_capacity=remaining,
            )
            if outcome.success:
                Logger.base.debug(
                    f'🎚️ [PLACE] {guest.full_name} placed at threshold {threshold:g} on {day}'
                )
                return outcome
            note = outcome.preference_note or note

        return AssignOutcome.failed(note)

    async def _commit(
        self,
        matrix: SeatMatrix,
        *,
        guest: Guest,
        day: Day,
        outcome: AssignOutcome,
        context: SeatingContext,
    ) -> PlacementResult:
        assignment = context.day_assignments[day]
        assignment.record(guest_id=guest.id, seats=guest.ticket_count, day=day)
        context.mark_seated(guest.id)
        for partner in outcome.co_placed:
            assignment.record(guest_id=partner.id, seats=partner.ticket_count, day=day)
            context.mark_seated(partner.id)

        await self.seating_store.set_seats_for_day(day=day, matrix=matrix)

        row = outcome.block.row_number if outcome.block else '?'
        Logger.base.info(
            f'🪑 [PLACE] {guest.full_name} ({guest.ticket_count}) → {day}, row {row}'
        )

        warnings: tuple[SeatingError, ...] = ()
        if outcome.preference_note:
            Logger.base.warning(f'💔 [PREFERENCE] {guest.full_name}: {outcome.preference_note}')
            warnings = (PreferenceConflictError(outcome.preference_note),)

        return PlacementResult.placed(
            day,
            warnings=warnings,
            co_placed_guest_ids=tuple(partner.id for partner in outcome.co_placed),
        )

    async def _resolve_conflict(
        self, matrix: SeatMatrix, *, guest: Guest, day: Day, context: SeatingContext
    ) -> PlacementResult:
        conflict = await self.resolve_conflict_use_case.resolve(
            guest=guest, day=day, matrix=matrix, context=context
        )

        if conflict.success:
            return PlacementResult.placed(
                day,
                used_blocked_seats=conflict.choice is ConflictChoice.USE_BLOCKED,
                unplaced_guest_ids=conflict.unplaced_guest_ids,
            )

        if not conflict.applicable:
            return PlacementResult.failed(
                day,
                SeatingError(
                    f'No seats found for {guest.full_name} on {day}',
                    code=SeatingErrorCode.NO_SEATS_FOUND,
                    solution='Try another day or lower the number of tickets',
                ),
            )

        error = BlockedSeatConflictError(f'Blocked seats prevent seating {guest.full_name} on {day}')
        return PlacementResult.failed(day, error, retry_second_day=conflict.retry_second_day)

    # ========== Teacher pairs ==========

    @Logger.io
    async def place_teacher_pair(
        self, *, first: Guest, second: Guest, context: SeatingContext
    ) -> Optional[PlacementResult]:
        """
        Seat a mutual teacher pair as one unit.

        Shared first-choice day first, then any shared preferred day.
        Returns None when no day could take the pair.
        """
        if first.id in context.seated_guest_ids or second.id in context.seated_guest_ids:
            return None

        days: list[Day] = []
        if first.first_choice_day is not None and first.first_choice_day == second.first_choice_day:
            days.append(first.first_choice_day)
        days.extend(day for day in first.preferred_days if day in second.preferred_days and day not in days)

        total = first.ticket_count + second.ticket_count
        assigner = SeatAssigner(settings=context.settings, policy=context.policy)
        for day in days:
            assignment = context.day_assignments[day]
            if not assignment.can_fit(total):
                continue
            matrix = await self.seating_store.get_seats_for_day(day=day)
            block = assigner.try_assign_teacher_pair(matrix, first=first, second=second)
            if block is None:
                continue

            assignment.record(guest_id=first.id, seats=first.ticket_count, day=day)
            assignment.record(guest_id=second.id, seats=second.ticket_count, day=day)
            context.mark_seated(first.id, second.id)
            await self.seating_store.set_seats_for_day(day=day, matrix=matrix)

            Logger.base.info(
                f'👩‍🏫 [TEACHERS] {first.full_name} + {second.full_name} → {day}, row {block.row_number}'
            )
            return PlacementResult.placed(day, co_placed_guest_ids=(second.id,))

        Logger.base.info(
            f'👩‍🏫 [TEACHERS] no shared block for {first.full_name} + {second.full_name}, placing individually'
        )
        return None
