"""
Blocked-Seat Conflict Protocol

Entered when a guest could not be placed after full threshold escalation.
The session is a small state machine that suspends on operator decisions:

    CHECKING ──► AWAITING_CHOICE ──► TRY_SECOND_DAY
                      │  ├──────────► CANCELLED
                      │  ├──► TRYING_BLOCKED ──► RESOLVED | CANCELLED
                      │  └──► REORDERING ──────► RESOLVED | CANCELLED
                      ▼
    (not a blocked-seat conflict) ──► CANCELLED (not applicable)

`start()` / `resume(answer)` return either a PendingDecision (ask the
operator, then call `resume`) or a terminal ConflictOutcome. Nothing is
written to the matrix, the registry or the day totals until an action is
confirmed and its trial succeeded.
"""

from typing import Optional, Union

from src.platform.logging.loguru_io import Logger
from src.service.seating.app.dto.conflict_dto import ConflictOutcome, DecisionPrompt, PendingDecision
from src.service.seating.app.dto.placement_dto import SeatingContext
from src.service.seating.app.interface.i_operator_prompt import IOperatorPrompt
from src.service.seating.app.interface.i_seating_store import ISeatingStore
from src.service.seating.domain.entity.guest_entity import Guest
from src.service.seating.domain.enum.conflict import ConflictChoice, ConflictState, Confirmation
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.group_reorder_domain import (
    MovableGroup,
    find_group_combination,
    movable_groups,
)
from src.service.seating.domain.seat_assigner_domain import SeatAssigner
from src.service.seating.domain.value_object.seat_matrix import SeatMatrix, SeatMatrixTransaction


ConflictStep = Union[PendingDecision, ConflictOutcome]

_CHOICE_LABELS = {
    ConflictChoice.TRY_SECOND_DAY: 'Try second preferred day',
    ConflictChoice.REORDER_GROUPS: 'Move small groups',
    ConflictChoice.USE_BLOCKED: 'Use blocked seats',
    ConflictChoice.CANCEL: 'Cancel',
}


def _confirm_prompt(*, title: str, message: str, detail: str = '') -> DecisionPrompt:
    return DecisionPrompt(
        title=title,
        message=message,
        detail=detail,
        choices=(Confirmation.YES, Confirmation.NO),
        choice_labels=('Yes', 'No'),
        default=Confirmation.NO,
    )


class BlockedSeatConflictSession:
    def __init__(
        self,
        *,
        seating_store: ISeatingStore,
        context: SeatingContext,
        guest: Guest,
        day: Day,
        matrix: SeatMatrix,
    ) -> None:
        self.seating_store = seating_store
        self.context = context
        self.guest = guest
        self.day = day
        self.matrix = matrix
        self.state = ConflictState.CHECKING
        self._assigner = SeatAssigner(settings=context.settings, policy=context.policy)
        self._groups: list[MovableGroup] = []
        self._reorder_tx: Optional[SeatMatrixTransaction] = None
        self._stranded: list[MovableGroup] = []
        self.pending: Optional[PendingDecision] = None

    @property
    def ticket_count(self) -> int:
        return self.guest.ticket_count

    @property
    def trial_threshold(self) -> float:
        return self.context.policy.conflict_trial_threshold

    # ========== Entry ==========

    async def start(self) -> ConflictStep:
        if not await self._fits_once_unblocked():
            self.state = ConflictState.CANCELLED
            return ConflictOutcome.not_applicable()

        Logger.base.warning(
            f'🚧 [CONFLICT] {self.guest.full_name} blocked only by blocked seats on {self.day}'
        )
        self.state = ConflictState.AWAITING_CHOICE
        second_day = self.guest.second_choice_day or '-'
        return self._suspend(
            DecisionPrompt(
                title='Blocked seat conflict',
                message=(
                    f'{self.guest.full_name} cannot be seated on {self.day} because of blocked seats.'
                ),
                detail=(
                    f'The guest needs {self.ticket_count} seat(s). '
                    f'Second preferred day: {second_day}. What do you want to do?'
                ),
                choices=tuple(ConflictChoice),
                choice_labels=tuple(_CHOICE_LABELS[choice] for choice in ConflictChoice),
                default=ConflictChoice.TRY_SECOND_DAY,
            ),
        )

    async def _fits_once_unblocked(self) -> bool:
        if not await self.seating_store.get_blocked_seats(day=self.day):
            return False

        unblocked = self.matrix.copy()
        unblocked.unblock_all()
        return self._trial(unblocked)

    def _trial(self, matrix: SeatMatrix, threshold: Optional[float] = None) -> bool:
        return self._assigner.try_assign_seats(
            matrix,
            guest=self.guest,
            ticket_count=self.ticket_count,
            max_priority=threshold if threshold is not None else self.trial_threshold,
            preferences=[],
        ).success

    # ========== Resume ==========

    def _suspend(self, prompt: DecisionPrompt) -> PendingDecision:
        self.pending = PendingDecision(state=self.state, prompt=prompt)
        return self.pending

    async def resume(self, answer: Optional[str]) -> ConflictStep:
        if self.pending is not None:
            answer = self.pending.prompt.normalize(answer)
            self.pending = None
        if self.state is ConflictState.AWAITING_CHOICE:
            return await self._on_choice(answer)
        if self.state is ConflictState.TRYING_BLOCKED:
            return await self._on_use_blocked_confirmed(answer)
        if self.state is ConflictState.REORDERING:
            if self._reorder_tx is None:
                return await self._on_reorder_confirmed(answer)
            return await self._on_partial_reorder_confirmed(answer)
        raise RuntimeError(f'Conflict session cannot resume from state {self.state}')

    async def _on_choice(self, answer: Optional[str]) -> ConflictStep:
        choice = ConflictChoice(answer or ConflictChoice.TRY_SECOND_DAY)
        Logger.base.info(f'🧑‍💼 [CONFLICT] operator chose {choice} for {self.guest.full_name}')

        if choice is ConflictChoice.TRY_SECOND_DAY:
            self.state = ConflictState.TRY_SECOND_DAY
            return ConflictOutcome(state=self.state, choice=choice)

        if choice is ConflictChoice.CANCEL:
            return self._cancel(choice)

        if choice is ConflictChoice.USE_BLOCKED:
            self.state = ConflictState.TRYING_BLOCKED
            return self._suspend(
                _confirm_prompt(
                    title='Use blocked seats',
                    message=(
                        f'Are you sure you want to use blocked seats for {self.guest.full_name}?'
                    ),
                    detail='The seats used will be removed from the blocked-seat list.',
                ),
            )

        self._groups = (
            find_group_combination(
                movable_groups(self.matrix, ticket_count=self.ticket_count),
                target=self.ticket_count,
                max_groups=self.context.settings.reorder_max_groups,
            )
            or []
        )
        if not self._groups:
            Logger.base.warning(
                f'⚠️ [REORDER] no combination of small groups frees {self.ticket_count} seat(s) '
                f'on {self.day}'
            )
            return self._cancel(choice)

        self.state = ConflictState.REORDERING
        listing = ', '.join(f'{g.guest.full_name} ({g.seats})' for g in self._groups)
        return self._suspend(
            _confirm_prompt(
                title='Move groups',
                message=f'Move these groups to make room for {self.guest.full_name}?',
                detail=listing,
            ),
        )

    def _cancel(self, choice: Optional[ConflictChoice]) -> ConflictOutcome:
        self.state = ConflictState.CANCELLED
        self._reorder_tx = None
        return ConflictOutcome.cancelled(choice)

    # ========== Use blocked seats ==========

    async def _on_use_blocked_confirmed(self, answer: Optional[str]) -> ConflictStep:
        if answer != Confirmation.YES:
            return self._cancel(ConflictChoice.USE_BLOCKED)

        unblocked = self.matrix.copy()
        unblocked.unblock_all()
        if not self._trial(unblocked):
            return self._cancel(ConflictChoice.USE_BLOCKED)

        consumed: list[tuple[int, int]] = []
        with self.matrix.transaction() as tx:
            for row_index, seat_index in unblocked.seats_of(self.guest.id):
                cell = tx.scratch.rows[row_index][seat_index]
                if cell.blocked:
                    consumed.append((row_index, seat_index))
                    cell.blocked = False
                    cell.reason = None
                cell.assign(self.guest, together=False)
            tx.commit()

        for row_index, seat_index in consumed:
            await self.seating_store.unblock_seat(
                day=self.day, row=row_index + 1, seat_number=seat_index + 1
            )
        await self.seating_store.set_seats_for_day(day=self.day, matrix=self.matrix)
        self._record_guest()

        Logger.base.warning(
            f'🔓 [CONFLICT] {self.guest.full_name} seated using {len(consumed)} blocked seat(s) '
            f'on {self.day}'
        )
        self.state = ConflictState.RESOLVED
        return ConflictOutcome(state=self.state, success=True, choice=ConflictChoice.USE_BLOCKED)

    # ========== Reorder small groups ==========

    async def _on_reorder_confirmed(self, answer: Optional[str]) -> ConflictStep:
        if answer != Confirmation.YES:
            return self._cancel(ConflictChoice.REORDER_GROUPS)

        tx = self.matrix.transaction()
        for group in self._groups:
            tx.scratch.remove_guest(group.guest.id)

        if not self._trial(tx.scratch):
            Logger.base.warning(
                f'⚠️ [REORDER] {self.guest.full_name} still does not fit after moving groups'
            )
            return self._cancel(ConflictChoice.REORDER_GROUPS)

        self._stranded = [group for group in self._groups if not self._reseat(tx.scratch, group)]
        self._reorder_tx = tx
        if not self._stranded:
            return await self._commit_reorder()

        listing = ', '.join(f'{g.guest.full_name} ({g.seats})' for g in self._stranded)
        return self._suspend(
            _confirm_prompt(
                title='Not every group could be re-seated',
                message='Proceed anyway? These groups will lose their seats on this day.',
                detail=listing,
            ),
        )

    def _reseat(self, scratch: SeatMatrix, group: MovableGroup) -> bool:
        for threshold in self.context.policy.reorder_reseat_thresholds:
            if self._assigner.try_assign_seats(
                scratch,
                guest=group.guest,
                ticket_count=group.seats,
                max_priority=threshold,
                preferences=[],
            ).success:
                return True
        return False

    async def _on_partial_reorder_confirmed(self, answer: Optional[str]) -> ConflictStep:
        if answer != Confirmation.YES:
            return self._cancel(ConflictChoice.REORDER_GROUPS)
        return await self._commit_reorder()

    async def _commit_reorder(self) -> ConflictOutcome:
        if self._reorder_tx is None:
            raise RuntimeError('No pending reorder to commit')
        self._reorder_tx.commit()
        self._reorder_tx = None

        assignment = self.context.day_assignments[self.day]
        for group in self._stranded:
            assignment.remove(group.guest.id)
            self.context.seated_guest_ids.discard(group.guest.id)
            Logger.base.warning(
                f'⚠️ [REORDER] {group.guest.full_name} lost their seats on {self.day}'
            )

        await self.seating_store.set_seats_for_day(day=self.day, matrix=self.matrix)
        self._record_guest()

        Logger.base.info(
            f'🔀 [REORDER] moved {len(self._groups)} group(s) to seat {self.guest.full_name} '
            f'on {self.day}'
        )
        self.state = ConflictState.RESOLVED
        return ConflictOutcome(
            state=self.state,
            success=True,
            choice=ConflictChoice.REORDER_GROUPS,
            unplaced_guest_ids=tuple(group.guest.id for group in self._stranded),
        )

    def _record_guest(self) -> None:
        self.context.day_assignments[self.day].record(
            guest_id=self.guest.id, seats=self.ticket_count, day=self.day
        )
        self.context.mark_seated(self.guest.id)


class ResolveBlockedSeatConflictUseCase:
    """Drive a BlockedSeatConflictSession to a terminal outcome through the operator prompt."""

    def __init__(self, *, seating_store: ISeatingStore, operator_prompt: IOperatorPrompt) -> None:
        self.seating_store = seating_store
        self.operator_prompt = operator_prompt

    @Logger.io
    async def resolve(
        self, *, guest: Guest, day: Day, matrix: SeatMatrix, context: SeatingContext
    ) -> ConflictOutcome:
        session = BlockedSeatConflictSession(
            seating_store=self.seating_store,
            context=context,
            guest=guest,
            day=day,
            matrix=matrix,
        )
        step = await session.start()
        while isinstance(step, PendingDecision):
            answer = await self.operator_prompt.ask(prompt=step.prompt)
            step = await session.resume(answer)
        return step
