"""
Auto Assign Seating Use Case - the full seating run
"""

from typing import Optional

from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.seating.app.command.place_guest_on_day_use_case import PlaceGuestOnDayUseCase
from src.service.seating.app.dto.auto_assign_dto import AutoAssignResult, DayTotals, UnplacedGuest
from src.service.seating.app.dto.placement_dto import SeatingContext
from src.service.seating.app.interface.i_seating_store import ISeatingStore
from src.service.seating.domain.entity.guest_entity import Guest
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.enum.guest_tier import GuestTier
from src.service.seating.domain.preference_resolver_domain import (
    resolve_guest_preferences,
    resolve_teacher_preferences,
)
from src.service.seating.domain.priority_matrix_domain import generate_priority_matrix
from src.service.seating.domain.seating_error import (
    SeatingError,
    SeatingErrorCode,
    UnknownSeatingError,
)
from src.service.seating.domain.value_object.day_assignment import DaySeating
from src.service.seating.domain.value_object.seating_preference import PreferenceSet
from src.service.seating.domain.value_object.threshold_policy import (
    DEFAULT_THRESHOLD_POLICY,
    ThresholdPolicy,
)
from src.service.seating.domain.value_object.venue_layout import THEATER_LAYOUT, VenueLayout


REORDER_LOSS_REASON = 'lost their seats while groups were reordered'

_TIER_ORDER: tuple[tuple[GuestTier, bool], ...] = (
    (GuestTier.HONOREE, True),
    (GuestTier.HONOREE, False),
    (GuestTier.PERFORMER, True),
    (GuestTier.PERFORMER, False),
    (GuestTier.TEACHER, True),
    (GuestTier.TEACHER, False),
    (GuestTier.REGULAR, True),
    (GuestTier.REGULAR, False),
)


class AutoAssignSeatingUseCase:
    """
    Auto Assign Seating Use Case

    Flow:
    1. Reset every day matrix (fresh priorities, blocked seats painted in)
    2. Resolve guest and teacher preferences
    3. Partition guests into tiers, each sorted by registration time
    4. Place tier by tier: first-choice day, then second-choice day
    5. Persist day totals, log the summary and the day verification report

    Tier order:
        honorees (with / without preference), performers (with / without),
        teacher mutual pairs, teachers (with / without), regular (with / without)

    Dependencies:
    - seating_store: matrices, totals, settings, roster, blocked seats
    - place_guest_use_case: single guest / teacher pair placement
    """

    def __init__(
        self,
        *,
        seating_store: ISeatingStore,
        place_guest_use_case: PlaceGuestOnDayUseCase,
        venue: VenueLayout = THEATER_LAYOUT,
        policy: ThresholdPolicy = DEFAULT_THRESHOLD_POLICY,
    ) -> None:
        self.seating_store = seating_store
        self.place_guest_use_case = place_guest_use_case
        self.venue = venue
        self.policy = policy
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def auto_assign_seating(self, *, guests: list[Guest]) -> AutoAssignResult:
        """
        Run the complete seating.

        Raises:
            SeatingError: typed seating failures pass through unchanged
            UnknownSeatingError: anything else, e.g. store I/O failures
        """
        with self.tracer.start_as_current_span(
            'use_case.auto_assign_seating',
            attributes={'seating.guest_count': len(guests)},
        ):
            try:
                return await self._run(guests)
            except SeatingError:
                raise
            except Exception as e:
                Logger.base.exception(f'💥 [AUTO-ASSIGN] Seating run failed: {e}')
                raise UnknownSeatingError(e) from e

    async def _run(self, guests: list[Guest]) -> AutoAssignResult:
        Logger.base.info(f'🎭 [AUTO-ASSIGN] Starting seating run for {len(guests)} guests')
        await self.seating_store.set_seating_status(is_done=False, guests_to_process=len(guests))

        # ========== Step 1: Reset days ==========
        context = await self._prepare_context(guests)

        # ========== Step 2: Preferences ==========
        # Every guest with the teacher flag, performers and honorees included
        teacher_preferences = resolve_teacher_preferences(
            teachers=[guest for guest in guests if guest.is_teacher]
        )
        guest_preferences = resolve_guest_preferences(
            guests=guests, roster=context.roster, settings=context.settings
        )
        context.preferences = PreferenceSet.from_edges(
            guest_preferences.edges + teacher_preferences.edges
        )
        Logger.base.info(
            f'💞 [AUTO-ASSIGN] {len(context.preferences.pairs())} preference pair(s) '
            f'({len(teacher_preferences.mutual_pairs())} mutual teacher pair(s))'
        )

        # ========== Step 3 + 4: Tiers ==========
        reasons: dict[int, str] = {}
        tiers = self._partition(guests, context.preferences)
        for tier, with_preference in _TIER_ORDER:
            if tier is GuestTier.TEACHER and with_preference:
                await self._place_teacher_pairs(teacher_preferences, context)

            tier_guests = tiers[(tier, with_preference)]
            if tier_guests:
                label = f'{tier.name.lower()} {"with" if with_preference else "without"} preference'
                Logger.base.info(f'🎟️ [AUTO-ASSIGN] Tier {label}: {len(tier_guests)} guest(s)')

            for guest in tier_guests:
                if guest.id in context.seated_guest_ids:
                    continue
                reason = await self._place_guest(guest, context)
                if reason is None:
                    reasons.pop(guest.id, None)
                else:
                    reasons[guest.id] = reason
                    Logger.base.warning(
                        f'⚠️ [UNPLACED] {guest.full_name} (ID: {guest.id}): {reason}'
                    )

        # ========== Step 5: Persist + report ==========
        await self.seating_store.update_day_assignments(assignments=context.day_assignments)
        result = self._build_result(guests, context, reasons)
        self._log_summary(result)
        self._log_day_verification(context.day_assignments, guests)
        await self.seating_store.set_seating_status(is_done=True, processed_guests=len(guests))
        return result

    async def _prepare_context(self, guests: list[Guest]) -> SeatingContext:
        settings = await self.seating_store.get_settings()
        roster = await self.seating_store.get_guests() or list(guests)
        overrides = await self.seating_store.get_priority_overrides()
        blocked_seats = await self.seating_store.get_blocked_seats()

        for day in Day:
            matrix = generate_priority_matrix(
                day=day,
                venue=self.venue,
                settings=settings,
                overrides=overrides,
                blocked_seats=blocked_seats,
            )
            await self.seating_store.set_seats_for_day(day=day, matrix=matrix)

        Logger.base.info(
            f'🧹 [AUTO-ASSIGN] Reset {len(Day)} day(s), {len(blocked_seats)} blocked seat(s) painted in'
        )
        return SeatingContext(
            settings=settings,
            day_assignments=DaySeating.fresh(capacity=self.venue.total_capacity),
            roster=roster,
            venue=self.venue,
            policy=self.policy,
        )

    @staticmethod
    def _partition(
        guests: list[Guest], preferences: PreferenceSet
    ) -> dict[tuple[GuestTier, bool], list[Guest]]:
        with_edge = preferences.source_ids()
        tiers: dict[tuple[GuestTier, bool], list[Guest]] = {key: [] for key in _TIER_ORDER}
        for guest in guests:
            with_preference = guest.id in with_edge or guest.has_seatmate_request()
            tiers[(guest.tier, with_preference)].append(guest)
        for tier_guests in tiers.values():
            # sort is stable: equal timestamps keep roster order
            tier_guests.sort(key=lambda guest: guest.registered_at)
        return tiers

    async def _place_teacher_pairs(
        self, teacher_preferences: PreferenceSet, context: SeatingContext
    ) -> None:
        pairs = sorted(
            teacher_preferences.mutual_pairs(),
            key=lambda pair: min(pair.guest.registered_at, pair.preferred_guest.registered_at),
        )
        for pair in pairs:
            await self.place_guest_use_case.place_teacher_pair(
                first=pair.guest, second=pair.preferred_guest, context=context
            )

    async def _place_guest(self, guest: Guest, context: SeatingContext) -> Optional[str]:
        """Try the preferred days in order; returns the failure reason or None when placed."""
        if not guest.preferred_days:
            return 'no valid preferred day'

        failure: Optional[SeatingError] = None
        for day in guest.preferred_days:
            result = await self.place_guest_use_case.place_guest_on_day(
                guest=guest, day=day, context=context
            )
            if result:
                if guest.preferred_days.index(day) > 0:
                    Logger.base.info(f'↪️ [AUTO-ASSIGN] {guest.full_name} placed on second choice {day}')
                return None

            failure = result.failure
            # An operator who cancels keeps the guest unplaced
            if (
                failure is not None
                and failure.code is SeatingErrorCode.BLOCKED_SEAT_CONFLICT
                and not result.retry_second_day
            ):
                break

        return failure.message if failure is not None else 'could not be placed on a preferred day'

    def _build_result(
        self, guests: list[Guest], context: SeatingContext, reasons: dict[int, str]
    ) -> AutoAssignResult:
        result = AutoAssignResult(preference_count=len(context.preferences.pairs()))
        for guest in guests:
            if guest.id in context.seated_guest_ids:
                result.placed_count += 1
                continue
            result.unplaced.append(
                UnplacedGuest(
                    guest_id=guest.id,
                    name=guest.full_name,
                    reason=reasons.get(guest.id, REORDER_LOSS_REASON),
                )
            )
        result.day_totals = [
            DayTotals(day=day, assigned=assignment.assigned, capacity=assignment.capacity)
            for day, assignment in context.day_assignments.days.items()
        ]
        return result

    @staticmethod
    def _log_summary(result: AutoAssignResult) -> None:
        Logger.base.info(
            f'✅ [AUTO-ASSIGN] Seating complete: {result.placed_count} placed, '
            f'{result.unplaced_count} unplaced'
        )
        for totals in result.day_totals:
            Logger.base.info(f'📊 [AUTO-ASSIGN] {totals.day}: {totals.assigned}/{totals.capacity}')

    @staticmethod
    def _log_day_verification(day_assignments: DaySeating, guests: list[Guest]) -> None:
        by_id = {guest.id: guest for guest in guests}
        for day in day_assignments:
            for record in day_assignments[day].records:
                guest = by_id.get(record.guest_id)
                if guest is None:
                    continue
                if day == guest.first_choice_day:
                    Logger.base.debug(f'🔍 [VERIFY] {guest.full_name} → {day} (first choice)')
                elif day == guest.second_choice_day:
                    Logger.base.debug(f'🔍 [VERIFY] {guest.full_name} → {day} (second choice)')
                else:
                    Logger.base.warning(
                        f'🔍 [VERIFY] {guest.full_name} → {day}, preferred '
                        f'{guest.first_choice_day}/{guest.second_choice_day}'
                    )

