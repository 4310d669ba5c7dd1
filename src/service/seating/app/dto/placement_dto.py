"""
Placement DTOs

SeatingContext is request-scoped: one per run (or per single placement),
never stored in module state.
"""

from typing import Optional

import attrs

from src.service.seating.domain.entity.guest_entity import Guest
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.seating_error import SeatingError
from src.service.seating.domain.value_object.algorithm_settings import AlgorithmSettings
from src.service.seating.domain.value_object.day_assignment import DaySeating
from src.service.seating.domain.value_object.seating_preference import (
    PreferenceSet,
    SeatingPreference,
)
from src.service.seating.domain.value_object.threshold_policy import (
    DEFAULT_THRESHOLD_POLICY,
    ThresholdPolicy,
)
from src.service.seating.domain.value_object.venue_layout import THEATER_LAYOUT, VenueLayout


@attrs.define
class SeatingContext:
    settings: AlgorithmSettings
    day_assignments: DaySeating
    roster: list[Guest] = attrs.field(factory=list)
    preferences: PreferenceSet = attrs.field(factory=PreferenceSet)
    seated_guest_ids: set[int] = attrs.field(factory=set)
    venue: VenueLayout = THEATER_LAYOUT
    policy: ThresholdPolicy = DEFAULT_THRESHOLD_POLICY

    def preferences_for(self, guest: Guest) -> list[SeatingPreference]:
        return self.preferences.for_guest(guest.id)

    def mark_seated(self, *guest_ids: int) -> None:
        self.seated_guest_ids.update(guest_ids)


@attrs.define(frozen=True)
class PlacementResult:
    """Outcome of placing one guest on one day; truthy on success."""

    success: bool
    day: Day
    failure: Optional[SeatingError] = None
    warnings: tuple[SeatingError, ...] = ()
    co_placed_guest_ids: tuple[int, ...] = ()
    unplaced_guest_ids: tuple[int, ...] = ()  # earlier guests that lost their seat
    retry_second_day: bool = False
    used_blocked_seats: bool = False

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def placed(cls, day: Day, **kwargs) -> 'PlacementResult':
        return cls(success=True, day=day, **kwargs)

    @classmethod
    def failed(cls, day: Day, failure: SeatingError, **kwargs) -> 'PlacementResult':
        return cls(success=False, day=day, failure=failure, **kwargs)
