"""
Threshold escalation policies.

A threshold is the maximum acceptable average seat priority for a block.
Each placement path escalates through a named sequence and scales the
value by the multipliers below; the table is the single place to tune them.
"""

import attrs

from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.enum.guest_tier import GuestTier


@attrs.define(frozen=True)
class EscalationPolicy:
    """Arithmetic threshold sequence: start, start+step, ... up to stop (inclusive)."""

    name: str
    start: float
    step: float
    stop: float

    def thresholds(self) -> list[float]:
        values: list[float] = []
        value = self.start
        while value <= self.stop:
            values.append(value)
            value += self.step
        return values

    def thresholds_from(self, start: float) -> list[float]:
        """Same sequence with a lower first step; later steps and the stop are unchanged."""
        return [start] + [value for value in self.thresholds() if value > start]


@attrs.define(frozen=True)
class DayMultipliers:
    first_choice: float
    second_choice: float
    other_day: float


@attrs.define(frozen=True)
class ThresholdPolicy:
    # VIP on a preferred day: restricted rows first, then the whole hall
    vip_restricted: EscalationPolicy = EscalationPolicy('vip_restricted', 2, 2, 10)
    vip_broadened: EscalationPolicy = EscalationPolicy('vip_broadened', 3, 5, 40)
    standard: EscalationPolicy = EscalationPolicy('standard', 3, 2, 20)
    # Performers whose first choice is the last day start lower
    last_day_performer_start: float = 1

    performer_day: DayMultipliers = DayMultipliers(0.3, 2.0, 5.0)
    regular_day: DayMultipliers = DayMultipliers(0.6, 1.5, 4.0)

    honoree_factor: float = 0.5
    performer_factor: float = 0.7
    teacher_factor: float = 0.8

    # Preference paths compound multiplicatively
    preference_allowance: float = 1.5
    mutual_allowance: float = 2.0
    move_others_allowance: float = 1.5
    displaced_reseat_allowance: float = 1.5
    second_choice_relocation_factor: float = 0.9

    # Conflict protocol
    conflict_trial_threshold: float = 20
    reorder_reseat_thresholds: tuple[float, ...] = (15, 25, 40, 60)

    def tier_factor(self, tier: GuestTier) -> float:
        return {
            GuestTier.HONOREE: self.honoree_factor,
            GuestTier.PERFORMER: self.performer_factor,
            GuestTier.TEACHER: self.teacher_factor,
        }.get(tier, 1.0)

    def day_multiplier(
        self, *, is_performer: bool, day: Day, first_choice: Day | None, second_choice: Day | None
    ) -> float:
        multipliers = self.performer_day if is_performer else self.regular_day
        if day == first_choice:
            return multipliers.first_choice
        if day == second_choice:
            return multipliers.second_choice
        return multipliers.other_day


DEFAULT_THRESHOLD_POLICY = ThresholdPolicy()
