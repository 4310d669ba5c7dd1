"""Algorithm settings value object."""

import attrs


@attrs.define(frozen=True)
class AlgorithmSettings:
    """
    Operator-tunable placement settings (Value Object).

    Threaded explicitly through every engine call; rows are 1-based and the
    ideal band is inclusive on both ends.
    """

    ideal_row_start: int = 3
    ideal_row_end: int = 6
    use_balcony_threshold: float = 70  # ground-floor occupancy percent
    max_vip_row_deviation: int = 2
    prefer_center_seats: bool = True
    balcony_penalty: float = 20
    max_moves_for_preference: int = 3
    allow_regular_to_vip_preference: bool = False
    require_mutual_preference: bool = False
    prioritize_preferences: bool = True
    teacher_preference_weight: float = 1.5
    orphan_seat_penalty: float = 15
    reorder_max_groups: int = 12

    def in_ideal_band(self, row_number: int) -> bool:
        return self.ideal_row_start <= row_number <= self.ideal_row_end

    @property
    def ideal_center_row(self) -> int:
        return (self.ideal_row_end - self.ideal_row_start) // 2 + self.ideal_row_start

    @property
    def vip_row_band(self) -> range:
        """Rows a VIP is first searched in, widened by the allowed deviation."""
        return range(
            max(1, self.ideal_row_start - self.max_vip_row_deviation),
            self.ideal_row_end + self.max_vip_row_deviation + 1,
        )
