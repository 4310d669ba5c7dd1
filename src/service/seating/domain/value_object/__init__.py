"""Seating Value Objects"""

from src.service.seating.domain.value_object.algorithm_settings import AlgorithmSettings
from src.service.seating.domain.value_object.blocked_seat import BlockedSeat
from src.service.seating.domain.value_object.day_assignment import (
    AssignmentRecord,
    DayAssignment,
    DaySeating,
)
from src.service.seating.domain.value_object.seat_matrix import (
    SeatBlock,
    SeatCell,
    SeatMatrix,
    SeatMatrixTransaction,
)
from src.service.seating.domain.value_object.seating_preference import (
    PreferenceSet,
    SeatingPreference,
)
from src.service.seating.domain.value_object.threshold_policy import (
    DEFAULT_THRESHOLD_POLICY,
    DayMultipliers,
    EscalationPolicy,
    ThresholdPolicy,
)
from src.service.seating.domain.value_object.venue_layout import (
    THEATER_LAYOUT,
    RowLayout,
    VenueLayout,
)

__all__ = [
    'AlgorithmSettings',
    'AssignmentRecord',
    'BlockedSeat',
    'DEFAULT_THRESHOLD_POLICY',
    'DayAssignment',
    'DayMultipliers',
    'DaySeating',
    'EscalationPolicy',
    'PreferenceSet',
    'RowLayout',
    'SeatBlock',
    'SeatCell',
    'SeatMatrix',
    'SeatMatrixTransaction',
    'SeatingPreference',
    'THEATER_LAYOUT',
    'ThresholdPolicy',
    'VenueLayout',
]
