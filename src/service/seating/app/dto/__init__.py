"""Seating DTOs"""

from src.service.seating.app.dto.auto_assign_dto import AutoAssignResult, DayTotals, UnplacedGuest
from src.service.seating.app.dto.conflict_dto import ConflictOutcome, DecisionPrompt, PendingDecision
from src.service.seating.app.dto.placement_dto import PlacementResult, SeatingContext

__all__ = [
    'AutoAssignResult',
    'ConflictOutcome',
    'DayTotals',
    'DecisionPrompt',
    'PendingDecision',
    'PlacementResult',
    'SeatingContext',
    'UnplacedGuest',
]
