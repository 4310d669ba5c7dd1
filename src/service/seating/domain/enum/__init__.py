"""Seating Enums"""

from src.service.seating.domain.enum.conflict import ConflictChoice, ConflictState, Confirmation
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.enum.guest_tier import GuestTier

__all__ = ['ConflictChoice', 'ConflictState', 'Confirmation', 'Day', 'GuestTier']
