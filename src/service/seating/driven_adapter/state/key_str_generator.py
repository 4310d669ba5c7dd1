"""
Key String Generator

Helper functions for the Kvrocks keys used by the seating store.
"""

import os

from src.service.seating.domain.enum.day import Day


# Get key prefix from environment for test isolation
_KEY_PREFIX = os.getenv('KVROCKS_KEY_PREFIX', '')


def _make_key(key: str) -> str:
    """Add prefix to key for test isolation in parallel testing"""
    return f'{_KEY_PREFIX}{key}'


def make_seats_key(*, day: Day) -> str:
    """Seat matrix of one day (JSON rows of seat cells)"""
    return _make_key(f'seats:{day}')


def make_guests_key() -> str:
    return _make_key('guests')


def make_day_assignments_key() -> str:
    return _make_key('dayAssignments')


def make_settings_key() -> str:
    return _make_key('settings')


def make_blocked_seats_key() -> str:
    return _make_key('blockedSeats')


def make_priority_matrix_key() -> str:
    """Manual priority overrides set by the operator"""
    return _make_key('priorityMatrix')


def make_seating_status_key() -> str:
    return _make_key('seatingStatus')
