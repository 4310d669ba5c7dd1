"""Blocked-seat conflict protocol enums"""

from enum import StrEnum


class ConflictState(StrEnum):
    CHECKING = 'checking'
    AWAITING_CHOICE = 'awaiting_choice'
    TRYING_BLOCKED = 'trying_blocked'
    REORDERING = 'reordering'
    TRY_SECOND_DAY = 'try_second_day'
    CANCELLED = 'cancelled'
    RESOLVED = 'resolved'

    @property
    def is_terminal(self) -> bool:
        return self in (
            ConflictState.TRY_SECOND_DAY,
            ConflictState.CANCELLED,
            ConflictState.RESOLVED,
        )


class ConflictChoice(StrEnum):
    """Choices offered to the operator, in presentation order."""

    TRY_SECOND_DAY = 'try_second_day'
    REORDER_GROUPS = 'reorder_groups'
    USE_BLOCKED = 'use_blocked'
    CANCEL = 'cancel'


class Confirmation(StrEnum):
    YES = 'yes'
    NO = 'no'
