"""Guest Tier Enum"""

from enum import IntEnum


class GuestTier(IntEnum):
    """
    Placement tier, computed once per guest.

    Lower value wins when a guest carries several VIP flags:
    Honoree > Performer > Teacher > Regular.
    """

    HONOREE = 0
    PERFORMER = 1
    TEACHER = 2
    REGULAR = 3

    @property
    def is_vip(self) -> bool:
        return self is not GuestTier.REGULAR
