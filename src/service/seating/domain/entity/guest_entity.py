from datetime import datetime, timezone
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.enum.guest_tier import GuestTier


def _positive_ticket_count(instance: 'Guest', attribute: attrs.Attribute, value: int) -> None:
    if value < 1:
        raise DomainError(f'Guest {instance.id} must request at least 1 ticket, got {value}')


@attrs.define(frozen=True)
class Guest:
    """
    A registered guest.

    `ticket_count` is the exact number of contiguous seats the guest needs.
    `preferred_student_number` names a seatmate by student number; teachers
    use `preferred_emails`, a comma-separated list of colleague emails.
    """

    id: int
    first_name: str
    last_name: str
    ticket_count: int = attrs.field(validator=_positive_ticket_count)
    first_choice_day: Optional[Day] = None
    second_choice_day: Optional[Day] = None
    email: str = ''
    student_number: Optional[int] = None
    preferred_student_number: str = ''
    preferred_emails: str = ''
    is_honoree: bool = False
    is_teacher: bool = False
    is_performer: bool = False
    is_member: bool = False
    registered_at: datetime = attrs.field(factory=lambda: datetime.fromtimestamp(0, timezone.utc))

    @property
    def full_name(self) -> str:
        return f'{self.first_name} {self.last_name}'.strip()

    @property
    def tier(self) -> GuestTier:
        if self.is_honoree:
            return GuestTier.HONOREE
        if self.is_performer:
            return GuestTier.PERFORMER
        if self.is_teacher:
            return GuestTier.TEACHER
        return GuestTier.REGULAR

    @property
    def is_vip(self) -> bool:
        return self.tier.is_vip

    @property
    def preferred_days(self) -> tuple[Day, ...]:
        days: list[Day] = []
        for day in (self.first_choice_day, self.second_choice_day):
            if day is not None and day not in days:
                days.append(day)
        return tuple(days)

    @property
    def normalized_email(self) -> str:
        return self.email.strip().lower()

    @property
    def preferred_email_list(self) -> list[str]:
        return [e.strip().lower() for e in self.preferred_emails.split(',') if e.strip()]

    def has_seatmate_request(self) -> bool:
        if self.tier is GuestTier.TEACHER:
            return bool(self.preferred_emails.strip())
        return bool(self.preferred_student_number.strip())

    def shares_preferred_day(self, other: 'Guest') -> bool:
        """First-choice match wins; otherwise any overlap of the preferred days."""
        if self.first_choice_day is not None and self.first_choice_day == other.first_choice_day:
            return True
        return any(day in other.preferred_days for day in self.preferred_days)
