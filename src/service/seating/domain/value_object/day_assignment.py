"""Per-day assignment bookkeeping."""

from typing import Iterator, Optional

import attrs

from src.service.seating.domain.enum.day import Day


@attrs.define(frozen=True)
class AssignmentRecord:
    guest_id: int
    seats: int
    assigned_day: Day


@attrs.define
class DayAssignment:
    """
    Seats handed out on one day.

    `assigned` always equals the sum of record seats and never exceeds
    `capacity`; every mutation goes through `record` / `remove`.
    """

    capacity: int
    assigned: int = 0
    records: list[AssignmentRecord] = attrs.field(factory=list)

    @property
    def remaining(self) -> int:
        return self.capacity - self.assigned

    def can_fit(self, seats: int) -> bool:
        return self.assigned + seats <= self.capacity

    def has_guest(self, guest_id: int) -> bool:
        return any(record.guest_id == guest_id for record in self.records)

    def record(self, *, guest_id: int, seats: int, day: Day) -> None:
        if not self.can_fit(seats):
            raise ValueError(
                f'Recording {seats} seats for guest {guest_id} exceeds capacity '
                f'({self.assigned}/{self.capacity})'
            )
        self.records.append(AssignmentRecord(guest_id=guest_id, seats=seats, assigned_day=day))
        self.assigned += seats

    def remove(self, guest_id: int) -> Optional[AssignmentRecord]:
        for record in self.records:
            if record.guest_id == guest_id:
                self.records.remove(record)
                self.assigned -= record.seats
                return record
        return None


@attrs.define
class DaySeating:
    """Assignments for every performance day."""

    days: dict[Day, DayAssignment]

    @classmethod
    def fresh(cls, *, capacity: int) -> 'DaySeating':
        return cls(days={day: DayAssignment(capacity=capacity) for day in Day})

    def __getitem__(self, day: Day) -> DayAssignment:
        return self.days[day]

    def __iter__(self) -> Iterator[Day]:
        return iter(self.days)

    def reset(self, day: Day, *, capacity: int) -> None:
        self.days[day] = DayAssignment(capacity=capacity)

    def day_of(self, guest_id: int) -> Optional[Day]:
        for day, assignment in self.days.items():
            if assignment.has_guest(guest_id):
                return day
        return None
