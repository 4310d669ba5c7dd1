"""
Seating State Schemas

Pydantic models for the JSON blobs kept in Kvrocks. Field aliases follow the
persisted names (Dutch guest fields, camelCase everywhere else), so data
written by earlier versions of the seating tool decodes unchanged.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from src.platform.logging.loguru_io import Logger
from src.service.seating.domain.entity.guest_entity import Guest
from src.service.seating.domain.enum.day import Day
from src.service.seating.domain.value_object.algorithm_settings import AlgorithmSettings
from src.service.seating.domain.value_object.blocked_seat import BlockedSeat
from src.service.seating.domain.value_object.day_assignment import (
    AssignmentRecord,
    DayAssignment,
    DaySeating,
)
from src.service.seating.domain.value_object.seat_matrix import SeatCell


_EPOCH = datetime.fromtimestamp(0, timezone.utc)


class _PersistedModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


def _parse_day(raw: str, *, guest_id: int) -> Optional[Day]:
    day = Day.parse(raw)
    if day is None and raw.strip():
        Logger.base.warning(f'📅 [ROSTER] Guest {guest_id}: unknown day "{raw}" ignored')
    return day


class GuestSchema(_PersistedModel):
    id: int
    first_name: str = Field('', alias='voornaam')
    last_name: str = Field('', alias='achternaam')
    ticket_count: int = Field(1, alias='aantalKaarten')
    first_choice_day: str = Field('', alias='voorkeurDag1')
    second_choice_day: str = Field('', alias='voorkeurDag2')
    preferred_student_number: str = Field('', alias='voorkeurPersoonen')
    preferred_emails: str = Field('', alias='voorkeurEmail')
    email: str = ''
    student_number: Optional[int] = Field(None, alias='leerlingnummer')
    is_honoree: bool = Field(False, alias='isErelid')
    is_performer: bool = Field(False, alias='speeltMee')
    is_teacher: bool = Field(False, alias='isDocent')
    is_member: bool = Field(False, alias='IoVivat')
    registered_at: Optional[datetime] = Field(None, alias='datumAanmelding')

    @field_validator(
        'first_name',
        'last_name',
        'first_choice_day',
        'second_choice_day',
        'preferred_student_number',
        'preferred_emails',
        'email',
        mode='before',
    )
    @classmethod
    def _text(cls, value: Any) -> str:
        return '' if value is None else str(value)

    @field_validator('student_number', 'registered_at', mode='before')
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_serializer('ticket_count')
    def _ticket_count_as_text(self, value: int) -> str:
        return str(value)

    @field_serializer('registered_at')
    def _registered_at_as_text(self, value: Optional[datetime]) -> str:
        return value.isoformat() if value else ''

    def to_entity(self) -> Guest:
        registered_at = self.registered_at or _EPOCH
        if registered_at.tzinfo is None:
            registered_at = registered_at.replace(tzinfo=timezone.utc)
        return Guest(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            ticket_count=self.ticket_count,
            first_choice_day=_parse_day(self.first_choice_day, guest_id=self.id),
            second_choice_day=_parse_day(self.second_choice_day, guest_id=self.id),
            email=self.email,
            student_number=self.student_number,
            preferred_student_number=self.preferred_student_number,
            preferred_emails=self.preferred_emails,
            is_honoree=self.is_honoree,
            is_teacher=self.is_teacher,
            is_performer=self.is_performer,
            is_member=self.is_member,
            registered_at=registered_at,
        )

    @classmethod
    def from_entity(cls, guest: Guest) -> 'GuestSchema':
        return cls(
            id=guest.id,
            first_name=guest.first_name,
            last_name=guest.last_name,
            ticket_count=guest.ticket_count,
            first_choice_day=guest.first_choice_day or '',
            second_choice_day=guest.second_choice_day or '',
            preferred_student_number=guest.preferred_student_number,
            preferred_emails=guest.preferred_emails,
            email=guest.email,
            student_number=guest.student_number,
            is_honoree=guest.is_honoree,
            is_performer=guest.is_performer,
            is_teacher=guest.is_teacher,
            is_member=guest.is_member,
            registered_at=None if guest.registered_at == _EPOCH else guest.registered_at,
        )


class SeatCellSchema(_PersistedModel):
    seat_number: int = Field(alias='stoel')
    guest: Optional[GuestSchema] = None
    priority: float = 1
    together: Optional[bool] = False
    blocked: Optional[bool] = False
    reason: Optional[str] = None

    def to_entity(self) -> SeatCell:
        return SeatCell(
            seat_number=self.seat_number,
            priority=self.priority,
            guest=self.guest.to_entity() if self.guest else None,
            together=bool(self.together),
            blocked=bool(self.blocked),
            reason=self.reason,
        )

    @classmethod
    def from_entity(cls, cell: SeatCell) -> 'SeatCellSchema':
        return cls(
            seat_number=cell.seat_number,
            guest=GuestSchema.from_entity(cell.guest) if cell.guest else None,
            priority=cell.priority,
            together=cell.together,
            blocked=cell.blocked,
            reason=cell.reason,
        )


class AssignmentRecordSchema(_PersistedModel):
    guest_id: int = Field(alias='guestId')
    seats: int
    assigned_day: Day = Field(alias='assignedDay')


class DayAssignmentSchema(_PersistedModel):
    seats: list[AssignmentRecordSchema] = Field(default_factory=list)
    capacity: int
    assigned: int = 0

    def to_entity(self) -> DayAssignment:
        records = [
            AssignmentRecord(guest_id=r.guest_id, seats=r.seats, assigned_day=r.assigned_day)
            for r in self.seats
        ]
        # `assigned` is derived from the records so the sum invariant holds after decoding
        return DayAssignment(
            capacity=self.capacity, assigned=sum(r.seats for r in records), records=records
        )

    @classmethod
    def from_entity(cls, assignment: DayAssignment) -> 'DayAssignmentSchema':
        return cls(
            seats=[
                AssignmentRecordSchema(
                    guest_id=r.guest_id, seats=r.seats, assigned_day=r.assigned_day
                )
                for r in assignment.records
            ],
            capacity=assignment.capacity,
            assigned=assignment.assigned,
        )


def day_seating_to_json(assignments: DaySeating) -> dict[str, Any]:
    return {
        str(day): DayAssignmentSchema.from_entity(assignment).model_dump(by_alias=True, mode='json')
        for day, assignment in assignments.days.items()
    }


def day_seating_from_json(data: dict[str, Any], *, capacity: int) -> DaySeating:
    seating = DaySeating.fresh(capacity=capacity)
    for raw_day, raw_assignment in data.items():
        day = Day.parse(raw_day)
        if day is not None:
            seating.days[day] = DayAssignmentSchema.model_validate(raw_assignment).to_entity()
    return seating


_DEFAULTS = AlgorithmSettings()


class AlgorithmSettingsSchema(_PersistedModel):
    ideal_row_start: int = Field(_DEFAULTS.ideal_row_start, alias='idealRowStart')
    ideal_row_end: int = Field(_DEFAULTS.ideal_row_end, alias='idealRowEnd')
    use_balcony_threshold: float = Field(_DEFAULTS.use_balcony_threshold, alias='useBalconyThreshold')
    max_vip_row_deviation: int = Field(_DEFAULTS.max_vip_row_deviation, alias='maxVIPRowDeviation')
    prefer_center_seats: bool = Field(_DEFAULTS.prefer_center_seats, alias='preferCenterSeats')
    balcony_penalty: float = Field(_DEFAULTS.balcony_penalty, alias='balconyPenalty')
    max_moves_for_preference: int = Field(
        _DEFAULTS.max_moves_for_preference, alias='maxMovesForPreference'
    )
    allow_regular_to_vip_preference: bool = Field(
        _DEFAULTS.allow_regular_to_vip_preference, alias='allowRegularToVIPPreference'
    )
    require_mutual_preference: bool = Field(
        _DEFAULTS.require_mutual_preference, alias='requireMutualPreference'
    )
    prioritize_preferences: bool = Field(
        _DEFAULTS.prioritize_preferences, alias='prioritizePreferences'
    )
    teacher_preference_weight: float = Field(
        _DEFAULTS.teacher_preference_weight, alias='teacherPreferenceWeight'
    )
    orphan_seat_penalty: float = Field(_DEFAULTS.orphan_seat_penalty, alias='orphanSeatPenalty')
    reorder_max_groups: int = Field(_DEFAULTS.reorder_max_groups, alias='reorderMaxGroups')

    def to_entity(self) -> AlgorithmSettings:
        return AlgorithmSettings(**self.model_dump())


class BlockedSeatSchema(_PersistedModel):
    day: Day
    row: int
    seat_number: int = Field(alias='seatNumber')
    reason: Optional[str] = None

    @field_validator('day', mode='before')
    @classmethod
    def _day(cls, value: Any) -> Any:
        return Day.parse(value) or value

    def to_entity(self) -> BlockedSeat:
        return BlockedSeat(day=self.day, row=self.row, seat_number=self.seat_number, reason=self.reason)

    @classmethod
    def from_entity(cls, blocked_seat: BlockedSeat) -> 'BlockedSeatSchema':
        return cls(
            day=blocked_seat.day,
            row=blocked_seat.row,
            seat_number=blocked_seat.seat_number,
            reason=blocked_seat.reason,
        )


class SeatingStatusSchema(_PersistedModel):
    is_done: bool = Field(True, alias='isDone')
    last_updated: datetime = Field(alias='lastUpdated')
    guests_to_process: Optional[int] = Field(None, alias='guestsToProcess')
    processed_guests: Optional[int] = Field(None, alias='processedGuests')
