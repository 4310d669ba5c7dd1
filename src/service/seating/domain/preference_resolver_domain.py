"""
Preference Resolver

Two independent passes build "wants to sit next to" edges for one run:

- guests: matched by student number against the full roster
- teachers: matched by normalized email, several colleagues per teacher

Edges are recomputed every run and never persisted.
"""

from typing import Iterable

from src.platform.logging.loguru_io import Logger
from src.service.seating.domain.entity.guest_entity import Guest
from src.service.seating.domain.value_object.algorithm_settings import AlgorithmSettings
from src.service.seating.domain.value_object.seating_preference import (
    PreferenceSet,
    SeatingPreference,
)


def _lists_student(source: Guest, target: Guest) -> bool:
    return (
        target.student_number is not None
        and source.preferred_student_number.strip() == str(target.student_number)
    )


def resolve_guest_preferences(
    *, guests: Iterable[Guest], roster: Iterable[Guest], settings: AlgorithmSettings
) -> PreferenceSet:
    by_student_number = {
        str(guest.student_number): guest for guest in roster if guest.student_number is not None
    }
    edges: list[SeatingPreference] = []

    for guest in guests:
        wanted = guest.preferred_student_number.strip()
        if not wanted or guest.is_honoree:
            continue

        target = by_student_number.get(wanted)
        if target is None:
            Logger.base.debug(f'🔎 [PREFERENCE] {guest.full_name}: no roster entry for {wanted}')
            continue
        if target.id == guest.id:
            continue
        # Honorees never receive ordinary preferences
        if target.is_honoree:
            continue
        if target.is_vip and not guest.is_vip and not settings.allow_regular_to_vip_preference:
            continue
        if not guest.shares_preferred_day(target):
            Logger.base.debug(
                f'🔎 [PREFERENCE] {guest.full_name} → {target.full_name}: no shared day'
            )
            continue

        is_mutual = _lists_student(target, guest)
        if settings.require_mutual_preference and not is_mutual:
            continue

        edges.append(SeatingPreference(guest=guest, preferred_guest=target, is_mutual=is_mutual))
        if is_mutual:
            edges.append(SeatingPreference(guest=target, preferred_guest=guest, is_mutual=True))

    return PreferenceSet.from_edges(edges)


def resolve_teacher_preferences(*, teachers: Iterable[Guest]) -> PreferenceSet:
    teachers = list(teachers)
    by_email = {t.normalized_email: t for t in teachers if t.normalized_email}
    edges: list[SeatingPreference] = []

    for teacher in teachers:
        for email in teacher.preferred_email_list:
            target = by_email.get(email)
            if target is None or target.id == teacher.id:
                continue
            if not teacher.shares_preferred_day(target):
                continue
            edges.append(
                SeatingPreference(
                    guest=teacher,
                    preferred_guest=target,
                    is_mutual=teacher.normalized_email in target.preferred_email_list,
                    is_teacher_preference=True,
                )
            )

    return PreferenceSet.from_edges(edges)
