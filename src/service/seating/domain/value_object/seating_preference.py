"""Seating preference value objects."""

from typing import Iterable

import attrs

from src.service.seating.domain.entity.guest_entity import Guest


@attrs.define(frozen=True)
class SeatingPreference:
    """Directed edge: `guest` wants to sit next to `preferred_guest`."""

    guest: Guest
    preferred_guest: Guest
    is_mutual: bool = False
    is_teacher_preference: bool = False

    @property
    def key(self) -> tuple[int, int]:
        return (self.guest.id, self.preferred_guest.id)

    @property
    def pair_key(self) -> frozenset[int]:
        return frozenset(self.key)


@attrs.define
class PreferenceSet:
    """
    Resolved preferences of one run.

    Directed edges are kept unique per (guest, preferred_guest); `pairs()`
    collapses both directions to one entry per unordered pair.
    """

    edges: list[SeatingPreference] = attrs.field(factory=list)

    @classmethod
    def from_edges(cls, edges: Iterable[SeatingPreference]) -> 'PreferenceSet':
        unique: dict[tuple[int, int], SeatingPreference] = {}
        for edge in edges:
            unique.setdefault(edge.key, edge)
        return cls(edges=list(unique.values()))

    def __len__(self) -> int:
        return len(self.edges)

    def for_guest(self, guest_id: int) -> list[SeatingPreference]:
        return [edge for edge in self.edges if edge.guest.id == guest_id]

    def source_ids(self) -> set[int]:
        return {edge.guest.id for edge in self.edges}

    def pairs(self) -> list[SeatingPreference]:
        seen: set[frozenset[int]] = set()
        result: list[SeatingPreference] = []
        for edge in self.edges:
            if edge.pair_key not in seen:
                seen.add(edge.pair_key)
                result.append(edge)
        return result

    def mutual_pairs(self) -> list[SeatingPreference]:
        return [edge for edge in self.pairs() if edge.is_mutual]
