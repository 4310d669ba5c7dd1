"""
Conflict Protocol DTOs

The protocol never talks to an operator itself: it returns a PendingDecision
and is resumed with the chosen answer, or finishes with a ConflictOutcome.
"""

from typing import Optional

import attrs

from src.service.seating.domain.enum.conflict import ConflictChoice, ConflictState


@attrs.define(frozen=True)
class DecisionPrompt:
    title: str
    message: str
    choices: tuple[str, ...]
    default: str
    detail: str = ''
    choice_labels: tuple[str, ...] = ()  # human-readable, same order as choices

    def normalize(self, answer: Optional[str]) -> str:
        """Unknown or empty answers fall back to the default choice."""
        if answer is None:
            return self.default
        answer = answer.strip().lower()
        return answer if answer in self.choices else self.default


@attrs.define(frozen=True)
class PendingDecision:
    state: ConflictState
    prompt: DecisionPrompt


@attrs.define(frozen=True)
class ConflictOutcome:
    state: ConflictState
    success: bool = False
    choice: Optional[ConflictChoice] = None
    applicable: bool = True  # False when blocked seats were not the only obstacle
    unplaced_guest_ids: tuple[int, ...] = ()  # displaced groups that lost their seats

    @property
    def retry_second_day(self) -> bool:
        return self.state is ConflictState.TRY_SECOND_DAY

    @classmethod
    def not_applicable(cls) -> 'ConflictOutcome':
        return cls(state=ConflictState.CANCELLED, applicable=False)

    @classmethod
    def cancelled(cls, choice: Optional[ConflictChoice] = None) -> 'ConflictOutcome':
        return cls(state=ConflictState.CANCELLED, choice=choice)
