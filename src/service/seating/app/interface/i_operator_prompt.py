"""
Operator Prompt Interface

The blocked-seat conflict protocol suspends on a DecisionPrompt; whoever
drives it asks an operator through this port and resumes with the answer.
"""

from abc import ABC, abstractmethod

from src.service.seating.app.dto.conflict_dto import DecisionPrompt


class IOperatorPrompt(ABC):
    @abstractmethod
    async def ask(self, *, prompt: DecisionPrompt) -> str:
        """
        Present a prompt and wait for the operator's choice.

        Returns:
            One of prompt.choices. There is no timeout: the run waits.
        """
        pass
