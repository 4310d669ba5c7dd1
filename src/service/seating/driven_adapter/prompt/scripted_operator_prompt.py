"""
Scripted Operator Prompt

Answers prompts from a fixed list, for batch runs and tests. Once the list
is exhausted every prompt gets its default answer.
"""

from typing import Iterable, Optional

from src.platform.logging.loguru_io import Logger
from src.service.seating.app.dto.conflict_dto import DecisionPrompt
from src.service.seating.app.interface.i_operator_prompt import IOperatorPrompt


class ScriptedOperatorPrompt(IOperatorPrompt):
    def __init__(self, *, answers: Optional[Iterable[str]] = None) -> None:
        self._answers = list(answers or [])
        self.asked: list[DecisionPrompt] = []

    async def ask(self, *, prompt: DecisionPrompt) -> str:
        self.asked.append(prompt)
        answer = prompt.normalize(self._answers.pop(0) if self._answers else None)
        Logger.base.info(f'🤖 [PROMPT] {prompt.title}: {answer}')
        return answer
