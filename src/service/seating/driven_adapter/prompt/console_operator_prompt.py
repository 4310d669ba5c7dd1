"""
Console Operator Prompt

Interactive prompt for runs started from a terminal. Rich renders the
question; the blocking read runs in a worker thread so the event loop keeps
serving other tasks while the operator decides.
"""

import asyncio
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

from src.platform.logging.loguru_io import Logger
from src.service.seating.app.dto.conflict_dto import DecisionPrompt
from src.service.seating.app.interface.i_operator_prompt import IOperatorPrompt


class ConsoleOperatorPrompt(IOperatorPrompt):
    def __init__(self, *, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def _render(self, prompt: DecisionPrompt) -> None:
        lines = [prompt.message]
        if prompt.detail:
            lines.append(f'[dim]{prompt.detail}[/dim]')
        if prompt.choice_labels:
            lines.append('')
            lines.extend(
                f'  [cyan]{choice}[/cyan]  {label}'
                for choice, label in zip(prompt.choices, prompt.choice_labels)
            )
        self.console.print(Panel('\n'.join(lines), title=prompt.title, border_style='yellow'))

    def _ask_blocking(self, prompt: DecisionPrompt) -> str:
        self._render(prompt)
        return Prompt.ask(
            'Your choice',
            console=self.console,
            choices=list(prompt.choices),
            default=prompt.default,
        )

    async def ask(self, *, prompt: DecisionPrompt) -> str:
        answer = await asyncio.to_thread(self._ask_blocking, prompt)
        Logger.base.info(f'🧑‍💼 [PROMPT] {prompt.title}: {answer}')
        return prompt.normalize(answer)
