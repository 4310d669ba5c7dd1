"""
Unit tests for operator prompt adapters

- ScriptedOperatorPrompt: answers in order, then defaults
- ConsoleOperatorPrompt: renders the prompt and normalizes the typed answer
"""

import io

import pytest
from rich.console import Console

from src.service.seating.app.dto.conflict_dto import DecisionPrompt
from src.service.seating.domain.enum.conflict import ConflictChoice
from src.service.seating.driven_adapter.prompt import console_operator_prompt
from src.service.seating.driven_adapter.prompt.console_operator_prompt import (
    ConsoleOperatorPrompt,
)
from src.service.seating.driven_adapter.prompt.scripted_operator_prompt import (
    ScriptedOperatorPrompt,
)


CHOICE_PROMPT = DecisionPrompt(
    title='Blocked seat conflict',
    message='Guest cannot be seated on woensdag because of blocked seats.',
    detail='The guest needs 2 seat(s).',
    choices=tuple(ConflictChoice),
    choice_labels=('Try second preferred day', 'Move small groups', 'Use blocked seats', 'Cancel'),
    default=ConflictChoice.TRY_SECOND_DAY,
)


class TestScriptedOperatorPrompt:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_answers_are_consumed_in_order_then_default(self):
        prompt = ScriptedOperatorPrompt(answers=['USE_BLOCKED ', 'nonsense'])

        answers = [await prompt.ask(prompt=CHOICE_PROMPT) for _ in range(3)]

        assert answers == ['use_blocked', 'try_second_day', 'try_second_day']
        assert len(prompt.asked) == 3


class TestConsoleOperatorPrompt:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_renders_choices_and_returns_the_answer(self, monkeypatch):
        # Arrange
        output = io.StringIO()
        asked = {}

        def fake_ask(question, **kwargs):
            asked.update(kwargs)
            return 'reorder_groups'

        monkeypatch.setattr(console_operator_prompt.Prompt, 'ask', fake_ask)
        prompt = ConsoleOperatorPrompt(console=Console(file=output, width=100))

        # Act
        answer = await prompt.ask(prompt=CHOICE_PROMPT)

        # Assert
        assert answer == ConflictChoice.REORDER_GROUPS
        assert asked['choices'] == list(ConflictChoice)
        assert asked['default'] == ConflictChoice.TRY_SECOND_DAY
        rendered = output.getvalue()
        assert 'Blocked seat conflict' in rendered
        assert 'Move small groups' in rendered
