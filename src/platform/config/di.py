"""
https://python-dependency-injector.ets-labs.org/index.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.service.seating.app.command.auto_assign_seating_use_case import AutoAssignSeatingUseCase
from src.service.seating.app.command.manage_blocked_seats_use_case import (
    ManageBlockedSeatsUseCase,
)
from src.service.seating.app.command.place_guest_on_day_use_case import PlaceGuestOnDayUseCase
from src.service.seating.app.command.remove_guest_from_seating_use_case import (
    RemoveGuestFromSeatingUseCase,
)
from src.service.seating.app.command.reset_seating_use_case import ResetSeatingUseCase
from src.service.seating.app.command.resolve_blocked_seat_conflict_use_case import (
    ResolveBlockedSeatConflictUseCase,
)
from src.service.seating.app.query.list_blocked_seats_use_case import ListBlockedSeatsUseCase
from src.service.seating.domain.value_object.threshold_policy import DEFAULT_THRESHOLD_POLICY
from src.service.seating.domain.value_object.venue_layout import THEATER_LAYOUT
from src.service.seating.driven_adapter.prompt.console_operator_prompt import (
    ConsoleOperatorPrompt,
)
from src.service.seating.driven_adapter.prompt.scripted_operator_prompt import (
    ScriptedOperatorPrompt,
)
from src.service.seating.driven_adapter.state.seating_store_impl import SeatingStoreImpl


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Static venue data + tunable threshold table
    venue = providers.Object(THEATER_LAYOUT)
    threshold_policy = providers.Object(DEFAULT_THRESHOLD_POLICY)

    # State (Kvrocks)
    seating_store = providers.Singleton(SeatingStoreImpl, venue=venue)

    # Operator prompt: interactive console or canned answers (OPERATOR_PROMPT_MODE)
    operator_prompt = providers.Selector(
        config_service.provided.OPERATOR_PROMPT_MODE,
        console=providers.Singleton(ConsoleOperatorPrompt),
        scripted=providers.Singleton(
            ScriptedOperatorPrompt,
            answers=config_service.provided.OPERATOR_SCRIPTED_ANSWERS,
        ),
    )

    # Seating Use Cases
    resolve_blocked_seat_conflict_use_case = providers.Factory(
        ResolveBlockedSeatConflictUseCase,
        seating_store=seating_store,
        operator_prompt=operator_prompt,
    )
    place_guest_on_day_use_case = providers.Factory(
        PlaceGuestOnDayUseCase,
        seating_store=seating_store,
        resolve_conflict_use_case=resolve_blocked_seat_conflict_use_case,
    )
    auto_assign_seating_use_case = providers.Factory(
        AutoAssignSeatingUseCase,
        seating_store=seating_store,
        place_guest_use_case=place_guest_on_day_use_case,
        venue=venue,
        policy=threshold_policy,
    )
    manage_blocked_seats_use_case = providers.Factory(
        ManageBlockedSeatsUseCase, seating_store=seating_store, venue=venue
    )
    list_blocked_seats_use_case = providers.Factory(
        ListBlockedSeatsUseCase, seating_store=seating_store
    )
    remove_guest_from_seating_use_case = providers.Factory(
        RemoveGuestFromSeatingUseCase, seating_store=seating_store
    )
    reset_seating_use_case = providers.Factory(
        ResetSeatingUseCase, seating_store=seating_store, venue=venue
    )


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
