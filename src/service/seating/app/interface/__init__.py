from src.service.seating.app.interface.i_operator_prompt import IOperatorPrompt
from src.service.seating.app.interface.i_seating_store import ISeatingStore

__all__ = ['IOperatorPrompt', 'ISeatingStore']
