"""
Key classification and action dispatch.

Every button click and keystroke goes through dispatch(), one action at a
time, so the engine only ever sees one transition per event.
"""

from typing import Callable, Dict, Optional, Tuple

from . import engine
from .engine import CalculatorState, Operation

DIGIT = "digit"
DECIMAL = "decimal"
OPERATOR = "operator"
EQUALS = "equals"
CLEAR = "clear"
CLEAR_ALL = "clear_all"
BACKSPACE = "backspace"
PERCENTAGE = "percentage"
TOGGLE_SIGN = "toggle_sign"
CLEAR_HISTORY = "clear_history"
TOGGLE_HISTORY = "toggle_history"

ACTIONS = (
    DIGIT,
    DECIMAL,
    OPERATOR,
    EQUALS,
    CLEAR,
    CLEAR_ALL,
    BACKSPACE,
    PERCENTAGE,
    TOGGLE_SIGN,
    CLEAR_HISTORY,
    TOGGLE_HISTORY,
)

_NAMED_KEYS: Dict[str, str] = {
    ".": DECIMAL,
    "Enter": EQUALS,
    "=": EQUALS,
    "Escape": CLEAR,
    "Backspace": BACKSPACE,
    "%": PERCENTAGE,
}

_COMMANDS: Dict[str, Callable[[CalculatorState], CalculatorState]] = {
    DECIMAL: engine.input_decimal,
    EQUALS: engine.calculate,
    CLEAR: engine.clear,
    CLEAR_ALL: engine.clear_all,
    BACKSPACE: engine.backspace,
    PERCENTAGE: engine.percentage,
    TOGGLE_SIGN: engine.toggle_sign,
    CLEAR_HISTORY: engine.clear_history,
}


class UnknownActionError(ValueError):
    """Raised when an action or its value cannot be applied."""


def classify_key(key: str) -> Optional[Tuple[str, Optional[str]]]:
    """
    Map a keyboard key name to an action.

    Args:
        key: Key name as reported by a browser keydown event ("7", "+",
            "Enter", "Escape", ...)

    Returns:
        (action, value) tuple, or None for keys the calculator ignores
    """
    if len(key) == 1 and "0" <= key <= "9":
        return DIGIT, key
    if key in ("+", "-", "*", "/"):
        return OPERATOR, key
    action = _NAMED_KEYS.get(key)
    if action is None:
        return None
    return action, None


def dispatch(
    state: CalculatorState, action: str, value: Optional[str] = None
) -> CalculatorState:
    """
    Apply one action to the calculator state.

    Args:
        state: Current state
        action: One of ACTIONS
        value: Digit for "digit", operator symbol or name for "operator"

    Returns:
        The next state. "toggle_history" only affects presentation and
        returns the state unchanged.

    Raises:
        UnknownActionError: If the action is unknown or its value is invalid
    """
    if action == DIGIT:
        if not value or len(value) != 1 or value not in "0123456789":
            raise UnknownActionError(f"Invalid digit: {value!r}")
        return engine.input_digit(state, value)

    if action == OPERATOR:
        if not value:
            raise UnknownActionError("Operator action needs a value")
        try:
            operation = Operation.from_symbol(value)
        except ValueError as e:
            raise UnknownActionError(str(e)) from e
        return engine.apply_operation(state, operation)

    if action == TOGGLE_HISTORY:
        return state

    command = _COMMANDS.get(action)
    if command is None:
        raise UnknownActionError(f"Unknown action: {action}")
    return command(state)
