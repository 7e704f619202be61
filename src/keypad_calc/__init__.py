"""Pocket calculator engine with history, keyboard input and a web front-end."""

from .engine import (
    HISTORY_LIMIT,
    CalculatorState,
    Idle,
    OperandStaged,
    Operation,
    apply_operation,
    backspace,
    calculate,
    clear,
    clear_all,
    clear_history,
    initial_state,
    input_decimal,
    input_digit,
    percentage,
    toggle_sign,
)
from .keys import UnknownActionError, classify_key, dispatch
from .numbers import format_display, number_to_string, parse_float

__all__ = [
    "HISTORY_LIMIT",
    "CalculatorState",
    "Idle",
    "OperandStaged",
    "Operation",
    "apply_operation",
    "backspace",
    "calculate",
    "clear",
    "clear_all",
    "clear_history",
    "initial_state",
    "input_decimal",
    "input_digit",
    "percentage",
    "toggle_sign",
    "UnknownActionError",
    "classify_key",
    "dispatch",
    "format_display",
    "number_to_string",
    "parse_float",
]
