"""
=============================================================================
MODULE NAME: engine.py
=============================================================================

INPUT:
- Classified key events (digits, decimal point, operators, commands).

OUTPUT:
- A new CalculatorState per event; states are never mutated in place.

NOTES:
- Sequential, last-operation-wins arithmetic like a pocket calculator. There
  is no operator precedence.
- The staged left operand and its operator live together in one tagged value
  (Idle or OperandStaged), so one is never set without the other.
- Division by zero yields 0. No transition raises.
=============================================================================
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple, Union

from .numbers import number_to_string, parse_float

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10


class Operation(Enum):
    """Binary operations, valued by their display symbol."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @property
    def symbol(self) -> str:
        return self.value

    def apply(self, left: float, right: float) -> float:
        if self is Operation.ADD:
            return left + right
        if self is Operation.SUBTRACT:
            return left - right
        if self is Operation.MULTIPLY:
            return left * right
        return left / right if right != 0 else 0.0

    @classmethod
    def from_symbol(cls, symbol: str) -> Operation:
        """
        Look up an operation by symbol or name.

        Args:
            symbol: One of '+', '-', '*', '/' or 'add', 'subtract', 'multiply', 'divide'

        Raises:
            ValueError: If the symbol names no operation
        """
        try:
            return cls(symbol)
        except ValueError:
            pass
        try:
            return cls[symbol.upper()]
        except KeyError:
            raise ValueError(f"Unknown operation: {symbol!r}") from None


@dataclass(frozen=True, slots=True)
class Idle:
    """No operand staged."""


@dataclass(frozen=True, slots=True)
class OperandStaged:
    """A left operand waiting for its right-hand side."""

    value: float
    operation: Operation


Pending = Union[Idle, OperandStaged]

IDLE = Idle()


@dataclass(frozen=True, slots=True)
class CalculatorState:
    """Snapshot of the calculator between two key presses."""

    display: str = "0"
    pending: Pending = IDLE
    waiting_for_operand: bool = False
    history: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def previous_value(self) -> Optional[float]:
        if isinstance(self.pending, OperandStaged):
            return self.pending.value
        return None

    @property
    def operation(self) -> Optional[Operation]:
        if isinstance(self.pending, OperandStaged):
            return self.pending.operation
        return None


def initial_state() -> CalculatorState:
    """Return the state a new session starts from."""
    return CalculatorState()


def input_digit(state: CalculatorState, digit: str) -> CalculatorState:
    """
    Type a single digit.

    A digit typed right after an operator or equals starts a new operand.
    Otherwise it is appended, except that a lone "0" is replaced.

    Args:
        state: Current state
        digit: Single digit character (0-9)
    """
    if state.waiting_for_operand:
        return replace(state, display=digit, waiting_for_operand=False)

    if state.display == "0":
        return replace(state, display=digit)
    return replace(state, display=state.display + digit)


def input_decimal(state: CalculatorState) -> CalculatorState:
    """Type a decimal point; ignored when the operand already has one."""
    if state.waiting_for_operand:
        return replace(state, display="0.", waiting_for_operand=False)

    if "." in state.display:
        return state
    return replace(state, display=state.display + ".")


def apply_operation(
    state: CalculatorState, next_operation: Optional[Operation]
) -> CalculatorState:
    """
    Press an operator key, or equals when next_operation is None.

    With nothing staged the displayed value becomes the left operand. With an
    operand staged the pending operation is carried out first: the result is
    shown, logged to history, and becomes the new left operand for
    next_operation.

    Args:
        state: Current state
        next_operation: Operator to stage, or None to compute

    Returns:
        The next state
    """
    input_value = parse_float(state.display)
    pending = state.pending

    if not isinstance(pending, OperandStaged):
        if next_operation is None:
            return replace(state, waiting_for_operand=True)
        return replace(
            state,
            pending=OperandStaged(input_value, next_operation),
            waiting_for_operand=True,
        )

    current_value = 0.0 if math.isnan(pending.value) else pending.value
    result = pending.operation.apply(current_value, input_value)

    calculation = (
        f"{number_to_string(current_value)} {pending.operation.symbol} "
        f"{number_to_string(input_value)} = {number_to_string(result)}"
    )
    logger.debug("Computed %s", calculation)

    if next_operation is None:
        staged: Pending = IDLE
    else:
        staged = OperandStaged(result, next_operation)

    return replace(
        state,
        display=number_to_string(result),
        pending=staged,
        waiting_for_operand=True,
        history=(calculation,) + state.history[: HISTORY_LIMIT - 1],
    )


def calculate(state: CalculatorState) -> CalculatorState:
    """Press equals."""
    return apply_operation(state, None)


def percentage(state: CalculatorState) -> CalculatorState:
    value = parse_float(state.display)
    return replace(state, display=number_to_string(value / 100))


def toggle_sign(state: CalculatorState) -> CalculatorState:
    value = parse_float(state.display)
    return replace(state, display=number_to_string(-value))


def backspace(state: CalculatorState) -> CalculatorState:
    """Delete the last character; the display never becomes empty."""
    if len(state.display) > 1:
        return replace(state, display=state.display[:-1])
    return replace(state, display="0")


def clear(state: CalculatorState) -> CalculatorState:
    """Reset entry and staging, keeping history."""
    return CalculatorState(history=state.history)


def clear_all(state: CalculatorState) -> CalculatorState:
    """Reset everything, history included."""
    return CalculatorState()


def clear_history(state: CalculatorState) -> CalculatorState:
    return replace(state, history=())


def staged_expression(state: CalculatorState) -> str:
    """
    Caption shown above the display while an operand is staged.

    Returns:
        "<previous> <symbol>", or an empty string when idle
    """
    if isinstance(state.pending, OperandStaged):
        return f"{number_to_string(state.pending.value)} {state.pending.operation.symbol}"
    return ""


__all__ = [
    "HISTORY_LIMIT",
    "Operation",
    "Idle",
    "OperandStaged",
    "IDLE",
    "CalculatorState",
    "initial_state",
    "input_digit",
    "input_decimal",
    "apply_operation",
    "calculate",
    "percentage",
    "toggle_sign",
    "backspace",
    "clear",
    "clear_all",
    "clear_history",
    "staged_expression",
]
