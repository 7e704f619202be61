"""Tests for the calculator engine transitions."""

import math

from keypad_calc import engine
from keypad_calc.engine import (
    HISTORY_LIMIT,
    CalculatorState,
    Idle,
    OperandStaged,
    Operation,
)


def press_digits(state, digits):
    for d in digits:
        state = engine.input_digit(state, d)
    return state


def test_initial_state():
    state = engine.initial_state()
    assert state.display == "0"
    assert isinstance(state.pending, Idle)
    assert state.previous_value is None
    assert state.operation is None
    assert state.waiting_for_operand is False
    assert state.history == ()


def test_digits_concatenate_and_replace_leading_zero():
    """Test that a lone "0" is replaced rather than prefixed."""
    state = press_digits(engine.initial_state(), "05")
    assert state.display == "5"

    state = press_digits(state, "07")
    assert state.display == "507"


def test_transitions_return_new_state():
    """Test that transitions never mutate their input."""
    start = engine.initial_state()
    after = engine.input_digit(start, "9")
    assert start.display == "0"
    assert after.display == "9"
    assert after is not start


def test_decimal_point_once_per_operand():
    state = engine.input_decimal(engine.initial_state())
    assert state.display == "0."

    state = engine.input_decimal(state)
    assert state.display == "0."

    state = engine.input_digit(state, "5")
    assert state.display == "0.5"
    state = engine.input_decimal(state)
    assert state.display.count(".") == 1


def test_decimal_after_operator_starts_new_operand():
    state = press_digits(engine.initial_state(), "12")
    state = engine.apply_operation(state, Operation.ADD)
    state = engine.input_decimal(state)
    assert state.display == "0."
    assert state.waiting_for_operand is False


def test_operator_stages_operand_and_keeps_display():
    state = press_digits(engine.initial_state(), "42")
    state = engine.apply_operation(state, Operation.MULTIPLY)

    assert state.display == "42"
    assert state.pending == OperandStaged(42.0, Operation.MULTIPLY)
    assert state.previous_value == 42.0
    assert state.operation is Operation.MULTIPLY
    assert state.waiting_for_operand is True
    assert state.history == ()


def test_digit_after_operator_replaces_display():
    state = press_digits(engine.initial_state(), "42")
    state = engine.apply_operation(state, Operation.SUBTRACT)
    state = engine.input_digit(state, "7")
    assert state.display == "7"
    assert state.waiting_for_operand is False


def test_add_then_equals():
    """Test the 7 + 3 = scenario."""
    state = engine.input_digit(engine.initial_state(), "7")
    state = engine.apply_operation(state, Operation.ADD)
    state = engine.input_digit(state, "3")
    state = engine.calculate(state)

    assert state.display == "10"
    assert state.history == ("7 + 3 = 10",)
    assert isinstance(state.pending, Idle)
    assert state.waiting_for_operand is True


def test_each_operation():
    cases = [
        (Operation.ADD, "9", "4", "13", "9 + 4 = 13"),
        (Operation.SUBTRACT, "4", "9", "-5", "4 - 9 = -5"),
        (Operation.MULTIPLY, "6", "7", "42", "6 * 7 = 42"),
        (Operation.DIVIDE, "10", "4", "2.5", "10 / 4 = 2.5"),
    ]
    for op, left, right, display, entry in cases:
        state = press_digits(engine.initial_state(), left)
        state = engine.apply_operation(state, op)
        state = press_digits(state, right)
        state = engine.calculate(state)
        assert state.display == display
        assert state.history[0] == entry


def test_divide_by_zero_yields_zero():
    """Test the 5 / 0 = scenario."""
    state = engine.input_digit(engine.initial_state(), "5")
    state = engine.apply_operation(state, Operation.DIVIDE)
    state = engine.input_digit(state, "0")
    state = engine.calculate(state)

    assert state.display == "0"
    assert state.history == ("5 / 0 = 0",)


def test_floating_point_result_is_not_rounded():
    state = engine.input_decimal(engine.initial_state())
    state = engine.input_digit(state, "1")
    state = engine.apply_operation(state, Operation.ADD)
    state = engine.input_decimal(state)
    state = engine.input_digit(state, "2")
    state = engine.calculate(state)
    assert state.display == "0.30000000000000004"


def test_chained_operators_compute_left_to_right():
    """Test that 2 + 3 * 4 = evaluates as (2 + 3) * 4."""
    state = engine.input_digit(engine.initial_state(), "2")
    state = engine.apply_operation(state, Operation.ADD)
    state = engine.input_digit(state, "3")
    state = engine.apply_operation(state, Operation.MULTIPLY)

    assert state.display == "5"
    assert state.pending == OperandStaged(5.0, Operation.MULTIPLY)

    state = engine.input_digit(state, "4")
    state = engine.calculate(state)
    assert state.display == "20"
    assert state.history == ("5 * 4 = 20", "2 + 3 = 5")


def test_digit_after_equals_starts_new_calculation():
    state = engine.input_digit(engine.initial_state(), "7")
    state = engine.apply_operation(state, Operation.ADD)
    state = engine.input_digit(state, "3")
    state = engine.calculate(state)

    state = engine.input_digit(state, "2")
    assert state.display == "2"
    state = engine.calculate(state)
    assert state.display == "2"
    assert len(state.history) == 1


def test_operator_after_equals_chains_onto_result():
    state = engine.input_digit(engine.initial_state(), "7")
    state = engine.apply_operation(state, Operation.ADD)
    state = engine.input_digit(state, "3")
    state = engine.calculate(state)

    state = engine.apply_operation(state, Operation.MULTIPLY)
    state = engine.input_digit(state, "2")
    state = engine.calculate(state)
    assert state.display == "20"
    assert state.history[0] == "10 * 2 = 20"


def test_operator_pressed_twice_computes_with_same_operand():
    """Test sequential semantics: 6 + + applies 6 + 6."""
    state = engine.input_digit(engine.initial_state(), "6")
    state = engine.apply_operation(state, Operation.ADD)
    state = engine.apply_operation(state, Operation.ADD)
    assert state.display == "12"
    assert state.history == ("6 + 6 = 12",)


def test_equals_with_nothing_staged():
    state = press_digits(engine.initial_state(), "8")
    state = engine.calculate(state)
    assert state.display == "8"
    assert state.history == ()
    assert state.waiting_for_operand is True


def test_history_keeps_newest_ten():
    """Test that 12 chained computations leave the 10 most recent."""
    state = engine.input_digit(engine.initial_state(), "1")
    state = engine.apply_operation(state, Operation.ADD)
    for _ in range(12):
        state = engine.input_digit(state, "1")
        state = engine.apply_operation(state, Operation.ADD)

    assert len(state.history) == HISTORY_LIMIT
    assert state.history[0] == "12 + 1 = 13"
    assert state.history[-1] == "3 + 1 = 4"


def test_staged_nan_operand_counts_as_zero():
    state = CalculatorState(display="-")
    state = engine.apply_operation(state, Operation.ADD)
    assert math.isnan(state.previous_value)

    state = engine.input_digit(state, "4")
    state = engine.calculate(state)
    assert state.display == "4"
    assert state.history == ("0 + 4 = 4",)


def test_percentage():
    state = press_digits(engine.initial_state(), "50")
    state = engine.percentage(state)
    assert state.display == "0.5"


def test_percentage_leaves_staging_alone():
    state = press_digits(engine.initial_state(), "200")
    state = engine.apply_operation(state, Operation.MULTIPLY)
    state = press_digits(state, "5")
    state = engine.percentage(state)
    assert state.display == "0.05"
    assert state.pending == OperandStaged(200.0, Operation.MULTIPLY)

    state = engine.calculate(state)
    assert state.display == "10"


def test_toggle_sign():
    state = press_digits(engine.initial_state(), "5")
    state = engine.toggle_sign(state)
    assert state.display == "-5"
    state = engine.toggle_sign(state)
    assert state.display == "5"

    assert engine.toggle_sign(engine.initial_state()).display == "0"


def test_toggle_sign_on_unparseable_display():
    state = engine.toggle_sign(CalculatorState(display="-"))
    assert state.display == "NaN"


def test_backspace_never_empties_display():
    """Test the 123 backspace scenario."""
    state = CalculatorState(display="123")
    displays = []
    for _ in range(4):
        state = engine.backspace(state)
        displays.append(state.display)
    assert displays == ["12", "1", "0", "0"]


def test_clear_keeps_history():
    state = engine.input_digit(engine.initial_state(), "7")
    state = engine.apply_operation(state, Operation.ADD)
    state = engine.input_digit(state, "3")
    state = engine.apply_operation(state, Operation.ADD)
    state = engine.input_digit(state, "9")

    cleared = engine.clear(state)
    assert cleared.display == "0"
    assert cleared.previous_value is None
    assert cleared.operation is None
    assert cleared.waiting_for_operand is False
    assert cleared.history == state.history == ("7 + 3 = 10",)


def test_clear_all_empties_history():
    state = CalculatorState(display="5", history=("2 + 3 = 5",))
    state = engine.clear_all(state)
    assert state == engine.initial_state()


def test_clear_history_keeps_entry():
    state = CalculatorState(
        display="9",
        pending=OperandStaged(3.0, Operation.ADD),
        history=("1 + 2 = 3",),
    )
    state = engine.clear_history(state)
    assert state.history == ()
    assert state.display == "9"
    assert state.pending == OperandStaged(3.0, Operation.ADD)


def test_staged_expression():
    assert engine.staged_expression(engine.initial_state()) == ""
    state = engine.apply_operation(CalculatorState(display="7"), Operation.DIVIDE)
    assert engine.staged_expression(state) == "7 /"


def test_operation_from_symbol_and_name():
    assert Operation.from_symbol("+") is Operation.ADD
    assert Operation.from_symbol("divide") is Operation.DIVIDE
    assert Operation.DIVIDE.apply(1.0, 0.0) == 0.0
