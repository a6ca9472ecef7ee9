"""
Four-function calculator engine with a single pending operation.

The engine is a two-operand accumulator: typing an operator parks the current
operand and waits for the next one, and chained operators evaluate left to
right. Division by zero (and any non-finite result) produces the ERROR_MARKER
display value instead of raising.

Error state: a digit typed while the display shows ERROR_MARKER behaves as an
implicit ``clear()`` followed by that digit. Operators and ``calculate()`` are
ignored until then.
"""

import math
from dataclasses import dataclass, replace

from scorepad.logic.enums import CalculatorKey, Operator

ERROR_MARKER = "Error"

DECIMAL_POINT = "."
DIGIT_TOKENS = frozenset("0123456789.")

# Integral results at or above this magnitude keep exponent notation.
_PLAIN_INTEGER_LIMIT = 1e21


@dataclass(frozen=True)
class CalculatorState:
    """Snapshot of the calculator registers."""

    current_operand: str = "0"
    pending_operand: str = ""
    pending_operator: Operator | None = None
    awaiting_fresh_input: bool = False

    @property
    def is_error(self) -> bool:
        return self.current_operand == ERROR_MARKER


def format_number(value: float) -> str:
    """Render a result deterministically, or ERROR_MARKER if it is not finite."""
    if not math.isfinite(value):
        return ERROR_MARKER
    if value.is_integer() and abs(value) < _PLAIN_INTEGER_LIMIT:
        return str(int(value))
    return repr(value)


def _parse_operand(text: str) -> float:
    # a bare "0." or "-3." is still a valid operand
    return float(text) if text not in ("", DECIMAL_POINT) else 0.0


def _apply(operator: Operator, left: float, right: float) -> str:
    if operator is Operator.ADD:
        return format_number(left + right)
    if operator is Operator.SUBTRACT:
        return format_number(left - right)
    if operator is Operator.MULTIPLY:
        return format_number(left * right)
    if right == 0:
        return ERROR_MARKER
    return format_number(left / right)


def to_points(result: str) -> int | None:
    """
    Round a calculator display value to whole points.

    Halves round toward positive infinity (2.5 -> 3, -2.5 -> -2).
    Returns None for ERROR_MARKER or text that is not a number.
    """
    if result == ERROR_MARKER:
        return None
    try:
        value = _parse_operand(result)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return math.floor(value + 0.5)


class Calculator:
    """Stateful four-function calculator."""

    def __init__(self) -> None:
        self._state = CalculatorState()

    @property
    def state(self) -> CalculatorState:
        return self._state

    @property
    def is_error(self) -> bool:
        return self._state.is_error

    def clear(self) -> None:
        self._state = CalculatorState()

    def append_digit(self, token: str) -> bool:
        """
        Append a digit or decimal point to the current operand.

        Returns False (no state change) for unknown tokens and for a second
        decimal point in the same operand.
        """
        if token not in DIGIT_TOKENS:
            return False
        if self._state.is_error:
            self.clear()

        current = self._state.current_operand
        if self._state.awaiting_fresh_input:
            current = ""

        if token == DECIMAL_POINT:
            if DECIMAL_POINT in current:
                return False
            current = "0." if current in ("", "0") else current + token
        elif current == "0":
            current = token
        else:
            current += token

        self._state = replace(self._state, current_operand=current, awaiting_fresh_input=False)
        return True

    def set_operator(self, op: str | Operator) -> bool:
        """
        Park the current operand behind an operator.

        If an operation is already pending it is evaluated first, so
        ``3 + 4 +`` shows 7 before waiting for the next operand. Returns False
        for unknown operators, in the error state, or when the chained
        evaluation itself ends in an error.
        """
        try:
            operator = Operator(op)
        except ValueError:
            return False
        if self._state.is_error:
            return False

        if self._state.pending_operator is not None and self._state.pending_operand != "":
            self.calculate()
            if self._state.is_error:
                return False

        self._state = replace(
            self._state,
            pending_operator=operator,
            pending_operand=self._state.current_operand,
            awaiting_fresh_input=True,
        )
        return True

    def calculate(self) -> bool:
        """Evaluate the pending operation. Returns False when there is nothing to evaluate."""
        state = self._state
        if state.is_error or state.pending_operator is None or state.pending_operand == "":
            return False

        result = _apply(
            state.pending_operator,
            _parse_operand(state.pending_operand),
            _parse_operand(state.current_operand),
        )
        self._state = CalculatorState(current_operand=result, awaiting_fresh_input=True)
        return True

    def get_result(self) -> str:
        return self._state.current_operand

    def press(self, key: str) -> bool:
        """Dispatch a single keypad key: a digit, an operator, '=' or 'C'."""
        if key in DIGIT_TOKENS:
            return self.append_digit(key)
        if key == CalculatorKey.EQUALS:
            return self.calculate()
        if key == CalculatorKey.CLEAR:
            self.clear()
            return True
        return self.set_operator(key)
