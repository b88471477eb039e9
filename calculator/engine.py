"""Arithmetic engine behind the calculator keypad.

The state is an immutable EngineState value. Every command is a plain function
taking the current state and returning the next one; ArithmeticEngine owns one
state and applies those functions for the widget.
"""

from __future__ import annotations

import logging
import math
import operator
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Callable, Optional

log = logging.getLogger(__name__)

DISPLAY_CAP = 9
ERROR_TEXT = "Error"
FRACTION_DIGITS = 8


class Operator(str, Enum):
    """Binary operators, valued by their keypad symbol."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "÷"

    @classmethod
    def parse(cls, value) -> Operator:
        if isinstance(value, cls):
            return value
        value = _ASCII_SYMBOLS.get(value, value)
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"unknown operator: {value!r}") from None


_ASCII_SYMBOLS = {"*": "×", "/": "÷", "−": "-"}

_APPLY = {
    Operator.ADD: operator.add,
    Operator.SUBTRACT: operator.sub,
    Operator.MULTIPLY: operator.mul,
    Operator.DIVIDE: operator.truediv,
}


@dataclass(frozen=True)
class EngineState:
    display: str = "0"
    pending_operand: Optional[float] = None
    pending_operator: Optional[Operator] = None
    awaiting_fresh_entry: bool = False
    errored: bool = False


INITIAL_STATE = EngineState()


# --- number <-> text ---

def significant_length(text: str) -> int:
    """Length of a display text without a leading minus and the decimal point."""
    if text.startswith("-"):
        text = text[1:]
    return len(text.replace(".", "", 1))


def to_plain_text(value: float) -> str:
    """Render a number the way the display shows it.

    Integral values below 1e21 have no fraction, exponent form is only used
    below 1e-6 and from 1e21 up, and the digits are the shortest ones that
    read back to the same float.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))

    magnitude = abs(value)
    text = repr(value)
    if magnitude < 1e-6 or magnitude >= 1e21:
        if "e" not in text:
            text = f"{value:e}"
        mantissa, exponent = text.split("e")
        if "." in mantissa:
            mantissa = mantissa.rstrip("0").rstrip(".")
        return f"{mantissa}e{int(exponent):+d}"
    return format(Decimal(text), "f")


def format_result(value: float, cap: int = DISPLAY_CAP) -> str:
    """Format an evaluation result for a display of ``cap`` characters."""
    if math.isfinite(value) and value.is_integer():
        text = to_plain_text(value)
    elif math.isfinite(value):
        text = to_plain_text(round(value, FRACTION_DIGITS))
    else:
        return to_plain_text(value)

    if significant_length(text) > cap:
        text = to_plain_text(float(f"{value:.{cap}g}"))
    return text


def _value_of(state: EngineState) -> float:
    return float(state.display)


def _is_plain_numeral(text: str) -> bool:
    # exponent and non-finite renderings are shown but never appended to
    return all(ch in "-.0123456789" for ch in text)


# --- transitions ---

def enter_digit(state: EngineState, digit: str, cap: int = DISPLAY_CAP) -> EngineState:
    if len(digit) != 1 or digit not in "0123456789":
        raise ValueError(f"not a digit: {digit!r}")
    if state.errored:
        return state
    if state.awaiting_fresh_entry:
        return replace(state, display=digit, awaiting_fresh_entry=False)
    if significant_length(state.display) >= cap or not _is_plain_numeral(state.display):
        return state
    if state.display == "0":
        return replace(state, display=digit)
    return replace(state, display=state.display + digit)


def enter_decimal_point(state: EngineState, cap: int = DISPLAY_CAP) -> EngineState:
    if state.errored:
        return state
    if state.awaiting_fresh_entry:
        return replace(state, display="0.", awaiting_fresh_entry=False)
    if "." in state.display or significant_length(state.display) >= cap:
        return state
    if not _is_plain_numeral(state.display):
        return state
    return replace(state, display=state.display + ".")


def select_operator(state: EngineState, op, cap: int = DISPLAY_CAP) -> EngineState:
    op = Operator.parse(op)
    if state.errored:
        return state
    if (
        state.pending_operand is not None
        and state.pending_operator is not None
        and not state.awaiting_fresh_entry
    ):
        state = evaluate(state, cap)
        if state.errored:
            return state
    return replace(
        state,
        pending_operand=_value_of(state),
        pending_operator=op,
        awaiting_fresh_entry=True,
    )


def evaluate(state: EngineState, cap: int = DISPLAY_CAP) -> EngineState:
    if state.pending_operand is None or state.pending_operator is None:
        return state

    prev = state.pending_operand
    current = _value_of(state)
    try:
        result = _APPLY[state.pending_operator](prev, current)
    except ZeroDivisionError:
        log.info("Division by zero: %s %s 0", to_plain_text(prev), state.pending_operator.value)
        return EngineState(display=ERROR_TEXT, awaiting_fresh_entry=True, errored=True)

    log.debug("%s %s %s = %r", prev, state.pending_operator.value, current, result)
    return EngineState(display=format_result(result, cap), awaiting_fresh_entry=True)


def clear(state: EngineState) -> EngineState:
    return INITIAL_STATE


def toggle_sign(state: EngineState) -> EngineState:
    if state.errored or state.display == "0":
        return state
    if state.display.startswith("-"):
        return replace(state, display=state.display[1:])
    return replace(state, display="-" + state.display)


def percent(state: EngineState) -> EngineState:
    if state.errored:
        return state
    return replace(state, display=to_plain_text(_value_of(state) / 100))


class ArithmeticEngine:
    """Owns one EngineState and applies the keypad commands to it.

    Commands return nothing; read ``state`` (or the shortcut properties)
    afterwards. Subscribers are called with the new state after every command.
    """

    def __init__(self, display_cap: int = DISPLAY_CAP):
        if display_cap < 1:
            raise ValueError(f"display cap must be positive, got {display_cap}")
        self.display_cap = display_cap
        self._state = INITIAL_STATE
        self._subscribers: list[Callable[[EngineState], None]] = []

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def display(self) -> str:
        return self._state.display

    @property
    def active_operator(self) -> Optional[Operator]:
        return self._state.pending_operator

    @property
    def errored(self) -> bool:
        return self._state.errored

    def subscribe(self, callback: Callable[[EngineState], None]) -> Callable[[], None]:
        """Call ``callback`` after every command; returns the unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _apply(self, command: str, new_state: EngineState) -> None:
        if new_state is self._state:
            log.debug("%s: no change (display %r)", command, new_state.display)
        else:
            log.debug("%s: display %r -> %r", command, self._state.display, new_state.display)
        self._state = new_state
        for callback in list(self._subscribers):
            callback(new_state)

    def enter_digit(self, digit: str) -> None:
        self._apply("enter_digit", enter_digit(self._state, digit, self.display_cap))

    def enter_decimal_point(self) -> None:
        self._apply("enter_decimal_point", enter_decimal_point(self._state, self.display_cap))

    def select_operator(self, op) -> None:
        self._apply("select_operator", select_operator(self._state, op, self.display_cap))

    def evaluate(self) -> None:
        self._apply("evaluate", evaluate(self._state, self.display_cap))

    def clear(self) -> None:
        self._apply("clear", clear(self._state))

    def toggle_sign(self) -> None:
        self._apply("toggle_sign", toggle_sign(self._state))

    def percent(self) -> None:
        self._apply("percent", percent(self._state))
