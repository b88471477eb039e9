"""Keyboard table for the calculator.

Key names follow QKeySequence spelling ("Return", "Escape", "+", "5", ...),
so the widget can build one shortcut per entry.
"""

from __future__ import annotations

import logging
from functools import partial

from calculator.engine import ArithmeticEngine, Operator

log = logging.getLogger(__name__)

CLEAR_KEYS = ("Escape", "c", "C")


def _build_bindings():
    bindings = {}
    for digit in "0123456789":
        bindings[digit] = partial(ArithmeticEngine.enter_digit, digit=digit)
    for key in (".", ","):
        bindings[key] = ArithmeticEngine.enter_decimal_point
    for key, op in (("+", Operator.ADD), ("-", Operator.SUBTRACT),
                    ("*", Operator.MULTIPLY), ("/", Operator.DIVIDE)):
        bindings[key] = partial(ArithmeticEngine.select_operator, op=op)
    for key in ("Enter", "Return", "="):
        bindings[key] = ArithmeticEngine.evaluate
    for key in CLEAR_KEYS:
        bindings[key] = ArithmeticEngine.clear
    bindings["%"] = ArithmeticEngine.percent
    return bindings


KEY_BINDINGS = _build_bindings()


def dispatch_key(engine: ArithmeticEngine, key: str) -> bool:
    """Run the command bound to ``key``.

    While the engine shows an error only the clear keys get through. Returns
    True when a command ran.
    """
    command = KEY_BINDINGS.get(key)
    if command is None:
        return False
    if engine.errored and key not in CLEAR_KEYS:
        log.debug("Key %r swallowed while in error state", key)
        return False
    command(engine)
    return True
