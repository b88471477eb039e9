"""Keypad calculator: an arithmetic engine and its PySide6 widget.

Run with ``python -m calculator``.
"""

from calculator.engine import ArithmeticEngine, EngineState, Operator

__all__ = ["ArithmeticEngine", "EngineState", "Operator"]
