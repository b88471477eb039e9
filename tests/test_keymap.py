import pytest

from calculator.engine import ArithmeticEngine, Operator
from calculator.keymap import CLEAR_KEYS, KEY_BINDINGS, dispatch_key


def _keys(calc, *keys):
    return [dispatch_key(calc, key) for key in keys]


@pytest.fixture
def calc():
    return ArithmeticEngine()


def test_table_covers_every_key():
    expected = set("0123456789") | {".", ",", "+", "-", "*", "/", "Enter", "Return", "=", "%"} | set(CLEAR_KEYS)
    assert set(KEY_BINDINGS) == expected


def test_digits_and_both_decimal_separators(calc):
    _keys(calc, "1", ",", "5")
    assert calc.display == "1.5"
    _keys(calc, ".")
    assert calc.display == "1.5"


@pytest.mark.parametrize("key, op", [
    ("+", Operator.ADD),
    ("-", Operator.SUBTRACT),
    ("*", Operator.MULTIPLY),
    ("/", Operator.DIVIDE),
])
def test_operator_keys(calc, key, op):
    _keys(calc, "4", key)
    assert calc.active_operator is op


@pytest.mark.parametrize("key", ["Enter", "Return", "="])
def test_evaluate_keys(calc, key):
    _keys(calc, "6", "*", "7", key)
    assert calc.display == "42"


def test_percent_key(calc):
    _keys(calc, "5", "0", "%")
    assert calc.display == "0.5"


def test_unknown_key_is_ignored(calc):
    assert dispatch_key(calc, "x") is False
    assert calc.display == "0"


@pytest.mark.parametrize("clear_key", CLEAR_KEYS)
def test_only_clear_keys_pass_while_errored(calc, clear_key):
    _keys(calc, "8", "/", "0", "Enter")
    assert calc.errored

    assert _keys(calc, "5", "+", ".", "%", "=") == [False] * 5
    assert calc.display == "Error"

    assert dispatch_key(calc, clear_key) is True
    assert calc.display == "0"
    assert not calc.errored
