import json

import pytest

from calculator.engine import ArithmeticEngine, Operator
from calculator.widget import CalculatorWidget, display_font_size


@pytest.fixture
def widget(qapp, config_file):
    w = CalculatorWidget(ArithmeticEngine())
    yield w
    w.close()
    w.deleteLater()


def _click(widget, *labels):
    for label in labels:
        widget.buttons[label].click()


def test_keypad_layout(widget):
    expected = {"AC", "±", "%", "÷", "×", "−", "+", "=", ","} | set("0123456789")
    assert set(widget.buttons) == expected


def test_clicks_drive_the_engine(widget):
    _click(widget, "3", "+", "4", "=")
    assert widget.display.text() == "7"


def test_operator_button_highlight(widget):
    _click(widget, "9", "×")
    assert widget.buttons["×"].isChecked()
    assert not widget.buttons["+"].isChecked()
    _click(widget, "2", "÷")
    assert widget.display.text() == "18"
    assert widget.buttons["÷"].isChecked()
    assert not widget.buttons["×"].isChecked()
    _click(widget, "=")
    assert not any(widget.buttons[label].isChecked() for label in ("÷", "×", "−", "+"))


def test_clicking_pending_operator_keeps_it_checked(widget):
    _click(widget, "1", "+", "+")
    assert widget.buttons["+"].isChecked()


def test_function_buttons(widget):
    _click(widget, "5", "0", "%")
    assert widget.display.text() == "0.5"
    _click(widget, "±")
    assert widget.display.text() == "-0.5"
    _click(widget, "AC")
    assert widget.display.text() == "0"
    _click(widget, "1", ",", "2")
    assert widget.display.text() == "1.2"


def test_error_shown_and_keys_swallowed(widget):
    _click(widget, "8", "÷", "0", "=")
    assert widget.display.text() == "Error"
    assert widget.on_key("5") is False
    assert widget.display.text() == "Error"
    assert widget.on_key("Escape") is True
    assert widget.display.text() == "0"


def test_display_follows_engine_commands(widget):
    widget.engine.enter_digit("6")
    widget.engine.select_operator(Operator.SUBTRACT)
    assert widget.display.text() == "6"
    assert widget.buttons["−"].isChecked()


def test_shortcuts_live_while_shown(widget):
    assert widget.shortcuts == []
    widget.show()
    keys = {s.key().toString() for s in widget.shortcuts}
    assert "Esc" in keys
    assert "C" in keys
    assert len(keys) == len(widget.shortcuts)
    widget.close()
    assert widget.shortcuts == []


def test_shortcut_activation_dispatches(widget):
    widget.show()
    by_key = {s.key().toString(): s for s in widget.shortcuts}
    by_key["7"].activated.emit()
    by_key["+"].activated.emit()
    by_key["2"].activated.emit()
    by_key["Return"].activated.emit()
    assert widget.display.text() == "9"


def test_close_saves_geometry(widget, config_file):
    widget.show()
    widget.close()
    saved = json.loads(config_file.read_text(encoding="utf-8"))
    assert set(saved["window_geometry"]) == {"x", "y", "width", "height"}


@pytest.mark.parametrize("text, size", [
    ("0", 44),
    ("123456", 44),
    ("1234567", 38),
    ("12345678", 32),
    ("123456789", 26),
])
def test_display_font_size(text, size):
    assert display_font_size(text) == size
