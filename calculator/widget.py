import logging
from functools import partial

from PySide6.QtWidgets import QWidget, QVBoxLayout, QLineEdit, QGridLayout, QPushButton
from PySide6.QtCore import Qt
from PySide6.QtGui import QKeySequence, QShortcut

from calculator.config import ConfigManager
from calculator.engine import ArithmeticEngine, Operator
from calculator.keymap import KEY_BINDINGS, dispatch_key

log = logging.getLogger(__name__)

# (label, row, col, rowspan, colspan)
BUTTONS = [
    ('AC', 0, 0), ('±', 0, 1), ('%', 0, 2), ('÷', 0, 3),
    ('7', 1, 0), ('8', 1, 1), ('9', 1, 2), ('×', 1, 3),
    ('4', 2, 0), ('5', 2, 1), ('6', 2, 2), ('−', 2, 3),
    ('1', 3, 0), ('2', 3, 1), ('3', 3, 2), ('+', 3, 3),
    ('0', 4, 0, 1, 2), (',', 4, 2), ('=', 4, 3),
]

# named keys of the key map, built from Qt.Key rather than parsed from text
NAMED_KEYS = {
    "Escape": Qt.Key_Escape,
    "Return": Qt.Key_Return,
    "Enter": Qt.Key_Enter,
}

OPERATOR_LABELS = {
    '÷': Operator.DIVIDE,
    '×': Operator.MULTIPLY,
    '−': Operator.SUBTRACT,
    '+': Operator.ADD,
}

BUTTON_STYLE = "background-color: #444; color: white; font-size: 18px; padding: 15px;"
FUNCTION_STYLE = "background-color: #777; color: white; font-size: 18px; padding: 15px;"
OPERATOR_STYLE = """
    QPushButton { background-color: #ff9f0a; color: white; font-size: 18px; padding: 15px; }
    QPushButton:checked { background-color: white; color: #ff9f0a; }
"""


def display_font_size(text):
    """Pixel size of the display font for a text of this length"""
    length = len(text)
    if length <= 6:
        return 44
    if length <= 7:
        return 38
    if length <= 8:
        return 32
    return 26


class CalculatorWidget(QWidget):
    def __init__(self, engine=None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Calculator")
        self.setStyleSheet("background-color: #2d2d2d; color: white; font-size: 18px;")

        self.engine = engine or ArithmeticEngine()
        self._shortcuts = []

        # display
        self.display = QLineEdit()
        self.display.setAlignment(Qt.AlignRight)
        self.display.setReadOnly(True)
        self.display.setFocusPolicy(Qt.NoFocus)

        self.buttons = {}
        grid = QGridLayout()
        for label, row, col, rowspan, colspan in [(*b, 1, 1) if len(b) == 3 else b for b in BUTTONS]:
            button = QPushButton(label)
            button.setFocusPolicy(Qt.NoFocus)
            if label in OPERATOR_LABELS:
                button.setCheckable(True)
                button.setStyleSheet(OPERATOR_STYLE)
            elif label in ('AC', '±', '%'):
                button.setStyleSheet(FUNCTION_STYLE)
            else:
                button.setStyleSheet(BUTTON_STYLE)
            button.clicked.connect(self.on_button_click)
            grid.addWidget(button, row, col, rowspan, colspan)
            self.buttons[label] = button

        layout = QVBoxLayout()
        layout.addWidget(self.display)
        layout.addLayout(grid)
        self.setLayout(layout)

        self._unsubscribe = None
        self.follow_engine()

    # --- keyboard shortcuts, alive while the widget is shown ---

    def install_shortcuts(self):
        if self._shortcuts:
            return
        seen = set()
        for key in KEY_BINDINGS:
            sequence = QKeySequence(NAMED_KEYS.get(key, key))
            # "c" and "C" are the same sequence; a duplicate would make both ambiguous
            if sequence.toString() in seen:
                continue
            seen.add(sequence.toString())
            shortcut = QShortcut(sequence, self)
            shortcut.activated.connect(partial(self.on_key, key))
            self._shortcuts.append(shortcut)
        log.debug("Installed %d keyboard shortcuts", len(self._shortcuts))

    def release_shortcuts(self):
        for shortcut in self._shortcuts:
            shortcut.setEnabled(False)
            shortcut.deleteLater()
        self._shortcuts = []

    @property
    def shortcuts(self):
        return list(self._shortcuts)

    def follow_engine(self):
        if self._unsubscribe is None:
            self._unsubscribe = self.engine.subscribe(lambda state: self.refresh())
        self.refresh()

    def showEvent(self, event):
        self.follow_engine()
        self.install_shortcuts()
        super().showEvent(event)

    def hideEvent(self, event):
        self.release_shortcuts()
        super().hideEvent(event)

    def closeEvent(self, event):
        self.release_shortcuts()
        geometry = {
            "x": self.x(),
            "y": self.y(),
            "width": self.width(),
            "height": self.height()
        }
        ConfigManager.update_window_geometry(geometry)
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        event.accept()

    def restore_geometry(self, geometry):
        if geometry:
            self.setGeometry(
                geometry.get("x", 100),
                geometry.get("y", 100),
                geometry.get("width", 300),
                geometry.get("height", 400)
            )

    # --- gestures ---

    def on_key(self, key):
        return dispatch_key(self.engine, key)

    def on_button_click(self):
        self.press(self.sender().text())

    def press(self, label):
        if label in OPERATOR_LABELS:
            self.engine.select_operator(OPERATOR_LABELS[label])
        elif label == "=":
            self.engine.evaluate()
        elif label == "AC":
            self.engine.clear()
        elif label == "±":
            self.engine.toggle_sign()
        elif label == "%":
            self.engine.percent()
        elif label == ",":
            self.engine.enter_decimal_point()
        else:
            self.engine.enter_digit(label)
        # a checkable button toggles itself on click; the engine decides
        self.refresh()

    def refresh(self):
        state = self.engine.state
        self.display.setText(state.display)
        self.display.setStyleSheet(
            f"background-color: #1e1e1e; color: white; padding: 5px; font-size: {display_font_size(state.display)}px;"
        )
        for label, op in OPERATOR_LABELS.items():
            self.buttons[label].setChecked(state.pending_operator is op)
