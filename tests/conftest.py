import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    import calculator.config

    path = tmp_path / "calculator_config.json"
    monkeypatch.setattr(calculator.config, "CONFIG_FILE", path)
    return path
