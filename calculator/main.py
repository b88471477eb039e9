import logging
import os
import sys

from PySide6.QtWidgets import QApplication

from calculator.config import ConfigManager
from calculator.engine import ArithmeticEngine
from calculator.widget import CalculatorWidget

log = logging.getLogger(__name__)


def setup_logging():
    logging.basicConfig(
        level=os.getenv("CALCULATOR_LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s | %(levelname)s | %(message)s',
    )


def main():
    setup_logging()
    app = QApplication.instance() or QApplication(sys.argv)

    config = ConfigManager.load_config()
    engine = ArithmeticEngine(display_cap=config["display_cap"])
    calc = CalculatorWidget(engine)
    calc.resize(300, 400)
    calc.restore_geometry(config.get("window_geometry"))
    calc.show()
    log.info("Calculator started (display cap %d)", engine.display_cap)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
