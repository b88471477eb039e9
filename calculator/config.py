"""Settings file for the calculator window."""

import json
import logging
import os
from pathlib import Path

from calculator.engine import DISPLAY_CAP

log = logging.getLogger(__name__)

CONFIG_FILE = Path(os.getenv("CALCULATOR_CONFIG") or "calculator_config.json")

DEFAULT_CONFIG = {
    "display_cap": DISPLAY_CAP,
    "window_geometry": None,
}


GEOMETRY_KEYS = ("x", "y", "width", "height")


def _valid_geometry(geometry):
    if not isinstance(geometry, dict):
        return False
    for key in GEOMETRY_KEYS:
        value = geometry.get(key)
        if not isinstance(value, int) or isinstance(value, bool):
            return False
    return True


class ConfigManager:
    """Load and save the calculator settings"""

    @staticmethod
    def load_config():
        """Read the settings file, filling missing keys with defaults"""
        config = dict(DEFAULT_CONFIG)
        try:
            with open(CONFIG_FILE, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except FileNotFoundError:
            return config
        except (OSError, json.JSONDecodeError) as e:
            log.warning("Could not load settings from %s: %s", CONFIG_FILE, e)
            return config

        if not isinstance(stored, dict):
            log.warning("Ignoring settings in %s: not a JSON object", CONFIG_FILE)
            return config
        config.update(stored)

        cap = config.get("display_cap")
        if not isinstance(cap, int) or isinstance(cap, bool) or cap < 1:
            log.warning("Invalid display_cap %r, using %d", cap, DISPLAY_CAP)
            config["display_cap"] = DISPLAY_CAP

        geometry = config.get("window_geometry")
        if geometry is not None and not _valid_geometry(geometry):
            log.warning("Invalid window_geometry %r, ignoring it", geometry)
            config["window_geometry"] = None
        return config

    @staticmethod
    def save_config(config):
        """Write the settings file; returns False when it could not be written"""
        try:
            with open(CONFIG_FILE, "w", encoding="utf-8") as f:
                json.dump(config, f, ensure_ascii=False, indent=2)
            return True
        except OSError as e:
            log.warning("Could not save settings to %s: %s", CONFIG_FILE, e)
            return False

    @staticmethod
    def update_display_cap(cap):
        config = ConfigManager.load_config()
        config["display_cap"] = cap
        return ConfigManager.save_config(config)

    @staticmethod
    def update_window_geometry(geometry):
        config = ConfigManager.load_config()
        config["window_geometry"] = geometry
        return ConfigManager.save_config(config)
