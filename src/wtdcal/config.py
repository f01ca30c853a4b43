"""Configuration management for wtdcal."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

WTDCAL_HOME = Path(os.environ.get("WTDCAL_HOME", Path.home() / "wtdcal"))
CONFIG_FILE = WTDCAL_HOME / "config" / "wtdcal.conf"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class Config:
    """wtdcal configuration."""

    input_file: str = "wtd.md"
    title: str = "Calendar"
    placeholder: str = "busy"
    stylesheet_href: str = ""
    show_grid: bool = True
    slot_minutes: int = 15
    window_days: int = 0  # 0 renders the whole journal


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_bool(key: str, value: str, default: bool) -> bool:
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    logger.warning(f"Invalid boolean for {key.upper()}: {value!r}")
    return default


def _parse_positive_int(key: str, value: str, default: int, allow_zero: bool = False) -> int:
    try:
        number = int(value)
    except ValueError:
        logger.warning(f"Invalid number for {key.upper()}: {value!r}")
        return default
    if number < 0 or (number == 0 and not allow_zero):
        logger.warning(f"Out of range value for {key.upper()}: {number}")
        return default
    return number


def load_config(path: Path | None = None) -> Config:
    """Load configuration from wtdcal.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "input_file":
                config.input_file = value
            case "title":
                config.title = value
            case "placeholder":
                config.placeholder = value
            case "stylesheet_href":
                config.stylesheet_href = value
            case "show_grid":
                config.show_grid = _parse_bool(key, value, config.show_grid)
            case "slot_minutes":
                config.slot_minutes = _parse_positive_int(key, value, config.slot_minutes)
            case "window_days":
                config.window_days = _parse_positive_int(
                    key, value, config.window_days, allow_zero=True
                )
            case _:
                logger.warning(f"Unknown config key: {key.upper()}")

    return config
