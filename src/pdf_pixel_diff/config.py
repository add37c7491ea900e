"""User configuration file management."""

import json
import os
from pathlib import Path

from pdf_pixel_diff.compare.diff import DEFAULT_INCLUDE_AA, DEFAULT_THRESHOLD
from pdf_pixel_diff.render import DEFAULT_DPI

CONFIG_ENV_VAR = "PDF_PIXEL_DIFF_HOME"
CONFIG_FILENAME = "config.json"

DEFAULT_CONFIG = {
    "dpi": DEFAULT_DPI,
    "threshold": DEFAULT_THRESHOLD,
    "include_aa": DEFAULT_INCLUDE_AA,
    "combine_images": False,
    "result_dir": None,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def get_config_dir() -> Path:
    """Get the config directory (``~/.pdf-pixel-diff`` unless overridden)."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".pdf-pixel-diff"


def get_config_file() -> Path:
    return get_config_dir() / CONFIG_FILENAME


def get_config() -> dict:
    """Load the configuration from disk.

    Returns:
        The defaults overlaid with any known keys from the config file. A
        missing or unreadable file yields the defaults.
    """
    config = dict(DEFAULT_CONFIG)
    config_file = get_config_file()
    if not config_file.exists():
        return config

    try:
        stored = json.loads(config_file.read_text())
    except (json.JSONDecodeError, OSError):
        return config

    if isinstance(stored, dict):
        config.update({k: v for k, v in stored.items() if k in DEFAULT_CONFIG})
    return config


def save_config(config: dict) -> None:
    """Save configuration to disk.

    Args:
        config: Configuration dict to save.
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    get_config_file().write_text(json.dumps(config, indent=2))


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Expected a boolean, got {raw!r}")


def parse_config_value(key: str, raw: str):
    """Convert a string from the command line to the type of ``key``.

    Raises:
        KeyError: If ``key`` is not a known setting.
        ValueError: If ``raw`` cannot be converted.
    """
    if key not in DEFAULT_CONFIG:
        raise KeyError(key)

    if key == "dpi":
        return int(raw)
    if key == "threshold":
        value = float(raw)
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"threshold must be between 0 and 1, got {value}")
        return value
    if key in ("include_aa", "combine_images"):
        return _parse_bool(raw)
    # result_dir
    if raw.strip().lower() in ("", "none", "null"):
        return None
    return str(Path(raw).expanduser())


def set_config_value(key: str, raw: str) -> dict:
    """Set a single configuration value and save it.

    Returns:
        The updated configuration.
    """
    config = get_config()
    config[key] = parse_config_value(key, raw)
    save_config(config)
    return config


def reset_config() -> None:
    """Restore every setting to its default."""
    save_config(dict(DEFAULT_CONFIG))
