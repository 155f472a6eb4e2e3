# filename: snapdir/config.py
""" config.py: Explicit capture/restore settings and the user configuration file. """
import json
import os
import sys
from pathlib import Path
from typing import NamedTuple, Optional, Tuple

from .log import LogHook, get_logger

logger = get_logger(__name__)

# --- Constants ---
APP_NAME = "snapdir"
CONFIG_FILENAME = "config.json"
DEFAULT_MAX_FILE_SIZE = 100 * 1024 * 1024  # 100MB limit


class SnapshotConfig(NamedTuple):
    """Settings handed to capture() and restore() in place of process-wide globals."""
    extra_patterns: Tuple[str, ...] = ()
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    log: Optional[LogHook] = None


# --- Configuration File ---

def get_config_dir() -> Path:
    """
    Platform-specific user configuration directory.

    Returns:
        Path: %APPDATA%\\snapdir, ~/Library/Application Support/snapdir, or
        $XDG_CONFIG_HOME/snapdir (default ~/.config/snapdir).
    """
    if sys.platform == "win32":
        appdata = os.getenv('APPDATA')
        return Path(appdata) / APP_NAME if appdata else Path.home() / f".{APP_NAME}"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME
    return Path(os.getenv('XDG_CONFIG_HOME') or Path.home() / ".config") / APP_NAME


def get_config_path() -> Path:
    """Full path to config.json. The file and its directory may not exist yet."""
    return get_config_dir() / CONFIG_FILENAME


def load_config(config_path: Optional[Path] = None, log: Optional[LogHook] = None) -> SnapshotConfig:
    """
    Builds a SnapshotConfig from the user configuration file.

    Recognised keys::

        {"version": 1,
         "snapshot": {"max_file_size": 1048576},
         "user_default_ignores": ["*.tmp", "build"]}

    A missing file gives the defaults. A file that cannot be read or parsed, or
    values of the wrong type, are reported as warnings and the defaults are used.

    Args:
        config_path: Explicit file to read. Defaults to get_config_path().
        log: Callback carried into the returned config.

    Returns:
        SnapshotConfig: The loaded settings.
    """
    defaults = SnapshotConfig(log=log)
    path = Path(config_path) if config_path is not None else get_config_path()
    if not path.exists():
        logger.debug("Configuration file %s not found. Using default settings.", path)
        return defaults

    try:
        with open(path, 'r', encoding='utf-8') as f:
            config_data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to load or parse config file '%s': %s", path, e)
        return defaults

    if not isinstance(config_data, dict):
        logger.warning("Config file '%s' does not hold a JSON object. Using default settings.", path)
        return defaults

    # Apply settings safely using .get() with defaults
    max_file_size = defaults.max_file_size
    snapshot_conf = config_data.get("snapshot", {})
    if isinstance(snapshot_conf, dict):
        loaded_size = snapshot_conf.get("max_file_size", max_file_size)
        if isinstance(loaded_size, int) and not isinstance(loaded_size, bool) and loaded_size >= 0:
            max_file_size = loaded_size
        else:
            logger.warning("'snapshot.max_file_size' in config is not a non-negative integer. Ignoring. Value: %r",
                           loaded_size)
    else:
        logger.warning("'snapshot' in config is not an object. Ignoring. Value: %r", snapshot_conf)

    extra_patterns: Tuple[str, ...] = ()
    loaded_ignores = config_data.get("user_default_ignores", [])
    if isinstance(loaded_ignores, list) and all(isinstance(p, str) for p in loaded_ignores):
        extra_patterns = tuple(loaded_ignores)
    else:
        logger.warning("'user_default_ignores' in config is not a list of strings. Ignoring. Value: %r",
                       loaded_ignores)

    logger.debug("Configuration loaded successfully from %s", path)
    return SnapshotConfig(extra_patterns=extra_patterns, max_file_size=max_file_size, log=log)
