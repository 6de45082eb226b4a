import os
import logging

from mediasort import constants
from mediasort.exceptions import ConfigError

ENV_PREFIX = "MEDIASORT_"
DEFAULT_CONFIG = {
    "log_dir": "logs",
    "log_level": "INFO",
    "chunk_size": constants.CHUNK_SIZE,
}


def _parse_log_level(value):
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise ConfigError(f"unknown log level {value!r}")
    return value.strip().upper()


def _parse_chunk_size(value):
    try:
        size = int(value)
    except ValueError:
        raise ConfigError(f"chunk size must be an integer, got {value!r}") from None
    if size <= 0:
        raise ConfigError(f"chunk size must be positive, got {size}")
    return size


_PARSERS = {
    "log_dir": str,
    "log_level": _parse_log_level,
    "chunk_size": _parse_chunk_size,
}


def load_config(environ=None):
    """Load settings from the environment. Returns defaults for anything unset or invalid."""
    if environ is None:
        environ = os.environ

    config = DEFAULT_CONFIG.copy()
    for key, parse in _PARSERS.items():
        raw = environ.get(ENV_PREFIX + key.upper())
        if raw is None or raw == "":
            continue
        try:
            config[key] = parse(raw)
        except ConfigError as e:
            print(f"Error loading config {ENV_PREFIX + key.upper()}: {e}. Using default.")
    return config
