"""Logging setup shared by every combitest module.

All loggers live under the ``combitest`` namespace. The namespace logger owns
a single handler; child loggers only inherit from it. Records still propagate
to the Python root logger so pytest's ``caplog`` sees them.

Levels may be given as numbers or names (``"debug"``, ``"WARNING"``). The
initial level can be set with the ``COMBITEST_LOG_LEVEL`` environment
variable.
"""

import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAMESPACE = "combitest"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LEVEL_ENV_VAR = "COMBITEST_LOG_LEVEL"

LevelLike = Union[int, str]

_configured = False


def coerce_level(level: LevelLike) -> int:
    """Turn a level number or case-insensitive level name into a number.

    Raises:
        ValueError: If ``level`` names no known logging level.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    # getLevelName maps unknown names to "Level <name>"
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def _level_from_env(default: int) -> int:
    raw = os.environ.get(LEVEL_ENV_VAR, "").strip()
    if not raw:
        return default
    try:
        return coerce_level(raw)
    except ValueError:
        logging.getLogger(LOGGER_NAMESPACE).warning(
            "Ignoring %s=%r: not a logging level", LEVEL_ENV_VAR, raw
        )
        return default


def _namespace_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAMESPACE)


def _apply_level(level: int) -> None:
    namespace_logger = _namespace_logger()
    namespace_logger.setLevel(level)
    for handler in namespace_logger.handlers:
        handler.setLevel(level)


def setup_root_logger(
    level: Optional[LevelLike] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach one handler to the ``combitest`` namespace logger.

    Only the first call has an effect; later calls return immediately until
    :func:`reset_logging` is used.

    Args:
        level: Namespace level. Defaults to ``COMBITEST_LOG_LEVEL`` or INFO.
        format_string: Formatter pattern; defaults to :data:`DEFAULT_FORMAT`.
        handler: Handler to install; defaults to a stdout stream handler.
    """
    global _configured
    if _configured:
        return

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))

    namespace_logger = _namespace_logger()
    namespace_logger.handlers[:] = [handler]
    namespace_logger.propagate = True
    _configured = True

    resolved = coerce_level(level) if level is not None else _level_from_env(logging.INFO)
    namespace_logger.setLevel(resolved)


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the ``combitest`` namespace.

    Names outside the namespace (for example ``"plugins.local"``) are placed
    under it, so every record reaches the namespace handler.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        A logger that defers its level to the namespace logger.
    """
    setup_root_logger()
    if name == LOGGER_NAMESPACE:
        return _namespace_logger()
    if not name.startswith(LOGGER_NAMESPACE + "."):
        name = f"{LOGGER_NAMESPACE}.{name}"
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: LevelLike) -> None:
    """Change the level of the namespace logger and of its handlers."""
    setup_root_logger()
    _apply_level(coerce_level(level))


def enable_debug_logging() -> None:
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    """Return every combitest logger to INFO."""
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Forget the namespace configuration. Intended for tests."""
    global _configured
    _configured = False
    namespace_logger = _namespace_logger()
    namespace_logger.handlers.clear()
    namespace_logger.setLevel(logging.NOTSET)


setup_root_logger()
