"""Package configuration: Config dataclass, environment detection and init()."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from monadkit._logging import configure_logging, get_logger

__all__ = [
    'Config',
    'get_config',
    'init',
    'reset_config',
]

_TRUTHY = frozenset({'1', 'true', 'yes', 'on'})
_FALSY = frozenset({'0', 'false', 'no', 'off', ''})
_LEVELS = frozenset({'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'})


@dataclass(frozen=True)
class Config:
    """Configuration for monadkit.

    Attributes:
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = leave logging alone.
        json_logs: Render logs as JSON (True) or colored console lines (False).
        trace_conversions: Emit a DEBUG event whenever an exception raised inside a
            continuation is converted into a Fail.
    """

    log_level: str | None = None
    json_logs: bool = True
    trace_conversions: bool = False


# Active configuration (set by init() or resolved lazily from the environment)
_config: Config | None = None


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    logging.warning("Unknown %s value '%s', using %s", name, raw, default)
    return default


def _detect_log_level() -> str | None:
    """Detect the log level from MONADKIT_LOG_LEVEL."""
    raw = os.environ.get('MONADKIT_LOG_LEVEL', '').strip().upper()
    if not raw:
        return None
    if raw not in _LEVELS:
        logging.warning("Unknown MONADKIT_LOG_LEVEL value '%s', ignoring", raw)
        return None
    return raw


def _from_env() -> Config:
    return Config(
        log_level=_detect_log_level(),
        json_logs=_env_flag('MONADKIT_JSON_LOGS', True),
        trace_conversions=_env_flag('MONADKIT_TRACE_CONVERSIONS', False),
    )


def init(
    log_level: str | None = None,
    json_logs: bool | None = None,
    trace_conversions: bool | None = None,
) -> Config:
    """Initialize monadkit with the specified configuration.

    Unset arguments fall back to MONADKIT_LOG_LEVEL, MONADKIT_JSON_LOGS and
    MONADKIT_TRACE_CONVERSIONS, then to the Config defaults.

    Args:
        log_level: Logging level ("DEBUG", "INFO", etc.). None = leave logging alone.
        json_logs: JSON (True) or console (False) rendering.
        trace_conversions: Log exceptions converted into Fail at DEBUG level.

    Returns:
        The Config that was set.

    Example:
        ```python
        import monadkit

        monadkit.init(log_level="DEBUG", json_logs=False, trace_conversions=True)
        ```
    """
    global _config  # noqa: PLW0603

    detected = _from_env()
    _config = Config(
        log_level=log_level.upper() if log_level is not None else detected.log_level,
        json_logs=detected.json_logs if json_logs is None else json_logs,
        trace_conversions=detected.trace_conversions if trace_conversions is None else trace_conversions,
    )

    if _config.log_level is not None:
        configure_logging(_config.log_level, json_output=_config.json_logs)
        get_logger(__name__).info(
            'monadkit_configured',
            log_level=_config.log_level,
            json_logs=_config.json_logs,
            trace_conversions=_config.trace_conversions,
        )

    return _config


def get_config() -> Config:
    """Get the active configuration.

    Resolves the configuration from the environment on first use when init()
    has not been called, so library code can always consult it.
    """
    global _config  # noqa: PLW0603

    if _config is None:
        _config = _from_env()
    return _config


def reset_config() -> None:
    """Forget the active configuration (the next get_config() re-reads the environment)."""
    global _config  # noqa: PLW0603

    _config = None
