"""structlog wiring for monadkit's diagnostic events.

monadkit emits a handful of events, all below the ``monadkit`` stdlib logger:

- ``continuation_raised`` (DEBUG): an exception raised inside a continuation
  was converted into a Fail. Only emitted when ``trace_conversions`` is on.
- ``stream_completed_empty`` (DEBUG): a take-one bridge fell back to its
  default error. Only emitted when ``trace_conversions`` is on.
- ``unhandled_stream_error`` (WARNING): a stream errored a subscriber that
  had no error callback.
- ``monadkit_configured`` (INFO): ``init()`` applied a log level.

Loggers are built with ``structlog.wrap_logger`` and a module-local processor
chain instead of ``structlog.configure``, so a host application's own structlog
setup is left untouched. Events leave the chain as plain stdlib records with
their fields in ``extra``, which any stdlib handler can format.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any

import structlog

__all__ = [
    'LOGGER_NAME',
    'LogHook',
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'get_logger',
    'remove_log_hook',
]

LOGGER_NAME = 'monadkit'

type LogHook = Callable[[dict[str, Any]], None]

_hooks: list[LogHook] = []


def _call_hooks(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for hook in tuple(_hooks):
        try:
            hook(dict(event_dict))
        except Exception:  # noqa: S112
            continue  # a failing hook must not drop the event
    return event_dict


_PROCESSORS: list[Any] = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    _call_hooks,
    structlog.stdlib.render_to_log_kwargs,
]


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger below the ``monadkit`` namespace.

    Args:
        name: Dotted logger name. Names outside the namespace are nested
            under it, so ``'cache'`` becomes ``'monadkit.cache'``.
    """
    if not name:
        name = LOGGER_NAME
    elif name != LOGGER_NAME and not name.startswith(f'{LOGGER_NAME}.'):
        name = f'{LOGGER_NAME}.{name}'
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging(level: str = 'INFO', *, json_output: bool = True) -> None:
    """Send monadkit's events to stderr through a structlog ProcessorFormatter.

    Only the ``monadkit`` logger is touched: it gets its own handler, stops
    propagating to the root logger and uses `level`. Calling this again
    replaces the handler installed by the previous call.

    Args:
        level: Level name ("DEBUG", "INFO", ...). Unknown names fall back to INFO.
        json_output: Render JSON lines if True, colored console output otherwise.
    """
    if json_output:
        renderer: Any = structlog.processors.JSONRenderer(default=repr)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(LOGGER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[structlog.stdlib.ExtraAdder(), structlog.processors.TimeStamper(fmt='iso')],
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    logger = logging.getLogger(LOGGER_NAME)
    for existing in [h for h in logger.handlers if h.get_name() == LOGGER_NAME]:
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(logging.getLevelNamesMapping().get(level.upper(), logging.INFO))
    logger.propagate = False


def add_log_hook(hook: LogHook) -> None:
    """Call `hook` with a copy of every event dict that passes the level filter.

    Useful to count converted continuation failures in tests or metrics.
    """
    _hooks.append(hook)


def remove_log_hook(hook: LogHook) -> None:
    if hook in _hooks:
        _hooks.remove(hook)


def clear_log_hooks() -> None:
    _hooks.clear()
