"""Shared fixtures for monadkit tests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pytest

from monadkit._config import reset_config
from monadkit._logging import LOGGER_NAME, add_log_hook, clear_log_hooks, configure_logging

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Give every test a fresh configuration resolved from a clean environment."""
    for name in ('MONADKIT_LOG_LEVEL', 'MONADKIT_JSON_LOGS', 'MONADKIT_TRACE_CONVERSIONS'):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def restore_logging() -> Generator[None]:
    """Undo configure_logging() and drop registered hooks."""
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level, propagate = logger.handlers[:], logger.level, logger.propagate
    yield
    clear_log_hooks()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def captured_events(restore_logging: None) -> list[dict[str, Any]]:
    """Configure DEBUG logging and collect every emitted event dict."""
    events: list[dict[str, Any]] = []
    configure_logging(level='DEBUG', json_output=True)
    add_log_hook(events.append)
    return events


class Counter:
    """Callable that records how often (and with what) it was invoked."""

    def __init__(self, returns: Any = None) -> None:
        self.calls: list[Any] = []
        self._returns = returns

    @property
    def count(self) -> int:
        return len(self.calls)

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args[0] if len(args) == 1 else args)
        return self._returns


@pytest.fixture
def counter() -> Counter:
    return Counter()


@pytest.fixture
def counter_factory() -> type[Counter]:
    """Build additional independent counters inside a test."""
    return Counter
