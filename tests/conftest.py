"""Shared test fixtures for hotpotato."""

import threading

import pytest

from hotpotato.config.models import HotPotatoConfig


class FakeHost:
    """DecorationHost that records redraws instead of drawing."""

    def __init__(self) -> None:
        self.updates = 0
        self.sync_calls = 0
        self.updated = threading.Event()

    def sync_exec(self, fn) -> None:
        self.sync_calls += 1
        fn()

    def update_decorations(self) -> None:
        self.updates += 1
        self.updated.set()


class FakeSource:
    """NotificationSource that lets tests push events by hand."""

    def __init__(self) -> None:
        self.listeners = []

    def add_listener(self, listener) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener) -> None:
        self.listeners.remove(listener)

    def fire(self, event) -> None:
        for listener in list(self.listeners):
            listener(event)


@pytest.fixture
def fake_host():
    return FakeHost()


@pytest.fixture
def fake_source():
    return FakeSource()


@pytest.fixture
def sample_config():
    return HotPotatoConfig(time_multiplier_seconds=1)


@pytest.fixture(autouse=True)
def _reset_hotpotato_logger():
    """CLI runs attach handlers to the package logger; undo that per test."""
    import logging

    logger = logging.getLogger("hotpotato")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
