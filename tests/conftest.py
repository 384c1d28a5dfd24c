"""Shared test fixtures."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import pytest

from sigdispatch import config, constants
from sigdispatch.dispatch.dispatcher import dispatch_channel


@pytest.fixture(autouse=True)
def tmp_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect config/data directory to a temp dir for every test."""
    cfg_dir = tmp_path / "sigdispatch-test"
    cfg_dir.mkdir()
    monkeypatch.setattr(config, "CONFIG_DIR", cfg_dir)
    monkeypatch.setattr(config, "CONFIG_FILE", cfg_dir / "config.toml")
    return cfg_dir


@pytest.fixture(autouse=True)
def reset_logger_level():
    """Handlers under test may change the package logger's level."""
    log = logging.getLogger(constants.LOGGER_NAME)
    level = log.level
    yield
    log.setLevel(level)


@pytest.fixture
def dispatcher():
    """Dispatcher on an injected source; closed after the test."""
    d = dispatch_channel()
    yield d
    d.close()
    d.join(timeout=5.0)


class Recorder:
    """Collects handler invocations from any thread."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self._cond = threading.Condition()

    def hook(self, label: str):
        def _handler() -> None:
            with self._cond:
                self.calls.append(label)
                self._cond.notify_all()
        return _handler

    def count(self, label: str) -> int:
        with self._cond:
            return self.calls.count(label)

    def wait_for(self, total: int, timeout: float = 5.0) -> bool:
        """Wait until at least *total* calls were recorded."""
        with self._cond:
            return self._cond.wait_for(lambda: len(self.calls) >= total, timeout)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()

