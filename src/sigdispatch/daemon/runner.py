"""Watcher process: a long-running consumer of dispatched signals."""

from __future__ import annotations

import logging
import os
import signal
from pathlib import Path

import click

from sigdispatch import config, constants
from sigdispatch.daemon.latch import ShutdownLatch
from sigdispatch.dispatch.dispatcher import Dispatcher, dispatch_channel
from sigdispatch.dispatch.source import subscribe, unsubscribe

logger = logging.getLogger(constants.LOGGER_NAME)


def _pid_file() -> Path:
    return config.data_dir() / constants.PID_FILE_NAME


def _log_file() -> Path:
    return config.data_dir() / constants.LOG_FILE_NAME


def _setup_logging(foreground: bool, level: str) -> None:
    handlers: list[logging.Handler] = [logging.FileHandler(str(_log_file()))]
    if foreground:
        handlers.append(logging.StreamHandler())
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
    )


def _is_running() -> int | None:
    """Check if a watcher is running. Returns PID if running, None otherwise."""
    pid_file = _pid_file()
    if not pid_file.exists():
        return None
    try:
        pid = int(pid_file.read_text().strip())
        os.kill(pid, 0)  # Check if process exists
        return pid
    except (ValueError, ProcessLookupError, PermissionError):
        pid_file.unlink(missing_ok=True)
        return None


def _write_pid() -> None:
    _pid_file().write_text(str(os.getpid()))


def _remove_pid() -> None:
    _pid_file().unlink(missing_ok=True)


class WatchedConfig:
    """Reloader holding the watcher's current configuration."""

    def __init__(self) -> None:
        self.values = config.load_config()
        self.reloads = 0

    def reload(self) -> None:
        self.values = config.load_config()
        self.reloads += 1
        level = self.values.get("logging", {}).get("level", constants.DEFAULT_LOG_LEVEL)
        logger.setLevel(level.upper())
        logger.info("Configuration reloaded (#%d)", self.reloads)

    @property
    def poll_interval(self) -> float:
        return self.values.get("watch", {}).get("poll_interval", constants.POLL_INTERVAL_SECONDS)


def build_watcher(dispatcher: Dispatcher, settings: WatchedConfig) -> ShutdownLatch:
    """Register the watcher's handlers on *dispatcher*."""
    latch = ShutdownLatch()
    latch.install(dispatcher)
    dispatcher.register_reloader(settings)

    def _report() -> None:
        names = ", ".join(str(getattr(s, "name", s)) for s in dispatcher.registry.signals())
        logger.info("Watching %s (%d handlers)", names, len(dispatcher.registry))

    def _toggle_debug() -> None:
        level = logging.INFO if logger.getEffectiveLevel() <= logging.DEBUG else logging.DEBUG
        logger.setLevel(level)
        logger.info("Log level set to %s", logging.getLevelName(level))

    dispatcher.on_usr1(_report)
    dispatcher.on_usr2(_toggle_debug)
    return latch


def _watch_loop(dispatcher: Dispatcher, latch: ShutdownLatch, settings: WatchedConfig) -> None:
    """Idle until a shutdown signal is dispatched."""
    logger.info("Watcher started (PID %d)", os.getpid())
    while not latch.should_stop:
        # Wait for next poll or shutdown signal
        if not latch.wait(settings.poll_interval):
            logger.debug("Watcher idle, dispatch loop alive: %s", dispatcher.running)
    logger.info("Watcher shutting down")


def _run_watcher() -> None:
    settings = WatchedConfig()
    dispatcher = dispatch_channel()
    latch = build_watcher(dispatcher, settings)
    try:
        previous = subscribe(dispatcher.source, config.handled_signals(settings.values))
    except (ValueError, OSError) as e:
        dispatcher.close()
        click.echo(f"Cannot watch signals from [signals] handle: {e}", err=True)
        raise SystemExit(1)
    _write_pid()
    try:
        _watch_loop(dispatcher, latch, settings)
    finally:
        unsubscribe(previous)
        dispatcher.close()
        _remove_pid()


def start_watcher(foreground: bool) -> None:
    """Start the sigdispatch watcher."""
    existing = _is_running()
    if existing:
        click.echo(f"Watcher already running (PID {existing})")
        raise SystemExit(1)

    level = config.get("logging", "level", constants.DEFAULT_LOG_LEVEL)
    _setup_logging(foreground, level)

    if foreground:
        click.echo("Starting sigdispatch watcher in foreground...")
        _run_watcher()
        return

    # Fork to background
    pid = os.fork()
    if pid > 0:
        click.echo(f"Watcher started (PID {pid})")
        click.echo(f"Log: {_log_file()}")
        return

    # Child process
    os.setsid()
    devnull = os.open(os.devnull, os.O_RDWR)
    os.dup2(devnull, 0)
    os.dup2(devnull, 1)
    os.dup2(devnull, 2)
    os.close(devnull)
    _run_watcher()


def send_signal(sig: signal.Signals, pid: int | None = None) -> None:
    """Deliver *sig* to *pid*, or to the running watcher."""
    if pid is None:
        pid = _is_running()
        if pid is None:
            click.echo("Watcher is not running", err=True)
            raise SystemExit(1)
    try:
        os.kill(pid, sig)
    except ProcessLookupError:
        click.echo(f"No process with PID {pid}", err=True)
        raise SystemExit(1)
    click.echo(f"Sent {sig.name} to PID {pid}")


def show_status() -> None:
    """Show whether a watcher is running."""
    pid = _is_running()
    if pid:
        click.echo(f"Watcher: running (PID {pid})")
    else:
        click.echo("Watcher: stopped")
