"""Signal identities and defaults."""

from __future__ import annotations

import signal

SIGINT = signal.SIGINT
SIGTERM = signal.SIGTERM
SIGHUP = signal.SIGHUP
SIGUSR1 = signal.SIGUSR1
SIGUSR2 = signal.SIGUSR2

SHUTDOWN = SIGTERM  # emitted by Dispatcher.shutdown()
RELOAD = SIGHUP  # emitted by Dispatcher.reload()

SHUTDOWN_SIGNALS = (SIGINT, SIGTERM)
DEFAULT_SIGNALS = (SIGINT, SIGTERM, SIGHUP, SIGUSR1, SIGUSR2)

LOGGER_NAME = "sigdispatch"
LOOP_THREAD_NAME = "sigdispatch-loop"

# Watcher
POLL_INTERVAL_SECONDS = 60  # How often the watcher wakes up while idle
DEFAULT_LOG_LEVEL = "INFO"
PID_FILE_NAME = "sigdispatch.pid"
LOG_FILE_NAME = "sigdispatch.log"
