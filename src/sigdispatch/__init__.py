"""sigdispatch: fan OS process signals out to registered handlers."""

from __future__ import annotations

__version__ = "0.1.0"

from sigdispatch.dispatch.dispatcher import (  # noqa: E402
    Dispatcher,
    default_dispatcher,
    dispatch_channel,
    dispatch_signals,
    emit,
)
from sigdispatch.dispatch.source import SignalSource, SourceClosedError  # noqa: E402
from sigdispatch.models import Closer, Reloader  # noqa: E402

__all__ = [
    "Closer",
    "Dispatcher",
    "Reloader",
    "SignalSource",
    "SourceClosedError",
    "default_dispatcher",
    "dispatch_channel",
    "dispatch_signals",
    "emit",
]
