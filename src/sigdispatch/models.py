"""Signal identities and lifecycle capabilities."""

from __future__ import annotations

import signal
from typing import Callable, Protocol, Union, runtime_checkable

SignalLike = Union[signal.Signals, int]
Handler = Callable[[], None]


@runtime_checkable
class Closer(Protocol):
    """A component that can be closed on shutdown.

    Failure is reported by raising.
    """

    def close(self) -> None: ...


@runtime_checkable
class Reloader(Protocol):
    """A component that can reload itself, typically on SIGHUP."""

    def reload(self) -> None: ...


def normalize(sig: SignalLike) -> SignalLike:
    """Return the ``signal.Signals`` member for *sig* when one exists.

    Integers without a matching member are returned unchanged so that
    programmatic identities can still be used as keys.
    """
    if isinstance(sig, signal.Signals):
        return sig
    try:
        return signal.Signals(sig)
    except ValueError:
        return sig


def signal_name(sig: SignalLike) -> str:
    """Descriptive name used in log lines."""
    sig = normalize(sig)
    if isinstance(sig, signal.Signals):
        return sig.name
    return str(sig)
