"""Tests for daemon/latch.py."""

from __future__ import annotations

import signal
import threading

from sigdispatch.daemon.latch import ShutdownLatch
from sigdispatch.models import Closer


def test_initial_state():
    latch = ShutdownLatch()
    assert latch.should_stop is False


def test_close_sets_shutdown():
    latch = ShutdownLatch()
    latch.close()
    assert latch.should_stop is True


def test_is_a_closer():
    assert isinstance(ShutdownLatch(), Closer)


def test_wait_timeout():
    latch = ShutdownLatch()
    assert latch.wait(timeout=0.05) is False
    assert latch.should_stop is False


def test_cross_thread_release():
    latch = ShutdownLatch()
    t = threading.Thread(target=latch.close)
    t.start()
    result = latch.wait(timeout=5.0)
    t.join()
    assert result is True


def test_released_by_dispatched_interrupt(dispatcher):
    latch = ShutdownLatch()
    latch.install(dispatcher)
    dispatcher.emit(signal.SIGINT)
    assert latch.wait(timeout=5.0) is True


def test_released_by_shutdown(dispatcher):
    latch = ShutdownLatch()
    latch.install(dispatcher)
    dispatcher.shutdown()
    assert latch.wait(timeout=5.0) is True


def test_not_released_by_reload(dispatcher, recorder):
    latch = ShutdownLatch()
    latch.install(dispatcher)
    dispatcher.on_hup(recorder.hook("hup"))
    dispatcher.reload()
    assert recorder.wait_for(1)
    assert latch.should_stop is False
