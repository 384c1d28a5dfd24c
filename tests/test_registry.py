"""Tests for dispatch/registry.py."""

from __future__ import annotations

import signal
import threading

from sigdispatch.dispatch.registry import HandlerRegistry


def _noop() -> None:
    pass


def test_snapshot_empty_for_unknown_signal():
    registry = HandlerRegistry()
    assert registry.snapshot(signal.SIGUSR1) == ()
    assert len(registry) == 0
    assert registry.signals() == []


def test_register_preserves_order():
    registry = HandlerRegistry()
    first, second = (lambda: None), (lambda: None)
    assert registry.register(signal.SIGTERM, first) == 1
    assert registry.register(signal.SIGTERM, second) == 2
    assert registry.snapshot(signal.SIGTERM) == (first, second)


def test_duplicates_are_kept():
    registry = HandlerRegistry()
    registry.register(signal.SIGHUP, _noop)
    registry.register(signal.SIGHUP, _noop)
    assert registry.snapshot(signal.SIGHUP) == (_noop, _noop)
    assert len(registry) == 2


def test_int_and_enum_share_a_key():
    registry = HandlerRegistry()
    registry.register(int(signal.SIGUSR2), _noop)
    assert registry.snapshot(signal.SIGUSR2) == (_noop,)
    assert registry.signals() == [signal.SIGUSR2]


def test_unknown_number_is_its_own_key():
    registry = HandlerRegistry()
    registry.register(10_000, _noop)
    assert registry.snapshot(10_000) == (_noop,)
    assert registry.snapshot(signal.SIGTERM) == ()


def test_snapshot_is_isolated_from_later_registration():
    registry = HandlerRegistry()
    registry.register(signal.SIGTERM, _noop)
    snap = registry.snapshot(signal.SIGTERM)
    registry.register(signal.SIGTERM, _noop)
    assert len(snap) == 1
    assert len(registry.snapshot(signal.SIGTERM)) == 2


def test_concurrent_registration_loses_nothing():
    registry = HandlerRegistry()
    workers = 8
    per_worker = 250
    sigs = [signal.SIGTERM, signal.SIGHUP]
    barrier = threading.Barrier(workers)

    def register_many(idx: int) -> None:
        barrier.wait()
        for _ in range(per_worker):
            registry.register(sigs[idx % 2], _noop)

    threads = [threading.Thread(target=register_many, args=(i,)) for i in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    half = workers // 2 * per_worker
    assert len(registry.snapshot(signal.SIGTERM)) == half
    assert len(registry.snapshot(signal.SIGHUP)) == half
    assert len(registry) == workers * per_worker
