"""Tests for the session status machine and shutdown hook."""

from __future__ import annotations

import signal
import threading
import time

from relay_core.events import STATUS_CHANGED, EventBus
from relay_core.status import SessionStatus, ShutdownHook, Status


def test_transitions_only_move_forward() -> None:
    status = SessionStatus()
    assert status.state is Status.NOT_INITIALIZED
    assert status.initialize() is True
    assert status.initialize() is False
    assert status.transition(Status.NOT_INITIALIZED) is False
    assert status.terminate() is True
    assert status.terminate() is False
    assert status.state is Status.TERMINATED


def test_terminate_before_initialization_is_allowed() -> None:
    status = SessionStatus()
    assert status.terminate() is True
    assert status.initialize() is False


def test_status_changes_are_emitted() -> None:
    events = EventBus()
    seen: list[tuple[Status, Status]] = []
    events.on(STATUS_CHANGED, lambda event: seen.append((event.payload["old"], event.payload["new"])))
    status = SessionStatus(events)

    status.initialize()
    status.terminate()
    status.terminate()

    assert seen == [
        (Status.NOT_INITIALIZED, Status.INITIALIZED),
        (Status.INITIALIZED, Status.TERMINATED),
    ]


def test_racing_terminations_finalize_once() -> None:
    status = SessionStatus()
    finalized: list[str] = []
    status.on_terminated(lambda: finalized.append(threading.current_thread().name))
    status.initialize()
    barrier = threading.Barrier(8)

    def trigger() -> None:
        barrier.wait()
        status.terminate()

    threads = [threading.Thread(target=trigger) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(finalized) == 1
    assert status.wait_terminated(0)


def test_shutdown_hook_routes_signals_and_exit() -> None:
    status = SessionStatus()
    finalized: list[int] = []
    status.on_terminated(lambda: finalized.append(1))
    hook = ShutdownHook(status)

    hook._on_signal(signal.SIGTERM, None)
    assert status.wait_terminated(5)
    hook._on_exit()

    assert finalized == [1]
    assert status.state is Status.TERMINATED


def test_signal_while_status_lock_is_held_does_not_block() -> None:
    status = SessionStatus()
    hook = ShutdownHook(status)

    with status._lock:
        hook._on_signal(signal.SIGINT, None)
        assert not status.wait_terminated(0)

    assert status.wait_terminated(5)
    assert status.state is Status.TERMINATED


def test_waiters_resume_after_termination_observers() -> None:
    status = SessionStatus()
    finished: list[str] = []

    def slow_finalizer() -> None:
        time.sleep(0.2)
        finished.append("observer")

    status.on_terminated(slow_finalizer)
    threading.Thread(target=status.terminate).start()

    assert status.wait_terminated(5)
    assert finished == ["observer"]
