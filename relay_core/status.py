"""Process-wide session status and the hooks that finish a session."""

from __future__ import annotations

import atexit
import logging
import signal
import threading
from enum import Enum
from typing import Any, Callable

from .events import STATUS_CHANGED, EventBus

logger = logging.getLogger(__name__)


class Status(Enum):
    """Session states, ordered by ``rank``."""

    NOT_INITIALIZED = "not-initialized"
    INITIALIZED = "initialized"
    TERMINATED = "terminated"

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS = {
    Status.NOT_INITIALIZED: 0,
    Status.INITIALIZED: 1,
    Status.TERMINATED: 2,
}


class SessionStatus:
    """Monotonic status flag guarded by a lock.

    A transition succeeds only when it moves forward. Exactly one caller wins
    the move into ``TERMINATED``; ``status.changed`` is emitted for the winner
    only, outside the lock, so observers may block or halt the process.
    Waiters are released once the termination observers have returned.
    """

    def __init__(self, events: EventBus | None = None) -> None:
        self.events = events or EventBus()
        self._state = Status.NOT_INITIALIZED
        self._lock = threading.Lock()
        self._terminated = threading.Event()

    @property
    def state(self) -> Status:
        with self._lock:
            return self._state

    def transition(self, new_state: Status) -> bool:
        with self._lock:
            old_state = self._state
            if new_state.rank <= old_state.rank:
                return False
            self._state = new_state
        logger.debug("session %s", new_state.value)
        try:
            self.events.emit(STATUS_CHANGED, {"old": old_state, "new": new_state})
        finally:
            if new_state is Status.TERMINATED:
                self._terminated.set()
        return True

    def initialize(self) -> bool:
        return self.transition(Status.INITIALIZED)

    def terminate(self) -> bool:
        return self.transition(Status.TERMINATED)

    def wait_terminated(self, timeout: float | None = None) -> bool:
        return self._terminated.wait(timeout)

    def on_terminated(self, handler: Callable[[], Any]) -> None:
        """Run ``handler`` once the session reaches ``TERMINATED``."""

        def observer(event) -> None:
            if event.payload["new"] is Status.TERMINATED:
                handler()

        self.events.on(STATUS_CHANGED, observer)


class ShutdownHook:
    """Route interpreter exit and termination signals into ``SessionStatus.terminate``."""

    SIGNALS = (signal.SIGTERM, signal.SIGINT)

    def __init__(self, status: SessionStatus) -> None:
        self.status = status
        self._installed = False
        self._signal_thread: threading.Thread | None = None

    def install(self) -> None:
        if self._installed:
            return
        atexit.register(self._on_exit)
        if threading.current_thread() is threading.main_thread():
            for signum in self.SIGNALS:
                signal.signal(signum, self._on_signal)
        else:
            logger.debug("not on the main thread, signal handlers not installed")
        self._installed = True

    def _on_exit(self) -> None:
        self.status.terminate()

    def _on_signal(self, signum: int, frame: Any) -> None:
        # The interrupted frame may hold the status or event bus lock.
        logger.debug("received signal %s", signum)
        if self._signal_thread is None:
            self._signal_thread = threading.Thread(
                target=self.status.terminate, name="relay-shutdown"
            )
            self._signal_thread.start()
