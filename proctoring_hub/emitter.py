"""
Emitters - Scheduled event producers for monitor connections.

PeriodicEmitter runs a callback on a background thread at a fixed
interval until cancelled. SyntheticEventGenerator is the placeholder
signal source used until real detectors feed the hub.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

import numpy as np

from shared_utils.common import get_timestamp

from .interfaces import EmitterHandle, EventSource
from .models import EventType, Severity, StudentEvent


class PeriodicEmitter(EmitterHandle):
    """
    Thread-backed emitter handle.

    The first call happens one interval after start(); nothing fires
    once cancel() has returned, unless cancel() is called from inside
    the callback itself.
    """

    def __init__(self, interval_seconds: float, callback: Callable[[], None], name: str = "emitter"):
        """
        Initialize the emitter.

        Args:
            interval_seconds: Delay between calls
            callback: Work to run on every tick
            name: Thread name, used in logs
        """
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.name = name
        self.logger = logging.getLogger(f"{__name__}.PeriodicEmitter")
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._tick_lock = threading.Lock()

    def start(self) -> None:
        """Start firing in a background thread."""
        if self._thread is not None:
            return

        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        self.logger.debug(f"Emitter {self.name} started ({self.interval_seconds}s)")

    def cancel(self) -> None:
        """Stop firing and wait for an in-flight tick to finish."""
        if self._stop_event.is_set():
            return

        self._stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            # Waiting on the tick lock means no callback is mid-flight
            with self._tick_lock:
                pass
        self.logger.debug(f"Emitter {self.name} cancelled")

    @property
    def is_active(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    def _run(self) -> None:
        """Tick loop."""
        while not self._stop_event.wait(self.interval_seconds):
            with self._tick_lock:
                if self._stop_event.is_set():
                    break
                try:
                    self.callback()
                except Exception as e:
                    self.logger.error(f"Error in emitter {self.name}: {e}", exc_info=True)


class SyntheticEventGenerator(EventSource):
    """
    Placeholder signal source producing random monitoring events.

    Each event picks one of two categories with equal probability and a
    student id uniformly from 1..pool_size.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        student_pool_size: int = 8,
        severity: Severity = Severity.MEDIUM,
        clock: Callable[[], datetime] = get_timestamp
    ):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.student_pool_size = student_pool_size
        self.severity = severity
        self.clock = clock

    def get_source_name(self) -> str:
        return "synthetic"

    def next_event(self) -> StudentEvent:
        """Draw the next synthetic event."""
        event_type = EventType.TAB_SWITCH if self.rng.random() > 0.5 else EventType.FACE_MISSING
        student_id = str(int(self.rng.integers(1, self.student_pool_size + 1)))
        return StudentEvent(
            student_id=student_id,
            event_type=event_type,
            timestamp=self.clock(),
            severity=self.severity
        )
