"""
Proctoring Hub Interfaces - Base classes for scheduled emitters and event sources.
"""

from abc import ABC, abstractmethod
from typing import Callable


class EmitterHandle(ABC):
    """
    Handle to repeatedly scheduled work.

    Whoever creates a handle owns it and must cancel it.
    """

    @abstractmethod
    def start(self) -> None:
        """Begin firing at the configured interval."""
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Stop firing. Safe to call more than once."""
        pass

    @property
    @abstractmethod
    def is_active(self) -> bool:
        """True between start() and cancel()."""
        pass


# (interval seconds, callback, name) -> handle, not yet started
EmitterFactory = Callable[[float, Callable[[], None], str], EmitterHandle]


class EventSource(ABC):
    """
    Abstract base class for producers of student events.
    """

    @abstractmethod
    def get_source_name(self) -> str:
        """Return the unique name of this event source."""
        pass

    @abstractmethod
    def next_event(self):
        """Produce the next StudentEvent."""
        pass
