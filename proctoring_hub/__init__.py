"""
Proctoring Hub Package - Live exam monitoring broadcast.

This package contains the monitor room hub, its scheduled emitters and
the Socket.IO bindings that expose it to monitoring clients.
"""

from .emitter import PeriodicEmitter, SyntheticEventGenerator
from .hub import STUDENT_EVENT, ProctoringHub
from .models import (
    ConnectionState,
    EventType,
    ExamRoom,
    MonitorConnection,
    Severity,
    StudentEvent
)

__all__ = [
    'PeriodicEmitter',
    'SyntheticEventGenerator',
    'STUDENT_EVENT',
    'ProctoringHub',
    'ConnectionState',
    'EventType',
    'ExamRoom',
    'MonitorConnection',
    'Severity',
    'StudentEvent'
]
