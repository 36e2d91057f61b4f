"""
Proctoring Hub Models - Data models for monitor connections, rooms and events.
"""

import threading
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional

from shared_utils.common import get_timestamp, get_timestamp_string

from .interfaces import EmitterHandle


# Outbound transport sink: (event name, payload)
SendCallback = Callable[[str, Dict[str, Any]], None]


class EventType(Enum):
    """Enumeration of student event types."""
    CAMERA = "camera"
    MIC = "mic"
    TAB = "tab"
    AI = "ai"
    TAB_SWITCH = "TAB_SWITCH"
    FACE_MISSING = "FACE_MISSING"


class Severity(Enum):
    """Enumeration of event severities."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ConnectionState(Enum):
    """Lifecycle states of a monitor connection."""
    CONNECTED = "connected"
    JOINED = "joined"
    DISCONNECTED = "disconnected"


class StudentEvent:
    """
    A proctoring observation about one student, broadcast to monitors and never stored.
    """

    def __init__(
        self,
        student_id: str,
        event_type: EventType,
        timestamp: datetime,
        severity: Severity = Severity.MEDIUM,
        status: Optional[Any] = None
    ):
        """Initialize a student event."""
        self.student_id = student_id
        self.event_type = event_type
        self.timestamp = timestamp
        self.severity = severity
        self.status = status

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StudentEvent':
        """
        Build an event from an inbound payload.

        Raises:
            ValueError: If the type or severity is unknown
            KeyError: If studentId or type is missing
        """
        timestamp = data.get('timestamp')
        return cls(
            student_id=str(data['studentId']),
            event_type=EventType(data['type']),
            timestamp=datetime.fromisoformat(timestamp) if timestamp else get_timestamp(),
            severity=Severity(data.get('severity', Severity.MEDIUM.value)),
            status=data.get('status')
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire payload of a ``student-event`` message."""
        payload = {
            'studentId': self.student_id,
            'type': self.event_type.value,
            'timestamp': get_timestamp_string(self.timestamp),
            'severity': self.severity.value
        }
        if self.status is not None:
            payload['status'] = self.status
        return payload

    def __str__(self) -> str:
        """String representation."""
        return f"StudentEvent({self.student_id}, {self.event_type.value}, {self.severity.value})"


class MonitorConnection:
    """
    One connected observer.

    A connection belongs to at most one room and owns at most one
    emitter handle at a time.
    """

    def __init__(self, connection_id: str, send: SendCallback):
        """Initialize a monitor connection in the CONNECTED state."""
        self.connection_id = connection_id
        self.send = send
        self.state = ConnectionState.CONNECTED
        self.room_id: Optional[str] = None
        self.emitter: Optional[EmitterHandle] = None
        # Serializes this connection's join/disconnect transitions
        self.lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self.state != ConnectionState.DISCONNECTED

    def release_emitter(self) -> None:
        """Cancel and forget the owned emitter, if any."""
        emitter, self.emitter = self.emitter, None
        if emitter is not None:
            emitter.cancel()


class ExamRoom:
    """
    Broadcast group of monitor connections for one exam session.
    """

    def __init__(self, room_id: str):
        """Initialize an empty room."""
        self.room_id = room_id
        self.members: Dict[str, MonitorConnection] = {}
        self.lock = threading.Lock()

    @property
    def channel_name(self) -> str:
        """Name of the transport room this exam maps to."""
        return f"exam-{self.room_id}"

    def add(self, connection: MonitorConnection) -> None:
        with self.lock:
            self.members[connection.connection_id] = connection

    def remove(self, connection_id: str) -> bool:
        """Remove a member; returns True if the room is now empty."""
        with self.lock:
            self.members.pop(connection_id, None)
            return not self.members

    def snapshot(self):
        """Members at this instant, safe to iterate without the lock."""
        with self.lock:
            return list(self.members.values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        with self.lock:
            member_ids = sorted(self.members)
        return {
            'room_id': self.room_id,
            'channel': self.channel_name,
            'member_count': len(member_ids),
            'members': member_ids
        }
