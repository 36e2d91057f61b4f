"""
Proctoring Hub - Exam monitoring rooms and event fan-out.

This module contains the ProctoringHub class that tracks monitor
connections, groups them into per-exam rooms, owns each connection's
periodic emitter and broadcasts student events to every member of a
room.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from shared_utils.config import PlatformConfiguration
from shared_utils.validation import InvalidArgument, validate_room_id

from .emitter import PeriodicEmitter, SyntheticEventGenerator
from .interfaces import EmitterFactory, EmitterHandle, EventSource
from .models import (
    ConnectionState, ExamRoom, MonitorConnection, SendCallback, Severity,
    StudentEvent
)


STUDENT_EVENT = 'student-event'


class ProctoringHub:
    """
    Stateful broadcast hub for exam monitors.

    Every connection moves CONNECTED -> JOINED(room) -> DISCONNECTED.
    A joined connection owns exactly one emitter handle, created on
    join and cancelled when the connection leaves its room or
    disconnects. Rooms appear on first join and disappear when their
    last member leaves.

    Lock order: connection.lock, then the registry lock, then room.lock.
    Emitter callbacks never take a connection lock.
    """

    def __init__(
        self,
        config: Optional[PlatformConfiguration] = None,
        event_source: Optional[EventSource] = None,
        emitter_factory: Optional[EmitterFactory] = None
    ):
        """
        Initialize the hub.

        Args:
            config: Platform configuration, defaults if None
            event_source: Producer for periodic events; a synthetic
                generator built from the configuration if None
            emitter_factory: Builds emitter handles; thread-backed
                PeriodicEmitter if None
        """
        self.config = config or PlatformConfiguration()
        self.event_source = event_source or SyntheticEventGenerator(
            student_pool_size=self.config.student_id_pool_size,
            severity=Severity(self.config.synthetic_severity)
        )
        self.emitter_factory = emitter_factory or PeriodicEmitter
        self.logger = logging.getLogger(__name__)

        self._connections: Dict[str, MonitorConnection] = {}
        self._rooms: Dict[str, ExamRoom] = {}
        self._registry_lock = threading.Lock()

    # Connection lifecycle

    def connect(self, connection_id: str, send: SendCallback) -> MonitorConnection:
        """
        Register a new transport connection.

        Args:
            connection_id: Transport-level id (the socket sid)
            send: Delivers (event name, payload) to this client

        Returns:
            The connection, in the CONNECTED state
        """
        with self._registry_lock:
            existing = self._connections.get(connection_id)
            if existing is not None:
                self.logger.warning(f"Connection {connection_id} is already registered")
                return existing
            connection = MonitorConnection(connection_id, send)
            self._connections[connection_id] = connection

        self.logger.info(f"Monitor connected: {connection_id}")
        return connection

    def join(self, connection_id: str, room_id: str) -> bool:
        """
        Add a connection to an exam room and start its emitter.

        Joining the room the connection is already in does nothing.
        Joining a different room moves the connection there.

        Returns:
            True if membership changed

        Raises:
            InvalidArgument: If the room id is malformed or the
                connection is unknown
        """
        if self.config.validate_room_ids:
            validate_room_id(room_id)

        connection = self._get_connection(connection_id)
        with connection.lock:
            if not connection.is_open:
                self.logger.info(f"Ignoring join from closed connection {connection_id}")
                return False

            if connection.room_id == room_id:
                self.logger.debug(f"Connection {connection_id} already in exam {room_id}")
                return False

            if connection.room_id is not None:
                self._leave_room(connection)

            with self._registry_lock:
                room = self._rooms.get(room_id)
                if room is None:
                    room = ExamRoom(room_id)
                    self._rooms[room_id] = room
                    self.logger.info(f"Created monitor room {room.channel_name}")
                room.add(connection)

            connection.room_id = room_id
            connection.state = ConnectionState.JOINED
            connection.emitter = self._start_emitter(connection)

        self.logger.info(f"User {connection_id} joined exam monitor {room_id}")
        return True

    def disconnect(self, connection_id: str) -> bool:
        """
        Tear down a connection: cancel its emitter and drop its membership.

        Returns:
            True if this call performed the cleanup, False if the
            connection was unknown or already gone
        """
        with self._registry_lock:
            connection = self._connections.pop(connection_id, None)

        if connection is None:
            self.logger.debug(f"Disconnect for unknown connection {connection_id}")
            return False

        with connection.lock:
            connection.state = ConnectionState.DISCONNECTED
            if connection.room_id is not None:
                self._leave_room(connection)
            else:
                connection.release_emitter()

        self.logger.info(f"Monitor disconnected: {connection_id}")
        return True

    def handle_join_message(self, connection_id: str, payload: Any) -> bool:
        """
        Handle an inbound ``join-monitor`` message.

        Accepts the exam id as a bare string or as ``{"examId": ...}``.
        Malformed messages are logged and ignored.
        """
        room_id = payload.get('examId') if isinstance(payload, dict) else payload
        try:
            return self.join(connection_id, room_id)
        except InvalidArgument as e:
            self.logger.warning(f"Ignoring join-monitor from {connection_id}: {e}")
            return False

    def shutdown(self) -> None:
        """Disconnect every connection, cancelling all emitters."""
        with self._registry_lock:
            connection_ids = list(self._connections)

        for connection_id in connection_ids:
            self.disconnect(connection_id)
        self.logger.info("Proctoring hub shut down")

    # Broadcast

    def broadcast(self, room_id: str, event_name: str, payload: Dict[str, Any]) -> int:
        """
        Send a message to every current member of a room.

        A failing client is logged and skipped so the rest still receive it.

        Returns:
            Number of members the message was delivered to
        """
        with self._registry_lock:
            room = self._rooms.get(room_id)
        if room is None:
            return 0

        delivered = 0
        for member in room.snapshot():
            if not member.is_open:
                continue
            try:
                member.send(event_name, payload)
                delivered += 1
            except Exception as e:
                self.logger.error(f"Failed to deliver {event_name} to {member.connection_id}: {e}")

        self.logger.debug(f"Broadcast {event_name} to {delivered} monitors of {room.channel_name}")
        return delivered

    def publish_event(self, room_id: str, event: StudentEvent) -> int:
        """Broadcast a student event to a room's monitors."""
        return self.broadcast(room_id, STUDENT_EVENT, event.to_dict())

    def emit_synthetic_event(self, room_id: str) -> int:
        """Draw one event from the event source and broadcast it."""
        return self.publish_event(room_id, self.event_source.next_event())

    # Introspection

    def room_members(self, room_id: str) -> List[str]:
        """Ids of the connections currently in a room, sorted."""
        with self._registry_lock:
            room = self._rooms.get(room_id)
        if room is None:
            return []
        return sorted(member.connection_id for member in room.snapshot())

    def room_ids(self) -> List[str]:
        with self._registry_lock:
            return sorted(self._rooms)

    def get_connection(self, connection_id: str) -> Optional[MonitorConnection]:
        with self._registry_lock:
            return self._connections.get(connection_id)

    def active_emitter_count(self) -> int:
        """Number of emitter handles currently running."""
        with self._registry_lock:
            connections = list(self._connections.values())
        return sum(
            1 for connection in connections
            if connection.emitter is not None and connection.emitter.is_active
        )

    def get_status(self) -> Dict[str, Any]:
        """Summary used by health checks."""
        with self._registry_lock:
            rooms = list(self._rooms.values())
            connection_count = len(self._connections)
        return {
            'connections': connection_count,
            'rooms': {room.room_id: room.to_dict()['member_count'] for room in rooms},
            'active_emitters': self.active_emitter_count(),
            'event_source': self.event_source.get_source_name(),
            'fixed_emitter_room': self.config.fixed_emitter_room
        }

    # Internals

    def _get_connection(self, connection_id: str) -> MonitorConnection:
        connection = self.get_connection(connection_id)
        if connection is None:
            raise InvalidArgument(f"Unknown connection: {connection_id}")
        return connection

    def _start_emitter(self, connection: MonitorConnection) -> EmitterHandle:
        """Create and start the emitter a joined connection owns."""
        target_room = self.config.fixed_emitter_room or connection.room_id
        emitter = self.emitter_factory(
            self.config.emitter_interval_seconds,
            lambda: self.emit_synthetic_event(target_room),
            f"emitter-{connection.connection_id}"
        )
        emitter.start()
        self.logger.debug(f"Started emitter for {connection.connection_id} targeting {target_room}")
        return emitter

    def _leave_room(self, connection: MonitorConnection) -> None:
        """Release the emitter and room membership. Caller holds connection.lock."""
        connection.release_emitter()
        room_id, connection.room_id = connection.room_id, None

        with self._registry_lock:
            room = self._rooms.get(room_id)
            if room is not None and room.remove(connection.connection_id):
                del self._rooms[room_id]
                self.logger.info(f"Removed empty monitor room {room.channel_name}")

        if connection.state == ConnectionState.JOINED:
            connection.state = ConnectionState.CONNECTED
