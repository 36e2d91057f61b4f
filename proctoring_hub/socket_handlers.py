"""
Socket.IO bindings for the exam monitor namespace.

Clients connect to the namespace, send ``join-monitor`` with an exam
id and then receive ``student-event`` messages for that exam until
they disconnect.
"""

import logging

from flask import request
from flask_socketio import SocketIO

from .hub import ProctoringHub


logger = logging.getLogger(__name__)


def register_school_namespace(socketio: SocketIO, hub: ProctoringHub, namespace: str = '/school') -> None:
    """Wire connect, join-monitor and disconnect on ``namespace`` to the hub."""

    @socketio.on('connect', namespace=namespace)
    def on_connect(auth=None):
        sid = request.sid

        def send(event_name, payload):
            socketio.emit(event_name, payload, to=sid, namespace=namespace)

        hub.connect(sid, send)

    @socketio.on('join-monitor', namespace=namespace)
    def on_join_monitor(payload=None):
        hub.handle_join_message(request.sid, payload)

    @socketio.on('disconnect', namespace=namespace)
    def on_disconnect(*args):
        hub.disconnect(request.sid)

    logger.info(f"Registered monitor namespace {namespace}")
