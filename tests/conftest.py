"""Shared fixtures for hub and app tests."""

from datetime import datetime, timezone

import numpy as np
import pytest

from proctoring_hub.emitter import SyntheticEventGenerator
from proctoring_hub.hub import ProctoringHub
from proctoring_hub.interfaces import EmitterHandle
from shared_utils.config import PlatformConfiguration


FIXED_TIME = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)


class ManualEmitter(EmitterHandle):
    """Emitter that only fires when a test calls fire()."""

    def __init__(self, interval_seconds, callback, name):
        self.interval_seconds = interval_seconds
        self.callback = callback
        self.name = name
        self.started = False
        self.cancelled = False
        self.cancel_count = 0

    def start(self):
        self.started = True

    def cancel(self):
        self.cancel_count += 1
        self.cancelled = True

    @property
    def is_active(self):
        return self.started and not self.cancelled

    def fire(self):
        if self.is_active:
            self.callback()


class ManualEmitterFactory:
    def __init__(self):
        self.created = []

    def __call__(self, interval_seconds, callback, name):
        emitter = ManualEmitter(interval_seconds, callback, name)
        self.created.append(emitter)
        return emitter

    def for_connection(self, connection_id):
        return [e for e in self.created if e.name == f"emitter-{connection_id}"]


class RecordingClient:
    """Send sink that remembers every (event, payload) it was given."""

    def __init__(self):
        self.received = []

    def __call__(self, event_name, payload):
        self.received.append((event_name, payload))

    def events(self, event_name='student-event'):
        return [payload for name, payload in self.received if name == event_name]


@pytest.fixture
def emitters():
    return ManualEmitterFactory()


@pytest.fixture
def event_source():
    return SyntheticEventGenerator(rng=np.random.default_rng(7), clock=lambda: FIXED_TIME)


@pytest.fixture
def config():
    return PlatformConfiguration()


@pytest.fixture
def hub(config, event_source, emitters):
    hub = ProctoringHub(config, event_source=event_source, emitter_factory=emitters)
    yield hub
    hub.shutdown()
