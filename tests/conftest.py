"""Shared fixtures for christie_projector tests."""

import asyncio
import socket

import pytest

from christie_projector.client import ProjectorHost


class FakeTransport(asyncio.Transport):
    """Transport that records writes and reports close back to its protocol."""

    def __init__(self, protocol):
        super().__init__()
        self.protocol = protocol
        self.written = []
        self.closed = False
        self.aborted = False
        self.close_time = None

    def write(self, data):
        self.written.append(bytes(data))

    def is_closing(self):
        return self.closed

    def close(self):
        if not self.closed:
            loop = asyncio.get_running_loop()
            self.closed = True
            self.close_time = loop.time()
            loop.call_soon(self.protocol.connection_lost, None)

    def abort(self):
        self.aborted = True
        self.close()


class RecordingHost(ProjectorHost):
    """ProjectorHost that records every call made by the instance."""

    def __init__(self):
        self.statuses = []
        self.variable_values = []
        self.feedback_checks = []
        self.action_definitions = None
        self.feedback_definitions = None
        self.variable_definitions = None
        self.logs = []

    def update_status(self, status, message=None):
        self.statuses.append((status, message))

    def set_variable_values(self, values):
        self.variable_values.append(dict(values))

    def check_feedbacks(self, *feedback_kinds):
        self.feedback_checks.append(feedback_kinds)

    def set_action_definitions(self, definitions):
        self.action_definitions = definitions

    def set_feedback_definitions(self, definitions):
        self.feedback_definitions = definitions

    def set_variable_definitions(self, definitions):
        self.variable_definitions = definitions

    def log(self, level, message):
        self.logs.append((level, message))


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep configuration defaults independent of the developer's environment."""
    for name in ("CHRISTIE_PROJECTOR_HOST", "CHRISTIE_PROJECTOR_PORT",
                 "CHRISTIE_PROJECTOR_PASSWORD", "CHRISTIE_PROJECTOR_CONFIG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_transport_factory():
    """Return a function that attaches a FakeTransport to a session."""
    def attach(session):
        transport = FakeTransport(session)
        session.connection_made(transport)
        return transport
    return attach


@pytest.fixture
def recording_host():
    """Create a RecordingHost instance."""
    return RecordingHost()


@pytest.fixture
def closed_port():
    """A local TCP port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


@pytest.fixture
def wait_until():
    """Return a coroutine function that polls a predicate until it is true."""
    async def wait(predicate, timeout=2.0, interval=0.01):
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not met before timeout")
            await asyncio.sleep(interval)
    return wait
