from concurrent import futures

import pytest

from relay_server.config import Settings
from relay_server.relay_interface.broker_client import BrokerSessionClient
from relay_server.relay_interface.relay_service import MessageRelayService


class FakeSession:

    def __init__(self, properties, connect_error=None, hang=False, send_error=None, disconnect_error=None):
        self.properties = properties
        self.connect_error = connect_error
        self.hang = hang
        self.send_error = send_error
        self.disconnect_error = disconnect_error
        self.sent = []
        self.connect_calls = 0
        self.disconnect_calls = 0
        self.dispose_calls = 0

    def connect(self):
        self.connect_calls += 1
        future = futures.Future()
        if self.hang:
            return future
        if self.connect_error is not None:
            future.set_exception(self.connect_error)
        else:
            future.set_result(None)
        return future

    def send(self, message):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(message)

    def disconnect(self):
        self.disconnect_calls += 1
        if self.disconnect_error is not None:
            raise self.disconnect_error

    def dispose(self):
        self.dispose_calls += 1


class FakeSessionFactory:

    def __init__(self, **session_kwargs):
        self.session_kwargs = session_kwargs
        self.sessions = []

    def create_session(self, properties):
        session = FakeSession(properties, **self.session_kwargs)
        self.sessions.append(session)
        return session

    @property
    def session(self):
        assert len(self.sessions) == 1
        return self.sessions[0]


@pytest.fixture
def valid_params():
    return {
        "brokerUrl": "ws://localhost:8008",
        "vpnName": "default",
        "username": "admin",
        "password": "admin",
        "destination": "DEAL.IN",
        "payload": "hello",
        "isQueue": True,
    }


@pytest.fixture
def factory():
    return FakeSessionFactory()


@pytest.fixture
def service(factory):
    return MessageRelayService(BrokerSessionClient(factory, connect_timeout=0.5))


@pytest.fixture
def settings():
    return Settings(port=5050)


@pytest.fixture
def make_factory():
    return FakeSessionFactory
