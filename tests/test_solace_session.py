from concurrent import futures

import pytest

pytest.importorskip("solace.messaging")

from relay_server.broker import solace_session
from relay_server.broker.session import (
    DeliveryMode,
    Destination,
    OutboundMessage,
    SessionProperties,
)


class FakeTopic:

    def __init__(self, name):
        self.name = name

    @classmethod
    def of(cls, name):
        return cls(name)


class FakeOutbound:

    def __init__(self, payload, properties):
        self.payload = payload
        self.properties = properties


class FakeMessageBuilder:

    def __init__(self):
        self.properties = {}

    def with_property(self, key, value):
        self.properties[key] = value
        return self

    def build(self, payload):
        return FakeOutbound(payload, dict(self.properties))


class FakePublisher:

    def __init__(self, kind):
        self.kind = kind
        self.started = False
        self.terminated = False
        self.published = []

    def start(self):
        self.started = True

    def publish(self, message, destination):
        self.published.append((message, destination))

    def terminate(self):
        self.terminated = True


class FakePublisherBuilder:

    def __init__(self, service, kind):
        self.service = service
        self.kind = kind

    def build(self):
        publisher = FakePublisher(self.kind)
        self.service.publishers.append(publisher)
        return publisher


class FakeService:

    def __init__(self, properties):
        self.properties = properties
        self.connect_future = futures.Future()
        self.publishers = []
        self.disconnect_calls = 0

    def connect_async(self):
        return self.connect_future

    def message_builder(self):
        return FakeMessageBuilder()

    def create_direct_message_publisher_builder(self):
        return FakePublisherBuilder(self, "direct")

    def create_persistent_message_publisher_builder(self):
        return FakePublisherBuilder(self, "persistent")

    def disconnect(self):
        self.disconnect_calls += 1


class FakeServiceBuilder:

    def __init__(self, created):
        self.created = created
        self.properties = None

    def from_properties(self, properties):
        self.properties = properties
        return self

    def build(self):
        service = FakeService(self.properties)
        self.created.append(service)
        return service


@pytest.fixture
def services(monkeypatch):
    created = []

    class FakeMessagingService:
        @staticmethod
        def builder():
            return FakeServiceBuilder(created)

    monkeypatch.setattr(solace_session, "MessagingService", FakeMessagingService)
    monkeypatch.setattr(solace_session, "Topic", FakeTopic)
    return created


@pytest.fixture
def properties():
    return SessionProperties("tcp://broker:55555", "default", "admin", "secret")


def test_broker_properties(services, properties):
    solace_session.SolaceSessionFactory().create_session(properties)

    [service] = services
    assert service.properties == {
        "solace.messaging.transport.host": "tcp://broker:55555",
        "solace.messaging.service.vpn-name": "default",
        "solace.messaging.authentication.scheme.basic.username": "admin",
        "solace.messaging.authentication.scheme.basic.password": "secret",
    }


def test_connect_returns_service_future(services, properties):
    session = solace_session.SolaceSession(properties)
    assert session.connect() is services[0].connect_future


def test_send_to_queue_uses_queue_network_topic(services, properties):
    session = solace_session.SolaceSession(properties)
    session.send(OutboundMessage(Destination.queue("DEAL.IN"), "hello", properties={"JMSXUserID": "admin"}))

    [publisher] = services[0].publishers
    assert publisher.kind == "direct"
    assert publisher.started
    [(message, topic)] = publisher.published
    assert topic.name == "#P2P/QUE/DEAL.IN"
    assert message.payload == "hello"
    assert message.properties == {"JMSXUserID": "admin"}


def test_send_to_topic(services, properties):
    session = solace_session.SolaceSession(properties)
    session.send(OutboundMessage(Destination.topic("orders/new"), "{}"))

    [(_, topic)] = services[0].publishers[0].published
    assert topic.name == "orders/new"


def test_persistent_delivery_uses_persistent_publisher(services, properties):
    session = solace_session.SolaceSession(properties)
    session.send(OutboundMessage(Destination.topic("t"), "x", delivery_mode=DeliveryMode.PERSISTENT))

    assert services[0].publishers[0].kind == "persistent"


def test_disconnect_terminates_publisher(services, properties):
    session = solace_session.SolaceSession(properties)
    session.send(OutboundMessage(Destination.topic("t"), "x"))
    session.disconnect()

    service = services[0]
    assert service.publishers[0].terminated
    assert service.disconnect_calls == 1


def test_dispose_while_connecting_disconnects_later(services, properties):
    session = solace_session.SolaceSession(properties)
    future = session.connect()
    session.dispose()

    service = services[0]
    assert service.disconnect_calls == 0
    future.set_result(None)
    assert service.disconnect_calls == 1


def test_dispose_after_failed_connect_does_nothing(services, properties):
    session = solace_session.SolaceSession(properties)
    future = session.connect()
    session.dispose()
    future.set_exception(RuntimeError("refused"))

    assert services[0].disconnect_calls == 0
