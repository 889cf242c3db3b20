import logging
from concurrent import futures
from typing import Optional

from solace.messaging.messaging_service import MessagingService
from solace.messaging.resources.topic import Topic

from relay_server.broker.session import (
    DeliveryMode,
    Destination,
    OutboundMessage,
    SessionProperties,
)

logger = logging.getLogger(__name__)

# Topic prefix the broker routes straight to the named queue.
QUEUE_NETWORK_TOPIC_PREFIX = "#P2P/QUE/"


def broker_properties(properties: SessionProperties) -> dict:
    return {
        "solace.messaging.transport.host": properties.url,
        "solace.messaging.service.vpn-name": properties.vpn_name,
        "solace.messaging.authentication.scheme.basic.username": properties.user_name,
        "solace.messaging.authentication.scheme.basic.password": properties.password,
    }


def resolve_topic(destination: Destination) -> Topic:
    if destination.is_queue:
        return Topic.of(QUEUE_NETWORK_TOPIC_PREFIX + destination.name)
    return Topic.of(destination.name)


class SolaceSession:
    """One MessagingService plus at most one started publisher."""

    def __init__(self, properties: SessionProperties):
        self._service = MessagingService.builder().from_properties(broker_properties(properties)).build()
        self._connect_future: Optional[futures.Future] = None
        self._publisher = None
        self._delivery_mode: Optional[DeliveryMode] = None

    def connect(self) -> futures.Future:
        self._connect_future = self._service.connect_async()
        return self._connect_future

    def _get_publisher(self, delivery_mode: DeliveryMode):
        if self._publisher is not None and self._delivery_mode is delivery_mode:
            return self._publisher
        if self._publisher is not None:
            self._publisher.terminate()

        if delivery_mode is DeliveryMode.PERSISTENT:
            builder = self._service.create_persistent_message_publisher_builder()
        else:
            builder = self._service.create_direct_message_publisher_builder()
        self._publisher = builder.build()
        self._publisher.start()
        self._delivery_mode = delivery_mode
        return self._publisher

    def send(self, message: OutboundMessage) -> None:
        builder = self._service.message_builder()
        for key, value in message.properties.items():
            builder = builder.with_property(key, value)
        outbound = builder.build(message.attachment)
        publisher = self._get_publisher(message.delivery_mode)
        publisher.publish(outbound, resolve_topic(message.destination))

    def disconnect(self) -> None:
        try:
            if self._publisher is not None:
                self._publisher.terminate()
        finally:
            self._publisher = None
            self._service.disconnect()

    def dispose(self) -> None:
        future = self._connect_future
        service = self._service
        if future is not None and not future.done():
            # connect still in flight: tear down once it settles
            def _late_disconnect(f: futures.Future):
                if f.cancelled() or f.exception() is not None:
                    return
                logger.info("Disconnecting late Solace session")
                try:
                    service.disconnect()
                except Exception:
                    logger.exception("Error disconnecting late Solace session")

            future.add_done_callback(_late_disconnect)
        self._publisher = None
        self._connect_future = None


class SolaceSessionFactory:
    """
    One-time broker client setup, performed by the host process before the
    first publish. Sessions it creates are independent of each other.
    """

    def __init__(self, log_level: str = "INFO"):
        logging.getLogger("solace").setLevel(log_level)

    def create_session(self, properties: SessionProperties) -> SolaceSession:
        return SolaceSession(properties)
