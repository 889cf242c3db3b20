import json
import logging
from concurrent import futures
from dataclasses import dataclass, field
from typing import Any, Mapping

from relay_server.broker.session import (
    BrokerSession,
    DeliveryMode,
    Destination,
    OutboundMessage,
    SessionFactory,
    SessionProperties,
)
from relay_server.common.errors import RelayError, connection_error, message_error
from relay_server.common.protocol import SendOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendRequest:
    broker_url: str
    vpn_name: str
    username: str
    password: str = field(repr=False)
    destination: str
    payload: Any
    is_queue: bool

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "SendRequest":
        """Build from an already validated canonical parameter mapping."""
        return cls(
            broker_url=params["brokerUrl"],
            vpn_name=params["vpnName"],
            username=params["username"],
            password=params["password"],
            destination=params["destination"],
            payload=params["payload"],
            is_queue=params["isQueue"],
        )


def serialize_payload(payload: Any) -> str:
    """Text is sent as-is; anything else goes out as compact JSON."""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def resolve_destination(name: str, is_queue: bool) -> Destination:
    return Destination.queue(name) if is_queue else Destination.topic(name)


class BrokerSessionClient:
    """Connect, publish once, disconnect. A new session for every call."""

    def __init__(
        self,
        session_factory: SessionFactory,
        connect_timeout: float = 10.0,
        delivery_mode: DeliveryMode = DeliveryMode.DIRECT,
        user_id_property: str = "JMSXUserID",
    ):
        self.session_factory = session_factory
        self.connect_timeout = connect_timeout
        self.delivery_mode = DeliveryMode(delivery_mode)
        self.user_id_property = user_id_property

    def publish(self, request: SendRequest) -> SendOutcome:
        properties = SessionProperties(
            url=request.broker_url,
            vpn_name=request.vpn_name,
            user_name=request.username,
            password=request.password,
        )
        try:
            session = self.session_factory.create_session(properties)
            self._connect(session, request)
            try:
                message = self.build_message(request)
                session.send(message)
                logger.info(
                    "Published to %s %s on %s",
                    message.destination.kind.value.lower(),
                    request.destination,
                    request.broker_url,
                )
                return SendOutcome()
            finally:
                self._release(session)
        except RelayError:
            raise
        except Exception as exc:
            logger.exception("Error sending message to %s", request.destination)
            raise message_error(
                f"Failed to send message: {exc}",
                {
                    "brokerUrl": request.broker_url,
                    "destination": request.destination,
                    "isQueue": request.is_queue,
                    "originalError": str(exc),
                },
            ) from exc

    def build_message(self, request: SendRequest) -> OutboundMessage:
        return OutboundMessage(
            destination=resolve_destination(request.destination, request.is_queue),
            attachment=serialize_payload(request.payload),
            delivery_mode=self.delivery_mode,
            properties={self.user_id_property: request.username},
        )

    def _connect(self, session: BrokerSession, request: SendRequest) -> None:
        future = session.connect()
        try:
            future.result(timeout=self.connect_timeout)
        except futures.TimeoutError as exc:
            logger.warning("Connection to %s timed out after %ss", request.broker_url, self.connect_timeout)
            self._dispose(session)
            raise connection_error(
                "Connection to Solace broker timed out",
                {
                    "brokerUrl": request.broker_url,
                    "vpnName": request.vpn_name,
                    "timeoutSeconds": self.connect_timeout,
                },
            ) from exc
        except Exception as exc:
            logger.warning("Connection to %s failed: %s", request.broker_url, exc)
            self._dispose(session)
            raise connection_error(
                "Connection to Solace broker failed",
                {
                    "brokerUrl": request.broker_url,
                    "vpnName": request.vpn_name,
                    "originalError": str(exc),
                },
            ) from exc
        logger.info("Connected to Solace broker %s (vpn %s)", request.broker_url, request.vpn_name)

    def _release(self, session: BrokerSession) -> None:
        try:
            logger.info("Disconnecting from Solace broker")
            session.disconnect()
        except Exception:
            logger.exception("Error disconnecting from Solace broker")
        self._dispose(session)

    def _dispose(self, session: BrokerSession) -> None:
        try:
            session.dispose()
        except Exception:
            logger.exception("Error releasing Solace session")
