"""
Broker session port.

A BrokerSession is created fresh for every publish and never shared. Its
connect() returns a future that resolves exactly once: a result means the
session is up, an exception means the connect failed.
"""

from concurrent import futures
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Protocol


class DestinationKind(str, Enum):
    QUEUE = "QUEUE"
    TOPIC = "TOPIC"


class DeliveryMode(str, Enum):
    DIRECT = "DIRECT"
    PERSISTENT = "PERSISTENT"


@dataclass(frozen=True)
class SessionProperties:
    url: str
    vpn_name: str
    user_name: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class Destination:
    name: str
    kind: DestinationKind

    @classmethod
    def queue(cls, name: str) -> "Destination":
        """Durable, point-to-point queue destination."""
        return cls(name, DestinationKind.QUEUE)

    @classmethod
    def topic(cls, name: str) -> "Destination":
        return cls(name, DestinationKind.TOPIC)

    @property
    def is_queue(self) -> bool:
        return self.kind is DestinationKind.QUEUE


@dataclass
class OutboundMessage:
    destination: Destination
    attachment: str
    delivery_mode: DeliveryMode = DeliveryMode.DIRECT
    properties: Dict[str, Any] = field(default_factory=dict)


class BrokerSession(Protocol):

    def connect(self) -> futures.Future: ...

    def send(self, message: OutboundMessage) -> None: ...

    def disconnect(self) -> None: ...

    def dispose(self) -> None: ...


class SessionFactory(Protocol):

    def create_session(self, properties: SessionProperties) -> BrokerSession: ...
