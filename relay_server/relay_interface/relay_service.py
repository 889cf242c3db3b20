from typing import Any

from relay_server.common.protocol import SendOutcome
from relay_server.relay_interface.broker_client import BrokerSessionClient, SendRequest
from relay_server.relay_interface.validators import validate_send_message_params


class MessageRelayService:
    """Validate, then hand off to the broker client. Errors pass through untouched."""

    def __init__(self, broker_client: BrokerSessionClient):
        self.broker_client = broker_client

    def send_message(self, params: Any) -> SendOutcome:
        validate_send_message_params(params)
        return self.broker_client.publish(SendRequest.from_params(params))
