from collections.abc import Mapping
from typing import Any

from relay_server.common.errors import validation_error

# Checked in this order; the first offending field is reported.
REQUIRED_STRING_PARAMS = ("brokerUrl", "vpnName", "username", "password", "destination")


def validate_send_message_params(params: Any) -> None:
    """Raise a VALIDATION RelayError for the first problem found; no I/O."""
    if not isinstance(params, Mapping):
        raise validation_error("Parameters must be provided as an object")

    for name in REQUIRED_STRING_PARAMS:
        value = params.get(name)
        if not value or not isinstance(value, str):
            raise validation_error(f"Parameter '{name}' is required and must be a string")

    if params.get("payload") is None:
        raise validation_error("Parameter 'payload' is required")

    if not isinstance(params.get("isQueue"), bool):
        raise validation_error("Parameter 'isQueue' is required and must be a boolean")
