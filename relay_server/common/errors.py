"""
Error taxonomy for the relay core.

Every failure leaving the core is a RelayError tagged with one ErrorKind:

    VALIDATION  bad input, no network attempted
    CONNECTION  broker unreachable or session rejected
    MESSAGE     message construction / publish failure, or a wrapped exception
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION = "ValidationError"
    CONNECTION = "ConnectionError"
    MESSAGE = "MessageError"


class RelayError(Exception):

    def __init__(self, kind: ErrorKind, message: str, details: Optional[Dict[str, Any]] = None):
        self.kind = kind
        self.message = message
        self.details = details
        super().__init__(message)

    def __repr__(self) -> str:
        return f"RelayError({self.kind.value}, {self.message!r})"


def validation_error(message: str, details: Optional[Dict[str, Any]] = None) -> RelayError:
    return RelayError(ErrorKind.VALIDATION, message, details)


def connection_error(message: str, details: Optional[Dict[str, Any]] = None) -> RelayError:
    return RelayError(ErrorKind.CONNECTION, message, details)


def message_error(message: str, details: Optional[Dict[str, Any]] = None) -> RelayError:
    return RelayError(ErrorKind.MESSAGE, message, details)
