"""
Success:
{
    "success": true,
    "message": "Message sent successfully"
}

Error:
{
    "success": false,
    "message": "<stable classification message>",
    "error": "<underlying detail>",
    "details": {...}            # optional
}
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel

from relay_server.common.errors import ErrorKind, RelayError


class SendOutcome(BaseModel):
    success: bool = True
    message: str = "Message sent successfully"


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: str
    details: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    port: int
    timestamp: str


DEFAULT_FAILURE = (500, "Failed to send message")

# error kind -> (HTTP status, classification message)
ERROR_STATUS: Dict[ErrorKind, Tuple[int, str]] = {
    ErrorKind.VALIDATION: (400, "Invalid request parameters"),
    ErrorKind.CONNECTION: (503, "Unable to connect to Solace broker"),
    ErrorKind.MESSAGE: DEFAULT_FAILURE,
}


def build_error(exc: Exception) -> Tuple[int, Dict[str, Any]]:
    """Map any exception to (status_code, JSON body)."""
    if isinstance(exc, RelayError):
        status, message = ERROR_STATUS.get(exc.kind, DEFAULT_FAILURE)
        body = ErrorResponse(message=message, error=exc.message, details=exc.details or None)
    else:
        status, message = DEFAULT_FAILURE
        body = ErrorResponse(message=message, error=str(exc))
    return status, body.model_dump(exclude_none=True)


def build_response(outcome: SendOutcome) -> Dict[str, Any]:
    return outcome.model_dump()
