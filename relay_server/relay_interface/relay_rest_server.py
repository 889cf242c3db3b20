import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from relay_server.broker.session import SessionFactory
from relay_server.common.errors import validation_error
from relay_server.common.protocol import HealthResponse, build_error, build_response
from relay_server.config import Settings, load_settings
from relay_server.relay_interface.broker_client import BrokerSessionClient
from relay_server.relay_interface.relay_service import MessageRelayService

logger = logging.getLogger(__name__)

# canonical field -> accepted aliases, in order of preference
FIELD_ALIASES = {
    "brokerUrl": ("brokerUrl",),
    "vpnName": ("vpnName", "vpn"),
    "username": ("username",),
    "password": ("password",),
    "destination": ("destination",),
    "payload": ("payload", "message"),
}


def _first_present(body: Mapping, names) -> Any:
    for name in names:
        value = body.get(name)
        if value is not None and value != "":
            return value
    return None


def normalize_body(body: Any, default_is_queue: bool = True) -> Any:
    """Map an inbound body (with aliases) to the canonical parameter dict."""
    if not isinstance(body, Mapping):
        return body
    params: Dict[str, Any] = {field: _first_present(body, names) for field, names in FIELD_ALIASES.items()}
    params["isQueue"] = body["isQueue"] if "isQueue" in body else default_is_queue
    return params


def build_service(settings: Settings, session_factory: Optional[SessionFactory] = None) -> MessageRelayService:
    if session_factory is None:
        from relay_server.broker.solace_session import SolaceSessionFactory

        session_factory = SolaceSessionFactory(log_level=settings.solace_log_level)
    client = BrokerSessionClient(
        session_factory,
        connect_timeout=settings.connect_timeout,
        delivery_mode=settings.delivery_mode,
        user_id_property=settings.user_id_property,
    )
    return MessageRelayService(client)


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[MessageRelayService] = None,
    session_factory: Optional[SessionFactory] = None,
) -> FastAPI:
    settings = settings or load_settings()
    service = service or build_service(settings, session_factory)

    app = FastAPI(title="Solace Message Relay API")
    app.state.settings = settings
    app.state.service = service
    app.state.port = settings.port

    # --- CORS ---
    cors_origins = {"allow_origins": [settings.client_origin]} if settings.is_production else {"allow_origin_regex": ".*"}
    app.add_middleware(
        CORSMiddleware,
        allow_methods=list(settings.cors_methods),
        allow_headers=list(settings.cors_allowed_headers),
        allow_credentials=settings.cors_credentials,
        **cors_origins,
    )

    @app.exception_handler(RequestValidationError)
    def invalid_body(request: Request, exc: RequestValidationError):
        logger.warning("Rejected malformed body on %s: %s", request.url.path, exc.errors())
        status, body = build_error(validation_error("Request body must be valid JSON"))
        return JSONResponse(status_code=status, content=body)

    # --- Endpoints ---

    @app.get("/health", response_model=HealthResponse)
    def health(request: Request):
        return HealthResponse(
            port=request.app.state.port,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    @app.post("/send-message")
    def send_message(request: Request, body: Any = Body(None)):
        params = normalize_body(body, settings.default_is_queue)
        try:
            outcome = request.app.state.service.send_message(params)
        except Exception as exc:
            status, error_body = build_error(exc)
            log = logger.warning if status < 500 else logger.error
            log("Error in /send-message endpoint: %r", exc)
            return JSONResponse(status_code=status, content=error_body)
        return build_response(outcome)

    return app
