import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 5050
    client_origin: str = "http://localhost:5173"
    app_env: str = "development"
    cors_methods: Tuple[str, ...] = ("GET", "POST", "OPTIONS")
    cors_allowed_headers: Tuple[str, ...] = ("Content-Type", "Authorization")
    cors_credentials: bool = True
    log_level: str = "INFO"

    # Solace defaults
    solace_log_level: str = "INFO"
    delivery_mode: str = "DIRECT"
    user_id_property: str = "JMSXUserID"
    default_is_queue: bool = True
    connect_timeout: float = 10.0

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def _get_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment (after reading .env) or an explicit mapping."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    delivery_mode = environ.get("SOLACE_DELIVERY_MODE", "DIRECT").upper()
    if delivery_mode not in ("DIRECT", "PERSISTENT"):
        raise ValueError(f"SOLACE_DELIVERY_MODE must be DIRECT or PERSISTENT, got {delivery_mode!r}")

    return Settings(
        host=environ.get("HOST", "0.0.0.0"),
        port=_get_int(environ, "PORT", 5050),
        client_origin=environ.get("CLIENT_ORIGIN", "http://localhost:5173"),
        app_env=environ.get("APP_ENV", "development"),
        log_level=environ.get("LOG_LEVEL", "INFO").upper(),
        solace_log_level=environ.get("SOLACE_LOG_LEVEL", "INFO").upper(),
        delivery_mode=delivery_mode,
        user_id_property=environ.get("SOLACE_USER_ID_PROPERTY", "JMSXUserID"),
        default_is_queue=_get_bool(environ, "SOLACE_DEFAULT_IS_QUEUE", True),
        connect_timeout=_get_float(environ, "SOLACE_CONNECT_TIMEOUT", 10.0),
    )
