import errno
import logging
import socket

from relay_server.config import Settings

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("solace").setLevel(settings.solace_log_level)


def port_in_use(host: str, port: int) -> bool:
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        probe.bind((host, port))
    except OSError as exc:
        if exc.errno == errno.EADDRINUSE:
            return True
        raise
    finally:
        probe.close()
    return False


def find_available_port(host: str, port: int, max_attempts: int = 10) -> int:
    """Return the first free port at or after `port`."""
    for candidate in range(port, port + max_attempts):
        if not port_in_use(host, candidate):
            return candidate
        logger.info("Port %s is already in use, trying port %s", candidate, candidate + 1)
    raise RuntimeError(f"No free port in range {port}-{port + max_attempts - 1}")
