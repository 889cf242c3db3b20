import json
from typing import Any

import requests


def coerce_payload(payload: Any) -> Any:
    """Parse strings that look like a JSON object; anything else is sent unchanged."""
    if not isinstance(payload, str):
        return payload
    stripped = payload.strip()
    if stripped.startswith("{") and stripped.endswith("}"):
        try:
            return json.loads(stripped)
        except ValueError:
            return payload
    return payload


class RelayRESTClient:
    """
    Lightweight REST client for the relay FastAPI server.
    """

    def __init__(self, base_url: str = "http://127.0.0.1:5050", timeout: float = 30.0):
        self.base = base_url.rstrip("/")
        self.timeout = timeout

    def health(self) -> dict:
        resp = requests.get(f"{self.base}/health", timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def send_message(
        self,
        broker_url: str,
        vpn_name: str,
        username: str,
        password: str,
        destination: str,
        payload: Any,
        is_queue: bool = True,
    ) -> dict:
        resp = requests.post(
            f"{self.base}/send-message",
            json={
                "brokerUrl": broker_url,
                "vpnName": vpn_name,
                "username": username,
                "password": password,
                "destination": destination,
                "payload": coerce_payload(payload),
                "isQueue": is_queue,
            },
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()
