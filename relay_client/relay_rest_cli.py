import os
import sys
from typing import Dict, List

import requests

from relay_client.relay_rest_client import RelayRESTClient

HELP_TEXT = """
Available commands:

Form:
  show
  set <field> <value>        fields: broker_url vpn_name username password destination
  queue                      publish to a queue (default)
  topic                      publish to a topic

Server:
  health
  send <payload...>          e.g. send {"key": "value"}

Utility:
  help
  exit
"""

FORM_FIELDS = ("broker_url", "vpn_name", "username", "password", "destination")


def default_form() -> Dict[str, object]:
    return {
        "broker_url": os.getenv("RELAY_DEFAULT_BROKER_URL", "ws://localhost:8008"),
        "vpn_name": os.getenv("RELAY_DEFAULT_VPN_NAME", "default"),
        "username": os.getenv("RELAY_DEFAULT_USERNAME", "admin"),
        "password": os.getenv("RELAY_DEFAULT_PASSWORD", "admin"),
        "destination": os.getenv("RELAY_DEFAULT_DESTINATION", "DEAL.IN"),
        "is_queue": True,
    }


def missing_fields(form: Dict[str, object], payload: str) -> List[str]:
    missing = [name for name in ("broker_url", "vpn_name", "username", "destination") if not form.get(name)]
    if not payload.strip():
        missing.append("payload")
    return missing


def show_form(form: Dict[str, object]):
    for name in FORM_FIELDS:
        value = "********" if name == "password" and form[name] else form[name]
        print(f"  {name:12} {value}")
    print(f"  {'type':12} {'queue' if form['is_queue'] else 'topic'}")


def describe_http_error(e: requests.exceptions.HTTPError) -> str:
    try:
        body = e.response.json()
    except ValueError:
        return str(e)
    if not isinstance(body, dict):
        return str(e)
    return f"{body.get('message')}: {body.get('error', e)}"


def main():
    if len(sys.argv) != 2:
        print("Usage: python relay_rest_cli.py <server_url>")
        print("Example: python relay_rest_cli.py http://localhost:5050")
        sys.exit(1)

    url = sys.argv[1].rstrip("/")
    client = RelayRESTClient(url)
    form = default_form()

    print(f"Relay REST CLI started (URL: {url}). Type 'help' for commands.")

    while True:
        try:
            raw = input("relay> ").strip()
            if not raw:
                continue

            cmd, _, rest = raw.partition(" ")
            cmd = cmd.lower()
            rest = rest.strip()

            if cmd == "help":
                print(HELP_TEXT)
            elif cmd == "exit":
                break
            elif cmd == "show":
                show_form(form)
            elif cmd == "set":
                name, _, value = rest.partition(" ")
                if name not in FORM_FIELDS:
                    print(f"Unknown field '{name}'.")
                    continue
                form[name] = value.strip()
            elif cmd == "queue":
                form["is_queue"] = True
            elif cmd == "topic":
                form["is_queue"] = False
            elif cmd == "health":
                info = client.health()
                print(f"Server {info['status']} on port {info['port']} at {info['timestamp']}")
            elif cmd == "send":
                missing = missing_fields(form, rest)
                if missing:
                    print(f"Please fill in all required fields: {', '.join(missing)}")
                    continue
                result = client.send_message(
                    form["broker_url"],
                    form["vpn_name"],
                    form["username"],
                    form["password"],
                    form["destination"],
                    rest,
                    is_queue=form["is_queue"],
                )
                print(result["message"])
            else:
                print("Unknown command.")
        except requests.exceptions.HTTPError as e:
            print(f"HTTP Error: {describe_http_error(e)}")
        except requests.exceptions.ConnectionError:
            print("Could not connect to server. Please check if the server is running.")
        except (EOFError, KeyboardInterrupt):
            break
        except Exception as e:
            print(f"Error: {e}")


if __name__ == "__main__":
    main()
