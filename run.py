import argparse
import sys
from dataclasses import replace
from pathlib import Path

# Ensure repo root on sys.path for module imports
REPO_ROOT = Path(__file__).resolve().parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from relay_server.common.server import configure_logging, find_available_port
from relay_server.config import load_settings
from relay_server.relay_interface import relay_rest_server
from relay_client.relay_rest_client import RelayRESTClient
import relay_client.relay_rest_cli as relay_rest_cli
from tools import bench
import uvicorn


def run_relay_rest_server(args):
    settings = load_settings()
    overrides = {}
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    settings = replace(settings, **overrides)
    configure_logging(settings)

    port = find_available_port(settings.host, settings.port, args.max_port_attempts)
    app = relay_rest_server.create_app(replace(settings, port=port))
    uvicorn.run(
        app,
        host=settings.host,
        port=port,
        reload=False,
    )


def run_relay_rest_cli(args):
    sys.argv = ["relay_rest_cli.py", args.url]
    relay_rest_cli.main()


def run_health(args):
    client = RelayRESTClient(args.url)
    print(client.health())


def run_bench(args):
    bench.main(args.url)


def main():
    parser = argparse.ArgumentParser(description="Run Solace message relay components.")
    sub = parser.add_subparsers(dest="cmd", required=True)

    # relay REST server (FastAPI)
    p = sub.add_parser("relay-rest-server", help="Run relay REST server (FastAPI)")
    p.add_argument("--host", default=None)
    p.add_argument("--port", type=int, default=None)
    p.add_argument("--max-port-attempts", type=int, default=10)
    p.set_defaults(func=run_relay_rest_server)

    # relay REST CLI
    p = sub.add_parser("relay-rest-cli", help="Run relay REST CLI")
    p.add_argument("url")
    p.set_defaults(func=run_relay_rest_cli)

    # health probe
    p = sub.add_parser("health", help="Query relay server health")
    p.add_argument("url")
    p.set_defaults(func=run_health)

    # load generator
    p = sub.add_parser("bench", help="Benchmark /send-message")
    p.add_argument("url", nargs="?", default="http://127.0.0.1:5050")
    p.set_defaults(func=run_bench)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
