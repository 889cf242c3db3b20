"""
Benchmark POST /send-message against a running relay.

Scenarios:
 1) 1 sender
 2) 10 concurrent senders

Metrics:
 - Average response time per publish
 - Average throughput (successful ops/sec) per run
 - Failed publishes, grouped by HTTP status (or exception name)

Prerequisites:
 - Relay REST server running (default: http://127.0.0.1:5050)
 - A reachable Solace broker matching the RELAY_DEFAULT_* settings

Run:
    python run.py bench http://127.0.0.1:5050
"""

from __future__ import annotations

import concurrent.futures
import statistics
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, List

from pathlib import Path
import sys

import requests

# for `relay_client.*` imports resolve
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from relay_client.relay_rest_cli import default_form
from relay_client.relay_rest_client import RelayRESTClient


@dataclass
class BenchResult:
    avg_latency: float = 0.0
    avg_throughput: float = 0.0
    succeeded: int = 0
    failures: Dict[str, int] = field(default_factory=dict)

    @property
    def failed(self) -> int:
        return sum(self.failures.values())


def failure_key(exc: Exception) -> str:
    response = getattr(exc, "response", None)
    if isinstance(exc, requests.exceptions.HTTPError) and response is not None:
        return str(response.status_code)
    return type(exc).__name__


# ------------- Helpers -------------

def measure_perf(senders: List[Callable[[], None]], runs: int = 3, ops_per_sender: int = 50) -> BenchResult:
    """
    Drives every sender concurrently for `runs` rounds. Latency covers all
    calls; throughput counts only publishes that returned 200.
    """
    result = BenchResult()
    if not senders:
        return result

    latencies: List[float] = []
    rates: List[float] = []
    failures: Counter = Counter()

    def drive(send: Callable[[], None]):
        timings, errors = [], Counter()
        for _ in range(ops_per_sender):
            started = time.perf_counter()
            try:
                send()
            except requests.exceptions.RequestException as exc:
                errors[failure_key(exc)] += 1
            timings.append(time.perf_counter() - started)
        return timings, errors

    for _ in range(runs):
        run_started = time.perf_counter()
        run_failures = 0
        with concurrent.futures.ThreadPoolExecutor(max_workers=len(senders)) as pool:
            for timings, errors in pool.map(drive, senders):
                latencies.extend(timings)
                failures.update(errors)
                run_failures += sum(errors.values())
        elapsed = time.perf_counter() - run_started
        ok = ops_per_sender * len(senders) - run_failures
        result.succeeded += ok
        rates.append(ok / elapsed if elapsed > 0 else 0.0)

    result.avg_latency = statistics.mean(latencies)
    result.avg_throughput = statistics.mean(rates)
    result.failures = dict(failures)
    return result


# ------------- Bench tasks -------------

def sender_call(client: RelayRESTClient, form: dict, seq: int):
    client.send_message(
        form["broker_url"],
        form["vpn_name"],
        form["username"],
        form["password"],
        form["destination"],
        {"bench": True, "seq": seq},
        is_queue=form["is_queue"],
    )


def run_scenario(senders: int, base_url: str = "http://127.0.0.1:5050", runs: int = 3, ops_per_sender: int = 50):
    form = default_form()
    clients = [RelayRESTClient(base_url) for _ in range(senders)]
    fns = [lambda c=c, i=i: sender_call(c, form, i) for i, c in enumerate(clients)]

    result = measure_perf(fns, runs=runs, ops_per_sender=ops_per_sender)
    return {
        "senders": senders,
        "avg_response_time_seconds": result.avg_latency,
        "avg_throughput_ops_per_sec": result.avg_throughput,
        "succeeded": result.succeeded,
        "failures": result.failures,
    }


def main(base_url: str = "http://127.0.0.1:5050"):
    for senders in (1, 10):
        result = run_scenario(senders, base_url)
        print(f"Scenario senders={senders}: {result}")


if __name__ == "__main__":
    main(*sys.argv[1:2])
