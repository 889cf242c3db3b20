import requests

from tools.bench import failure_key, measure_perf


class FakeResponse:

    def __init__(self, status_code):
        self.status_code = status_code


def test_measure_perf_counts_every_call():
    calls = []
    result = measure_perf([lambda: calls.append(1)] * 3, runs=2, ops_per_sender=5)

    assert len(calls) == 30
    assert result.succeeded == 30
    assert result.failed == 0
    assert result.avg_latency >= 0.0
    assert result.avg_throughput > 0.0


def test_measure_perf_tallies_failed_publishes():
    def unavailable():
        raise requests.exceptions.HTTPError("503", response=FakeResponse(503))

    def timed_out():
        raise requests.exceptions.ReadTimeout("slow")

    result = measure_perf([unavailable, timed_out, lambda: None], runs=2, ops_per_sender=4)

    assert result.succeeded == 8
    assert result.failures == {"503": 8, "ReadTimeout": 8}
    assert result.failed == 16


def test_failure_key():
    assert failure_key(requests.exceptions.HTTPError("x", response=FakeResponse(400))) == "400"
    assert failure_key(requests.exceptions.ConnectionError("down")) == "ConnectionError"


def test_measure_perf_without_senders():
    result = measure_perf([])
    assert result.succeeded == 0
    assert result.failures == {}
