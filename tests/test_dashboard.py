import asyncio
import json
import random
from datetime import datetime

import httpx
import pytest

from smart_health.client.dashboard import (
    STATUS_LIVE,
    STATUS_MOCK,
    ActivityLog,
    DashboardClient,
    RollingSeries,
)
from smart_health.models.heuristic import LOCAL_NOTES, SERVER_NOTES


HIGH_RISK = {"age": 55, "gender": "male", "bp": 145, "chol": 250, "glucose": 130}


def make_client(handler) -> DashboardClient:
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return DashboardClient("http://service.test/", http_client=http_client)


def test_rolling_series_keeps_last_samples():
    series = RollingSeries(length=3, fill=0)

    for value in (1, 2, 3, 4):
        series.push(value)

    assert series.values == [2, 3, 4]
    assert series.latest == 4
    assert len(series) == 3


def test_activity_log_is_newest_first_and_capped():
    log = ActivityLog(limit=2)
    now = datetime(2024, 1, 1, 9, 5, 7)

    log.push("first", now)
    log.push("second", now)
    log.push("third", now)

    assert log.entries == ["[09:05:07] third", "[09:05:07] second"]


def test_live_prediction():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"prediction": "Very high risk", "confidence": 0.95, "notes": SERVER_NOTES},
        )

    client = make_client(handler)
    result = client.predict(HIGH_RISK)

    assert seen["url"] == "http://service.test/predict"
    assert seen["body"]["gender"] == "male"
    assert result.notes == SERVER_NOTES
    assert client.status == STATUS_LIVE
    assert client.log.entries[0].endswith("Prediction returned: Very high risk")


def test_falls_back_to_local_heuristic_on_network_error():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)
    result = client.predict(HIGH_RISK)

    assert len(calls) == 1                   # one-shot substitution, no retry
    assert result.prediction == "Very high risk"
    assert result.confidence == 0.95
    assert result.notes == LOCAL_NOTES
    assert client.status == STATUS_MOCK
    assert client.log.entries[0].endswith("Prediction (mock) returned: Very high risk")


def test_falls_back_on_error_status():
    client = make_client(lambda request: httpx.Response(503, text="down"))

    result = client.predict({"age": 60, "bp": 150, "chol": 250})

    assert result.prediction == "High risk"
    assert result.confidence == 0.9          # local step of 0.10
    assert client.status == STATUS_MOCK


def test_falls_back_on_unreadable_response():
    client = make_client(lambda request: httpx.Response(200, text="<html>"))

    result = client.predict({})

    assert result.notes == LOCAL_NOTES


def test_run_mock_never_calls_service():
    def handler(request):
        raise AssertionError("service should not be called")

    client = make_client(handler)
    result = client.run_mock({"age": 60, "bp": 150})

    assert result.confidence == 0.8
    assert client.log.entries[0].endswith("Manual mock prediction: Moderate risk")


def test_tick_updates_series_and_log():
    client = make_client(lambda request: httpx.Response(500))

    sample = client.tick(random.Random(3))

    assert len(client.heart_rate) == 30
    assert client.heart_rate.values[0] == 72
    assert client.heart_rate.latest == sample["heartRate"]
    assert client.systolic.latest == sample["systolic"]
    assert 60 <= sample["heartRate"] < 100
    assert 100 <= sample["systolic"] < 140
    assert "Metrics update — HR:" in client.log.entries[0]


@pytest.mark.asyncio
async def test_run_for_fixed_ticks():
    client = make_client(lambda request: httpx.Response(500))

    await client.run(interval=0, ticks=4)

    assert len(client.log) == 4


@pytest.mark.asyncio
async def test_timer_is_cancelled_on_stop():
    client = make_client(lambda request: httpx.Response(500))

    task = client.start(interval=0.01)
    await asyncio.sleep(0.1)
    await client.stop()

    assert task.cancelled()
    ticks = len(client.log)
    assert ticks > 0
    await asyncio.sleep(0.05)
    assert len(client.log) == ticks


class BrokenRandom:
    def randrange(self, *args):
        raise RuntimeError("sensor offline")


@pytest.mark.asyncio
async def test_stop_clears_timer_that_already_failed():
    client = make_client(lambda request: httpx.Response(500))

    failed = client.start(interval=0, rng=BrokenRandom())
    await asyncio.sleep(0.05)
    assert failed.done()

    with pytest.raises(RuntimeError, match="sensor offline"):
        await client.stop()

    await client.stop()                      # nothing left to stop
    restarted = client.start(interval=0.01)
    assert restarted is not failed
    await client.stop()
