import asyncio
from collections import deque
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

import httpx

from smart_health.api.config import DASHBOARD_API_URL, get_logger
from smart_health.api.schemas import PredictionResponse, VitalsInput
from smart_health.models.heuristic import LOCAL_CONFIDENCE_STEP, LOCAL_NOTES, predict_risk
from smart_health.models.simulator import sample_heart_rate, sample_systolic


logger = get_logger(__name__)

SERIES_LENGTH = 30
LOG_LIMIT = 200
REFRESH_INTERVAL_SECONDS = 2.0
REQUEST_TIMEOUT_SECONDS = 5.0

STATUS_LIVE = "Live"
STATUS_MOCK = "Mock"


class RollingSeries:
    """Fixed-length chart buffer; pushing a sample drops the oldest one."""

    def __init__(self, length: int = SERIES_LENGTH, fill: float = 0):
        self._values = deque([fill] * length, maxlen=length)

    def push(self, value) -> None:
        self._values.append(value)

    @property
    def values(self) -> List:
        return list(self._values)

    @property
    def latest(self):
        return self._values[-1]

    def __len__(self) -> int:
        return len(self._values)


class ActivityLog:
    def __init__(self, limit: int = LOG_LIMIT):
        self.limit = limit
        self._entries: List[str] = []

    def push(self, message: str, now: Optional[datetime] = None) -> str:
        now = now or datetime.now()
        entry = f"[{now.strftime('%H:%M:%S')}] {message}"
        self._entries = [entry, *self._entries][: self.limit]
        return entry

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class DashboardClient:
    """
    Headless version of the monitoring dashboard.

    ``predict`` calls the live service once and, if that fails for any
    reason, shows the local heuristic result instead. ``run`` drives the
    simulated live charts on a fixed timer until cancelled.
    """

    def __init__(
        self,
        base_url: str = DASHBOARD_API_URL,
        http_client: Optional[httpx.Client] = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        self.base_url = base_url.rstrip("/")
        self._http = http_client or httpx.Client(timeout=timeout)
        self.status = STATUS_MOCK
        self.prediction: Optional[PredictionResponse] = None
        self.heart_rate = RollingSeries(SERIES_LENGTH, fill=72)
        self.systolic = RollingSeries(SERIES_LENGTH, fill=120)
        self.log = ActivityLog()
        self._task: Optional[asyncio.Task] = None

    # -------------------------------------------------
    # Prediction
    # -------------------------------------------------
    def predict(self, vitals: Union[VitalsInput, Dict[str, Any]]) -> PredictionResponse:
        vitals = self._as_vitals(vitals)
        payload = vitals.model_dump(exclude_none=True)

        try:
            response = self._http.post(f"{self.base_url}/predict", json=payload)
            response.raise_for_status()
            result = PredictionResponse.model_validate(response.json())
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Live prediction failed (%s), using local heuristic", exc)
            result = self._local_prediction(vitals)
            self._show(result, STATUS_MOCK, "Prediction (mock) returned: ")
            return result

        self._show(result, STATUS_LIVE, "Prediction returned: ")
        return result

    def run_mock(self, vitals: Union[VitalsInput, Dict[str, Any]]) -> PredictionResponse:
        result = self._local_prediction(self._as_vitals(vitals))
        self._show(result, STATUS_MOCK, "Manual mock prediction: ")
        return result

    @staticmethod
    def _as_vitals(vitals) -> VitalsInput:
        if isinstance(vitals, VitalsInput):
            return vitals
        return VitalsInput.from_payload(vitals)

    @staticmethod
    def _local_prediction(vitals: VitalsInput) -> PredictionResponse:
        return predict_risk(
            vitals,
            confidence_step=LOCAL_CONFIDENCE_STEP,
            notes=LOCAL_NOTES,
        )

    def _show(self, result: PredictionResponse, status: str, prefix: str) -> None:
        self.prediction = result
        self.status = status
        self.log.push(prefix + result.prediction)

    # -------------------------------------------------
    # Live metrics
    # -------------------------------------------------
    def tick(self, rng=None) -> Dict[str, int]:
        heart_rate = sample_heart_rate(rng)
        systolic = sample_systolic(rng)
        self.heart_rate.push(heart_rate)
        self.systolic.push(systolic)
        self.log.push(f"Metrics update — HR: {heart_rate} bpm, BP: {systolic} mmHg")
        return {"heartRate": heart_rate, "systolic": systolic}

    async def run(
        self,
        interval: float = REFRESH_INTERVAL_SECONDS,
        ticks: Optional[int] = None,
        rng=None,
    ) -> None:
        count = 0
        while ticks is None or count < ticks:
            await asyncio.sleep(interval)
            self.tick(rng)
            count += 1

    def start(self, interval: float = REFRESH_INTERVAL_SECONDS, rng=None) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(
                self.run(interval, rng=rng)
            )
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "DashboardClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
