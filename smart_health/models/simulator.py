import random
from datetime import datetime, timezone
from typing import Optional

from smart_health.models.vitals import MetricsSnapshot


# Half-open [low, high) ranges
HEART_RATE_RANGE = (60, 100)
SYSTOLIC_RANGE = (100, 140)
DIASTOLIC_RANGE = (60, 80)


def iso_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sample_heart_rate(rng=None) -> int:
    rng = rng or random
    return rng.randrange(*HEART_RATE_RANGE)


def sample_systolic(rng=None) -> int:
    rng = rng or random
    return rng.randrange(*SYSTOLIC_RANGE)


def generate_snapshot(rng=None) -> MetricsSnapshot:
    rng = rng or random
    return MetricsSnapshot(
        heartRate=sample_heart_rate(rng),
        systolic=sample_systolic(rng),
        diastolic=rng.randrange(*DIASTOLIC_RANGE),
        timestamp=iso_timestamp(),
    )
