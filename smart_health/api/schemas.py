from pydantic import BaseModel

from smart_health.models.vitals import (  # noqa: F401  request/response bodies
    DEFAULT_AGE,
    DEFAULT_BP,
    DEFAULT_CHOL,
    DEFAULT_GLUCOSE,
    MetricsSnapshot,
    PredictionResponse,
    VitalsInput,
    coerce_number,
)


class HealthResponse(BaseModel):
    status: str = "ok"
    message: str


class ErrorResponse(BaseModel):
    error: str
