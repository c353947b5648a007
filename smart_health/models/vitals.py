import math
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


DEFAULT_AGE = 30.0
DEFAULT_BP = 120.0
DEFAULT_CHOL = 200.0
DEFAULT_GLUCOSE = 100.0

FIELD_DEFAULTS = {
    "age": DEFAULT_AGE,
    "bp": DEFAULT_BP,
    "chol": DEFAULT_CHOL,
    "glucose": DEFAULT_GLUCOSE,
}


def coerce_number(value: Any, default: float) -> float:
    """Best-effort numeric coercion; anything unusable becomes ``default``."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    return number


class VitalsInput(BaseModel):
    """Patient vitals posted by the dashboard. Every field is optional."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    age: float = Field(DEFAULT_AGE, description="Age in years")
    bp: float = Field(DEFAULT_BP, description="Systolic blood pressure (mmHg)")
    chol: float = Field(DEFAULT_CHOL, description="Cholesterol (mg/dL)")
    glucose: float = Field(DEFAULT_GLUCOSE, description="Glucose (mg/dL)")
    gender: Optional[Literal["male", "female"]] = None

    @field_validator("age", "bp", "chol", "glucose", mode="before")
    @classmethod
    def _coerce_numeric(cls, value: Any, info: ValidationInfo) -> float:
        return coerce_number(value, FIELD_DEFAULTS[info.field_name])

    @field_validator("gender", mode="before")
    @classmethod
    def _drop_unknown_gender(cls, value: Any) -> Optional[str]:
        if isinstance(value, str) and value.strip().lower() in ("male", "female"):
            return value.strip().lower()
        return None

    @classmethod
    def from_payload(cls, payload: Any) -> "VitalsInput":
        # Anything that is not a JSON object counts as an empty body.
        if not isinstance(payload, dict):
            payload = {}
        return cls.model_validate(payload)


class PredictionResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    prediction: str
    confidence: float
    notes: str


class MetricsSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    heartRate: int
    systolic: int
    diastolic: int
    timestamp: str
