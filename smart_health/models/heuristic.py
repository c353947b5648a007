"""Mock risk "classifier": four threshold checks and a lookup table."""

from typing import Optional

from smart_health.models.vitals import PredictionResponse, VitalsInput


AGE_THRESHOLD = 50
BP_THRESHOLD = 140
CHOL_THRESHOLD = 240
GLUCOSE_THRESHOLD = 126

# Index 0 and 1 both read "Low risk": one tripped factor is still low risk.
RISK_LEVELS = (
    "Low risk",
    "Low risk",
    "Moderate risk",
    "High risk",
    "Very high risk",
)

BASE_CONFIDENCE = 0.6
MAX_CONFIDENCE = 0.95
SERVER_CONFIDENCE_STEP = 0.12
LOCAL_CONFIDENCE_STEP = 0.10

SERVER_NOTES = "This is only a mock result for testing the frontend."
SERVERLESS_NOTES = "Mock result served by Vercel Serverless Function"
LOCAL_NOTES = "This is a mock prediction for demo purposes."


def score_vitals(vitals: VitalsInput) -> int:
    score = 0
    if vitals.age > AGE_THRESHOLD:
        score += 1
    if vitals.bp > BP_THRESHOLD:
        score += 1
    if vitals.chol > CHOL_THRESHOLD:
        score += 1
    if vitals.glucose > GLUCOSE_THRESHOLD:
        score += 1
    return score


def risk_label(score: int) -> str:
    return RISK_LEVELS[max(0, min(score, len(RISK_LEVELS) - 1))]


def confidence_for(score: int, step: float = SERVER_CONFIDENCE_STEP) -> float:
    return round(min(MAX_CONFIDENCE, BASE_CONFIDENCE + score * step), 4)


def predict_risk(
    vitals: Optional[VitalsInput] = None,
    confidence_step: float = SERVER_CONFIDENCE_STEP,
    notes: str = SERVER_NOTES,
) -> PredictionResponse:
    """
    Score ``vitals`` and build the response the dashboard renders.

    The server paths use a 0.12 confidence step; the dashboard's offline
    fallback passes ``LOCAL_CONFIDENCE_STEP`` (0.10). Both clamp at 0.95.
    """
    if vitals is None:
        vitals = VitalsInput()
    score = score_vitals(vitals)
    return PredictionResponse(
        prediction=risk_label(score),
        confidence=confidence_for(score, confidence_step),
        notes=notes,
    )
