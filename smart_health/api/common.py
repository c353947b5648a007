import json
import time
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram

from smart_health.api.config import cors_origins, get_logger
from smart_health.api.schemas import PredictionResponse, VitalsInput
from smart_health.models.heuristic import SERVER_CONFIDENCE_STEP, predict_risk


logger = get_logger()


# =================================================
# Prometheus metrics
# =================================================
REQUEST_COUNT = Counter(
    "api_requests_total",
    "Total API requests",
    ["method", "endpoint", "status"],
)

REQUEST_LATENCY = Histogram(
    "api_request_latency_seconds",
    "API request latency",
    ["endpoint"],
)

PREDICTIONS_TOTAL = Counter(
    "model_predictions_total",
    "Total number of predictions",
    ["prediction"],
)

PREDICTION_ERRORS_TOTAL = Counter(
    "model_prediction_errors_total",
    "Total prediction errors",
)

SNAPSHOTS_TOTAL = Counter(
    "metrics_snapshots_total",
    "Total simulated vitals snapshots served",
)


# =================================================
# Middleware: CORS + logging + metrics
# =================================================
def install_middleware(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_and_metrics(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=request.url.path,
            status=str(response.status_code),
        ).inc()

        REQUEST_LATENCY.labels(
            endpoint=request.url.path
        ).observe(duration)

        logger.info(
            "%s %s status=%s latency=%.4fs",
            request.method,
            request.url.path,
            response.status_code,
            duration,
        )

        return response


# =================================================
# Request body
# =================================================
async def read_json_body(request: Request) -> Dict[str, Any]:
    """Malformed, empty or non-object bodies all read as ``{}``."""
    try:
        body = await request.json()
    except (ValueError, RecursionError):
        logger.debug("Unreadable JSON body on %s, using defaults", request.url.path)
        return {}
    return body if isinstance(body, dict) else {}


# =================================================
# Scoring
# =================================================
def score_payload(
    payload: Dict[str, Any],
    notes: str,
    confidence_step: float = SERVER_CONFIDENCE_STEP,
) -> PredictionResponse:
    try:
        vitals = VitalsInput.from_payload(payload)
        result = predict_risk(vitals, confidence_step=confidence_step, notes=notes)
    except Exception:
        PREDICTION_ERRORS_TOTAL.inc()
        logger.exception("Prediction failed")
        raise HTTPException(
            status_code=500,
            detail="prediction_failed",
        )

    PREDICTIONS_TOTAL.labels(prediction=result.prediction).inc()
    logger.info(
        json.dumps(
            {
                "event": "prediction",
                "prediction": result.prediction,
                "confidence": result.confidence,
            }
        )
    )
    return result
