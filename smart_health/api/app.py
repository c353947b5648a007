import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from smart_health.api.common import (
    SNAPSHOTS_TOTAL,
    install_middleware,
    logger,
    read_json_body,
    score_payload,
)
from smart_health.api.config import APP_NAME, HOST, PORT
from smart_health.api.schemas import HealthResponse, MetricsSnapshot, PredictionResponse
from smart_health.models.heuristic import SERVER_NOTES
from smart_health.models.simulator import generate_snapshot


# =================================================
# FastAPI app
# =================================================
app = FastAPI(title=APP_NAME)
install_middleware(app)


# =================================================
# Health check
# =================================================
@app.get("/", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok", message="Mock backend running")


# =================================================
# Prediction endpoint
# =================================================
@app.post("/predict", response_model=PredictionResponse)
async def predict(request: Request):
    start_time = time.time()
    body = await read_json_body(request)
    result = score_payload(body, notes=SERVER_NOTES)
    logger.debug("prediction latency=%.4fs", time.time() - start_time)
    return result


# =================================================
# Simulated vitals
# =================================================
@app.get("/metrics", response_model=MetricsSnapshot)
def metrics():
    SNAPSHOTS_TOTAL.inc()
    return generate_snapshot()


# =================================================
# Prometheus exposition
# =================================================
@app.get("/metrics/prometheus")
def prometheus_metrics():
    return Response(
        generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


def main() -> None:
    logger.info("Mock backend running on http://%s:%s", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    main()
