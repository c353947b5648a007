"""
Serverless variant of the prediction service.

A function host hands us one request on a single route; ``handle`` does the
method multiplexing and returns ``(status_code, payload)``. ``app`` wraps it
for hosts that run ASGI applications.
"""

from typing import Any, Dict, Tuple

from fastapi import FastAPI, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from smart_health.api.common import install_middleware, read_json_body, score_payload
from smart_health.api.config import APP_NAME
from smart_health.api.schemas import ErrorResponse, HealthResponse
from smart_health.models.heuristic import SERVERLESS_NOTES


ROUTE = "/api/predict"
STATUS_MESSAGE = "Mock API — POST /api/predict"
METHOD_NOT_ALLOWED = "Method not allowed"

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def handle(method: str, body: Any = None) -> Tuple[int, Dict[str, Any]]:
    method = (method or "").upper()

    if method == "GET":
        return 200, HealthResponse(status="ok", message=STATUS_MESSAGE).model_dump()

    if method != "POST":
        return 405, ErrorResponse(error=METHOD_NOT_ALLOWED).model_dump()

    payload = body if isinstance(body, dict) else {}
    try:
        result = score_payload(payload, notes=SERVERLESS_NOTES)
    except HTTPException as exc:
        return exc.status_code, ErrorResponse(error=str(exc.detail)).model_dump()
    return 200, result.model_dump()


# =================================================
# ASGI wrapper
# =================================================
app = FastAPI(title=f"{APP_NAME} (serverless)")
install_middleware(app)


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed(request: Request, exc: StarletteHTTPException):
    # Methods the router never matched (TRACE, PROPFIND, ...) land here.
    if exc.status_code == 405:
        return JSONResponse(
            status_code=405,
            content=ErrorResponse(error=METHOD_NOT_ALLOWED).model_dump(),
        )
    return await http_exception_handler(request, exc)


@app.api_route(ROUTE, methods=ALL_METHODS)
async def predict_function(request: Request):
    body = await read_json_body(request) if request.method == "POST" else None
    status_code, payload = handle(request.method, body)
    return JSONResponse(status_code=status_code, content=payload)
