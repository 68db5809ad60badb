# baseline_timeline/main.py
from __future__ import annotations

import uuid

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response as StarletteResponse
from structlog.contextvars import bound_contextvars

from baseline_timeline.api.routers.timeline import router as timeline_router
from baseline_timeline.core.config import get_settings
from baseline_timeline.core.logging import configure_logging, get_logger

configure_logging(service_name="api", level=get_settings().LOG_LEVEL)
logger = get_logger()

app = FastAPI(
    title="CSS Baseline Timeline",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        req_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        with bound_contextvars(request_id=req_id):
            logger.info("request_started", method=request.method, path=str(request.url.path))
            try:
                response: StarletteResponse = await call_next(request)
            except Exception as exc:
                logger.error("request_exception", error=exc.__class__.__name__)
                raise
            logger.info("request_ended", status_code=response.status_code)
        response.headers["X-Request-Id"] = req_id
        return response


# The timeline is public, read-only data for the static site and local previews
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "OPTIONS", "HEAD"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)


@app.get("/health")
async def health():
    return {"ok": True}


# --- API v1 router ---
app.include_router(timeline_router, prefix="/api/v1")
