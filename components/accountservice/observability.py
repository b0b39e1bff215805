from __future__ import annotations
import time, uuid
import logging
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("accountservice.http")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    else:
        root.setLevel(level.upper())


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Request/trace ids plus start/end logs. 401s also log which credential
    carriers were present, never their values."""

    def __init__(self, app, cookie_name: str = "auth-token"):
        super().__init__(app)
        self.cookie_name = cookie_name

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        trace_id = request.headers.get("x-trace-id") or str(uuid.uuid4())

        request.state.request_id = request_id
        request.state.trace_id = trace_id

        logger.info(
            "request.start",
            extra={"request_id": request_id, "trace_id": trace_id, "path": request.url.path, "method": request.method}
        )
        try:
            response: Response = await call_next(request)
        except Exception:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.exception(
                "request.exception",
                extra={"request_id": request_id, "trace_id": trace_id, "duration_ms": duration_ms}
            )
            raise
        duration_ms = int((time.perf_counter() - start) * 1000)
        response.headers["x-request-id"] = request_id
        response.headers["x-trace-id"] = trace_id
        if response.status_code == 401:
            logger.warning(
                "request.auth_rejected",
                extra={
                    "request_id": request_id,
                    "path": request.url.path,
                    "has_bearer": (request.headers.get("authorization") or "").lower().startswith("bearer "),
                    "has_cookie": bool(request.cookies.get(self.cookie_name)),
                }
            )
        logger.info(
            "request.end",
            extra={"request_id": request_id, "trace_id": trace_id, "status": response.status_code, "duration_ms": duration_ms}
        )
        return response
