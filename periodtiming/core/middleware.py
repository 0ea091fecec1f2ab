"""
Request logging middleware and school-scope helper.
"""

import logging
import time

from fastapi import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("periodtiming.requests")

# Paths that are not worth a log line
QUIET_PATHS = {"/api/health", "/docs", "/redoc", "/openapi.json"}


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        started = time.perf_counter()
        response = await call_next(request)

        if path not in QUIET_PATHS and request.method != "OPTIONS":
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info("%s %s -> %d (%.1f ms)", request.method, path, response.status_code, elapsed_ms)
        return response


def get_school_id(user: dict) -> str:
    """Every caller must belong to a school; the store is scoped by it."""
    school_id = user.get("school_id")
    if not school_id:
        raise HTTPException(status_code=403, detail="No school context. User not assigned to a school.")
    return school_id
