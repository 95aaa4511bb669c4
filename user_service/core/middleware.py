# user_service/core/middleware.py

import asyncio
import logging
import time
from fastapi import Header, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from user_service.core.errors import RequestTimeoutError, ServiceError, UnauthorizedError


logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-API-Key",
}


# -------------------------------
# Pipeline Stages
# -------------------------------

async def log_requests(request: Request, call_next):
    """
    Logs every request on entry and on completion with its duration.
    """
    start = time.perf_counter()
    method, path = request.method, request.url.path
    logger.info("Request started %s %s", method, path)
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        elapsed = (time.perf_counter() - start) * 1000
        logger.info("Request completed %s %s %s in %.1fms", method, path, status_code, elapsed)


async def enforce_deadline(request: Request, call_next):
    """
    Answers 504 once REQUEST_TIMEOUT passes, and turns any unhandled error
    into a 500 APIError so it still goes back through the CORS stage.

    A sync handler already running in the thread pool is not interrupted:
    it finishes in the background and its session is only closed by
    `get_db` when it does.
    """
    timeout = request.app.state.settings.REQUEST_TIMEOUT
    try:
        return await asyncio.wait_for(call_next(request), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Request timed out after %ss: %s %s", timeout, request.method, request.url.path)
        err = RequestTimeoutError(f"Request exceeded {timeout:g}s")
    except Exception:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        err = ServiceError("An unexpected error occurred")
    return JSONResponse(status_code=err.status_code, content=err.to_dict())


async def handle_cors(request: Request, call_next):
    """
    Adds permissive CORS headers; answers OPTIONS before any route runs.
    """
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


# Outermost first. CORS sits inside logging so preflights are timed too,
# and outside the deadline so 504s and 500s carry its headers.
PIPELINE = [log_requests, handle_cors, enforce_deadline]


def install_pipeline(app, stages=PIPELINE):
    # add_middleware wraps the current stack, so install innermost first
    for stage in reversed(stages):
        app.add_middleware(BaseHTTPMiddleware, dispatch=stage)


# -------------------------------
# Route Guard
# -------------------------------

def require_api_key(request: Request, x_api_key: str | None = Header(default=None)):
    """
    Static shared-secret check for protected routes. Not tied to login tokens.
    """
    if x_api_key != request.app.state.settings.API_KEY:
        raise UnauthorizedError("A valid X-API-Key header is required", error="Invalid API key")
