"""
HTTP middleware for request IDs and access logging.
"""

import logging
import time

from fastapi import Request

from .core.request_context import clear_request_id, generate_request_id

logger = logging.getLogger("fnbridge.access")


async def request_context_middleware(request: Request, call_next):
    """Assign a request ID and write one structured access log line."""
    start_time = time.perf_counter()
    req_id = generate_request_id()

    try:
        response = await call_next(request)
        response.headers["x-request-id"] = req_id

        process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "query_params": str(request.query_params),
                "status": response.status_code,
                "latency_ms": process_time_ms,
            },
        )
        return response
    finally:
        clear_request_id()
