"""
Pure ASGI Timing Middleware

Stamps each HTTP request with a request id, measures processing time and
records it in Prometheus. WebSocket scopes pass straight through.
"""

import logging
import time

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.config import settings
from ..core.request_context import reset_request_id, set_request_id
from ..core.ulid_helper import generate_ulid
from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
UNTIMED_PATHS = ("/health", "/internal/metrics")


class TimingMiddlewareASGI:
    """
    Pure ASGI middleware to measure and log request processing time.
    """

    def __init__(self, app: ASGIApp, slow_request_ms: int | None = None) -> None:
        self.app = app
        self.slow_request_ms = slow_request_ms or settings.slow_request_ms

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        method = scope.get("method", "")
        request_id = Headers(scope=scope).get(REQUEST_ID_HEADER) or generate_ulid()
        token = set_request_id(request_id)

        if path in UNTIMED_PATHS:
            try:
                await self.app(scope, receive, send)
            finally:
                reset_request_id(token)
            return

        logger.debug(f"[TIMING] Starting request: {method} {path}")
        start_time = time.time()

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                elapsed = time.time() - start_time
                process_time = elapsed * 1000

                logger.info(
                    f"[TIMING] {method} {path} -> {message['status']} in {process_time:.2f}ms"
                )

                headers = MutableHeaders(scope=message)
                headers["X-Process-Time"] = f"{process_time:.2f}ms"
                headers[REQUEST_ID_HEADER] = request_id

                if process_time > self.slow_request_ms:
                    logger.warning(
                        f"[TIMING] Slow request: {method} {path} took {process_time:.2f}ms"
                    )
                prometheus_metrics.record_http_request(method, elapsed, message["status"])

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as e:
            process_time = (time.time() - start_time) * 1000
            logger.error(f"[TIMING] Error in request {path} after {process_time:.2f}ms: {str(e)}")
            raise
        finally:
            reset_request_id(token)
