"""
Prometheus metrics module for the FarmDirect messaging backend.

Metrics live in a dedicated registry so tests and multiple app instances in
one process do not collide with the global default registry.
"""

from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

http_request_duration_seconds = Histogram(
    "farmdirect_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "status_code"],
    registry=REGISTRY,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

http_requests_total = Counter(
    "farmdirect_http_requests_total",
    "Total number of HTTP requests",
    ["method", "status_code"],
    registry=REGISTRY,
)

service_operation_duration_seconds = Histogram(
    "farmdirect_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "farmdirect_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "farmdirect_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

# Messaging
messages_sent_total = Counter(
    "farmdirect_messages_sent_total",
    "Total number of messages stored",
    registry=REGISTRY,
)

relay_deliveries_total = Counter(
    "farmdirect_relay_deliveries_total",
    "Real-time notification delivery attempts by outcome",
    ["outcome"],
    registry=REGISTRY,
)

websocket_connections = Gauge(
    "farmdirect_websocket_connections",
    "Currently open relay WebSocket connections",
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Thin facade so callers do not touch metric objects directly."""

    @staticmethod
    def record_http_request(method: str, duration: float, status_code: int) -> None:
        http_request_duration_seconds.labels(method=method, status_code=str(status_code)).observe(
            duration
        )
        http_requests_total.labels(method=method, status_code=str(status_code)).inc()

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'MessageService')
            operation: Operation/method name (e.g., 'send_message')
            duration: Operation duration in seconds
            status: Operation status ('success' or 'error')
            error_type: Type of error if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def inc_messages_sent() -> None:
        messages_sent_total.inc()

    @staticmethod
    def record_relay_delivery(outcome: str) -> None:
        relay_deliveries_total.labels(outcome=outcome).inc()

    @staticmethod
    def websocket_opened() -> None:
        websocket_connections.inc()

    @staticmethod
    def websocket_closed() -> None:
        websocket_connections.dec()

    @staticmethod
    def get_metrics() -> bytes:
        return generate_latest(REGISTRY)

    @staticmethod
    def get_content_type() -> str:
        return CONTENT_TYPE_LATEST


prometheus_metrics = PrometheusMetrics()
