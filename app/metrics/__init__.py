# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Prometheus metrics for the mailing list service."""
from prometheus_client import Counter, Histogram

ENROLLMENTS = Counter(
    "enrollments_total",
    "Enrollment attempts by outcome",
    ["outcome"],
)
ENROLLMENT_DURATION = Histogram(
    "enrollment_duration_seconds",
    "Time to run one enrollment end-to-end",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)
ENROLLMENT_NOTIFICATIONS = Counter(
    "enrollment_notifications_total",
    "Enrollment notifications by delivery status",
    ["status"],
)
REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request latency", ["method", "endpoint"]
)
HTTP_ERRORS = Counter(
    "http_errors_total", "Total HTTP errors", ["method", "endpoint", "status"]
)
