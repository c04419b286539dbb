"""Prometheus metrics: request count by route/status, latency, file operations, presigned-url mint."""
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total requests",
    ["method", "path", "status_class"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "Request latency",
    ["method", "path"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)
FILE_OPERATION_TOTAL = Counter(
    "file_operations_total",
    "File operations",
    ["operation", "mode", "result"],  # operation: upload|download|query|delete|preview; result: success|failure
)
PRESIGNED_URL_MINT_TOTAL = Counter(
    "files_presigned_url_mint_total",
    "Presigned URL mints",
)

# Fixed routes only; anything else collapses to one label to keep cardinality bounded.
_KNOWN_PATHS = frozenset({
    "/api/v1/files/uuid/upload",
    "/api/v1/files/uuid/download",
    "/api/v1/files/uuid/query",
    "/api/v1/files/uuid/delete",
    "/api/v1/files/uuid/preview-url",
    "/api/v1/files/upload-by-url",
    "/api/v1/files/download-by-url",
    "/api/v1/files/query-by-url",
    "/api/v1/files/delete-by-url",
    "/api/v1/files/preview-url",
    "/api/v1/files/stream",
})


def _status_class(status: int) -> str:
    if status < 200:
        return "1xx"
    if status < 300:
        return "2xx"
    if status < 400:
        return "3xx"
    if status < 500:
        return "4xx"
    return "5xx"


def record_request(method: str, path: str, status_code: int, latency_seconds: float) -> None:
    path = path or "/"
    if path not in _KNOWN_PATHS:
        path = "other"
    sc = _status_class(status_code)
    REQUEST_COUNT.labels(method=method, path=path, status_class=sc).inc()
    REQUEST_LATENCY.labels(method=method, path=path).observe(latency_seconds)


def record_file_operation(operation: str, mode: str, success: bool) -> None:
    FILE_OPERATION_TOTAL.labels(operation=operation, mode=mode, result="success" if success else "failure").inc()


def record_presigned_url_mint() -> None:
    PRESIGNED_URL_MINT_TOTAL.inc()


def get_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
