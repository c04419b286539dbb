"""FastAPI app: middleware, error envelopes, routers, health and metrics."""
import logging

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from file_storage.core.config import get_settings
from file_storage.core.deps import require_metrics_access
from file_storage.core.metrics import get_metrics
from file_storage.core.request_logging import RequestLoggingMiddleware
from file_storage.domain.errors import (
    ConflictError,
    CryptoError,
    FileStorageError,
    InvalidStateError,
    NotFoundError,
    StorageFaultError,
    ValidationError,
)
from file_storage.api.files_uuid import router as files_uuid_router
from file_storage.api.files_url import router as files_url_router
from file_storage.api.stream import router as stream_router

logger = logging.getLogger(__name__)

settings = get_settings()
if settings.log_json:
    for h in logging.getLogger("file_storage.request").handlers[:]:
        logging.getLogger("file_storage.request").removeHandler(h)
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter("%(message)s"))
    logging.getLogger("file_storage.request").addHandler(h)
    logging.getLogger("file_storage.request").setLevel(logging.INFO)

# Most specific class first; lookup walks the exception's MRO.
_STATUS_BY_ERROR: dict[type[FileStorageError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    CryptoError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidStateError: status.HTTP_409_CONFLICT,
    ConflictError: status.HTTP_409_CONFLICT,
    StorageFaultError: status.HTTP_502_BAD_GATEWAY,
}


def status_for_error(exc: FileStorageError) -> int:
    for cls in type(exc).__mro__:
        if cls in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


app = FastAPI(title=settings.app_name)
app.add_middleware(RequestLoggingMiddleware)


@app.middleware("http")
async def security_headers(request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


@app.exception_handler(FileStorageError)
async def file_storage_error_handler(request: Request, exc: FileStorageError):
    status_code = status_for_error(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    else:
        logger.warning("%s %s rejected: [%s] %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "code": exc.code, "message": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    missing = [".".join(str(p) for p in err.get("loc", ())[1:]) for err in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "code": ValidationError.code,
            "message": f"Invalid request parameters: {', '.join(m for m in missing if m) or 'body'}",
        },
    )


app.include_router(files_uuid_router, prefix="/api")
app.include_router(files_url_router, prefix="/api")
app.include_router(stream_router, prefix="/api")


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/healthz")
async def healthz():
    """Liveness: no DB, no object store."""
    return {"status": "ok"}


@app.get("/readyz")
async def readyz():
    """Readiness: light DB check."""
    from file_storage.db.session import ping_db
    if await ping_db():
        return {"status": "ok"}
    return JSONResponse(
        status_code=503,
        content={"status": "unavailable", "detail": "database unreachable"},
    )


@app.get("/metrics", response_class=Response)
async def metrics(_: None = Depends(require_metrics_access)):
    """Prometheus metrics. Guard with METRICS_SECRET + X-Metrics-Secret header outside local dev."""
    body, content_type = get_metrics()
    return Response(content=body, media_type=content_type)
