# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Global exception handlers — map enrollment errors to HTTP responses."""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import EnrollmentError, InvalidEnrollmentRequest
from app.core.logging import get_logger
from app.metrics import ENROLLMENTS

logger = get_logger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(EnrollmentError)
    async def enrollment_error_handler(request: Request, exc: EnrollmentError):
        req_id = getattr(request.state, "request_id", None)
        logger.warning("%s on %s: %s", exc.code, request.url.path, exc.message,
                       extra={"request_id": req_id})
        return JSONResponse(status_code=exc.http_status, content=exc.to_response(req_id))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        req_id = getattr(request.state, "request_id", None)
        error = InvalidEnrollmentRequest(_describe(exc))
        # only the enrollment body is validated, so every hit is a rejected enrollment
        ENROLLMENTS.labels(outcome=error.code).inc()
        logger.warning("%s on %s: %s", error.code, request.url.path, error.message,
                       extra={"request_id": req_id})
        return JSONResponse(status_code=error.http_status, content=error.to_response(req_id))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        req_id = getattr(request.state, "request_id", None)
        logger.exception("Unhandled exception", extra={"request_id": req_id})
        return JSONResponse(
            status_code=500,
            content={"error": "internal_server_error", "detail": str(exc), "request_id": req_id},
        )


def _describe(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into ``field: message; field: message``."""
    parts = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{field}: {err.get('msg', 'invalid')}" if field else err.get("msg", "invalid"))
    return "; ".join(parts) or "invalid request"
