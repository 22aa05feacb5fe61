# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Mailing List Service
====================
Adds users to mailing lists: resolves the user in the directory, notifies
them through the notification service, then records the membership.

Port: 8005
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.controllers import enrollment_controller, system_controller
from app.core.config import settings
from app.core.logging import get_logger
from app.error_handlers import register_error_handlers
from app.middleware import MetricsMiddleware, RequestIDMiddleware
from app.schemas import ErrorResponse

logger = get_logger(settings.SERVICE_NAME)


@asynccontextmanager
async def lifespan(application: FastAPI):
    logger.info(
        "Mailing list service starting — directory=%s lookup=%s notification_failure=%s",
        settings.DIRECTORY_BACKEND, settings.USER_LOOKUP_MODE, settings.NOTIFICATION_FAILURE_POLICY,
    )
    yield
    logger.info("Mailing list service shutting down")


app = FastAPI(
    title="Mailing List Service",
    description="Enrolls users in mailing lists and notifies them.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
    responses={
        422: {"model": ErrorResponse, "description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)

register_error_handlers(app)

app.include_router(system_controller.router)
app.include_router(enrollment_controller.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
