"""
Loan Eligibility Service

A FastAPI-based service that decides whether an applicant is eligible for a
loan and how much they can borrow.

How a decision is made:
-----------------------
1. A CIBIL-style credit score (300-900) is simulated from monthly income
   and the loan-to-income ratio. There is no bureau integration; the score
   is synthetic.
2. Applicants scoring below 600, or earning below ₹20,000 a month, are
   rejected.
3. Everyone else is offered a share of the requested amount based on their
   score tier, never more than five years of income.

Every application is stored with the decision it received.
"""
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from loan_eligibility.api import router
from loan_eligibility.config import settings
from loan_eligibility.database import engine, Base
from loan_eligibility.logging import (
    configure_logging,
    get_logger,
    set_request_context,
    clear_request_context,
    generate_request_id,
)
from loan_eligibility.schemas import FIELD_ERROR_MESSAGES
from loan_eligibility import metrics

# Configure structured logging
configure_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("service_starting", service_name=settings.service_name)

    # Create tables if they don't exist (in production, use migrations)
    Base.metadata.create_all(bind=engine)

    logger.info("service_started", service_name=settings.service_name)

    yield

    logger.info("service_stopping", service_name=settings.service_name)


app = FastAPI(
    title="Loan Eligibility Service",
    description="Simulated credit scoring and loan eligibility decisions",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _endpoint_label(request: Request) -> str:
    """Route template for metric labels, e.g. "/api/loan/applications/{application_id}"."""
    route = request.scope.get("route")
    if route is not None:
        return route.path
    # Paths that matched no route share one label
    return "unmatched"


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """
    Middleware for request tracing, logging, and metrics.

    Sets up request context with:
    - request_id: Unique identifier for tracing
    - Timing for duration_ms calculation
    - Prometheus metrics collection
    """
    method = request.method
    path = request.url.path

    # Skip logging/metrics for health and metrics endpoints
    if path in ("/health", "/metrics"):
        return await call_next(request)

    request_id = request.headers.get("X-Request-ID") or generate_request_id()
    set_request_context(request_id)
    request.state.request_id = request_id

    start_time = time.perf_counter()

    logger.info("request_received", method=method, path=path)

    try:
        response = await call_next(request)

        duration_seconds = time.perf_counter() - start_time

        logger.info(
            "request_completed",
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=round(duration_seconds * 1000, 2),
        )

        metrics.record_http_request(
            method, _endpoint_label(request), response.status_code, duration_seconds
        )

        response.headers["X-Request-ID"] = request_id

        return response

    except Exception as e:
        duration_seconds = time.perf_counter() - start_time

        logger.error(
            "request_failed",
            method=method,
            path=path,
            duration_ms=round(duration_seconds * 1000, 2),
            error=str(e),
        )

        metrics.record_http_request(method, _endpoint_label(request), 500, duration_seconds)

        raise

    finally:
        clear_request_context()


def _error_body(request: Request, status: int, error: str, message: str) -> dict:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status,
        "error": error,
        "message": message,
        "path": request.url.path,
    }


def _field_error_message(field: str, error: dict) -> str:
    messages = FIELD_ERROR_MESSAGES.get(field, {})
    return messages.get(error["type"]) or messages.get("*") or error["msg"]


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Return 400 with a field -> message map for invalid request bodies."""
    errors = {}
    for error in exc.errors():
        field = str(error["loc"][-1]) if error["loc"] else "body"
        # Keep the first error reported for each field
        errors.setdefault(field, _field_error_message(field, error))

    logger.warning("request_validation_failed", path=request.url.path, errors=errors)

    body = _error_body(request, 400, "Validation Failed", "Invalid input data")
    body["errors"] = errors
    return JSONResponse(status_code=400, content=body)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Handle bad arguments raised inside route handlers."""
    logger.warning("bad_request", path=request.url.path, error=str(exc))

    return JSONResponse(
        status_code=400,
        content=_error_body(request, 400, "Bad Request", str(exc)),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Handle everything else as a 500."""
    logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=exc)

    return JSONResponse(
        status_code=500,
        content=_error_body(request, 500, "Internal Server Error", str(exc)),
    )


# Include API routes
app.include_router(router)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "ok", "service": settings.service_name}


@app.get("/metrics")
async def metrics_endpoint():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
