"""FastAPI application for the NDRDesk API.

Provides the main application instance with the NDR router, domain error
handlers, and a health endpoint.
"""

import logging
import sys
import time as _time
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from fastapi import FastAPI, Request

# Configure logging to stdout for uvicorn to capture
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
# Ensure our application loggers are captured
logging.getLogger("ndrdesk").setLevel(logging.INFO)
from fastapi.responses import JSONResponse

from ndrdesk import __version__
from ndrdesk.api.routes import ndr
from ndrdesk.api.schemas import ErrorResponse
from ndrdesk.errors import DomainError, GatewayError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_startup_time: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Async lifespan: record startup time, close the courier client on exit."""
    global _startup_time

    from ndrdesk.services.gateway_provider import shutdown_action_gateway

    _startup_time = _time.time()
    logger.info("NDRDesk API starting")

    yield

    await shutdown_action_gateway()


app = FastAPI(
    title="NDRDesk API",
    description="Courier non-delivery report resolution",
    version=__version__,
    lifespan=lifespan,
)


def _status_for(exc: DomainError) -> int:
    """Map a domain error type to an HTTP status code."""
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, GatewayError):
        return 502
    return 500


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Handle DomainError exceptions with consistent format.

    Args:
        request: The incoming request.
        exc: The DomainError exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    body = ErrorResponse(
        error_code=exc.code,
        message=exc.message,
        remediation=exc.remediation,
        retryable=exc.is_retryable,
        details=exc.details or None,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


# Include routers
app.include_router(ndr.router, prefix="/api/v1")


@app.get("/health")
def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status, version, and uptime.
    """
    uptime = int(_time.time() - _startup_time) if _startup_time else 0
    try:
        version = _pkg_version("ndrdesk")
    except PackageNotFoundError:
        version = __version__
    return {
        "status": "healthy",
        "version": version,
        "uptime_seconds": uptime,
    }
