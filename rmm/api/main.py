"""FastAPI application for the RMM quoting service.

Note: Rate limiting is intentionally not implemented at the application level.
It should be handled at the infrastructure layer (reverse proxy / load balancer).
"""

import logging
import os

import structlog
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from rmm import __version__
from rmm.api.endpoints import get_quoter, router
from rmm.errors import RmmError
from rmm.models.quote import ErrorResponse
from rmm.swaps.quoter import SwapQuoter

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("RMM_HOST", "0.0.0.0")
PORT = int(os.environ.get("RMM_PORT", "8000"))
DEBUG = os.environ.get("RMM_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

app = FastAPI(
    title="RMM Quoter",
    description="Swap quotes for replicating market maker pools",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(RmmError)
async def rmm_error_handler(request: Request, exc: RmmError) -> JSONResponse:
    """Report a rejected quote with its error code. Nothing here is retryable."""
    logger.info(
        "quote_rejected",
        path=request.url.path,
        error=exc.code,
        detail=str(exc),
    )
    body = ErrorResponse(error=exc.code, detail=str(exc))
    return JSONResponse(status_code=422, content=body.model_dump())


app.include_router(router)


@app.get("/health")
async def health(quoter: SwapQuoter = Depends(get_quoter)) -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "curve": quoter.curve.name}


def configure_logging(debug: bool = DEBUG) -> None:
    """Console logging with ISO timestamps; debug level when RMM_DEBUG is set."""
    log_level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )


def run() -> None:
    """Run the quoting API server.

    Configuration via environment variables:
    - RMM_HOST: Host to bind to (default: 0.0.0.0)
    - RMM_PORT: Port to bind to (default: 8000)
    - RMM_DEBUG: Enable debug logging and reload mode (default: false)
    - RMM_CURVE: Curve primitives, "approximate" or "exact" (default: approximate)
    - RMM_QUOTE_TIMEOUT: Seconds allowed per quote (default: 5.0)
    """
    configure_logging()
    uvicorn.run(
        "rmm.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
