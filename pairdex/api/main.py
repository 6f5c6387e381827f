"""FastAPI application for the pairdex simulator.

Every pairdex error is returned as a JSON body with the error class, its
category and the message. Status codes follow the error category.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pairdex.api.endpoints import router
from pairdex.errors import (
    ArithmeticFailure,
    AuthorizationError,
    CollaboratorFailure,
    InputValidationError,
    PairdexError,
    StateError,
    UnknownContract,
)
from pairdex.logging_config import configure_logging
from pairdex.safe_int import SafeIntError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("PAIRDEX_HOST", "127.0.0.1")
PORT = int(os.environ.get("PAIRDEX_PORT", "8000"))
DEBUG = os.environ.get("PAIRDEX_DEBUG", "false").lower() in ("true", "1", "yes")

# Checked in order; the first matching category wins
STATUS_BY_CATEGORY: list[tuple[type[Exception], int, str]] = [
    (UnknownContract, 404, "state"),
    (InputValidationError, 400, "input_validation"),
    (AuthorizationError, 403, "authorization"),
    (StateError, 409, "state"),
    (ArithmeticFailure, 422, "arithmetic"),
    (CollaboratorFailure, 502, "collaborator"),
]

app = FastAPI(
    title="pairdex",
    description="Deterministic two-asset exchange pools, simulated in memory",
    version="0.1.0",
)


def classify(exc: Exception) -> tuple[int, str]:
    """HTTP status and category name for an error."""
    for kind, status, category in STATUS_BY_CATEGORY:
        if isinstance(exc, kind):
            return status, category
    if isinstance(exc, SafeIntError):
        return 422, "arithmetic"
    return 400, "input_validation"


@app.exception_handler(PairdexError)
@app.exception_handler(SafeIntError)
async def pairdex_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    status, category = classify(exc)
    logger.warning(
        "request_rejected",
        error=type(exc).__name__,
        category=category,
        detail=str(exc),
    )
    return JSONResponse(
        status_code=status,
        content={"error": type(exc).__name__, "category": category, "detail": str(exc)},
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the simulator API server.

    Configuration via environment variables:
    - PAIRDEX_HOST: Host to bind to (default: 127.0.0.1)
    - PAIRDEX_PORT: Port to bind to (default: 8000)
    - PAIRDEX_DEBUG: Enable debug logging and reload mode (default: false)
    - PAIRDEX_CHAIN_ID: Chain id bound into permit signatures (default: 1)
    - PAIRDEX_REENTRANCY_GUARD: Reject re-entrant pool calls (default: true)
    """
    configure_logging(verbose=DEBUG)
    uvicorn.run(
        "pairdex.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
