import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from movelist.api.routes import catalog, health, inventory, items
from movelist.errors import InvalidItemText
from movelist.logging import configure_logging

configure_logging()

logger = structlog.get_logger()

app = FastAPI(
    title="Movelist API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url=None,
)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", request.headers.get("X-Request-ID", ""))


def _error_json(request: Request, status: int, error: str, message: str, retryable: bool):
    response = JSONResponse(
        status_code=status,
        content={"error": error, "message": message, "retryable": retryable},
    )
    response.headers["X-Request-ID"] = _request_id(request)
    return response


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Attach a unique request ID to every request for log correlation.

    The ID is bound into structlog context vars, so it appears in every log
    entry for the request, and echoed in the X-Request-ID response header.
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Return ErrorResponse JSON for pydantic validation errors.

    FastAPI's default 422 body is {"detail": [...]}; clients get one error shape.
    """
    messages = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}")
    return _error_json(request, 422, "validation_error", "; ".join(messages), False)


@app.exception_handler(InvalidItemText)
async def invalid_item_text_handler(request: Request, exc: InvalidItemText) -> JSONResponse:
    logger.info("item_text_rejected", reason=str(exc))
    return _error_json(request, 422, "validation_error", str(exc), False)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return ErrorResponse JSON instead of a bare 500 page."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    return _error_json(request, 500, "internal_error", "An unexpected error occurred", True)


app.include_router(health.router)
app.include_router(catalog.router, prefix="/api/v1")
app.include_router(items.router, prefix="/api/v1")
app.include_router(inventory.router, prefix="/api/v1")
