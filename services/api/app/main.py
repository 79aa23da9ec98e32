"""FastAPI application entry point."""

import logging
import sys
from uuid import uuid4

# Configure logging to output to stdout (the platform captures this)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.routers import admin, chat, health, visitor_chat
from app.services.errors import ChatError, QuotaExceededError, UnknownUpstreamError

logger = logging.getLogger(__name__)

settings = get_settings()

if settings.is_dev_mode:
    logger.warning(f"DEV_USER_ID is set: JWT auth is bypassed for user {settings.dev_user_id}")


app = FastAPI(
    title="Heart Wellness API",
    description="Wellness chat for people tracking ectopic heartbeats",
    version="0.1.0",
    redirect_slashes=False,  # Prevent 307 redirects that break HTTPS through proxies
)

# CORS for frontend
origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8080",
]

# Add production frontend URL if configured (handle www and non-www)
if settings.frontend_url:
    origins.append(settings.frontend_url)
    if "://www." in settings.frontend_url:
        origins.append(settings.frontend_url.replace("://www.", "://"))
    elif "://" in settings.frontend_url:
        origins.append(settings.frontend_url.replace("://", "://www."))

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(chat.router)
app.include_router(visitor_chat.router)
app.include_router(admin.router)


@app.exception_handler(ChatError)
async def chat_error_handler(request: Request, exc: ChatError):
    """Render wellness chat errors as {"error": ...} bodies."""
    error_id = str(uuid4())
    headers = None

    if isinstance(exc, QuotaExceededError):
        if exc.retry_after is not None:
            headers = {"Retry-After": str(exc.retry_after)}
    elif isinstance(exc, UnknownUpstreamError):
        logger.error(
            f"Upstream failure [{error_id}]: status={exc.upstream_status} "
            f"detail={exc.detail} - {request.method} {request.url.path}"
        )

    logger.warning(
        f"HTTP {exc.status_code} [{error_id}]: {type(exc).__name__}: {exc.message} - "
        f"{request.method} {request.url.path}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={**exc.to_content(), "error_id": error_id},
        headers=headers,
    )


def _error_type(status_code: int) -> str:
    if status_code == 404:
        return "not_found"
    if status_code in (401, 403):
        return "auth"
    if status_code == 429:
        return "rate_limit"
    if status_code < 500:
        return "validation"
    return "server_error"


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render framework HTTP errors (auth, admin gating, 404) in the chat error shape."""
    error_id = str(uuid4())

    logger.warning(
        f"HTTP {exc.status_code} [{error_id}]: {exc.detail} - {request.method} {request.url.path}"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": str(exc.detail),
            "error_type": _error_type(exc.status_code),
            "error_id": error_id,
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed chat/admin bodies with per-field messages."""
    error_id = str(uuid4())
    errors = [
        {"field": ".".join(str(loc) for loc in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]

    logger.warning(f"Invalid request [{error_id}]: {errors} - {request.method} {request.url.path}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Invalid request",
            "error_type": "validation",
            "error_id": error_id,
            "errors": errors,
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Anything unexpected becomes a generic 500; details stay in the log."""
    error_id = str(uuid4())

    logger.error(
        f"Unhandled exception [{error_id}]: {type(exc).__name__}: {exc} - "
        f"{request.method} {request.url.path}",
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "error_type": "server_error",
            "error_id": error_id,
        },
    )
