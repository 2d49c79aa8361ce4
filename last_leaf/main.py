"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from last_leaf.api import auth, diary, health, user
from last_leaf.config import get_settings
from last_leaf.database import engine
from last_leaf.exceptions import LastLeafError

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

INVALID_JSON_MESSAGE = "Invalid JSON in request body"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info(f"Starting The Last Leaf API ({settings.environment})")
    yield
    # Shutdown: release pooled database connections
    engine.dispose()


app = FastAPI(
    title="The Last Leaf API",
    description="Personal diary with an inactivity safety switch for emergency contacts",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:3001",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def describe_validation_error(exc: RequestValidationError) -> str:
    """Pick the message of the first failed check for the client."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return INVALID_JSON_MESSAGE
    # An empty or literal null body leaves the whole body missing
    if first.get("type") == "missing" and tuple(first.get("loc", ())) == ("body",):
        return INVALID_JSON_MESSAGE
    message = str(first.get("msg", "Invalid request"))
    return message.removeprefix("Value error, ")


@app.exception_handler(LastLeafError)
async def last_leaf_error_handler(request: Request, exc: LastLeafError):
    """Render domain errors as ``{"error": message}``."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed or invalid request input is a 400, not FastAPI's default 422."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": describe_validation_error(exc)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Keep framework errors (unknown routes, wrong methods) in the same shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log unexpected failures and hide their details from the client."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# Register routers
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(diary.router)
app.include_router(user.router)
