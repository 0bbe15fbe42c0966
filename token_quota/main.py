import logging
import os
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from token_quota.common.config import settings
from token_quota.common.database import create_tables, close_db
from token_quota.common.exceptions import AppException
from token_quota.common.responses import error_response, success_response
from token_quota.common.rate_limit import limiter


def configure_logging(log_dir: str | None = None) -> None:
    """Configure root logging, optionally mirrored to a file in ``log_dir``."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(log_dir, "token-quota.log")))

    logging.basicConfig(
        level=logging.INFO if not settings.debug else logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


configure_logging(settings.log_dir)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    await create_tables()
    logger.info(f"{settings.app_name} {settings.app_version} started")

    yield

    await close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)


def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Render rate limit errors in the standard envelope."""
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=error_response(
            error="TooManyRequests",
            message=f"Rate limit exceeded: {exc.detail}",
        ),
        headers={"Retry-After": "60"},
    )


app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """Handle custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            error=exc.__class__.__name__.replace("Exception", ""),
            message=exc.message,
        ),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are reported as validation errors (400)."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response(
            error="Validation",
            message=f"Invalid request parameters: {details}",
        ),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(
            error="InternalServer",
            message=str(exc) if settings.debug else "An error occurred",
        ),
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running"
    }


@app.get("/api/status")
async def api_status():
    """Health check endpoint."""
    return success_response("", {"version": settings.app_version})


from token_quota.api.v1 import auth, tokens

app.include_router(auth.router, prefix="/api/v1", tags=["auth"])
app.include_router(tokens.router, prefix="/api/v1", tags=["tokens"])
