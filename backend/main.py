# ruff: noqa: E402
# E402 disabled: load_dotenv() must run before other imports for Sentry DSN

import time
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import sentry_sdk
from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from core.correlation import (
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from core.logging_config import configure_logging
from core.sentry_config import init_sentry
from helpers.rate_limiter import limiter
from helpers.security_headers import SecurityHeadersMiddleware
from models.config import settings
from models.exceptions import (
    AlreadyExistsException,
    AuthenticationException,
    BusinessRuleException,
    ConflictException,
    DomainException,
    NotFoundException,
    PermissionDeniedException,
    ValidationException,
)
from repositories.database import Base, engine
from routers import (
    auth_router,
    complaints_router,
    departments_router,
    locations_router,
    profile_router,
    publications_router,
    settings_router,
    users_router,
)

# Initialize Sentry BEFORE app creation
init_sentry()

configure_logging(settings.ENVIRONMENT, settings.LOG_DIR)

# Latest migration revision; bump when adding a migration
EXPECTED_REVISION = "0001_initial"


def check_schema_version() -> None:
    """Warn when the database schema is behind the code's latest migration."""
    from sqlalchemy import text

    from repositories.database import SessionLocal

    db = SessionLocal()
    try:
        result = db.execute(text("SELECT version_num FROM alembic_version LIMIT 1"))
        row = result.fetchone()
        if row:
            current_revision = row[0]
            if current_revision != EXPECTED_REVISION:
                logger.warning(
                    f"Database schema mismatch! "
                    f"Current: {current_revision}, Expected: {EXPECTED_REVISION}. "
                    f"Run 'alembic upgrade head' to update the database schema."
                )
            else:
                logger.info(f"Database schema version: {current_revision} (up to date)")
        else:
            logger.warning(
                "No alembic_version found. Database may not be initialized with migrations."
            )
    except Exception as e:
        logger.warning(f"Could not verify schema version: {e}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    - Verify database schema version matches expected migration.
    - Optionally create tables when `AUTO_CREATE_DB` is enabled (development).
    """
    check_schema_version()

    if settings.AUTO_CREATE_DB:
        logger.info(
            "AUTO_CREATE_DB enabled; creating database tables via SQLAlchemy create_all()"
        )
        Base.metadata.create_all(bind=engine)
    else:
        logger.info("AUTO_CREATE_DB disabled; skipping automatic create_all()")

    yield


app = FastAPI(title="CitiCare API", lifespan=lifespan)

# Attach rate limiter to app
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Inject correlation ID into request context and Sentry."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        correlation_id = (
            request.headers.get("X-Correlation-ID") or generate_correlation_id()
        )
        set_correlation_id(correlation_id)
        sentry_sdk.set_tag("correlation_id", correlation_id)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all incoming requests with performance monitoring."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()

        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Request: {request.method} {request.url.path} from {client_host}")

        response = await call_next(request)

        duration = time.perf_counter() - start_time
        logger.info(
            f"Response: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s"
        )

        if duration > settings.SLOW_REQUEST_THRESHOLD:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} "
                f"took {duration:.2f}s (threshold: {settings.SLOW_REQUEST_THRESHOLD}s)"
            )

        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        return response


# Middleware runs in reverse order of registration
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# In development, allow all origins for mobile/network testing
cors_origins = ["*"] if settings.ENVIRONMENT == "development" else settings.CORS_ORIGINS
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True if settings.ENVIRONMENT != "development" else False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Complaint photos and avatars
uploads_dir = Path(settings.UPLOAD_DIR)
uploads_dir.mkdir(parents=True, exist_ok=True)
app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=str(uploads_dir)),
    name="uploads",
)


# (exception family, HTTP status, log label, report to Sentry)
DOMAIN_ERROR_STATUS: list[tuple[type[DomainException], int, str, bool]] = [
    (NotFoundException, status.HTTP_404_NOT_FOUND, "Not found", False),
    (AlreadyExistsException, status.HTTP_409_CONFLICT, "Already exists", False),
    (ConflictException, status.HTTP_409_CONFLICT, "Conflict", False),
    (ValidationException, status.HTTP_422_UNPROCESSABLE_CONTENT, "Validation error", False),
    (PermissionDeniedException, status.HTTP_403_FORBIDDEN, "Permission denied", False),
    # Auth failures are security-relevant
    (AuthenticationException, status.HTTP_401_UNAUTHORIZED, "Authentication failed", True),
    (BusinessRuleException, status.HTTP_400_BAD_REQUEST, "Business rule violation", False),
    (DomainException, status.HTTP_400_BAD_REQUEST, "Domain exception", True),
]


def _error_response(
    exc: DomainException, status_code: int, headers: dict | None = None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "correlation_id": exc.correlation_id,
        },
        headers=headers,
    )


def domain_exception_handler(
    status_code: int, label: str, capture: bool = False
) -> Callable[[Request, DomainException], Awaitable[JSONResponse]]:
    """Build the handler turning one exception family into its HTTP response."""
    headers = (
        {"WWW-Authenticate": "Bearer"}
        if status_code == status.HTTP_401_UNAUTHORIZED
        else None
    )

    async def handler(request: Request, exc: DomainException) -> JSONResponse:
        sentry_sdk.set_tag("correlation_id", exc.correlation_id)
        sentry_sdk.set_tag("exception_type", exc.__class__.__name__)
        if capture:
            sentry_sdk.capture_exception(exc)

        logger.warning(
            f"{label}: {exc.message}",
            correlation_id=exc.correlation_id,
            exception_type=exc.__class__.__name__,
            path=str(request.url.path),
        )
        return _error_response(exc, status_code, headers=headers)

    return handler


# Global unhandled exception handler (returns generic 500 and logs details)
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch all unhandled exceptions with full Sentry capture."""
    correlation_id = get_correlation_id() or generate_correlation_id()

    sentry_sdk.set_tag("correlation_id", correlation_id)
    sentry_sdk.capture_exception(exc)

    # repr() keeps curly braces away from loguru's formatter
    logger.exception(
        f"Unhandled exception: {exc!r}",
        correlation_id=correlation_id,
        path=str(request.url.path),
        method=request.method,
    )

    detail = "Internal server error"
    if settings.ENVIRONMENT != "production":
        detail = f"{detail}: {exc}"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": detail,
            "correlation_id": correlation_id,
        },
    )


for exception_class, status_code, label, capture in DOMAIN_ERROR_STATUS:
    app.add_exception_handler(
        exception_class, domain_exception_handler(status_code, label, capture)
    )


app.include_router(auth_router.router, prefix="/api")
app.include_router(complaints_router.router, prefix="/api")
app.include_router(departments_router.router, prefix="/api")
app.include_router(locations_router.router, prefix="/api")
app.include_router(users_router.router, prefix="/api")
app.include_router(profile_router.router, prefix="/api")
app.include_router(settings_router.router, prefix="/api")
app.include_router(publications_router.documents_router, prefix="/api")
app.include_router(publications_router.projects_router, prefix="/api")


@app.get("/")
def root() -> dict:
    return {"message": "Welcome to CitiCare API"}


@app.get("/api/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/health", include_in_schema=False)
def health_check_root() -> dict:
    return {"status": "healthy"}
