import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mindjournal import database
from mindjournal.config import DEV_JWT_SECRET, get_settings
from mindjournal.errors import JournalAppError
from mindjournal.logging import RequestLoggingMiddleware, init_logging, setup_query_logging
from mindjournal.routes import auth as auth_routes
from mindjournal.routes import journal as journal_routes
from mindjournal.services.journal_service import build_journal_service

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------
init_logging()
logger = logging.getLogger("mindjournal")
settings = get_settings()


# ---------------------------------------------------------------------------
# App lifespan (startup/shutdown)
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown tasks."""
    logger.info("Startup: initializing database...")
    try:
        await database.init_db_async()
        logger.info("Connected to database: %s", database.get_database_dsn())
    except Exception as e:
        logger.critical("Database initialization failed: %s", e)
        raise  # app should not start without DB

    if settings.jwt_secret_key == DEV_JWT_SECRET:
        logger.warning("JWT_SECRET_KEY not set; using the development secret")

    app.state.journal_service = build_journal_service(settings)

    yield

    logger.info("Shutdown: closing database connection pool...")
    try:
        await database.shutdown_db_async()
        logger.info("Cleanup complete.")
    except Exception as e:
        logger.error("Error during shutdown cleanup: %s", e)


# ---------------------------------------------------------------------------
# FastAPI Application
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Mind Journal API",
    version="1.0.0",
    description=(
        "Journaling API: each entry gets an inferred emotion and a coping suggestion.\n\n"
        "AI features degrade to fixed fallbacks when HF_API_KEY or GROQ_API_KEY is not set."
    ),
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
setup_query_logging(database.async_engine)


# ---------------------------------------------------------------------------
# Base Routes
# ---------------------------------------------------------------------------
@app.get("/", tags=["Health"])
async def root():
    """Basic health check to verify the service is running."""
    return {"status": "ok", "message": "Mind Journal API is running."}


app.include_router(auth_routes.router, prefix="/api/auth")
app.include_router(journal_routes.router, prefix="/api/journal")


# -------------------------------
# Unified error response handlers
# -------------------------------
def _error_body(message: str, details=None) -> dict:
    body = {"error": message}
    if details is not None:
        body["details"] = details
    return body


@app.exception_handler(JournalAppError)
async def app_error_handler(request: Request, exc: JournalAppError):
    log = logging.getLogger("mindjournal")
    if exc.status_code >= 500:
        log.error("%s: %s %s -> %s", type(exc).__name__, request.method, request.url.path, exc.message)
    else:
        log.info("%s: %s %s -> %s", type(exc).__name__, request.method, request.url.path, exc.status_code)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, exc.details),
        headers=headers,
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    logging.getLogger("mindjournal").warning(
        "HTTPException: %s %s -> %s | detail=%s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.detail,
    )
    if isinstance(exc.detail, dict):
        body = _error_body(exc.detail.get("error") or "Error", exc.detail.get("details"))
    else:
        body = _error_body(exc.detail if isinstance(exc.detail, str) else "Error")
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logging.getLogger("mindjournal").info(
        "ValidationError: %s %s | errors=%s",
        request.method,
        request.url.path,
        exc.errors(),
    )
    return JSONResponse(
        status_code=400,
        content=_error_body("Validation failed", jsonable_encoder(exc.errors())),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logging.getLogger("mindjournal").exception(
        "Unhandled exception: %s %s",
        request.method,
        request.url.path,
    )
    return JSONResponse(status_code=500, content=_error_body("Internal server error"))
