import importlib.util
import logging
import time
from logging.config import dictConfig

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.middleware.base import BaseHTTPMiddleware

from mindjournal.config import get_settings

# ---------------------------------------------------
# Colorlog Availability Check
# ---------------------------------------------------
COLORLOG_AVAILABLE = importlib.util.find_spec("colorlog") is not None

SLOW_QUERY_THRESHOLD_MS = 200


def build_logging_config() -> dict:
    settings = get_settings()
    log_level = settings.log_level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            },
            "color": (
                {
                    "()": "colorlog.ColoredFormatter",
                    "format": "%(log_color)s%(asctime)s %(levelname)s [%(name)s] %(message)s",
                    "log_colors": {
                        "DEBUG": "cyan",
                        "INFO": "green",
                        "WARNING": "yellow",
                        "ERROR": "red",
                        "CRITICAL": "bold_red",
                    },
                }
                if COLORLOG_AVAILABLE
                else {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s"}
            ),
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "color" if COLORLOG_AVAILABLE else "default",
                "level": settings.console_log_level.upper(),
            },
        },
        "loggers": {
            # Silence uvicorn noise in console
            "uvicorn": {"level": "WARNING"},
            "uvicorn.error": {"level": "WARNING"},
            "uvicorn.access": {"level": "WARNING"},
            "sqlalchemy.engine": {"level": "WARNING"},
            # Third-party HTTP clients log every request at INFO
            "httpx": {"level": "WARNING"},
            "groq": {"level": "WARNING"},
            "mindjournal.request": {"level": "INFO"},
            "mindjournal.db": {"level": "INFO"},
        },
        "root": {
            "level": log_level,
            "handlers": ["console"],
        },
    }


def init_logging() -> None:
    dictConfig(build_logging_config())


# ---------------------------------------------------
# Request Logging Middleware
# ---------------------------------------------------
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        logger = logging.getLogger("mindjournal.request")
        start_time = time.perf_counter()

        response = await call_next(request)

        duration = (time.perf_counter() - start_time) * 1000
        logger.info(
            "%s %s -> %s (%.2f ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration,
        )
        return response


# ---------------------------------------------------
# SQLAlchemy Query Timing
# ---------------------------------------------------
def setup_query_logging(engine: AsyncEngine) -> None:
    logger = logging.getLogger("mindjournal.db")

    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        context._query_start_time = time.perf_counter()

    @event.listens_for(engine.sync_engine, "after_cursor_execute")
    def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        total_time = (time.perf_counter() - context._query_start_time) * 1000
        if total_time > SLOW_QUERY_THRESHOLD_MS:
            logger.warning("Slow query (%.2f ms): %s", total_time, statement)
        else:
            logger.debug("Query (%.2f ms): %s", total_time, statement)
