# app/utils/logger.py

import uuid
import sys
import logging
from typing import Optional, Dict, Any, List, Callable
from datetime import datetime, timezone

import structlog
from fastapi import Request, FastAPI
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

DEFAULT_APP_NAME = "Fleet Back Office"
REQUEST_ID_HEADER = "X-Request-ID"

Processor = Callable[[Any, str, Dict[str, Any]], Dict[str, Any]]


def app_context_processor(app_name: str, environment: str) -> Processor:
    """Build a processor stamping the app name and environment on every event"""
    def add_app_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_app_context


def build_formatter(renderer: Processor, pre_chain: List[Processor]) -> structlog.stdlib.ProcessorFormatter:
    """Formatter rendering both structlog events and plain stdlib records"""
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            # Drop _record / _from_structlog before rendering
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=pre_chain,
    )


def setup_logging(
    log_level: str = "INFO",
    use_json: bool = True,
    log_file: Optional[str] = None,
    app_name: str = DEFAULT_APP_NAME,
    environment: str = "development"
) -> None:
    """
    Configure structlog for the application

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_json: Use JSON format (True) or plain console output (False)
        log_file: Optional path to a log file, always written as JSON
        app_name: Application name for log context
        environment: Environment name (development, staging, production)
    """
    level = getattr(logging, log_level.upper())

    # Clear any existing handlers to avoid conflicts
    logging.root.handlers = []

    # Common processors for structlog and stdlib records
    # request_id, file_name and imported_by come in through contextvars
    shared_processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        app_context_processor(app_name, environment),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if use_json:
        console_renderer = structlog.processors.JSONRenderer()
    else:
        console_renderer = structlog.dev.ConsoleRenderer(
            colors=False,
            exception_formatter=structlog.dev.plain_traceback
        )

    # Setup console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(build_formatter(console_renderer, shared_processors))

    logging.root.setLevel(level)
    logging.root.addHandler(console_handler)

    # Setup file handler
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(
            build_formatter(structlog.processors.JSONRenderer(), shared_processors)
        )
        logging.root.addHandler(file_handler)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name (Optional[str]): Name of the logger.

    Returns:
        structlog.stdlib.BoundLogger: Configured logger instance.
    """
    return structlog.get_logger(name)


def bind_upload_context(file_name: str, imported_by: str):
    """
    Context manager tagging every log line emitted inside it with the
    upload being processed.
    """
    return structlog.contextvars.bound_contextvars(file_name=file_name, imported_by=imported_by)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for request/response logging and request ID injection
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        logger = get_logger("api.access")
        start_time = datetime.now(timezone.utc)

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            try:
                logger.info(
                    "request_started",
                    method=request.method,
                    path=request.url.path,
                    client_host=request.client.host if request.client else None,
                )

                response = await call_next(request)

                duration_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
                logger.info(
                    "request_completed",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=round(duration_ms, 2)
                )

                response.headers[REQUEST_ID_HEADER] = request_id
                return response

            except Exception as e:
                duration_ms = (datetime.now(timezone.utc) - start_time).total_seconds() * 1000
                logger.error(
                    "request_failed",
                    method=request.method,
                    path=request.url.path,
                    duration_ms=round(duration_ms, 2),
                    error=str(e),
                    exc_info=True
                )

                # Body carries only the request id
                return JSONResponse(
                    status_code=500,
                    content={
                        "error": "Internal server error",
                        "request_id": request_id
                    },
                    headers={REQUEST_ID_HEADER: request_id}
                )


def setup_app_logging(
    app: FastAPI,
    log_level: str = "INFO",
    use_json: bool = True,
    log_file: Optional[str] = None,
    app_name: Optional[str] = None,
    environment: str = "development",
) -> None:
    """
    Setup logging for a FastAPI application and register the request logging middleware.
    """
    setup_logging(
        log_level=log_level,
        use_json=use_json,
        log_file=log_file,
        app_name=app_name or app.title or DEFAULT_APP_NAME,
        environment=environment,
    )

    app.add_middleware(LoggingMiddleware)
