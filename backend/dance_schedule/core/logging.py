"""
structlog configuration for the schedule service.

Every record carries the service name and environment. Entity ids, UUIDs
and timestamps may be passed to log calls as they are; they are rendered
to strings before output. Production emits one JSON object per line,
development a colored console line.
"""

import logging
import sys
from datetime import date
from uuid import UUID

import structlog
from structlog.typing import EventDict, WrappedLogger

from dance_schedule.core.config import Settings, get_settings
from dance_schedule.domain.ids import Id


def _service_tagger(settings: Settings):
    def add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", settings.APP_NAME)
        event_dict.setdefault("environment", settings.ENVIRONMENT)
        return event_dict

    return add_service


def render_schedule_values(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Render ids and timestamps so the JSON renderer never sees them raw."""
    for key, value in event_dict.items():
        if isinstance(value, (Id, UUID)):
            event_dict[key] = str(value)
        elif isinstance(value, date):
            event_dict[key] = value.isoformat()
        elif isinstance(value, (list, tuple)) and value and isinstance(value[0], Id):
            event_dict[key] = [str(item) for item in value]
    return event_dict


def setup_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        _service_tagger(settings),
        render_schedule_values,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.ENVIRONMENT == "production":
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    # lifespan runs once per app start; tests and reloads start it repeatedly
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DEBUG else logging.WARNING
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
