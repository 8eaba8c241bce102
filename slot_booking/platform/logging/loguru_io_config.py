from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
import os
import re
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from slot_booking.platform.config.core_setting import settings
from slot_booking.platform.logging.service_context import get_service_context


LOG_DIR = os.environ.get('TEST_LOG_DIR', str(settings.LOG_DIR))


# Argument names whose values never reach the log sink
SENSITIVE_KEYWORDS = {
    'password',
    'secret',
    'token',
}

chain_start_time_var: ContextVar[float] = ContextVar('first_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


# Stdlib loggers forwarded only from this level up
QUIET_LOGGERS: dict[str, int] = {
    'sqlalchemy.engine': logging.WARNING,
    'sqlalchemy.pool': logging.WARNING,
    'asyncpg': logging.INFO,
    'redis': logging.INFO,
    'asyncio': logging.INFO,
}

# uvicorn.access: '127.0.0.1:51234 - "POST /api/booking/hold HTTP/1.1" 201'
_ACCESS_LINE = re.compile(r'" (?P<status>\d{3})$')


def _access_log_level(record: logging.LogRecord) -> str | None:
    """Log level for a uvicorn access line, picked from its HTTP status"""
    if record.name != 'uvicorn.access':
        return None

    match = _ACCESS_LINE.search(record.getMessage())
    if not match:
        return None

    status_code = int(match.group('status'))
    if status_code >= 500:
        return 'ERROR'
    if status_code in (409, 410):
        # Lost races and lapsed holds are expected traffic
        return 'INFO'
    if status_code >= 400:
        return 'WARNING'
    return 'SUCCESS'


def _is_quiet(record: logging.LogRecord) -> bool:
    for prefix, min_level in QUIET_LOGGERS.items():
        if record.name.startswith(prefix):
            return record.levelno < min_level
    return False


_intercept_bound_logger = None  # Cached bound logger for InterceptHandler


def _get_intercept_bound_logger() -> 'LoguruLogger':
    """Get or create bound logger with default extra fields (cached)."""
    global _intercept_bound_logger
    if _intercept_bound_logger is None:
        _intercept_bound_logger = loguru_logger.bind(
            **{
                ExtraField.SERVICE_CONTEXT: get_service_context(),
                ExtraField.CHAIN_START_TIME: '',
                ExtraField.CALL_TARGET: '',
            }
        )
    return _intercept_bound_logger


class InterceptHandler(logging.Handler):
    """Forwards stdlib logging (uvicorn, sqlalchemy, redis) into loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        if _is_quiet(record):
            return

        level: str | int | None = _access_log_level(record)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        _get_intercept_bound_logger().opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


io_log_format = ' | '.join(
    (
        '<g>{time:YYYY-MM-DDTHH:mm:ss.SSS!UTC}Z</>',
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


loguru_logger.remove()
custom_logger = loguru_logger.bind(
    **{
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }
)

min_log_level = 'DEBUG' if settings.DEBUG else 'INFO'

custom_logger.add(sys.stdout, format=io_log_format, level=min_log_level, enqueue=True)

# Hourly files only in DEBUG; deployed processes log to stdout
if settings.DEBUG:
    prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else ''
    custom_logger.add(
        f'{LOG_DIR}/{prefix}{datetime.now(timezone.utc):%Y-%m-%d_%H}.log',
        format=io_log_format,
        rotation='1 hour',
        retention='7 days',
        compression='gz',
        enqueue=True,
        level=min_log_level,
    )

logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
