from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
import sys

from loguru import logger as loguru_logger

from eventdesk.platform.config.core_setting import settings
from eventdesk.platform.logging.service_context import get_service_context


# Keys whose values never reach the log (attendee contact data, credentials)
SENSITIVE_KEYWORDS = {
    'password',
    'email',
    'emails',
    'phone',
    'phones',
    'user_email',
    'attendee_email',
    'attendee_phone',
}
MAX_CONTENT_LENGTH = 500

# Client libraries that log every request / statement at INFO
QUIET_LOGGERS = ('httpx', 'httpcore', 'sqlalchemy.engine', 'asyncpg')

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


io_log_format = ' | '.join(
    (
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


class InterceptHandler(logging.Handler):
    """Route stdlib logging (granian, SQLAlchemy, httpx) through custom_logger"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        custom_logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def log_file_path(now: datetime) -> str:
    return f'{settings.LOG_DIR}/{settings.LOG_FILE_PREFIX}{now.strftime("%Y-%m-%d_%H")}.log'


min_log_level = 'DEBUG' if settings.DEBUG else 'INFO'

custom_logger.add(sys.stdout, format=io_log_format, level=min_log_level, enqueue=True)

# File output only in DEBUG mode; production ships stdout to the log collector
if settings.DEBUG:
    custom_logger.add(
        log_file_path(datetime.now(timezone.utc)),
        format=io_log_format,
        rotation='1 hour',
        retention='7 days',
        compression='gz',
        enqueue=True,
        level=min_log_level,
    )

logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
for name in QUIET_LOGGERS:
    logging.getLogger(name).setLevel(logging.WARNING)
