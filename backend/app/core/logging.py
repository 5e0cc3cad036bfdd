"""Structured Logging Configuration"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator

import structlog
from structlog.types import Processor

from backend.app.core.config import settings


def setup_logging() -> None:
    """구조화 로깅 설정"""

    # Shared processors
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]

    # DEBUG 플래그가 켜지면 레벨 설정과 무관하게 디버그 로그 출력
    level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL
    root_logger.setLevel(getattr(logging, level.upper()))

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> None:
    """Add context to all subsequent log messages in this context"""
    structlog.contextvars.bind_contextvars(**kwargs)


@contextmanager
def attempt_log_context(cell_id: str, order: int, attempt_id: str) -> Iterator[None]:
    """실행 시도 범위의 로그 컨텍스트

    전송 태스크는 생성 시점의 컨텍스트를 복사하므로
    트랜스포트/정규화 로그에도 cell_id, order, attempt_id 가 붙는다.
    """
    with structlog.contextvars.bound_contextvars(
        cell_id=cell_id,
        order=order,
        attempt_id=attempt_id,
    ):
        yield


def clear_log_context() -> None:
    """Clear all context variables"""
    structlog.contextvars.clear_contextvars()
