"""Execution Order Counter"""

import sys
from threading import Lock

from backend.app.core.errors import ErrorCode, ExecutionError


class ExecutionOrderCounter:
    """실행 순번 발급기

    시작 시점에 원자적으로 증가하며, 한 번 발급한 번호는 재사용하지 않는다.
    """

    def __init__(self, start: int = 0, limit: int = sys.maxsize):
        self._value = start
        self._limit = limit
        self._lock = Lock()

    @property
    def current(self) -> int:
        return self._value

    def next(self) -> int:
        with self._lock:
            if self._value >= self._limit:
                raise ExecutionError(
                    ErrorCode.EXECUTION_ORDER_EXHAUSTED,
                    details={"limit": self._limit},
                )
            self._value += 1
            return self._value
