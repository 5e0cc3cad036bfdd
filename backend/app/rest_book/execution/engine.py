"""Execution Engine

셀 하나의 실행 파이프라인:
    parse → transport.send (취소 토큰 바인딩) → normalize → cache.record → render

셀마다 독립된 asyncio 태스크로 실행되며 서로 직렬화하지 않는다.
같은 셀을 다시 실행해도 이전 시도를 암묵적으로 취소하지 않는다 (cancel_cell 사용).
"""

import asyncio
import inspect
from typing import Any, Optional

from backend.app.core.logging import attempt_log_context, get_logger
from backend.app.rest_book.cache import CacheWriter
from backend.app.rest_book.cancellation import CancellationToken
from backend.app.rest_book.models import (
    AttemptState,
    ErrorKind,
    ExecutionAttempt,
    ExecutionEvent,
    ExecutionEventType,
    NormalizedResponse,
    RequestDescriptor,
    TransportFailure,
)
from backend.app.rest_book.request import RequestParser
from backend.app.rest_book.response import ResponseNormalizer, ResponseRenderer
from backend.app.rest_book.transport import Transport
from .order import ExecutionOrderCounter

logger = get_logger(__name__)


class ExecutionEngine:
    """셀 실행 엔진

    Args:
        transport: 네트워크 호출 협력자
        cache: 응답 캐시 쓰기 협력자 (없으면 기록 생략)
        events: 표면으로 보낼 ExecutionEvent 큐
        order_counter: 실행 순번 발급기 (문서 수명 동안 공유)
        sink: 관측용 로거 (기본: 모듈 로거)
    """

    def __init__(
        self,
        transport: Transport,
        cache: Optional[CacheWriter] = None,
        events: Optional[asyncio.Queue] = None,
        order_counter: Optional[ExecutionOrderCounter] = None,
        parser: Optional[RequestParser] = None,
        normalizer: Optional[ResponseNormalizer] = None,
        renderer: Optional[ResponseRenderer] = None,
        sink: Any = None,
    ):
        self.transport = transport
        self.cache = cache
        # 표면 연결마다 하나씩
        self._event_queues: list[asyncio.Queue] = [events] if events is not None else []
        self.orders = order_counter or ExecutionOrderCounter()
        self.parser = parser or RequestParser()
        self.normalizer = normalizer or ResponseNormalizer()
        self.renderer = renderer or ResponseRenderer()
        self.log = sink or logger

        # cell_id → {attempt_id → attempt}
        self._running: dict[str, dict[str, ExecutionAttempt]] = {}
        self._latest: dict[str, ExecutionAttempt] = {}

    async def execute(
        self,
        cell_id: str,
        text: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ExecutionAttempt:
        """셀 실행

        Args:
            cell_id: 셀 식별자
            text: 셀 원문
            cancel_token: 취소 토큰 (없으면 새로 생성)

        Returns:
            종료 상태의 ExecutionAttempt
        """
        attempt = ExecutionAttempt(
            cell_id=cell_id,
            order=self.orders.next(),
            cancel_token=cancel_token or CancellationToken(),
        )
        attempt.mark_running()
        self._register(attempt)
        with attempt_log_context(cell_id=cell_id, order=attempt.order, attempt_id=attempt.attempt_id):
            return await self._run(attempt, text)

    async def _run(self, attempt: ExecutionAttempt, text: str) -> ExecutionAttempt:
        log = self.log
        log.info("Cell execution started")
        self._emit(ExecutionEventType.STARTED, attempt)

        try:
            parsed = self.parser.try_parse(text)
            if not parsed.ok:
                response = NormalizedResponse.from_error(ErrorKind.PARSE, parsed.error.message)
                # 전송 단계에 도달하지 않았으므로 캐시 기록 없음
                self._finish(attempt, AttemptState.FAILED, response, end_time=attempt.start_time)
                log.info("Cell parse failed", error=parsed.error.message)
                return attempt

            request = parsed.request
            attempt.request = request

            outcome = await self._dispatch(request, attempt.cancel_token)
            response = self.normalizer.normalize(outcome, request)
            await self._record(request, response, log)

            self._finish(attempt, _terminal_state(response), response)
            log.info(
                "Cell execution finished",
                state=attempt.state.value,
                status=response.status,
                error_kind=response.error.kind.value if response.error else None,
                duration_ms=attempt.duration_ms,
            )
            return attempt

        except asyncio.CancelledError:
            # 엔진 바깥에서 태스크 자체가 취소된 경우
            if not attempt.is_terminal:
                self._finish(
                    attempt,
                    AttemptState.CANCELLED,
                    NormalizedResponse.from_error(ErrorKind.CANCELLED, "execution task cancelled"),
                )
            raise

        finally:
            self._unregister(attempt)

    async def _dispatch(self, request: RequestDescriptor, token: CancellationToken) -> Any:
        """토큰을 전송 태스크에 바인딩한 뒤 결과 대기"""
        if token.is_cancelled:
            return TransportFailure(
                error_kind=ErrorKind.CANCELLED,
                message=token.reason or "cancelled before dispatch",
            )

        task = asyncio.ensure_future(self._send(request, token))
        # 태스크가 처음 실행되기 전에 바인딩: 이미 취소됐다면 send 는 호출되지 않는다
        unbind = token.bind(task.cancel)
        try:
            return await task
        except asyncio.CancelledError:
            if token.is_cancelled:
                return TransportFailure(
                    error_kind=ErrorKind.CANCELLED,
                    message=token.reason or "cancelled",
                )
            raise
        finally:
            unbind()

    async def _send(self, request: RequestDescriptor, token: CancellationToken) -> Any:
        try:
            return await self.transport.send(request, token)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.log.warning(
                "Transport raised instead of returning a failure",
                error=str(e),
                error_type=type(e).__name__,
            )
            return TransportFailure(error_kind=ErrorKind.TRANSPORT, message=str(e))

    async def _record(self, request: RequestDescriptor, response: NormalizedResponse, log: Any) -> None:
        """캐시 기록 (실패는 로그만 남긴다)"""
        if self.cache is None:
            return
        try:
            result = self.cache.record(request, response)
            if inspect.isawaitable(result):
                await asyncio.shield(result)
        except Exception as e:
            log.warning("Cache write failed", error=str(e))

    def _finish(
        self,
        attempt: ExecutionAttempt,
        state: AttemptState,
        response: NormalizedResponse,
        end_time: Any = None,
    ) -> None:
        outputs = self.renderer.render(response)
        attempt.finish(state, response, outputs, end_time=end_time)
        self._latest[attempt.cell_id] = attempt
        self._emit(ExecutionEventType.COMPLETED, attempt)

    def add_event_queue(self, queue: asyncio.Queue) -> None:
        if queue not in self._event_queues:
            self._event_queues.append(queue)

    def remove_event_queue(self, queue: asyncio.Queue) -> bool:
        """해당 큐만 분리 (다른 연결의 큐는 유지)"""
        if queue in self._event_queues:
            self._event_queues.remove(queue)
            return True
        return False

    def _emit(self, event_type: ExecutionEventType, attempt: ExecutionAttempt) -> None:
        for queue in self._event_queues:
            # 얕은 복사로 상태 스냅샷
            queue.put_nowait(ExecutionEvent(type=event_type, attempt=attempt.model_copy()))

    def _register(self, attempt: ExecutionAttempt) -> None:
        self._running.setdefault(attempt.cell_id, {})[attempt.attempt_id] = attempt

    def _unregister(self, attempt: ExecutionAttempt) -> None:
        attempts = self._running.get(attempt.cell_id)
        if attempts is None:
            return
        attempts.pop(attempt.attempt_id, None)
        if not attempts:
            del self._running[attempt.cell_id]

    # ── 표면용 조회/취소 ──

    def running_attempts(self, cell_id: Optional[str] = None) -> list[ExecutionAttempt]:
        if cell_id is not None:
            return list(self._running.get(cell_id, {}).values())
        return [a for attempts in self._running.values() for a in attempts.values()]

    def latest_attempt(self, cell_id: str) -> Optional[ExecutionAttempt]:
        return self._latest.get(cell_id)

    def cancel_cell(self, cell_id: str, reason: str = "cancelled by user") -> int:
        """셀의 실행 중 시도를 모두 취소

        Returns:
            실제로 취소된 시도 수
        """
        cancelled = 0
        for attempt in self.running_attempts(cell_id):
            if attempt.cancel_token.cancel(reason):
                cancelled += 1
        self.log.info("Cell cancel requested", cell_id=cell_id, cancelled=cancelled)
        return cancelled


def _terminal_state(response: NormalizedResponse) -> AttemptState:
    if response.error is None:
        return AttemptState.SUCCEEDED
    if response.error.kind == ErrorKind.CANCELLED:
        return AttemptState.CANCELLED
    return AttemptState.FAILED
