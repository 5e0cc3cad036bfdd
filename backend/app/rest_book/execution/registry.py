"""Kernel Registry

문서마다 하나의 ExecutionEngine 을 둔다.
실행 순번은 문서 수명 동안 유일하며, 트랜스포트와 응답 캐시는 문서 간에 공유한다.
"""

import asyncio
from typing import Optional

from backend.app.core.logging import get_logger
from backend.app.rest_book.cache import CacheWriter, get_response_cache
from backend.app.rest_book.transport import HttpxTransport, Transport
from .engine import ExecutionEngine

logger = get_logger(__name__)


class KernelRegistry:
    """document_id → ExecutionEngine"""

    def __init__(
        self,
        transport: Optional[Transport] = None,
        cache: Optional[CacheWriter] = None,
    ):
        self.transport = transport or HttpxTransport()
        self.cache = cache if cache is not None else get_response_cache()
        self._engines: dict[str, ExecutionEngine] = {}

    def get(self, document_id: str) -> ExecutionEngine:
        engine = self._engines.get(document_id)
        if engine is None:
            engine = ExecutionEngine(transport=self.transport, cache=self.cache)
            self._engines[document_id] = engine
            logger.info("Kernel created", document_id=document_id)
        return engine

    def attach_events(self, document_id: str, queue: asyncio.Queue) -> ExecutionEngine:
        """표면 연결 시 이벤트 큐 연결"""
        engine = self.get(document_id)
        engine.add_event_queue(queue)
        return engine

    def detach_events(self, document_id: str, queue: asyncio.Queue) -> bool:
        """해당 연결의 이벤트 큐만 분리"""
        engine = self._engines.get(document_id)
        if engine is None:
            return False
        return engine.remove_event_queue(queue)

    def close_document(self, document_id: str) -> int:
        """문서 종료: 실행 중인 시도를 모두 취소하고 엔진 제거"""
        engine = self._engines.pop(document_id, None)
        if engine is None:
            return 0
        cancelled = 0
        for attempt in engine.running_attempts():
            if attempt.cancel_token.cancel("document closed"):
                cancelled += 1
        return cancelled

    def document_ids(self) -> list[str]:
        return list(self._engines.keys())

    async def aclose(self) -> None:
        for document_id in list(self._engines):
            self.close_document(document_id)
        aclose = getattr(self.transport, "aclose", None)
        if aclose is not None:
            await aclose()


# 싱글톤
_kernel_registry: Optional[KernelRegistry] = None


def get_kernel_registry() -> KernelRegistry:
    """KernelRegistry 싱글톤 반환"""
    global _kernel_registry
    if _kernel_registry is None:
        _kernel_registry = KernelRegistry()
    return _kernel_registry


def reset_kernel_registry(registry: Optional[KernelRegistry] = None) -> None:
    """테스트용: 싱글톤 교체"""
    global _kernel_registry
    _kernel_registry = registry
