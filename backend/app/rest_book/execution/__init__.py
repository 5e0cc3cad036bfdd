"""Execution - 셀 실행 엔진"""

from .engine import ExecutionEngine
from .order import ExecutionOrderCounter
from .registry import KernelRegistry, get_kernel_registry, reset_kernel_registry

__all__ = [
    "ExecutionEngine",
    "ExecutionOrderCounter",
    "KernelRegistry",
    "get_kernel_registry",
    "reset_kernel_registry",
]
