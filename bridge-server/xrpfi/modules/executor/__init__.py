"""Exports for payment execution"""

from .orchestrator import ExecutionOrchestrator, FailureHook, split_amounts
from .supervisor import ExecutionSupervisor

__all__ = [
    "ExecutionOrchestrator",
    "ExecutionSupervisor",
    "FailureHook",
    "split_amounts",
]
