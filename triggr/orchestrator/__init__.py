"""Kestra orchestrator integration."""

from triggr.orchestrator.client import KestraClient
from triggr.orchestrator.models import (
    DeployResult,
    ExecutionResult,
    ExecutionStatus,
    TaskRunStatus,
)

__all__ = [
    "DeployResult",
    "ExecutionResult",
    "ExecutionStatus",
    "KestraClient",
    "TaskRunStatus",
]
