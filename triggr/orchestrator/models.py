"""Kestra API responses, reduced to what Triggr reports back."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class DeployResult(BaseModel):
    """A flow created or updated in Kestra."""

    flow_id: str
    namespace: str
    revision: int | None = None

    @property
    def message(self) -> str:
        return (
            f'Flow "{self.flow_id}" deployed successfully to namespace '
            f'"{self.namespace}" (revision {self.revision})'
        )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> DeployResult:
        return cls(
            flow_id=data.get("id", ""),
            namespace=data.get("namespace", ""),
            revision=data.get("revision"),
        )


class ExecutionResult(BaseModel):
    """A newly started execution."""

    execution_id: str
    state: str = "CREATED"
    namespace: str = ""
    flow_id: str = ""

    @property
    def message(self) -> str:
        return f"Execution started with ID: {self.execution_id}"

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ExecutionResult:
        state = data.get("state") or {}
        return cls(
            execution_id=data.get("id", ""),
            state=state.get("current") or "CREATED",
            namespace=data.get("namespace", ""),
            flow_id=data.get("flowId", ""),
        )


class TaskRunStatus(BaseModel):
    task_id: str
    state: str | None = None
    outputs: dict[str, Any] | None = None


TERMINAL_STATES = {"SUCCESS", "WARNING", "FAILED", "KILLED", "CANCELLED"}


class ExecutionStatus(BaseModel):
    """Current state of an execution and its task runs."""

    execution_id: str
    state: str = "UNKNOWN"
    namespace: str = ""
    flow_id: str = ""
    start_date: str | None = None
    end_date: str | None = None
    duration: str | None = None
    tasks: list[TaskRunStatus] = Field(default_factory=list)
    outputs: dict[str, Any] | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ExecutionStatus:
        state = data.get("state") or {}
        tasks = [
            TaskRunStatus(
                task_id=run.get("taskId", ""),
                state=(run.get("state") or {}).get("current"),
                outputs=run.get("outputs"),
            )
            for run in data.get("taskRunList") or []
        ]
        return cls(
            execution_id=data.get("id", ""),
            state=state.get("current") or "UNKNOWN",
            namespace=data.get("namespace", ""),
            flow_id=data.get("flowId", ""),
            start_date=state.get("startDate"),
            end_date=state.get("endDate"),
            duration=state.get("duration"),
            tasks=tasks,
            outputs=data.get("outputs"),
        )
