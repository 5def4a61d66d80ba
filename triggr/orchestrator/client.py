"""Kestra REST client.

Deploys generated flows, starts executions and polls their state.

Example:
    >>> async with KestraClient.from_settings() as kestra:
    ...     flow = await kestra.deploy(result.yaml)
    ...     run = await kestra.execute(flow.namespace, flow.flow_id, {"user_prompt": "Hi"})
    ...     status = await kestra.status(run.execution_id)
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from triggr.config import Settings, get_settings
from triggr.errors.exceptions import KestraAPIError, KestraConnectionError
from triggr.orchestrator.models import DeployResult, ExecutionResult, ExecutionStatus

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/main"


class KestraClient:
    """Async client for the Kestra open-source API (``main`` tenant)."""

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        base_url: str,
        username: str = "",
        password: str = "",
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Kestra server URL (e.g., 'http://localhost:8080').
            username: Basic-auth user; auth is only sent with a password too.
            password: Basic-auth password.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        auth = httpx.BasicAuth(username, password) if username and password else None
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            auth=auth,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> KestraClient:
        settings = settings or get_settings()
        return cls(
            settings.kestra_base_url,
            username=settings.kestra_username,
            password=settings.kestra_password,
            timeout=settings.kestra_timeout,
        )

    async def __aenter__(self) -> KestraClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def deploy(self, yaml: str) -> DeployResult:
        """Create or update the flow described by ``yaml``.

        Raises:
            ValueError: If ``yaml`` is empty.
            KestraAPIError: If Kestra rejects the flow.
            KestraConnectionError: If Kestra is unreachable.
        """
        if not yaml:
            raise ValueError("YAML content is required")

        logger.debug(f"Deploying flow to Kestra:\n{yaml}")
        try:
            response = await self._client.post(
                f"{API_PREFIX}/flows",
                content=yaml.encode("utf-8"),
                headers={"Content-Type": "application/x-yaml"},
            )
        except httpx.TransportError as e:
            raise KestraConnectionError(self.base_url) from e

        data = self._check(response, "Failed to deploy flow to Kestra")
        result = DeployResult.from_api(data)
        logger.info(result.message)
        return result

    async def execute(
        self,
        namespace: str,
        flow_id: str,
        inputs: dict[str, Any] | None = None,
    ) -> ExecutionResult:
        """Start an execution; ``inputs`` are sent as multipart form fields.

        Raises:
            ValueError: If ``namespace`` or ``flow_id`` is empty.
            KestraAPIError: If Kestra refuses the execution.
            KestraConnectionError: If Kestra is unreachable.
        """
        if not namespace or not flow_id:
            raise ValueError("Namespace and flowId are required")

        files = None
        if inputs:
            files = {key: (None, str(value)) for key, value in inputs.items()}

        try:
            response = await self._client.post(
                f"{API_PREFIX}/executions/{namespace}/{flow_id}",
                files=files,
            )
        except httpx.TransportError as e:
            raise KestraConnectionError(self.base_url) from e

        data = self._check(response, "Failed to execute flow")
        result = ExecutionResult.from_api(data)
        logger.info(f"{result.message} ({namespace}.{flow_id})")
        return result

    async def status(self, execution_id: str) -> ExecutionStatus:
        """Fetch the state of an execution and its task runs.

        Raises:
            ValueError: If ``execution_id`` is empty.
            KestraAPIError: If Kestra answers with an error.
            KestraConnectionError: If Kestra is unreachable.
        """
        if not execution_id:
            raise ValueError("executionId is required")

        try:
            response = await self._client.get(f"{API_PREFIX}/executions/{execution_id}")
        except httpx.TransportError as e:
            raise KestraConnectionError(self.base_url) from e

        data = self._check(response, "Failed to get execution status")
        return ExecutionStatus.from_api(data)

    @staticmethod
    def _check(response: httpx.Response, message: str) -> dict[str, Any]:
        if not response.is_success:
            logger.error(f"Kestra API error: {response.status_code} {response.text}")
            raise KestraAPIError(
                message,
                status_code=response.status_code,
                details=response.text,
            )
        return response.json()
