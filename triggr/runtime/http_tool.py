"""HTTP tools exposed to the model through function calling."""

from __future__ import annotations

import json
import logging
import re
import time
from typing import Any
from urllib.parse import quote

import httpx

from triggr.compiler.tool_config import ToolSpec
from triggr.graph.settings import parse_headers
from triggr.logging import get_logger

logger = logging.getLogger(__name__)

DEFAULT_TOOL_TIMEOUT = 30.0
MAX_FUNCTION_NAME_LENGTH = 64

_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_.\-:]")
_VALID_NAME_START = re.compile(r"^[a-zA-Z_]")

JSON_TYPES = {"string", "number", "integer", "boolean", "object", "array"}


def sanitize_function_name(name: str) -> str:
    """Make ``name`` acceptable as a function name for the chat API."""
    sanitized = _INVALID_NAME_CHARS.sub("_", name)
    if not _VALID_NAME_START.match(sanitized):
        sanitized = "_" + sanitized
    return sanitized[:MAX_FUNCTION_NAME_LENGTH]


def json_type_for(value: Any) -> str:
    """JSON schema type for a declared parameter.

    ``{"city": "string"}`` declares the type by name; anything else is
    treated as an example value and the type is inferred from it.
    """
    if isinstance(value, str):
        lowered = value.strip().lower()
        return lowered if lowered in JSON_TYPES else "string"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    return "string"


def build_tool_schemas(tools: list[ToolSpec]) -> list[dict[str, Any]]:
    """OpenAI function definitions for ``tools``."""
    schemas = []
    for tool in tools:
        properties = {
            key: {"type": json_type_for(value), "description": f"Parameter {key}"}
            for key, value in tool.parameters.items()
        }
        schemas.append(
            {
                "type": "function",
                "function": {
                    "name": sanitize_function_name(tool.name),
                    "description": tool.description,
                    "parameters": {
                        "type": "object",
                        "properties": properties,
                        "required": [],
                    },
                },
            }
        )
    return schemas


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _resolve_api_key(tool: ToolSpec, headers: dict[str, str]) -> str:
    """API key from the tool, else from an existing auth header."""
    if tool.api_key:
        return tool.api_key
    header_auth = headers.get("Authorization") or headers.get("authorization") or ""
    if header_auth.lower().startswith("bearer "):
        return header_auth[7:].strip()
    return headers.get(tool.key_name, "")


def build_request(tool: ToolSpec, parameters: dict[str, Any]) -> tuple[str, httpx.URL, dict[str, str], Any]:
    """Resolve method, URL, headers and JSON body for a tool call."""
    method = (tool.method or "GET").upper()

    url_string = tool.url
    for key, value in parameters.items():
        url_string = url_string.replace(f"{{{key}}}", quote(_query_value(value), safe=""))
    url = httpx.URL(url_string)

    if method == "GET":
        for key, value in parameters.items():
            if f"{{{key}}}" not in tool.url:
                url = url.copy_set_param(key, _query_value(value))

    headers: dict[str, str] = {"Content-Type": "application/json"}
    headers.update({k: str(v) for k, v in parse_headers(tool.headers, owner=tool.name).items()})

    auth_type = tool.resolved_auth_type
    api_key = _resolve_api_key(tool, headers)

    if api_key and auth_type != "none":
        if auth_type == "bearer":
            headers["Authorization"] = f"Bearer {api_key}"
        elif auth_type == "query":
            url = url.copy_set_param(tool.key_name, api_key)
        elif auth_type == "header":
            # Header auth without an explicit name uses the conventional
            # X-API-Key header rather than the query default "key".
            headers[tool.api_key_name or "X-API-Key"] = api_key

    body = parameters if method == "POST" else None
    return method, url, headers, body


async def execute_tool(
    tool: ToolSpec,
    parameters: dict[str, Any],
    *,
    timeout: float = DEFAULT_TOOL_TIMEOUT,
) -> Any:
    """Call ``tool`` and return its decoded JSON answer.

    Failures are returned as ``{"error": "Failed to execute tool: ..."}``
    so the model can see them; nothing is raised.
    """
    start = time.perf_counter()
    try:
        method, url, headers, body = build_request(tool, parameters)
        logger.info(f"Executing tool {tool.name}: {method} {tool.url} (auth={tool.resolved_auth_type})")

        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.request(method, url, headers=headers, json=body)
        result = response.json()
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        logger.error(f"Error executing tool {tool.name}: {e}")
        get_logger().tool_call(tool.name, success=False, duration_ms=_elapsed_ms(start))
        return {"error": f"Failed to execute tool: {e}"}

    get_logger().tool_call(tool.name, success=True, duration_ms=_elapsed_ms(start))
    return result


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
