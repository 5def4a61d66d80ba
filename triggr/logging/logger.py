"""Rich console logger for agent runs and graph compilation."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from rich.console import Console


class LogLevel(str, Enum):
    """Log levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        """Get numeric rank for comparison."""
        ranks = {"debug": 0, "info": 1, "warning": 2, "error": 3}
        return ranks[self.value]


class TriggrLogger:
    """Console trace of what a workflow run is doing.

    Example:
        >>> logger = TriggrLogger(level=LogLevel.DEBUG)
        >>> logger.agent_start("Weather Agent", "What is the weather in Paris?")
        >>> logger.tool_call("get_weather", success=True, duration_ms=120)
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        console: Console | None = None,
        show_timestamps: bool = True,
        show_level: bool = True,
        enabled: bool = True,
    ) -> None:
        self._level = level
        self._console = console or Console()
        self._show_timestamps = show_timestamps
        self._show_level = show_level
        self._enabled = enabled

    @property
    def level(self) -> LogLevel:
        return self._level

    @level.setter
    def level(self, value: LogLevel) -> None:
        self._level = value

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    def _should_log(self, level: LogLevel) -> bool:
        return self._enabled and level.rank >= self._level.rank

    def _format_prefix(self, level: LogLevel) -> str:
        parts = []

        if self._show_timestamps:
            timestamp = datetime.now().strftime("%H:%M:%S")
            parts.append(f"[dim]{timestamp}[/]")

        if self._show_level:
            level_colors = {
                LogLevel.DEBUG: "dim",
                LogLevel.INFO: "blue",
                LogLevel.WARNING: "yellow",
                LogLevel.ERROR: "red bold",
            }
            color = level_colors.get(level, "white")
            parts.append(f"[{color}]{level.value.upper():7}[/]")

        return " ".join(parts)

    def _log(self, level: LogLevel, message: str, **context: Any) -> None:
        if not self._should_log(level):
            return

        prefix = self._format_prefix(level)

        if context:
            context_str = " ".join(f"[dim]{k}=[/]{v}" for k, v in context.items())
            message = f"{message} {context_str}"

        self._console.print(f"{prefix} {message}")

    def debug(self, message: str, **context: Any) -> None:
        self._log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(LogLevel.WARNING, message, **context)

    def error(self, message: str, **context: Any) -> None:
        self._log(LogLevel.ERROR, message, **context)

    # Run-specific logging methods

    def agent_start(self, agent_name: str, input_preview: str | None = None) -> None:
        """Log the start of a chat run for an agent."""
        if not self._should_log(LogLevel.INFO):
            return

        preview = ""
        if input_preview:
            preview = input_preview[:50] + "..." if len(input_preview) > 50 else input_preview
            preview = f' "{preview}"'

        self._console.print(
            f"{self._format_prefix(LogLevel.INFO)} "
            f"[bold blue]▶ {agent_name}[/] starting{preview}"
        )

    def agent_end(self, agent_name: str, duration_ms: int, tokens: int | None = None) -> None:
        """Log the end of a chat run."""
        if not self._should_log(LogLevel.INFO):
            return

        details = [f"{duration_ms}ms"]
        if tokens:
            details.append(f"{tokens:,} tokens")

        self._console.print(
            f"{self._format_prefix(LogLevel.INFO)} "
            f"[bold green]✓ {agent_name}[/] completed ({' | '.join(details)})"
        )

    def tool_call(self, tool_name: str, success: bool, duration_ms: int | None = None) -> None:
        """Log an HTTP tool dispatch."""
        if not self._should_log(LogLevel.DEBUG):
            return

        status = "[green]✓[/]" if success else "[red]✗[/]"
        duration = f" ({duration_ms}ms)" if duration_ms else ""

        self._console.print(
            f"{self._format_prefix(LogLevel.DEBUG)} "
            f"  [dim]Tool:[/] {tool_name} {status}{duration}"
        )

    def flow_compiled(self, flow_id: str, task_count: int) -> None:
        """Log a finished graph lowering."""
        if not self._should_log(LogLevel.INFO):
            return

        self._console.print(
            f"{self._format_prefix(LogLevel.INFO)} "
            f"[bold cyan]◆ Flow[/] {flow_id} compiled ({task_count} tasks)"
        )
