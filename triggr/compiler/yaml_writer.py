"""Small deterministic YAML writer for orchestrator flow definitions.

Only the subset needed for flow files is supported: mappings (insertion
order kept), sequences, strings, numbers, booleans and null. Output uses
two-space indentation, block style everywhere, and literal blocks for
multi-line strings.
"""

from __future__ import annotations

import re
from typing import Any

INDENT = "  "

# Characters/sequences that force a double-quoted scalar.
_QUOTE_TRIGGERS = ("{{", ":", "#", '"', "'")
# Leading indicators that YAML would otherwise interpret.
_INDICATOR_START = tuple("-?[]{},&*!|>%@`")
_RESERVED_WORDS = {
    "true", "false", "yes", "no", "on", "off", "y", "n", "null", "~",
    ".inf", "-.inf", "+.inf", ".nan",
}
_NUMBER_LIKE = re.compile(r"^[-+]?(\d[\d_]*)?(\.\d+)?([eE][-+]?\d+)?$")
# Hex, octal and binary integers as YAML 1.1 loaders read them.
_PREFIXED_INT = re.compile(r"^[-+]?0(x[0-9a-fA-F_]+|o?[0-7_]+|b[01_]+)$")
# Dates and timestamps (2024-01-01, 2024-1-1T10:00:00Z) load as datetimes.
_DATE_LIKE = re.compile(r"^\d{4}-\d{1,2}-\d{1,2}")


def dump_yaml(value: Any) -> str:
    """Serialize ``value`` to a YAML document (no trailing newline)."""
    if isinstance(value, dict):
        return "\n".join(_mapping_lines(value, 0)) if value else "{}"
    if isinstance(value, (list, tuple)):
        return "\n".join(_sequence_lines(list(value), 0)) if value else "[]"
    return _scalar(value, 1)


def quote_string(text: str) -> str:
    """Return ``text`` as a plain or double-quoted YAML scalar."""
    if _needs_quotes(text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def _needs_quotes(text: str) -> bool:
    if text == "":
        return True
    if any(trigger in text for trigger in _QUOTE_TRIGGERS):
        return True
    if text != text.strip():
        return True
    if text.startswith(_INDICATOR_START):
        return True
    if text.lower() in _RESERVED_WORDS:
        return True
    if _PREFIXED_INT.match(text) or _DATE_LIKE.match(text):
        return True
    return bool(_NUMBER_LIKE.match(text)) and any(ch.isdigit() for ch in text)


def _scalar(value: Any, level: int) -> str:
    """Format a leaf value whose content would sit at indentation ``level``."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, dict):
        return "{}"
    if isinstance(value, (list, tuple)):
        return "[]"

    text = str(value)
    if "\n" in text:
        pad = INDENT * level
        lines = text.split("\n")
        body = "\n".join(f"{pad}{line}" if line else "" for line in lines)
        # Block indentation is detected from the first non-empty line, so a
        # leading space there needs an explicit indentation indicator.
        first = next((line for line in lines if line), "")
        header = f"|{len(INDENT)}" if first.startswith((" ", "\t")) else "|"
        return f"{header}\n{body}"
    return quote_string(text)


def _is_block(value: Any) -> bool:
    return isinstance(value, (dict, list, tuple)) and len(value) > 0


def _mapping_lines(mapping: dict[Any, Any], level: int) -> list[str]:
    pad = INDENT * level
    lines: list[str] = []
    for key, value in mapping.items():
        prefix = f"{pad}{quote_string(str(key))}:"
        if isinstance(value, dict) and value:
            lines.append(prefix)
            lines.extend(_mapping_lines(value, level + 1))
        elif isinstance(value, (list, tuple)) and value:
            lines.append(prefix)
            lines.extend(_sequence_lines(list(value), level + 1))
        else:
            lines.append(f"{prefix} {_scalar(value, level + 1)}")
    return lines


def _sequence_lines(items: list[Any], level: int) -> list[str]:
    dash = INDENT * level + "- "
    nested_pad = INDENT * (level + 1)
    lines: list[str] = []
    for item in items:
        if _is_block(item):
            if isinstance(item, dict):
                nested = _mapping_lines(item, level + 1)
            else:
                nested = _sequence_lines(list(item), level + 1)
            # First entry shares the dash line; the rest stay aligned under it.
            nested[0] = dash + nested[0][len(nested_pad):]
            lines.extend(nested)
        else:
            lines.append(f"{dash}{_scalar(item, level + 1)}")
    return lines
