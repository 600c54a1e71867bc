"""
Line codec.

The control plane speaks in "<key> <value>" lines in both directions.
Keys never contain spaces; values may.
"""

from __future__ import annotations

from typing import Any, Iterable

from server_builder.core.errors import ConfigurationError


def format_line(key: str, value: Any) -> str:
    """
    Format one argument line. Lists become space separated values.

    A line break in key or value would inject extra argument lines, so it is
    rejected.
    """
    if isinstance(value, (list, tuple)):
        value = " ".join(str(v) for v in value)
    line = f"{key} {value}"
    if "\n" in line or "\r" in line:
        raise ConfigurationError(f"setting {key!r} contains a line break")
    return line


def parse_lines(lines: Iterable[str]) -> dict[str, str]:
    """
    Parse response lines into a mapping.

    Blank lines are skipped. A key with no value maps to "".
    When a key repeats, the last value wins.
    """
    parsed: dict[str, str] = {}
    for raw in lines:
        line = raw.strip()
        if not line:
            continue
        key, _, value = line.partition(" ")
        parsed[key] = value.strip()
    return parsed


def split_output(text: str) -> list[str]:
    """Split raw command output into non blank lines."""
    return [line for line in text.splitlines() if line.strip()]
