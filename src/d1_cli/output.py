"""
CLI Output Formatting

Handles JSON and table output formats.
"""

import json
import sys
from dataclasses import asdict, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List

from d1_client.models import D1Node

# Columns shown when listing nodes
NODE_COLUMNS = ["identifier", "name", "type", "state", "base_url"]


def format_output(data: Any, format: str = "table", title_keys: bool = True) -> str:
    """
    Format data for output.

    Args:
        data: Data to format (dataclass, dict, list, etc.)
        format: Output format - table or json

    Returns:
        Formatted string
    """
    if format == "json":
        return format_json(data)

    return format_table(data, title_keys)


def _serialize(obj: Any) -> Any:
    if is_dataclass(obj):
        return {k: _serialize(v) for k, v in asdict(obj).items() if v is not None}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, (list, tuple)):
        return [_serialize(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _serialize(v) for k, v in obj.items() if v is not None}
    return obj


def format_json(data: Any) -> str:
    """
    Format data as JSON.

    Absent fields are left out.
    """
    return json.dumps(_serialize(data), indent=2, default=str)


def format_table(data: Any, title_keys: bool = True) -> str:
    """
    Format data as human-readable table.

    Args:
        data: Data to format

    Returns:
        Table string
    """
    if data is None:
        return "No data"

    if isinstance(data, list):
        if not data:
            return "No results"
        if isinstance(data[0], D1Node):
            return format_node_table(data)
        return "\n".join(str(item) for item in data)

    if is_dataclass(data):
        return format_dict_table(asdict(data))

    if isinstance(data, dict):
        return format_dict_table(data, title_keys)

    return str(data)


def format_dict_table(data: Dict[str, Any], title_keys: bool = True) -> str:
    """
    Format dictionary as key-value table.

    None values and empty sequences are skipped. With title_keys=False the
    keys are printed as-is.
    """
    if not data:
        return "No data"

    lines = []
    max_key_width = max(len(str(k)) for k in data.keys())

    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)) and not value:
            continue

        key_str = str(key).replace("_", " ").title() if title_keys else str(key)
        key_padded = key_str.ljust(max_key_width + 2)
        lines.append(f"{key_padded}: {format_value(value)}")

    return "\n".join(lines)


def format_node_table(nodes: List[D1Node]) -> str:
    """
    Format a node list as a table, one row per node.

    Args:
        nodes: Nodes to show

    Returns:
        Table string
    """
    rows = []
    for node in nodes:
        rows.append({col: format_value(getattr(node, col), short=True) for col in NODE_COLUMNS})

    widths = {}
    for col in NODE_COLUMNS:
        widths[col] = max([len(col)] + [len(row[col]) for row in rows])

    lines = []
    lines.append("  ".join(col.replace("_", " ").title().ljust(widths[col]) for col in NODE_COLUMNS))
    lines.append("  ".join("-" * widths[col] for col in NODE_COLUMNS))
    for row in rows:
        lines.append("  ".join(row[col].ljust(widths[col]) for col in NODE_COLUMNS))

    return "\n".join(lines)


def format_value(value: Any, short: bool = False) -> str:
    """
    Format a single value for display.

    Args:
        value: Value to format
        short: Whether to use short format

    Returns:
        Formatted string
    """
    if value is None:
        return ""

    if isinstance(value, bool):
        return "Yes" if value else "No"

    if isinstance(value, Enum):
        return str(value.value)

    if isinstance(value, datetime):
        if short:
            return value.strftime("%Y-%m-%d")
        return value.strftime("%Y-%m-%d %H:%M:%S")

    if isinstance(value, (list, tuple)):
        if not value:
            return ""
        if short and len(value) > 2:
            return f"{format_value(value[0], short)}, ... ({len(value)} total)"
        return ", ".join(format_value(v, short=True) for v in value)

    if isinstance(value, dict):
        # Nested dataclasses arrive here after asdict()
        for key in ["name", "method_name", "schedule"]:
            if value.get(key):
                return str(value[key])
        parts = [f"{k}={format_value(v, short=True)}" for k, v in value.items() if v is not None]
        return ", ".join(parts)

    return str(value)


def print_error(message: str) -> None:
    """Print error message to stderr."""
    print(f"ERROR: {message}", file=sys.stderr)


def print_info(message: str) -> None:
    """Print info message."""
    print(f"INFO: {message}")


def print_success(message: str) -> None:
    """Print success message."""
    print(f"SUCCESS: {message}")


class OutputFormatter:
    """
    Formats and prints command results.
    """

    def __init__(self, format: str = "table", quiet: bool = False):
        """
        Initialize formatter.

        Args:
            format: Output format (table, json)
            quiet: Suppress non-essential output
        """
        self.format = format
        self.quiet = quiet

    def output(self, data: Any, title_keys: bool = True) -> None:
        """Output formatted data."""
        print(format_output(data, self.format, title_keys))

    def info(self, message: str) -> None:
        """Print info message."""
        if not self.quiet:
            print_info(message)
