"""Configuration saving for prefsync."""

import datetime
import logging
import math
import os
import re
from pathlib import Path
from typing import Any

from prefsync.config.loader import _get_appdata_config_path
from prefsync.config.types import Config

logger = logging.getLogger(__name__)

# Comment lines written above each known key
_COMMENTS: dict[str, dict[str, str]] = {
    "appearance": {
        "enable_auto_scale": "Scale the UI with the system DPI setting",
        "truncate_path_method": "Long path display: none, compact, trimStart, fileNameOnly",
        "show_repo_current_branch": "Show the current branch next to each repository",
        "show_current_branch_in_visual_studio": "Show the current branch in Visual Studio",
        "relative_date": "Show relative dates (\"3 days ago\")",
    },
    "branches": {
        "sort_order": "Branch sort direction: Ascending or Descending",
        "sort_by": "Branch sort field: Default, authordate, committerdate, creatordate, taggerdate, refname",
    },
    "revisions": {
        "sort_by_author_date": "Sort revisions by author date (may delay graph rendering)",
    },
    "avatars": {
        "show_in_commit_info": "Show the author avatar in commit details",
        "show_column": "Show the author avatar column in the revision graph",
        "cache_days": "Days to keep downloaded avatar images",
        "provider": "Avatar provider: Default, Custom or None",
        "fallback_type": "Image used when the provider has none for an email address",
        "custom_template": "URL template(s) for the Custom provider",
    },
    "language": {
        "translation": "UI translation (\"English\" or an installed translation name)",
        "dictionary": "Spell-check dictionary name without .dic, or \"none\"",
    },
    "paths": {
        "dictionary_dir": "Directory holding .dic files (empty = default)",
        "translations_dir": "Directory holding translation files (empty = default)",
        "avatar_cache_dir": "Avatar image cache directory (empty = default)",
    },
}


def _format_string(value: str) -> str:
    """Format a TOML basic string, escaping quotes, backslashes and control chars."""
    escaped = []
    for ch in value:
        if ch == "\\":
            escaped.append("\\\\")
        elif ch == '"':
            escaped.append('\\"')
        elif ch == "\n":
            escaped.append("\\n")
        elif ch == "\r":
            escaped.append("\\r")
        elif ch == "\t":
            escaped.append("\\t")
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            escaped.append(f"\\u{ord(ch):04x}")
        else:
            escaped.append(ch)
    return '"' + "".join(escaped) + '"'


_BARE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")


def _format_key(key: str) -> str:
    return key if _BARE_KEY.match(key) else _format_string(key)


def _format_value(value: Any) -> str:
    """Format a value as TOML.

    Covers every type tomllib produces, so any loaded document can be
    written back. Dicts inside values become inline tables.

    Raises:
        TypeError: If the value has no TOML representation.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return repr(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        return repr(value)
    if isinstance(value, str):
        return _format_string(value)
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_format_value(v) for v in value) + "]"
    if isinstance(value, dict):
        items = ", ".join(f"{_format_key(k)} = {_format_value(v)}" for k, v in value.items())
        return "{ " + items + " }" if items else "{}"
    raise TypeError(f"Unsupported config value type: {type(value).__name__}")


def _render_table(
    name: str,
    values: dict[str, Any],
    comments: dict[str, str],
    lines: list[str],
) -> None:
    """Append one table and, after its own keys, its sub-tables."""
    lines.append(f"[{name}]")
    tables = []
    for key, value in values.items():
        if isinstance(value, dict):
            tables.append((key, value))
            continue
        comment = comments.get(key)
        if comment:
            lines.append(f"# {comment}")
        lines.append(f"{_format_key(key)} = {_format_value(value)}")
        lines.append("")

    if not tables:
        lines.append("")
    for key, table in tables:
        _render_table(f"{name}.{_format_key(key)}", table, {}, lines)


def render_config(config: Config) -> str:
    """Render configuration as a commented TOML document.

    Keys outside the known sections (top-level values, sub-tables) are
    written back as well.

    Args:
        config: Configuration dictionary.

    Returns:
        TOML text.

    Raises:
        TypeError: If a value cannot be represented.
    """
    lines = ["# prefsync Configuration", ""]

    # Top-level values must precede the first table header
    for key, value in config.items():
        if not isinstance(value, dict):
            lines.append(f"{_format_key(key)} = {_format_value(value)}")
            lines.append("")

    for section, values in config.items():
        if isinstance(values, dict):
            _render_table(_format_key(section), values, _COMMENTS.get(section, {}), lines)

    return "\n".join(lines)


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    The document is written to a temporary file next to the target and
    then moved over it, so a failed write leaves the previous file intact.

    Args:
        config: Configuration dictionary to save.
        config_path: Path to config file. Defaults to the user settings file.

    Raises:
        OSError: If the file cannot be written.
        TypeError: If a value cannot be represented.
    """
    if config_path is None:
        config_path = _get_appdata_config_path()

    content = render_config(config)

    # Create parent directory if needed
    config_path.parent.mkdir(parents=True, exist_ok=True)

    temp_path = config_path.with_name(config_path.name + ".tmp")
    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(temp_path, config_path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
    logger.debug("save_config: wrote %s", config_path)
