"""Process environment detection: terminal width, platform and color support.

Every function reads ``os.environ`` (or an explicit mapping) at call time so
tests can control the outcome without touching the real process.
"""

from __future__ import annotations

import os
import platform
import sys
from typing import Mapping, TextIO

DEFAULT_COLUMNS = 80


def is_windows() -> bool:
    return os.sep == "\\"


def terminal_width(fallback: int = DEFAULT_COLUMNS, environ: Mapping[str, str] | None = None) -> int:
    """Columns of the controlling terminal.

    ``COLUMNS`` wins when set to a positive integer; otherwise the size of
    stdout is queried and *fallback* is used when there is no terminal.
    """
    env = os.environ if environ is None else environ
    columns = env.get("COLUMNS", "").strip()
    if columns.isdigit() and int(columns) > 0:
        return int(columns)

    try:
        size = os.get_terminal_size(sys.stdout.fileno())
    except (AttributeError, ValueError, OSError):
        return fallback
    return size.columns or fallback


def _windows_supports_ansi(env: Mapping[str, str]) -> bool:
    return (
        platform.release() == "10.0.10586"
        or "ANSICON" in env
        or env.get("ConEmuANSI") == "ON"
        or env.get("TERM") == "xterm"
        or "WT_SESSION" in env
    )


def stream_supports_color(stream: TextIO | None, environ: Mapping[str, str] | None = None) -> bool:
    """Whether ANSI escape codes written to *stream* would be rendered.

    ``NO_COLOR`` (any value) disables color and ``FORCE_COLOR`` (any value
    but ``0``) enables it, before any terminal check.
    """
    env = os.environ if environ is None else environ
    if "NO_COLOR" in env:
        return False
    force = env.get("FORCE_COLOR")
    if force is not None:
        return force != "0"

    if is_windows():
        return _windows_supports_ansi(env)

    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # closed stream
        return False
