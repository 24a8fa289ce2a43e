"""Terminal text utilities: ANSI stripping, padding, wrapping and unit formatting.

Widths here are plain character counts. Markup-aware measurement lives on
:class:`termstyle.formatter.MarkupFormatter`.
"""

from __future__ import annotations

import enum
import math
import re

from termstyle.errors import LayoutError


# ---------------------------------------------------------------------------
# ANSI / tag patterns
# ---------------------------------------------------------------------------

# CSI SGR sequences: ESC[ <params> m
_SGR_RE = re.compile(r"\x1b\[[^m]*m")
# HTML-like tags, used when writing "plain" output
_TAG_RE = re.compile(r"</?([a-z][a-z0-9]*)\b[^>]*>", re.IGNORECASE)
_COMMENT_RE = re.compile(r"<!--[\s\S]*?-->")
# printf-style conversion spec: flags, width, precision, type
_PRINTF_SPEC_RE = re.compile(r"^([-+ #0]*)(\d*)(?:\.(\d+))?([sdifFeEgGxXo])$")


def strip_ansi(text: str) -> str:
    """Remove every ``ESC[...m`` sequence from *text*."""
    return _SGR_RE.sub("", text)


def strip_tags(text: str) -> str:
    """Remove HTML-like tags and comments from *text*."""
    return _TAG_RE.sub("", _COMMENT_RE.sub("", text))


# ---------------------------------------------------------------------------
# Padding
# ---------------------------------------------------------------------------


class PadType(str, enum.Enum):
    """Which side(s) :func:`str_pad` fills."""

    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"


def _repeat_to(pad: str, length: int) -> str:
    if length <= 0:
        return ""
    return (pad * (length // len(pad) + 1))[:length]


def str_pad(text: str, length: int, pad: str = " ", pad_type: PadType = PadType.RIGHT) -> str:
    """Pad *text* with *pad* to *length* characters. Longer text is returned as is."""
    missing = length - len(text)
    if missing <= 0 or not pad:
        return text

    if pad_type is PadType.LEFT:
        return _repeat_to(pad, missing) + text
    if pad_type is PadType.BOTH:
        left = missing // 2
        return _repeat_to(pad, left) + text + _repeat_to(pad, missing - left)
    return text + _repeat_to(pad, missing)


# ---------------------------------------------------------------------------
# Wrapping / chunking
# ---------------------------------------------------------------------------


def wordwrap(text: str, width: int = 75, break_sequence: str = "\n") -> str:
    """Wrap *text* to *width* characters.

    Lines break at the last space before the limit; tabs and other
    whitespace never break. A word longer than *width* is cut. Existing
    line breaks are kept.
    """
    if width < 1:
        return text

    wrapped: list[str] = []
    for line in re.split(r"\r\n|\n|\r", text):
        partials: list[str] = []
        rest = line
        while len(rest) > width:
            head = rest[:width]
            if rest[width] == " ":
                rest = rest[width + 1 :]
            elif " " in head:
                cut = head.rfind(" ")
                head = head[:cut]
                rest = rest[cut + 1 :]
            else:
                rest = rest[width:]
            partials.append(head)
        if rest:
            partials.append(rest)
        wrapped.append(break_sequence.join(partials))

    return break_sequence.join(wrapped)


def chunk_string(text: str, size: int = 1) -> list[str]:
    """Split *text* into pieces of *size* characters (the last may be shorter)."""
    if size < 1:
        raise LayoutError(f"Could not chunk string: {text}")
    return [text[pos : pos + size] for pos in range(0, len(text), size)]


def count_occurrences(haystack: str, needle: str) -> int:
    if not needle:
        return 0
    return haystack.count(needle)


# ---------------------------------------------------------------------------
# Human-readable units
# ---------------------------------------------------------------------------

# (threshold, label, divisor); no divisor means the label is used as is
_TIME_FORMATS: list[tuple[int, str, int | None]] = [
    (0, "< 1 sec", None),
    (1, "1 sec", None),
    (2, "secs", 1),
    (60, "1 min", None),
    (120, "mins", 60),
    (3600, "1 hr", None),
    (7200, "hrs", 3600),
    (86400, "1 day", None),
    (172800, "days", 86400),
]


def format_time(seconds: float) -> str:
    """Format a duration, e.g. ``< 1 sec``, ``5 secs``, ``2 mins``, ``3 days``."""
    label = _TIME_FORMATS[0][1]
    for index, (threshold, name, divisor) in enumerate(_TIME_FORMATS):
        if seconds < threshold:
            break
        is_last = index == len(_TIME_FORMATS) - 1
        if is_last or seconds < _TIME_FORMATS[index + 1][0]:
            label = name if divisor is None else f"{math.floor(seconds / divisor)} {name}"
            break
    return label


def format_memory(memory: int) -> str:
    """Format a byte count using binary units."""
    if memory >= 1024 * 1024 * 1024:
        return f"{memory / 1024 / 1024 / 1024:.1f} GiB"
    if memory >= 1024 * 1024:
        return f"{memory / 1024 / 1024:.1f} MiB"
    if memory >= 1024:
        return f"{memory // 1024} KiB"
    return f"{memory} B"


def format_placeholder(spec: str, value: str) -> str:
    """Apply a printf-style conversion such as ``3s`` or ``-6s`` to *value*.

    Numeric conversions coerce *value* first. Unknown specs leave *value*
    unchanged.
    """
    match = _PRINTF_SPEC_RE.match(spec)
    if match is None:
        return value

    conversion = match.group(4)
    converted: object = value
    if conversion in "dixXo":
        converted = int(float(value))
    elif conversion in "fFeEgG":
        converted = float(value)
    return f"%{spec}" % converted
