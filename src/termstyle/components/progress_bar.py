"""Progress bar that redraws a single status line as work advances."""

from __future__ import annotations

import logging
import math
import re
import sys
import time
from typing import Callable, ClassVar

from termstyle.errors import PlaceholderUnavailableError
from termstyle.output import ConsoleOutput, OutputInterface, Verbosity
from termstyle.terminal import terminal_width
from termstyle.utils import PadType, count_occurrences, format_memory, format_placeholder, format_time, str_pad

logger = logging.getLogger(__name__)

PlaceholderFormatter = Callable[["ProgressBar", OutputInterface], str]

_PLACEHOLDER_RE = re.compile(r"%([a-z\-_]+)(?::([^%]+))?%", re.IGNORECASE)

_MOVE_TO_LINE_START = "\r"
_ERASE_LINE = "\x1b[2K"
_ERASE_PREVIOUS_LINE = "\x1b[1A\x1b[2K"


def _round(value: float) -> int:
    """Round half up."""
    return math.floor(value + 0.5)


def _memory_usage() -> int:
    """Peak resident memory of this process, in bytes."""
    if sys.platform == "win32":
        return 0
    import resource

    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # kilobytes on Linux, bytes on macOS
    return peak if sys.platform == "darwin" else peak * 1024


# ---------------------------------------------------------------------------
# Built-in placeholders
# ---------------------------------------------------------------------------


def _bar(bar: ProgressBar, output: OutputInterface) -> str:
    if bar.max_steps > 0:
        complete = math.floor(bar.progress_percent * bar.bar_width)
    else:
        complete = bar.progress % bar.bar_width

    display = bar.bar_character * complete
    if complete < bar.bar_width:
        progress_width = output.formatter.length_without_decoration(bar.progress_character)
        empty = bar.bar_width - complete - progress_width
        display += bar.progress_character + bar.empty_bar_character * empty
    return display


def _elapsed(bar: ProgressBar, output: OutputInterface) -> str:
    return format_time(time.time() - bar.start_time)


def _remaining(bar: ProgressBar, output: OutputInterface) -> str:
    if not bar.max_steps:
        raise PlaceholderUnavailableError(
            "Unable to display the remaining time if the maximum number of steps is not set."
        )
    remaining = 0
    if bar.progress:
        remaining = _round((time.time() - bar.start_time) / bar.progress * (bar.max_steps - bar.progress))
    return format_time(remaining)


def _estimated(bar: ProgressBar, output: OutputInterface) -> str:
    if not bar.max_steps:
        raise PlaceholderUnavailableError(
            "Unable to display the estimated time if the maximum number of steps is not set."
        )
    estimated = 0
    if bar.progress:
        estimated = _round((time.time() - bar.start_time) / bar.progress * bar.max_steps)
    return format_time(estimated)


def _memory(bar: ProgressBar, output: OutputInterface) -> str:
    return format_memory(_memory_usage())


def _current(bar: ProgressBar, output: OutputInterface) -> str:
    return str_pad(str(bar.progress), bar.step_width, " ", PadType.LEFT)


def _max(bar: ProgressBar, output: OutputInterface) -> str:
    return str(bar.max_steps)


def _percent(bar: ProgressBar, output: OutputInterface) -> str:
    return str(math.floor(bar.progress_percent * 100))


# ---------------------------------------------------------------------------
# ProgressBar
# ---------------------------------------------------------------------------


class ProgressBar:
    """A redrawing progress line driven by ``start``/``advance``/``finish``.

    Line templates use ``%name%`` placeholders, optionally with a printf
    spec (``%percent:3s%``). A name without a registered formatter is looked
    up among the messages set with :meth:`set_message`.

    On undecorated output the line is not redrawn in place: each redraw goes
    on its own line and redraws are limited to about ten per run.
    """

    _formats: ClassVar[dict[str, str]] = {
        "normal": " %current%/%max% [%bar%] %percent:3s%%",
        "normal_nomax": " %current% [%bar%]",
        "verbose": " %current%/%max% [%bar%] %percent:3s%% %elapsed:6s%",
        "verbose_nomax": " %current% [%bar%] %elapsed:6s%",
        "very_verbose": " %current%/%max% [%bar%] %percent:3s%% %elapsed:6s%/%estimated:-6s%",
        "very_verbose_nomax": " %current% [%bar%] %elapsed:6s%",
        "debug": " %current%/%max% [%bar%] %percent:3s%% %elapsed:6s%/%estimated:-6s% %memory:6s%",
        "debug_nomax": " %current% [%bar%] %elapsed:6s% %memory:6s%",
    }

    _placeholder_formatters: ClassVar[dict[str, PlaceholderFormatter]] = {
        "bar": _bar,
        "elapsed": _elapsed,
        "remaining": _remaining,
        "estimated": _estimated,
        "memory": _memory,
        "current": _current,
        "max": _max,
        "percent": _percent,
    }

    def __init__(
        self,
        output: OutputInterface,
        max_steps: int = 0,
        *,
        bar_width: int = 28,
        terminal_width: int | None = None,
    ) -> None:
        if isinstance(output, ConsoleOutput):
            output = output.error_output
        self._output = output
        self._terminal_width = terminal_width

        self._bar_width = max(1, bar_width)
        self._bar_char: str | None = None
        self._empty_bar_char = "-"
        self._progress_char = ">"

        self._format: str | None = None
        self._internal_format: str | None = None
        self._format_line_count = 0
        self._redraw_freq: float = 1
        self._step = 0
        self._max = 0
        self._step_width = 4
        self._percent = 0.0
        self._messages: dict[str, str] = {}
        self._overwrite = True
        self._first_run = True

        self._set_max_steps(max_steps)
        if not self._output.decorated:
            self._overwrite = False
            self.set_redraw_frequency(self._max / 10)

        self._start_time = time.time()

    # -- class-level definitions ---------------------------------------------

    @classmethod
    def set_format_definition(cls, name: str, format: str) -> None:
        cls._formats[name] = format

    @classmethod
    def get_format_definition(cls, name: str) -> str | None:
        return cls._formats.get(name)

    @classmethod
    def set_placeholder_formatter(cls, name: str, formatter: PlaceholderFormatter) -> None:
        cls._placeholder_formatters[name] = formatter

    @classmethod
    def get_placeholder_formatter(cls, name: str) -> PlaceholderFormatter | None:
        return cls._placeholder_formatters.get(name)

    # -- state ----------------------------------------------------------------

    @property
    def start_time(self) -> float:
        return self._start_time

    @property
    def max_steps(self) -> int:
        return self._max

    @property
    def progress(self) -> int:
        return self._step

    @property
    def step_width(self) -> int:
        return self._step_width

    @property
    def progress_percent(self) -> float:
        return self._percent

    @property
    def bar_width(self) -> int:
        return self._bar_width

    @bar_width.setter
    def bar_width(self, size: int) -> None:
        self._bar_width = max(1, size)

    @property
    def bar_character(self) -> str:
        if self._bar_char is None:
            return "=" if self._max else self._empty_bar_char
        return self._bar_char

    @bar_character.setter
    def bar_character(self, char: str) -> None:
        self._bar_char = char

    @property
    def empty_bar_character(self) -> str:
        return self._empty_bar_char

    @empty_bar_character.setter
    def empty_bar_character(self, char: str) -> None:
        self._empty_bar_char = char

    @property
    def progress_character(self) -> str:
        return self._progress_char

    @progress_character.setter
    def progress_character(self, char: str) -> None:
        self._progress_char = char

    def set_message(self, message: str, name: str = "message") -> None:
        self._messages[name] = message

    def get_message(self, name: str = "message") -> str | None:
        return self._messages.get(name)

    def set_format(self, format: str) -> None:
        """Use a named format (``verbose``...) or a literal template."""
        self._format = None
        self._internal_format = format

    def set_redraw_frequency(self, freq: float) -> None:
        self._redraw_freq = max(freq, 1)

    def set_overwrite(self, overwrite: bool) -> None:
        self._overwrite = overwrite

    def _set_max_steps(self, max_steps: int) -> None:
        self._max = max(0, max_steps)
        self._step_width = len(str(self._max)) if self._max else 4

    # -- driving --------------------------------------------------------------

    def start(self, max_steps: int | None = None) -> None:
        self._start_time = time.time()
        self._step = 0
        self._percent = 0.0
        if max_steps is not None:
            self._set_max_steps(max_steps)
        self.display()

    def advance(self, step: int = 1) -> None:
        self.set_progress(self._step + step)

    def set_progress(self, step: int) -> None:
        """Move to *step*. A step past a known maximum raises the maximum."""
        if self._max and step > self._max:
            self._max = step
        elif step < 0:
            step = 0

        previous_period = _round(self._step / self._redraw_freq)
        current_period = _round(step / self._redraw_freq)
        self._step = step
        self._percent = self._step / self._max if self._max else 0.0
        if previous_period != current_period or self._max == step:
            self.display()

    def finish(self) -> None:
        if not self._max:
            self._max = self._step
        if self._step == self._max and not self._overwrite:
            # already drawn at 100%
            return
        self.set_progress(self._max)

    def display(self) -> None:
        if self._output.verbosity == Verbosity.QUIET:
            return
        self._write(self._build_line())

    def clear(self) -> None:
        if not self._overwrite:
            return
        self._resolve_format()
        self._write("")

    # -- rendering ------------------------------------------------------------

    def _resolve_format(self) -> str:
        """The format string in use, resolving a pending one first."""
        if self._format is None:
            self._format = self._set_real_format(self._internal_format or self._determine_best_format())
        return self._format

    def _set_real_format(self, format: str) -> str:
        nomax = self.get_format_definition(f"{format}_nomax")
        if not self._max and nomax is not None:
            real = nomax
        else:
            real = self.get_format_definition(format) or format
        self._format_line_count = count_occurrences(real, "\n")
        logger.debug("Progress format %r resolved to %r", format, real)
        return real

    def _determine_best_format(self) -> str:
        verbosity = self._output.verbosity
        if verbosity == Verbosity.VERBOSE:
            name = "verbose"
        elif verbosity == Verbosity.VERY_VERBOSE:
            name = "very_verbose"
        elif verbosity == Verbosity.DEBUG:
            name = "debug"
        else:
            name = "normal"
        return name if self._max else f"{name}_nomax"

    def _replace_placeholder(self, match: re.Match[str]) -> str:
        name, spec = match.group(1), match.group(2)
        formatter = self.get_placeholder_formatter(name)
        if formatter is not None:
            text = formatter(self, self._output)
        elif name in self._messages:
            text = self._messages[name]
        else:
            return match.group(0)
        if spec:
            text = format_placeholder(spec, text)
        return text

    def _build_line(self) -> str:
        format = self._resolve_format()
        line = _PLACEHOLDER_RE.sub(self._replace_placeholder, format)
        line_length = self._output.formatter.length_without_decoration(line)
        width = self._terminal_width or terminal_width()
        if line_length <= width:
            return line

        self.bar_width = self._bar_width - line_length + width
        return _PLACEHOLDER_RE.sub(self._replace_placeholder, format)

    def _write(self, message: str) -> None:
        if self._overwrite:
            if not self._first_run:
                self._output.write(_MOVE_TO_LINE_START + _ERASE_LINE + _ERASE_PREVIOUS_LINE * self._format_line_count)
        elif self._step > 0:
            self._output.writeln("")
        self._first_run = False
        self._output.write(message)
