"""Output sinks: verbosity gating and markup formatting in front of a writer.

``Output`` implements everything but the final write. ``StreamOutput`` writes
to a text stream, ``ConsoleOutput`` pairs stdout with an stderr companion and
``BufferedOutput`` keeps what was written in memory.
"""

from __future__ import annotations

import abc
import enum
import sys
from typing import Iterable, Protocol, TextIO, Union

from termstyle.errors import OutputWriteError
from termstyle.formatter import MarkupFormatter
from termstyle.terminal import stream_supports_color
from termstyle.utils import strip_tags

# Text-mode streams translate this to the platform line ending.
EOL = "\n"

Messages = Union[str, Iterable[str]]


class Verbosity(enum.IntEnum):
    QUIET = 16
    NORMAL = 32
    VERBOSE = 64
    VERY_VERBOSE = 128
    DEBUG = 256


class OutputType(enum.IntEnum):
    """How a message is treated before it reaches the writer."""

    NORMAL = 1  # markup is formatted
    RAW = 2  # written as is
    PLAIN = 4  # markup is formatted, then any remaining tags are stripped


_TYPE_MASK = OutputType.NORMAL | OutputType.RAW | OutputType.PLAIN
_VERBOSITY_MASK = (
    Verbosity.QUIET | Verbosity.NORMAL | Verbosity.VERBOSE | Verbosity.VERY_VERBOSE | Verbosity.DEBUG
)


class OutputInterface(Protocol):
    """What the renderers need from a sink."""

    def write(self, messages: Messages, newline: bool = False, options: int = 0) -> None: ...

    def writeln(self, messages: Messages, options: int = 0) -> None: ...

    @property
    def verbosity(self) -> Verbosity: ...

    @property
    def decorated(self) -> bool: ...

    @property
    def formatter(self) -> MarkupFormatter: ...

    def is_quiet(self) -> bool: ...

    def is_verbose(self) -> bool: ...

    def is_very_verbose(self) -> bool: ...

    def is_debug(self) -> bool: ...


def _as_list(messages: Messages) -> list[str]:
    if isinstance(messages, str):
        return [messages]
    return [str(message) for message in messages]


# ---------------------------------------------------------------------------
# Base output
# ---------------------------------------------------------------------------


class Output(abc.ABC):
    """Base sink. Subclasses only implement :meth:`_do_write`.

    ``options`` passed to :meth:`write` is a bitmask of one
    :class:`OutputType` and one :class:`Verbosity`; a message whose
    verbosity is above the output's own is dropped.
    """

    def __init__(
        self,
        verbosity: Verbosity = Verbosity.NORMAL,
        decorated: bool = False,
        formatter: MarkupFormatter | None = None,
    ) -> None:
        self._verbosity = Verbosity(verbosity)
        self._formatter = formatter if formatter is not None else MarkupFormatter()
        self._formatter.decorated = bool(decorated)

    @property
    def formatter(self) -> MarkupFormatter:
        return self._formatter

    @formatter.setter
    def formatter(self, formatter: MarkupFormatter) -> None:
        self._formatter = formatter

    @property
    def decorated(self) -> bool:
        return self._formatter.decorated

    @decorated.setter
    def decorated(self, decorated: bool) -> None:
        self._formatter.decorated = decorated

    @property
    def verbosity(self) -> Verbosity:
        return self._verbosity

    @verbosity.setter
    def verbosity(self, level: Verbosity) -> None:
        self._verbosity = Verbosity(level)

    def is_quiet(self) -> bool:
        return self._verbosity == Verbosity.QUIET

    def is_verbose(self) -> bool:
        return self._verbosity >= Verbosity.VERBOSE

    def is_very_verbose(self) -> bool:
        return self._verbosity >= Verbosity.VERY_VERBOSE

    def is_debug(self) -> bool:
        return self._verbosity >= Verbosity.DEBUG

    def writeln(self, messages: Messages, options: int = 0) -> None:
        self.write(messages, True, options)

    def write(self, messages: Messages, newline: bool = False, options: int = 0) -> None:
        output_type = options & _TYPE_MASK or OutputType.NORMAL
        verbosity = options & _VERBOSITY_MASK or Verbosity.NORMAL
        if verbosity > self._verbosity:
            return

        for message in _as_list(messages):
            if output_type == OutputType.NORMAL:
                message = self._formatter.format(message)
            elif output_type == OutputType.PLAIN:
                message = strip_tags(self._formatter.format(message))
            self._do_write(message, newline)

    @abc.abstractmethod
    def _do_write(self, message: str, newline: bool) -> None:
        """Write one already formatted message."""


# ---------------------------------------------------------------------------
# Concrete sinks
# ---------------------------------------------------------------------------


class StreamOutput(Output):
    """Writes to a text stream. ``decorated=None`` auto-detects color support."""

    def __init__(
        self,
        stream: TextIO,
        verbosity: Verbosity = Verbosity.NORMAL,
        decorated: bool | None = None,
        formatter: MarkupFormatter | None = None,
    ) -> None:
        if decorated is None:
            decorated = stream_supports_color(stream)
        super().__init__(verbosity, decorated, formatter)
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream

    def _do_write(self, message: str, newline: bool) -> None:
        try:
            self._stream.write(message)
            if newline:
                self._stream.write(EOL)
            self._stream.flush()
        except OSError as exc:
            raise OutputWriteError("Unable to write output.") from exc


class ConsoleOutput(StreamOutput):
    """stdout output with an stderr companion for diagnostics and progress.

    Changing decoration, verbosity or formatter here changes the error
    output too.
    """

    def __init__(
        self,
        verbosity: Verbosity = Verbosity.NORMAL,
        decorated: bool | None = None,
        formatter: MarkupFormatter | None = None,
        stream: TextIO | None = None,
        error_stream: TextIO | None = None,
    ) -> None:
        super().__init__(stream if stream is not None else sys.stdout, verbosity, decorated, formatter)
        stdout_decorated = self.decorated
        self._stderr: Output = StreamOutput(
            error_stream if error_stream is not None else sys.stderr,
            verbosity,
            decorated,
            formatter,
        )
        if decorated is None:
            self.decorated = stdout_decorated and self._stderr.decorated

    @StreamOutput.decorated.setter  # type: ignore[attr-defined]
    def decorated(self, decorated: bool) -> None:
        self._formatter.decorated = decorated
        self._stderr.decorated = decorated

    @StreamOutput.formatter.setter  # type: ignore[attr-defined]
    def formatter(self, formatter: MarkupFormatter) -> None:
        self._formatter = formatter
        self._stderr.formatter = formatter

    @StreamOutput.verbosity.setter  # type: ignore[attr-defined]
    def verbosity(self, level: Verbosity) -> None:
        self._verbosity = Verbosity(level)
        self._stderr.verbosity = level

    @property
    def error_output(self) -> Output:
        return self._stderr

    @error_output.setter
    def error_output(self, error: Output) -> None:
        self._stderr = error


class BufferedOutput(Output):
    """Collects output in memory until :meth:`fetch` is called."""

    def __init__(
        self,
        verbosity: Verbosity = Verbosity.NORMAL,
        decorated: bool = False,
        formatter: MarkupFormatter | None = None,
    ) -> None:
        super().__init__(verbosity, decorated, formatter)
        self._buffer: list[str] = []

    def fetch(self) -> str:
        """Return everything written so far and empty the buffer."""
        content = "".join(self._buffer)
        self._buffer = []
        return content

    def _do_write(self, message: str, newline: bool) -> None:
        self._buffer.append(message)
        if newline:
            self._buffer.append(EOL)
