"""High-level console style: titles, message blocks, tables, prompts and progress.

``ConsoleStyle`` is itself an output (it can be handed to a ``Table``) and
keeps a small record of the last characters written so blocks and text are
separated by exactly one blank line whatever was printed before.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from termstyle.components.block import BlockFormatter
from termstyle.components.progress_bar import ProgressBar
from termstyle.components.questionnaire import Questionnaire, Validator
from termstyle.components.table import Table
from termstyle.components.table_style import TableStyleRegistry
from termstyle.errors import ProgressNotStartedError
from termstyle.formatter import MarkupFormatter
from termstyle.input import ConsoleInput, InputInterface
from termstyle.output import EOL, BufferedOutput, ConsoleOutput, Messages, Output, OutputType, Verbosity
from termstyle.settings import ConsoleSettings
from termstyle.terminal import is_windows, terminal_width

# Four characters cover two line endings even when they are "\r\n".
_HISTORY_LENGTH = 4


def _as_list(messages: Messages) -> list[str]:
    if isinstance(messages, str):
        return [messages]
    return list(messages)


class ConsoleStyle:
    """Styled console output and interaction on top of an :class:`Output`."""

    def __init__(
        self,
        input: InputInterface | None = None,
        output: Output | None = None,
        settings: ConsoleSettings | None = None,
    ) -> None:
        self._settings = settings if settings is not None else ConsoleSettings()
        if input is None:
            input = ConsoleInput(interactive=self._settings.interactive)
        if output is None:
            output = ConsoleOutput(self._settings.verbosity_level, self._settings.decorated)
        self._input = input
        self._output = output

        self._buffered_output = BufferedOutput(output.verbosity, False, output.formatter.clone())
        max_line_length = self._settings.max_line_length
        width = terminal_width(fallback=max_line_length)
        self._line_length = min(width - int(is_windows()), max_line_length)
        self._blocks = BlockFormatter(output.formatter, self._line_length)
        self._table_styles = TableStyleRegistry()
        self._progress_bar: ProgressBar | None = None
        self._questionnaire: Questionnaire | None = None

    # ------------------------------------------------------------------
    # Output passthrough
    # ------------------------------------------------------------------

    @property
    def output(self) -> Output:
        return self._output

    @property
    def line_length(self) -> int:
        return self._line_length

    @property
    def formatter(self) -> MarkupFormatter:
        return self._output.formatter

    @property
    def decorated(self) -> bool:
        return self._output.decorated

    @decorated.setter
    def decorated(self, decorated: bool) -> None:
        self._output.decorated = decorated

    @property
    def verbosity(self) -> Verbosity:
        return self._output.verbosity

    @verbosity.setter
    def verbosity(self, level: Verbosity) -> None:
        self._output.verbosity = level
        self._buffered_output.verbosity = level

    def is_quiet(self) -> bool:
        return self._output.is_quiet()

    def is_verbose(self) -> bool:
        return self._output.is_verbose()

    def is_very_verbose(self) -> bool:
        return self._output.is_very_verbose()

    def is_debug(self) -> bool:
        return self._output.is_debug()

    def write(self, messages: Messages, newline: bool = False, options: int = 0) -> None:
        messages = _as_list(messages)
        self._output.write(messages, newline, options)
        self._write_history(messages, newline, options)

    def writeln(self, messages: Messages, options: int = 0) -> None:
        self.write(messages, True, options)

    def new_line(self, count: int = 1) -> None:
        self._output.write(EOL * count)
        self._buffered_output.write(EOL * count)

    # ------------------------------------------------------------------
    # Headings and text
    # ------------------------------------------------------------------

    def title(self, message: str) -> None:
        self._heading(message, "=")

    def section(self, message: str) -> None:
        self._heading(message, "-")

    def _heading(self, message: str, underline: str) -> None:
        self._auto_prepend_block()
        width = self.formatter.length_without_decoration(message)
        self.writeln(
            [
                f"<comment>{MarkupFormatter.escape_trailing_backslash(message)}</>",
                f"<comment>{underline * width}</>",
            ]
        )
        self.new_line()

    def listing(self, elements: Iterable[str]) -> None:
        self._auto_prepend_text()
        self.writeln([f" * {element}" for element in elements])
        self.new_line()

    def text(self, message: Messages) -> None:
        self._auto_prepend_text()
        for line in _as_list(message):
            self.writeln(f" {line}")

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def block(
        self,
        messages: Messages,
        type: str | None = None,
        style: str | None = None,
        prefix: str = " ",
        padding: bool = False,
        escape: bool = True,
    ) -> None:
        self._auto_prepend_block()
        self.writeln(self._blocks.create_block(_as_list(messages), type, style, prefix, padding, escape))
        self.new_line()

    def comment(self, message: Messages) -> None:
        self._auto_prepend_block()
        self.writeln(self._blocks.create_block(_as_list(message), prefix="<fg=default;bg=default> // </>"))
        self.new_line()

    def success(self, message: Messages) -> None:
        self.block(message, "OK", "fg=black;bg=green", " ", True)

    def error(self, message: Messages) -> None:
        self.block(message, "ERROR", "fg=white;bg=red", " ", True)

    def warning(self, message: Messages) -> None:
        self.block(message, "WARNING", "fg=white;bg=red", " ", True)

    def note(self, message: Messages) -> None:
        self.block(message, "NOTE", "fg=yellow", " ! ")

    def caution(self, message: Messages) -> None:
        self.block(message, "CAUTION", "fg=white;bg=red", " ! ", True)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def table(self, headers: Sequence[Any], rows: Sequence[Any]) -> None:
        style = self._table_styles.get(self._settings.table_style).clone()
        style.cell_header_format = "<info>%s</info>"

        table = Table(self, self._table_styles)
        table.set_headers(headers)
        table.set_rows(rows)
        table.set_style(style)
        table.render()
        self.new_line()

    # ------------------------------------------------------------------
    # Questions (None when the input is not interactive)
    # ------------------------------------------------------------------

    def _get_questionnaire(self) -> Questionnaire:
        if self._questionnaire is None:
            self._questionnaire = Questionnaire(self, self._input)
        return self._questionnaire

    async def ask(self, question: str, default: str | None = None, validator: Validator | None = None) -> str | None:
        if not self._input.interactive:
            return None
        return await self._get_questionnaire().ask(question, default, validator)

    async def ask_hidden(self, question: str, validator: Validator | None = None) -> str | None:
        if not self._input.interactive:
            return None
        return await self._get_questionnaire().ask_hidden(question, validator)

    async def confirm(self, question: str, default: bool = True) -> bool | None:
        if not self._input.interactive:
            return None
        return await self._get_questionnaire().confirm(question, default)

    async def choice(self, question: str, choices: Mapping[str, str], default: str | None = None) -> str | None:
        if not self._input.interactive:
            return None
        return await self._get_questionnaire().choice(question, choices, default)

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def create_progress_bar(self, max_steps: int = 0) -> ProgressBar:
        progress_bar = ProgressBar(self._output, max_steps, bar_width=self._settings.bar_width)
        if not is_windows():
            progress_bar.empty_bar_character = "░"  # light shade
            progress_bar.progress_character = ""
            progress_bar.bar_character = "▓"  # dark shade
        return progress_bar

    def progress_start(self, max_steps: int = 0) -> None:
        self._progress_bar = self.create_progress_bar(max_steps)
        self._progress_bar.start()

    def progress_advance(self, step: int = 1) -> None:
        self._get_progress_bar().advance(step)

    def progress_set(self, step: int) -> None:
        self._get_progress_bar().set_progress(step)

    def progress_finish(self) -> None:
        self._get_progress_bar().finish()
        self.new_line(2)
        self._progress_bar = None

    def _get_progress_bar(self) -> ProgressBar:
        if self._progress_bar is None:
            raise ProgressNotStartedError("The ProgressBar is not started.")
        return self._progress_bar

    # ------------------------------------------------------------------
    # Blank-line bookkeeping
    # ------------------------------------------------------------------

    def _write_history(self, messages: list[str], newline: bool, options: int) -> None:
        history = self._buffered_output.fetch()[-_HISTORY_LENGTH:]
        # history is always kept, whatever the verbosity of the new messages
        self._buffered_output.write(history, False, OutputType.RAW | Verbosity.QUIET)
        self._buffered_output.write([message[-_HISTORY_LENGTH:] for message in messages], newline, options)

    def _auto_prepend_block(self) -> None:
        chars = self._buffered_output.fetch().replace("\r\n", "\n")[-2:]
        if not chars:
            # nothing written yet: start with a blank line
            self.new_line()
            return
        self.new_line(2 - chars.count("\n"))

    def _auto_prepend_text(self) -> None:
        if not self._buffered_output.fetch().endswith("\n"):
            self.new_line()
