"""Message blocks: wrapped, labelled, padded lines such as ``[OK] Done``."""

from __future__ import annotations

from typing import Iterable

from termstyle.formatter import MarkupFormatter
from termstyle.output import EOL
from termstyle.utils import wordwrap


class BlockFormatter:
    """Lays out messages as a block *line_length* visible columns wide.

    Line widths are measured with *formatter*, so markup in the prefix or the
    messages does not count towards the width.
    """

    def __init__(self, formatter: MarkupFormatter, line_length: int) -> None:
        self._formatter = formatter
        self.line_length = line_length

    def create_block(
        self,
        messages: str | Iterable[str],
        type: str | None = None,
        style: str | None = None,
        prefix: str = " ",
        padding: bool = False,
        escape: bool = False,
        decorated: bool | None = None,
    ) -> list[str]:
        """Return the block's markup lines.

        ``type`` becomes a ``[TYPE] `` label on the first content line, with
        continuation lines indented to match. ``padding`` adds a blank line
        above and below, but only when the output is decorated (defaults to
        the formatter's flag). Every line is right-padded to the full width
        and wrapped in ``<style>...</>`` when a style is given.
        """
        if isinstance(messages, str):
            messages = [messages]
        messages = list(messages)
        if decorated is None:
            decorated = self._formatter.decorated

        label = ""
        if type is not None:
            label = f"[{type}] "
        indentation = " " * len(label)
        prefix_length = self._formatter.length_without_decoration(prefix)
        wrap_width = self.line_length - prefix_length - len(label)

        lines: list[str] = []
        for index, message in enumerate(messages):
            if escape:
                message = MarkupFormatter.escape(message)
            lines.extend(wordwrap(message, wrap_width, EOL).split(EOL))
            if index < len(messages) - 1:
                lines.append("")

        first_line = 0
        if padding and decorated:
            first_line = 1
            lines = ["", *lines, ""]

        block: list[str] = []
        for index, line in enumerate(lines):
            if type is not None:
                line = (label if index == first_line else indentation) + line
            line = prefix + line
            line += " " * (self.line_length - self._formatter.length_without_decoration(line))
            if style:
                line = f"<{style}>{line}</>"
            block.append(line)

        return block

