"""Bordered tables with colspan, rowspan, multi-line cells and separators.

Layout is computed from scratch on every render. The steps are:

1. count logical columns (cells plus extra colspan) over headers and rows;
2. expand rowspans into synthesized rows below the spanning cell, merging
   them into the next rows when the columns fit, inserting them otherwise;
3. split multi-line cells into continuation rows;
4. pad colspan cells with blank placeholders so row indices are columns;
5. measure each column, spreading colspan text evenly over its columns;
6. draw borders, headers, body rows and separators.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Sequence, Union

from termstyle.components.table_style import TableStyle, TableStyleRegistry
from termstyle.errors import InvalidRowError
from termstyle.output import OutputInterface
from termstyle.utils import chunk_string, str_pad

logger = logging.getLogger(__name__)


class TableCell:
    """A cell value with optional row and column spans."""

    def __init__(self, value: Any = "", rowspan: int = 1, colspan: int = 1) -> None:
        if rowspan < 1 or colspan < 1:
            raise ValueError(f"Cell spans must be at least 1 (rowspan={rowspan}, colspan={colspan})")
        self._value = str(value)
        self._rowspan = rowspan
        self._colspan = colspan

    @property
    def value(self) -> str:
        return self._value

    @property
    def rowspan(self) -> int:
        return self._rowspan

    @property
    def colspan(self) -> int:
        return self._colspan

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r}, rowspan={self._rowspan}, colspan={self._colspan})"


class TableSeparator(TableCell):
    """A horizontal rule: a whole row when added as a row, a run of border chars as a cell."""


# A row is a list of cells (strings, TableCell or anything str()-able), or a separator.
Row = Union[list, TableSeparator]


@dataclass
class _Layout:
    """Per-render layout state. Never stored on the table."""

    columns: int
    widths: list[int] = field(default_factory=list)


def _is_separator(row: Any) -> bool:
    return isinstance(row, TableSeparator)


def _column_count(row: Sequence[Any]) -> int:
    return len(row) + sum(cell.colspan - 1 for cell in row if isinstance(cell, TableCell))


def _blank_copy(row: Row) -> list:
    """Same shape as *row* (colspans kept) with every value emptied."""
    if _is_separator(row):
        return []
    return [TableCell("", colspan=cell.colspan) if isinstance(cell, TableCell) else "" for cell in row]


def _fill_cells(row: list) -> list:
    filled: list = []
    for cell in row:
        filled.append(cell)
        if isinstance(cell, TableCell) and cell.colspan > 1:
            filled.extend([""] * (cell.colspan - 1))
    return filled


def _check_row(row: Any) -> Row:
    if _is_separator(row):
        return row
    if isinstance(row, (list, tuple)):
        return list(row)
    raise InvalidRowError("A row must be a list or a TableSeparator instance.")


class Table:
    """Renders headers and rows as a bordered table on *output*."""

    def __init__(self, output: OutputInterface, styles: TableStyleRegistry | None = None) -> None:
        self._output = output
        self._styles = styles if styles is not None else TableStyleRegistry()
        self._style = self._styles.get("default")
        self._column_styles: dict[int, TableStyle] = {}
        self._column_widths: dict[int, int] = {}
        self._headers: list[list] = []
        self._rows: list[Row] = []

    # -- styles ---------------------------------------------------------------

    def _resolve_style(self, name: TableStyle | str) -> TableStyle:
        if isinstance(name, TableStyle):
            return name
        return self._styles.get(name)

    @property
    def style(self) -> TableStyle:
        return self._style

    def set_style(self, name: TableStyle | str) -> None:
        self._style = self._resolve_style(name)

    def set_column_style(self, column: int, name: TableStyle | str) -> None:
        self._column_styles[column] = self._resolve_style(name)

    def get_column_style(self, column: int) -> TableStyle:
        return self._column_styles.get(column, self._style)

    def set_column_width(self, column: int, width: int) -> None:
        """Minimum content width of *column*; longer content still widens it."""
        self._column_widths[column] = width

    def set_column_widths(self, widths: Sequence[int | None]) -> None:
        self._column_widths = {}
        for column, width in enumerate(widths):
            if width is not None:
                self.set_column_width(column, width)

    # -- content --------------------------------------------------------------

    def set_headers(self, headers: Sequence[Any]) -> None:
        """Accepts one header row or a list of header rows."""
        headers = list(headers)
        if headers and not isinstance(headers[0], (list, tuple, TableSeparator)):
            headers = [headers]
        rows: list[list] = []
        for row in headers:
            if _is_separator(row):
                raise InvalidRowError("A header row must be a list of cells.")
            rows.append(_check_row(row))
        self._headers = rows

    def set_rows(self, rows: Sequence[Any]) -> None:
        self._rows = []
        self.add_rows(rows)

    def add_rows(self, rows: Sequence[Any]) -> None:
        for row in rows:
            self.add_row(row)

    def add_row(self, row: Any) -> None:
        self._rows.append(_check_row(row))

    def set_row(self, index: int, row: Any) -> None:
        row = _check_row(row)
        if index == len(self._rows):
            self._rows.append(row)
        else:
            self._rows[index] = row

    # -- rendering ------------------------------------------------------------

    def render(self) -> None:
        for line in self.render_lines():
            self._output.writeln(line)

    def render_lines(self) -> list[str]:
        """The table as markup lines, ready for ``writeln``."""
        layout = _Layout(columns=self._count_columns())
        rows = self._build_rows(self._rows, layout)
        headers = self._build_rows(self._headers, layout)
        layout.widths = self._measure_columns(headers + rows, layout)
        logger.debug("Table layout: %d columns, widths %s", layout.columns, layout.widths)

        lines: list[str | None] = [self._border_line(layout)]
        for header in headers:
            lines.append(self._row_line(header, self._style.cell_header_format, layout))
            lines.append(self._border_line(layout))
        for row in rows:
            if _is_separator(row):
                lines.append(self._border_line(layout))
            else:
                lines.append(self._row_line(row, self._style.cell_row_format, layout))
        if rows:
            lines.append(self._border_line(layout))

        return [line for line in lines if line is not None]

    def _count_columns(self) -> int:
        counts = [_column_count(row) for row in [*self._headers, *self._rows] if not _is_separator(row)]
        return max(counts, default=0)

    def _build_rows(self, source: Sequence[Row], layout: _Layout) -> list[Row]:
        rows: list[Row] = [row if _is_separator(row) else list(row) for row in source]
        # row index -> line number -> continuation row
        continuations: dict[int, dict[int, list]] = {}

        row_key = 0
        while row_key < len(rows):
            if not _is_separator(rows[row_key]):
                rows = self._fill_next_rows(rows, row_key, layout)
                row = rows[row_key]
                for column, cell in enumerate(list(row)):
                    text = str(cell)
                    if "\n" not in text:
                        continue
                    for line_key, line in enumerate(text.split("\n")):
                        value: Any = TableCell(line, colspan=cell.colspan) if isinstance(cell, TableCell) else line
                        if line_key == 0:
                            row[column] = value
                            continue
                        extra = continuations.setdefault(row_key, {})
                        if line_key not in extra:
                            extra[line_key] = _blank_copy(row)
                        extra[line_key][column] = value
            row_key += 1

        built: list[Row] = []
        for row_key, row in enumerate(rows):
            if _is_separator(row):
                built.append(row)
                continue
            built.append(_fill_cells(row))
            for _, extra_row in sorted(continuations.get(row_key, {}).items()):
                built.append(_fill_cells(extra_row))
        return built

    def _fill_next_rows(self, rows: list[Row], line: int, layout: _Layout) -> list[Row]:
        """Push the lower parts of rowspan cells on row *line* into the rows below."""
        rows = list(rows)
        current = list(rows[line])
        rows[line] = current

        # row index -> column -> synthesized cell
        synthesized: dict[int, dict[int, TableCell]] = {}
        for column, cell in enumerate(current):
            if not isinstance(cell, TableCell) or cell.rowspan <= 1:
                continue

            text = str(cell)
            extra_lines = cell.rowspan - 1
            lines = [text]
            if "\n" in text:
                lines = text.split("\n")
                if len(lines) > extra_lines:
                    extra_lines = text.count("\n")
                current[column] = TableCell(lines[0], colspan=cell.colspan)

            for offset in range(1, extra_lines + 1):
                value = lines[offset] if offset < len(lines) else ""
                synthesized.setdefault(line + offset, {})[column] = TableCell(value, colspan=cell.colspan)

        for key in sorted(synthesized):
            cells = synthesized[key]
            target = rows[key] if key < len(rows) else None
            if isinstance(target, list) and _column_count(target) + _column_count(list(cells.values())) <= layout.columns:
                merged = list(target)
                for column in sorted(cells):
                    merged.insert(column, cells[column])
                rows[key] = merged
            else:
                filler = _blank_copy(rows[key - 1])
                for column, cell in cells.items():
                    if column >= len(filler):
                        filler.extend([""] * (column + 1 - len(filler)))
                    filler[column] = cell
                rows.insert(key, filler)

        return rows

    def _measure_columns(self, rows: Sequence[Row], layout: _Layout) -> list[int]:
        formatter = self._output.formatter
        padding = len(self._style.cell_row_content_format) - 2

        spread_rows: list[list] = []
        for row in rows:
            if _is_separator(row):
                continue
            spread = list(row)
            for index, cell in enumerate(row):
                if not isinstance(cell, TableCell):
                    continue
                text = formatter.remove_decoration(str(cell))
                if not text:
                    continue
                for position, chunk in enumerate(chunk_string(text, math.ceil(len(text) / cell.colspan))):
                    if index + position >= len(spread):
                        spread.extend([""] * (index + position + 1 - len(spread)))
                    spread[index + position] = chunk
            spread_rows.append(spread)

        widths: list[int] = []
        for column in range(layout.columns):
            lengths = [self._cell_width(row, column) for row in spread_rows]
            widths.append(max(lengths, default=0) + padding)
        return widths

    def _cell_width(self, row: list, column: int) -> int:
        cell_width = 0
        if column < len(row):
            cell_width = self._output.formatter.length_without_decoration(str(row[column]))
        return max(cell_width, self._column_widths.get(column, 0))

    def _row_columns(self, row: list, layout: _Layout) -> list[int]:
        spanned: set[int] = set()
        for key, cell in enumerate(row):
            if isinstance(cell, TableCell) and cell.colspan > 1:
                spanned.update(range(key + 1, key + cell.colspan))
        return [column for column in range(layout.columns) if column not in spanned]

    def _column_separator(self) -> str:
        return self._style.border_format % self._style.vertical_border_char

    def _border_line(self, layout: _Layout) -> str | None:
        style = self._style
        if not layout.columns:
            return None
        if not style.horizontal_border_char and not style.crossing_char:
            return None

        markup = style.crossing_char + "".join(
            style.horizontal_border_char * width + style.crossing_char for width in layout.widths
        )
        return style.border_format % markup

    def _row_line(self, row: list, cell_format: str, layout: _Layout) -> str | None:
        if not row:
            return None

        separator = self._column_separator()
        parts = [separator]
        for column in self._row_columns(row, layout):
            parts.append(self._render_cell(row, column, cell_format, layout))
            parts.append(separator)
        return "".join(parts)

    def _render_cell(self, row: list, column: int, cell_format: str, layout: _Layout) -> str:
        cell = row[column] if column < len(row) else ""
        text = str(cell)
        width = layout.widths[column]

        if isinstance(cell, TableCell) and cell.colspan > 1:
            separator_width = len(self._column_separator())
            for next_column in range(column + 1, min(column + cell.colspan, layout.columns)):
                width += separator_width + layout.widths[next_column]

        style = self.get_column_style(column)
        if isinstance(cell, TableSeparator):
            return style.border_format % (style.horizontal_border_char * width)

        width += len(text) - self._output.formatter.length_without_decoration(text)
        content = style.cell_row_content_format % text
        return cell_format % str_pad(content, width, style.padding_char, style.pad_type)
