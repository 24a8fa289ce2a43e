"""Tests for termstyle.components.table and table_style."""

from __future__ import annotations

import pytest

from termstyle.components.table import Table, TableCell, TableSeparator
from termstyle.components.table_style import TableStyle, TableStyleRegistry
from termstyle.errors import InvalidRowError, UndefinedStyleError
from termstyle.output import BufferedOutput
from termstyle.utils import PadType


def _render(table: Table, output: BufferedOutput) -> list[str]:
    table.render()
    return output.fetch().splitlines()


# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------


class TestTableCell:
    """Cell values and spans."""

    def test_defaults(self) -> None:
        cell = TableCell("x")
        assert (cell.value, cell.rowspan, cell.colspan) == ("x", 1, 1)
        assert str(cell) == "x"

    def test_value_is_stringified(self) -> None:
        assert TableCell(42).value == "42"

    @pytest.mark.parametrize(("rowspan", "colspan"), [(0, 1), (1, 0), (-1, 2)])
    def test_spans_must_be_positive(self, rowspan: int, colspan: int) -> None:
        with pytest.raises(ValueError):
            TableCell("x", rowspan=rowspan, colspan=colspan)

    def test_separator_is_a_cell(self) -> None:
        assert isinstance(TableSeparator(), TableCell)


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRender:
    """Render borders, spans and multi-line cells."""

    def test_simple_table(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_headers(["A", "B"])
        table.set_rows([["1", "2"]])
        assert _render(table, output) == [
            "+---+---+",
            "| A | B |",
            "+---+---+",
            "| 1 | 2 |",
            "+---+---+",
        ]

    def test_header_markup_is_applied(self, decorated_output: BufferedOutput) -> None:
        table = Table(decorated_output)
        table.set_headers(["A"])
        table.render()
        assert "|\x1b[32m A \x1b[39m|" in decorated_output.fetch()

    def test_headers_only(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_headers(["Name"])
        assert _render(table, output) == ["+------+", "| Name |", "+------+"]

    def test_empty_table_renders_nothing(self, output: BufferedOutput) -> None:
        assert Table(output).render_lines() == []

    def test_short_rows_are_padded(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_headers(["A", "B"])
        table.add_row(["only"])
        assert _render(table, output)[3] == "| only |   |"

    def test_values_are_stringified(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.add_row([1, None])
        assert _render(table, output)[1] == "| 1 | None |"

    def test_colspan(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_headers(["A", "B", "C"])
        table.set_rows([[TableCell("wide", colspan=2), "c"], ["1", "2", "3"]])
        assert _render(table, output) == [
            "+----+----+---+",
            "| A  | B  | C |",
            "+----+----+---+",
            "| wide    | c |",
            "| 1  | 2  | 3 |",
            "+----+----+---+",
        ]

    def test_rowspan(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_rows([[TableCell("span", rowspan=2), "a"], ["b"]])
        assert _render(table, output) == [
            "+------+---+",
            "| span | a |",
            "|      | b |",
            "+------+---+",
        ]

    def test_multiline_cell(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_rows([["foo\nbar", "x"]])
        assert _render(table, output) == [
            "+-----+---+",
            "| foo | x |",
            "| bar |   |",
            "+-----+---+",
        ]

    def test_multiline_rowspan_cell_inserts_extra_rows(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_rows([[TableCell("a\nb\nc", rowspan=2), "x"], ["y"]])
        assert _render(table, output) == [
            "+---+---+",
            "| a | x |",
            "| b | y |",
            "| c |   |",
            "+---+---+",
        ]

    def test_rowspan_and_colspan_on_one_cell(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_rows([[TableCell("ab", rowspan=2, colspan=2), "c"], ["d"], ["e", "f", "g"]])
        assert _render(table, output) == [
            "+---+---+---+",
            "| ab    | c |",
            "|       | d |",
            "| e | f | g |",
            "+---+---+---+",
        ]

    def test_rowspan_into_a_full_row_inserts_a_row(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_rows([[TableCell("span", rowspan=2), "a"], ["b", "c"]])
        assert _render(table, output) == [
            "+------+---+",
            "| span | a |",
            "|      |   |",
            "| b    | c |",
            "+------+---+",
        ]

    def test_rowspan_into_a_separator_inserts_a_row(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_rows([[TableCell("span", rowspan=2), "a"], TableSeparator(), ["b", "c"]])
        assert _render(table, output) == [
            "+------+---+",
            "| span | a |",
            "|      |   |",
            "+------+---+",
            "| b    | c |",
            "+------+---+",
        ]

    def test_separator_row(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_headers(["H"])
        table.set_rows([["1"], TableSeparator(), ["2"]])
        lines = _render(table, output)
        assert lines == ["+---+", "| H |", "+---+", "| 1 |", "+---+", "| 2 |", "+---+"]

    def test_separator_cell_spanning_columns(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_rows([["a", "b"], [TableSeparator(colspan=2)]])
        assert _render(table, output)[2] == "|-------|"

    def test_borders_and_widths_of_mixed_table(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_headers(["Name", "Qty"])
        table.set_rows(
            [
                ["apple", "3"],
                TableSeparator(),
                [TableCell("both", colspan=2)],
                [TableCell("x\ny", rowspan=2), "1"],
                ["2"],
            ]
        )
        lines = _render(table, output)
        borders = [line for line in lines if line.startswith("+")]
        # top, below the header, one separator, bottom
        assert len(borders) == 4
        assert len(lines) == 9
        assert {len(line) for line in lines} == {15}
        assert "| both" + " " * 8 + "|" in lines
        assert lines[-3:-1] == ["| x     | 1   |", "| y     | 2   |"]

    def test_render_lines_keep_markup(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_headers(["A"])
        assert table.render_lines()[1] == "|<info> A </info>|"
        assert output.fetch() == ""

    def test_markup_does_not_count_towards_width(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_rows([["<comment>ab</comment>", "c"]])
        assert _render(table, output) == ["+----+---+", "| ab | c |", "+----+---+"]

    def test_double_angle_brackets_in_a_cell(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.add_row(["1 << 3"])
        assert _render(table, output) == ["+--------+", "| 1 << 3 |", "+--------+"]


class TestColumns:
    """Column widths and per-column styles."""

    def test_minimum_column_width(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_headers(["A", "B"])
        table.set_column_width(0, 5)
        assert _render(table, output)[:2] == ["+-------+---+", "| A     | B |"]

    def test_column_width_never_truncates(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_column_widths([2])
        table.add_row(["longer"])
        assert _render(table, output)[1] == "| longer |"

    def test_set_column_widths_skips_none(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_column_widths([None, 3])
        table.add_row(["a", "b"])
        assert _render(table, output)[1] == "| a | b   |"

    def test_column_style(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_headers(["Name", "Qty"])
        table.add_row(["apple", "3"])
        table.set_column_style(1, TableStyle(pad_type=PadType.LEFT))
        assert _render(table, output)[3] == "| apple |   3 |"

    def test_get_column_style_falls_back_to_table_style(self, output: BufferedOutput) -> None:
        table = Table(output)
        assert table.get_column_style(3) is table.style


class TestStyles:
    """Built-in and custom table styles."""

    def test_compact(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_style("compact")
        table.set_headers(["A", "B"])
        table.add_row(["1", "2"])
        assert _render(table, output) == [" A B ", " 1 2 "]

    def test_borderless(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_style("borderless")
        table.set_headers(["A", "B"])
        table.add_row(["1", "2"])
        lines = _render(table, output)
        assert lines[0] == " === === "
        assert lines[1] == "  A   B  "

    def test_style_guide(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_style("style-guide")
        table.set_headers(["A", "B"])
        table.add_row(["1", "2"])
        assert _render(table, output) == [" --- --- ", "  A   B  ", " --- --- ", "  1   2  ", " --- --- "]

    def test_style_instance(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_style(TableStyle(horizontal_border_char="~", crossing_char="*"))
        table.add_row(["x"])
        assert _render(table, output)[0] == "*~~~*"

    def test_unknown_style(self, output: BufferedOutput) -> None:
        with pytest.raises(UndefinedStyleError, match='Style "fancy" is not defined.'):
            Table(output).set_style("fancy")

    def test_custom_registry(self, output: BufferedOutput) -> None:
        registry = TableStyleRegistry({"dots": TableStyle(horizontal_border_char=".")})
        table = Table(output, registry)
        table.set_style("dots")
        table.add_row(["x"])
        assert _render(table, output)[0] == "+...+"


class TestRows:
    """Add, replace and validate rows."""

    def test_invalid_row(self, output: BufferedOutput) -> None:
        with pytest.raises(InvalidRowError):
            Table(output).add_row("not a row")

    def test_tuples_are_accepted(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.add_row(("a", "b"))
        assert _render(table, output)[1] == "| a | b |"

    def test_set_row_replaces_and_appends(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.add_row(["a"])
        table.set_row(0, ["b"])
        table.set_row(1, ["c"])
        assert _render(table, output)[1:3] == ["| b |", "| c |"]

    def test_set_rows_replaces_all(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.add_row(["old"])
        table.set_rows([["new"]])
        assert _render(table, output)[1] == "| new |"

    def test_multiple_header_rows(self, output: BufferedOutput) -> None:
        table = Table(output)
        table.set_headers([["A"], ["B"]])
        assert _render(table, output) == ["+---+", "| A |", "+---+", "| B |", "+---+"]

    def test_invalid_header_row(self, output: BufferedOutput) -> None:
        with pytest.raises(InvalidRowError):
            Table(output).set_headers([["A"], 5])

    def test_separator_header_row_is_rejected(self, output: BufferedOutput) -> None:
        with pytest.raises(InvalidRowError, match="header row"):
            Table(output).set_headers([["A"], TableSeparator()])

    def test_lone_separator_header_is_rejected(self, output: BufferedOutput) -> None:
        with pytest.raises(InvalidRowError):
            Table(output).set_headers([TableSeparator()])


class TestTableStyle:
    """Table style fields and registry."""

    def test_empty_padding_char_rejected(self) -> None:
        with pytest.raises(ValueError):
            TableStyle(padding_char="")

    def test_pad_type_coerced_from_string(self) -> None:
        assert TableStyle(pad_type="left").pad_type is PadType.LEFT

    def test_clone_is_independent(self) -> None:
        style = TableStyle()
        clone = style.clone()
        clone.cell_header_format = "%s"
        assert style.cell_header_format == "<info>%s</info>"

    def test_registry_defaults(self) -> None:
        registry = TableStyleRegistry()
        assert registry.names() == ["default", "borderless", "compact", "style-guide"]
        assert registry.has("compact")
        assert not registry.has("symfony")
