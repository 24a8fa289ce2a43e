"""Tests for termstyle.components.block."""

from __future__ import annotations

from termstyle.components.block import BlockFormatter
from termstyle.formatter import MarkupFormatter


def _blocks(line_length: int, decorated: bool = False) -> BlockFormatter:
    return BlockFormatter(MarkupFormatter(decorated=decorated), line_length)


class TestCreateBlock:
    """Build padded, labelled and styled message blocks."""

    def test_labelled_styled_line(self) -> None:
        lines = _blocks(20).create_block("line one", type="NOTE", style="fg=yellow", prefix=" ! ")
        assert lines == ["<fg=yellow> ! [NOTE] line one  </>"]

    def test_wrapped_lines_are_indented_under_the_label(self) -> None:
        lines = _blocks(12).create_block("aaa bbb ccc", type="OK")
        assert lines == [" [OK] aaa   ", "      bbb   ", "      ccc   "]

    def test_every_line_has_full_width(self) -> None:
        formatter = MarkupFormatter()
        lines = BlockFormatter(formatter, 30).create_block("a fairly long message that wraps", type="WARNING")
        assert len(lines) > 1
        assert all(formatter.length_without_decoration(line) == 30 for line in lines)

    def test_messages_are_separated_by_a_blank_line(self) -> None:
        assert _blocks(5).create_block(["a", "b"]) == [" a   ", "     ", " b   "]

    def test_padding_when_decorated(self) -> None:
        lines = _blocks(5, decorated=True).create_block("x", style="error", padding=True)
        assert lines == ["<error>     </>", "<error> x   </>", "<error>     </>"]

    def test_label_goes_on_first_content_line_when_padded(self) -> None:
        lines = _blocks(12).create_block("hi", type="OK", padding=True, decorated=True)
        assert lines == ["            ", " [OK] hi    ", "            "]

    def test_no_padding_when_undecorated(self) -> None:
        assert _blocks(5).create_block("x", padding=True) == [" x   "]

    def test_escape(self) -> None:
        lines = _blocks(6).create_block("<b>", escape=True)
        assert lines == [" \\<b>  "]
        assert MarkupFormatter().format(lines[0]) == " <b>  "

    def test_markup_in_prefix_does_not_count(self) -> None:
        lines = _blocks(10).create_block("hi", prefix="<fg=default;bg=default> // </>")
        assert lines == ["<fg=default;bg=default> // </>hi    "]

    def test_line_length_can_change(self) -> None:
        blocks = _blocks(5)
        blocks.line_length = 8
        assert blocks.create_block("x") == [" x      "]

    def test_escaped_trailing_backslash_survives_padding(self) -> None:
        formatter = MarkupFormatter()
        lines = BlockFormatter(formatter, 12).create_block("path\\", escape=True)
        assert [formatter.format(line) for line in lines] == [" path\\" + " " * 6]

    def test_double_angle_brackets_are_literal(self) -> None:
        formatter = MarkupFormatter()
        lines = BlockFormatter(formatter, 12).create_block("x << y", prefix=" // ")
        assert [formatter.format(line) for line in lines] == [" // x << y  "]
