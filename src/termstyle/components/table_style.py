"""Table appearance: border characters, cell formats and padding."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Mapping

from termstyle.errors import UndefinedStyleError
from termstyle.utils import PadType


@dataclass
class TableStyle:
    """How a :class:`~termstyle.components.table.Table` draws borders and cells.

    The ``*_format`` fields are ``%s`` templates; cell formats may contain
    markup (the default header format is ``<info>%s</info>``).
    """

    padding_char: str = " "
    horizontal_border_char: str = "-"
    vertical_border_char: str = "|"
    crossing_char: str = "+"
    cell_header_format: str = "<info>%s</info>"
    cell_row_format: str = "%s"
    cell_row_content_format: str = " %s "
    border_format: str = "%s"
    pad_type: PadType = PadType.RIGHT

    def __post_init__(self) -> None:
        if not self.padding_char:
            raise ValueError("The padding char must not be empty")
        self.pad_type = PadType(self.pad_type)

    def clone(self) -> TableStyle:
        return dataclasses.replace(self)


def default_table_styles() -> dict[str, TableStyle]:
    return {
        "default": TableStyle(),
        "borderless": TableStyle(
            horizontal_border_char="=",
            vertical_border_char=" ",
            crossing_char=" ",
        ),
        "compact": TableStyle(
            horizontal_border_char="",
            vertical_border_char=" ",
            crossing_char="",
            cell_row_content_format="%s",
        ),
        "style-guide": TableStyle(
            horizontal_border_char="-",
            vertical_border_char=" ",
            crossing_char=" ",
            cell_header_format="%s",
        ),
    }


class TableStyleRegistry:
    """Named table styles, seeded with ``default``, ``borderless``, ``compact`` and ``style-guide``."""

    def __init__(self, styles: Mapping[str, TableStyle] | None = None) -> None:
        self._styles = default_table_styles()
        self._styles.update(styles or {})

    def set(self, name: str, style: TableStyle) -> None:
        self._styles[name] = style

    def has(self, name: str) -> bool:
        return name in self._styles

    def get(self, name: str) -> TableStyle:
        try:
            return self._styles[name]
        except KeyError:
            raise UndefinedStyleError(f'Style "{name}" is not defined.') from None

    def names(self) -> list[str]:
        return list(self._styles)
