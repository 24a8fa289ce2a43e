"""Nested style scopes used while parsing markup."""

from __future__ import annotations

from termstyle.errors import NestingError
from termstyle.style import Style


class StyleStack:
    """An ordered list of open styles, outermost first.

    Closing by reference matches on rendered escape codes rather than object
    identity, and drops every style opened after the match.
    """

    def __init__(self, empty_style: Style | None = None) -> None:
        self._empty_style = empty_style or Style()
        self._styles: list[Style] = []

    def reset(self) -> None:
        self._styles = []

    def push(self, style: Style) -> None:
        self._styles.append(style)

    def pop(self, style: Style | None = None) -> Style:
        """Close the top style, or the topmost style rendering like *style*.

        Raises :class:`NestingError` when *style* is given and nothing on the
        stack matches it.
        """
        if style is None:
            if not self._styles:
                return self._empty_style
            return self._styles.pop()

        target = style.apply("")
        for index in range(len(self._styles) - 1, -1, -1):
            stacked = self._styles[index]
            if stacked.apply("") == target:
                self._styles = self._styles[:index]
                return stacked

        raise NestingError("Incorrectly nested style tag found.")

    def current(self) -> Style:
        if not self._styles:
            return self._empty_style
        return self._styles[-1]

    @property
    def empty_style(self) -> Style:
        return self._empty_style

    @empty_style.setter
    def empty_style(self, style: Style) -> None:
        self._empty_style = style

    def __len__(self) -> int:
        return len(self._styles)
