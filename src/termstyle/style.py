"""Text styles: ANSI SGR code tables, the ``Style`` value type and the registry.

A style combines an optional foreground color, an optional background color
and a set of options. Applying it wraps text in a single "set" sequence and a
single "unset" sequence, e.g. ``\\x1b[32;1mOK\\x1b[39;22m``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Mapping

from termstyle.errors import InvalidStyleError, UndefinedStyleError


@dataclass(frozen=True)
class AnsiCode:
    """A pair of SGR parameters: one to switch an attribute on, one to switch it off."""

    set: int
    unset: int


# ---------------------------------------------------------------------------
# Code tables
# ---------------------------------------------------------------------------

FOREGROUND_COLORS: dict[str, AnsiCode] = {
    "black": AnsiCode(30, 39),
    "red": AnsiCode(31, 39),
    "green": AnsiCode(32, 39),
    "yellow": AnsiCode(33, 39),
    "blue": AnsiCode(34, 39),
    "magenta": AnsiCode(35, 39),
    "cyan": AnsiCode(36, 39),
    "white": AnsiCode(37, 39),
    "default": AnsiCode(39, 39),
}

BACKGROUND_COLORS: dict[str, AnsiCode] = {
    "black": AnsiCode(40, 49),
    "red": AnsiCode(41, 49),
    "green": AnsiCode(42, 49),
    "yellow": AnsiCode(43, 49),
    "blue": AnsiCode(44, 49),
    "magenta": AnsiCode(45, 49),
    "cyan": AnsiCode(46, 49),
    "white": AnsiCode(47, 49),
    "default": AnsiCode(49, 49),
}

OPTIONS: dict[str, AnsiCode] = {
    "bold": AnsiCode(1, 22),
    "underscore": AnsiCode(4, 24),
    "blink": AnsiCode(5, 25),
    "reverse": AnsiCode(7, 27),
    "dim": AnsiCode(2, 22),
    "conceal": AnsiCode(8, 28),
}


def _expected(table: Mapping[str, AnsiCode]) -> str:
    return ", ".join(table)


# ---------------------------------------------------------------------------
# Style
# ---------------------------------------------------------------------------


class Style:
    """A foreground/background/options combination.

    Styles compare equal when they render the same escape sequences, so two
    separately built but visually identical styles are interchangeable.
    """

    def __init__(
        self,
        foreground: str | None = None,
        background: str | None = None,
        options: Iterable[str] = (),
    ) -> None:
        self._foreground: AnsiCode | None = None
        self._background: AnsiCode | None = None
        self._options: list[AnsiCode] = []

        if foreground is not None:
            self.set_foreground(foreground)
        if background is not None:
            self.set_background(background)
        self.set_options(options)

    def set_foreground(self, color: str | None = None) -> None:
        if color is None:
            self._foreground = None
            return
        if color not in FOREGROUND_COLORS:
            raise InvalidStyleError(
                f'Invalid foreground color specified: "{color}". '
                f"Expected one of ({_expected(FOREGROUND_COLORS)})"
            )
        self._foreground = FOREGROUND_COLORS[color]

    def set_background(self, color: str | None = None) -> None:
        if color is None:
            self._background = None
            return
        if color not in BACKGROUND_COLORS:
            raise InvalidStyleError(
                f'Invalid background color specified: "{color}". '
                f"Expected one of ({_expected(BACKGROUND_COLORS)})"
            )
        self._background = BACKGROUND_COLORS[color]

    def set_option(self, option: str) -> None:
        code = self._option_code(option)
        if code not in self._options:
            self._options.append(code)

    def unset_option(self, option: str) -> None:
        code = self._option_code(option)
        self._options = [existing for existing in self._options if existing != code]

    def set_options(self, options: Iterable[str]) -> None:
        self._options = []
        for option in options:
            self.set_option(option)

    @staticmethod
    def _option_code(option: str) -> AnsiCode:
        if option not in OPTIONS:
            raise InvalidStyleError(
                f'Invalid option specified: "{option}". '
                f"Expected one of ({_expected(OPTIONS)})"
            )
        return OPTIONS[option]

    def codes(self) -> list[AnsiCode]:
        """Active codes in emission order: foreground, background, options."""
        codes: list[AnsiCode] = []
        if self._foreground is not None:
            codes.append(self._foreground)
        if self._background is not None:
            codes.append(self._background)
        codes.extend(self._options)
        return codes

    def apply(self, text: str) -> str:
        """Wrap *text* in this style's set/unset sequences."""
        codes = self.codes()
        if not codes:
            return text

        set_codes = ";".join(str(code.set) for code in codes)
        unset_codes = ";".join(str(code.unset) for code in codes)
        return f"\x1b[{set_codes}m{text}\x1b[{unset_codes}m"

    def copy(self) -> Style:
        clone = Style()
        clone._foreground = self._foreground
        clone._background = self._background
        clone._options = list(self._options)
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Style):
            return NotImplemented
        return self.apply("") == other.apply("")

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Style({self.apply('')!r})"


# ---------------------------------------------------------------------------
# Inline style specs: "fg=red;bg=blue;options=bold,underscore"
# ---------------------------------------------------------------------------

_CLAUSE_RE = re.compile(r"([^=]+)=([^;]+)(;|$)")
_OPTION_LIST_RE = re.compile(r"([^,;]+)")


def parse_inline_style(spec: str) -> Style:
    """Build a :class:`Style` from an inline ``key=value;...`` spec.

    Raises :class:`InvalidStyleError` for unknown keys, colors or options and
    for specs containing no ``key=value`` clause at all.
    """
    style = Style()
    matched = False

    for match in _CLAUSE_RE.finditer(spec):
        matched = True
        key, value = match.group(1), match.group(2)
        if key == "fg":
            style.set_foreground(value)
        elif key == "bg":
            style.set_background(value)
        elif key == "options":
            for option in _OPTION_LIST_RE.findall(value):
                style.set_option(option)
        else:
            raise InvalidStyleError(f'Unknown style key "{key}" in "{spec}"')

    if not matched:
        raise InvalidStyleError(f'"{spec}" is neither a style name nor an inline style')
    return style


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


def default_styles() -> dict[str, Style]:
    """The named styles every registry starts with."""
    return {
        "error": Style("white", "red"),
        "info": Style("green"),
        "comment": Style("yellow"),
        "question": Style("black", "cyan"),
    }


class StyleRegistry:
    """Named styles owned by one formatter. Names are case-insensitive."""

    def __init__(self, styles: Mapping[str, Style] | None = None) -> None:
        self._styles: dict[str, Style] = {}
        for name, style in default_styles().items():
            self.set(name, style)
        for name, style in (styles or {}).items():
            self.set(name, style)

    def set(self, name: str, style: Style) -> None:
        self._styles[name.lower()] = style

    def has(self, name: str) -> bool:
        return name.lower() in self._styles

    def get(self, name: str) -> Style:
        try:
            return self._styles[name.lower()]
        except KeyError:
            raise UndefinedStyleError(f"Undefined style: {name}") from None

    def names(self) -> list[str]:
        return list(self._styles)

    def resolve(self, spec: str) -> Style:
        """Return the registered style called *spec*, or parse it as an inline style."""
        if self.has(spec):
            return self.get(spec)
        return parse_inline_style(spec)

    def copy(self) -> StyleRegistry:
        clone = StyleRegistry()
        clone._styles = dict(self._styles)
        return clone
