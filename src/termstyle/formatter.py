"""Markup formatter: turns ``<tag>text</tag>`` markup into ANSI-styled text.

Tags are either registered style names (``<info>``, ``<comment>``) or inline
specs (``<fg=red;bg=white;options=bold>``). ``</>`` closes the innermost open
style; ``</name>`` closes the innermost style rendering like ``name``. A
literal ``<`` is written as ``\\<``.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping

from termstyle.errors import InvalidStyleError
from termstyle.style import Style, StyleRegistry
from termstyle.style_stack import StyleStack
from termstyle.utils import strip_ansi

logger = logging.getLogger(__name__)

_TAG_NAME = r"[a-z][a-z0-9,_=;-]*"
_TAGS_RE = re.compile(rf"<(({_TAG_NAME})|/({_TAG_NAME})?)>", re.IGNORECASE)
# Stands in for a trailing backslash so it can't escape the next tag.
_BACKSLASH_SENTINEL = "\0"


def escape(text: str) -> str:
    """Escape every ``<`` in *text* so it is printed literally."""
    text = re.sub(r"([^\\]?)<", r"\1\\<", text)
    return escape_trailing_backslash(text)


def escape_trailing_backslash(text: str) -> str:
    """Replace trailing backslashes with a sentinel restored by :meth:`MarkupFormatter.format`.

    NUL characters already in *text* are dropped so every sentinel left in
    the result stands for one backslash.
    """
    if text.endswith("\\"):
        stripped = text.rstrip("\\")
        count = len(text) - len(stripped)
        text = stripped.replace(_BACKSLASH_SENTINEL, "") + _BACKSLASH_SENTINEL * count
    return text


class MarkupFormatter:
    """Formats markup into decorated (ANSI) or plain text.

    Each formatter owns a :class:`StyleRegistry` and a :class:`StyleStack`.
    The stack is not reset between :meth:`format` calls, so a tag left open
    by one call still applies to the next.
    """

    escape = staticmethod(escape)
    escape_trailing_backslash = staticmethod(escape_trailing_backslash)

    def __init__(
        self,
        decorated: bool = False,
        styles: Mapping[str, Style] | None = None,
        registry: StyleRegistry | None = None,
    ) -> None:
        self._decorated = bool(decorated)
        self._registry = registry.copy() if registry is not None else StyleRegistry()
        for name, style in (styles or {}).items():
            self._registry.set(name, style)
        self._style_stack = StyleStack()

    # -- configuration ------------------------------------------------------

    @property
    def decorated(self) -> bool:
        return self._decorated

    @decorated.setter
    def decorated(self, decorated: bool) -> None:
        self._decorated = bool(decorated)

    @property
    def registry(self) -> StyleRegistry:
        return self._registry

    @property
    def style_stack(self) -> StyleStack:
        return self._style_stack

    def set_style(self, name: str, style: Style) -> None:
        self._registry.set(name, style)

    def has_style(self, name: str) -> bool:
        return self._registry.has(name)

    def get_style(self, name: str) -> Style:
        return self._registry.get(name)

    def clone(self) -> MarkupFormatter:
        """A formatter with the same flag and styles but its own stack."""
        return MarkupFormatter(self._decorated, registry=self._registry)

    # -- formatting ---------------------------------------------------------

    def format(self, message: str) -> str:
        """Render *message*, applying or stripping its markup."""
        message = str(message)
        output: list[str] = []
        offset = 0

        for match in _TAGS_RE.finditer(message):
            text = match.group(0)
            pos = match.start()
            if pos != 0 and message[pos - 1] == "\\":
                continue

            output.append(self._apply_current_style(message[offset:pos]))
            offset = pos + len(text)

            is_open = text[1] != "/"
            tag = match.group(2) if is_open else (match.group(3) or "")

            if not is_open and not tag:
                self._style_stack.pop()
                continue

            style = self._create_style_from_string(tag.lower())
            if style is None:
                output.append(self._apply_current_style(text))
            elif is_open:
                self._style_stack.push(style)
            else:
                self._style_stack.pop(style)

        output.append(self._apply_current_style(message[offset:]))
        result = "".join(output).replace("\\<", "<")
        return result.replace(_BACKSLASH_SENTINEL, "\\")

    def remove_decoration(self, text: str) -> str:
        """Return *text* as it would appear on screen: no tags, no escape codes."""
        was_decorated = self._decorated
        self._decorated = False
        try:
            plain = self.format(text)
        finally:
            self._decorated = was_decorated
        return strip_ansi(plain)

    def length_without_decoration(self, text: str) -> int:
        """Visible character count of *text*."""
        return len(self.remove_decoration(text))

    # -- internals ----------------------------------------------------------

    def _create_style_from_string(self, spec: str) -> Style | None:
        if self._registry.has(spec):
            return self._registry.get(spec)
        try:
            return self._registry.resolve(spec)
        except InvalidStyleError as exc:
            logger.debug("Treating <%s> as literal text: %s", spec, exc)
            return None

    def _apply_current_style(self, text: str) -> str:
        if self._decorated and text:
            return self._style_stack.current().apply(text)
        return text
