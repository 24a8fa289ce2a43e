"""Interactive questions: free text, hidden text, yes/no and choice lists."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Callable, Mapping, Union

from termstyle.input import InputInterface

if TYPE_CHECKING:
    from termstyle.console_style import ConsoleStyle

Validator = Callable[[str], bool]
ErrorMessage = Union[str, Callable[[str], str]]

PROMPT = " > "
_TRUTHY_RE = re.compile(r"^y", re.IGNORECASE)


def is_filled(value: str) -> bool:
    return bool(value.strip())


class Questionnaire:
    """Asks questions through a :class:`ConsoleStyle` and reads answers from *input*."""

    def __init__(self, style: ConsoleStyle, input: InputInterface) -> None:
        self._style = style
        self._input = input

    async def _do_ask(
        self,
        question: str,
        validator: Validator | None = None,
        hidden: bool = False,
        error_message: ErrorMessage = "Invalid value.",
    ) -> str:
        """Ask until *validator* accepts the answer, showing an error block after each rejection."""
        while True:
            self._style.writeln(question)
            self._style.write(PROMPT)
            value = await self._input.read_line("", hidden)
            self._style.new_line()

            if validator is None or validator(value):
                return value

            message = error_message(value) if callable(error_message) else error_message
            self._style.error(message)

    async def ask(self, question: str, default: str | None = None, validator: Validator | None = None) -> str:
        formatted = f" <fg=green>{question}</>"
        if default is not None:
            formatted += f" [<fg=yellow>{default}</>]"
        formatted += ":"

        if validator is None and default is None:
            validator = is_filled
        value = await self._do_ask(formatted, validator, error_message="A value is required.")
        if default is not None and not is_filled(value):
            return default
        return value

    async def ask_hidden(self, question: str, validator: Validator | None = None) -> str:
        return await self._do_ask(
            f" <fg=green>{question}</>:",
            validator or is_filled,
            hidden=True,
            error_message="A value is required.",
        )

    async def confirm(self, question: str, default: bool = True) -> bool:
        answer = "yes" if default else "no"
        value = await self._do_ask(f" <fg=green>{question} (yes/no)</> [<fg=yellow>{answer}</>]")
        if not is_filled(value):
            return default
        return bool(_TRUTHY_RE.match(value.strip()))

    async def choice(self, question: str, choices: Mapping[str, str], default: str | None = None) -> str:
        """Ask for one of *choices* (key -> label) and return the chosen key.

        *default* may be given as a key or as a label.
        """
        keys = {str(key): label for key, label in choices.items()}
        default_key: str | None = None
        if default is not None:
            labels = {label: key for key, label in keys.items()}
            if default in keys:
                default_key = default
            elif default in labels:
                default_key = labels[default]
            else:
                expected = ", ".join(f'"{label}"' for label in labels)
                raise ValueError(f'Invalid default value "{default}", must be one of: {expected}')

        lines = [f" <fg=green>{question}</>" + (f" [<fg=yellow>{default}</>]" if default is not None else "") + ":"]
        lines.extend(f"  [<fg=yellow>{key}</>] {label}" for key, label in keys.items())

        def validator(value: str) -> bool:
            if is_filled(value):
                return value in keys
            return default_key is not None

        value = await self._do_ask(
            "\n".join(lines),
            validator,
            error_message=lambda value: f'Value "{value}" is invalid.',
        )
        if default_key is not None and not is_filled(value):
            return default_key
        return value
