"""Line-based interactive input."""

from __future__ import annotations

import asyncio
import getpass
from typing import Protocol, TextIO


class InputInterface(Protocol):
    """An input source that answers one prompt at a time."""

    @property
    def interactive(self) -> bool: ...

    async def read_line(self, prompt: str = "", hidden: bool = False) -> str: ...


class ConsoleInput:
    """Reads answers from the terminal, or from *stream* when one is given.

    Terminal reads run in a worker thread so the event loop stays free.
    Stream reads ignore *prompt* and *hidden*. Either way the end of input
    raises :class:`EOFError`.
    """

    def __init__(self, stream: TextIO | None = None, interactive: bool = True) -> None:
        self._stream = stream
        self._interactive = interactive

    @property
    def interactive(self) -> bool:
        return self._interactive

    @interactive.setter
    def interactive(self, interactive: bool) -> None:
        self._interactive = interactive

    async def read_line(self, prompt: str = "", hidden: bool = False) -> str:
        if self._stream is not None:
            line = self._stream.readline()
            if not line:
                raise EOFError("End of input reached")
            return line.rstrip("\r\n")

        if hidden:
            return await asyncio.to_thread(getpass.getpass, prompt)
        return await asyncio.to_thread(input, prompt)
