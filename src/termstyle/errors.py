"""Exception hierarchy for termstyle.

Every error derives from :class:`TermStyleError` and from the closest
builtin exception, so callers may catch either.
"""

from __future__ import annotations


class TermStyleError(Exception):
    """Base class for all termstyle errors."""


class InvalidStyleError(TermStyleError, ValueError):
    """An inline style names an unknown color, option or key."""


class UndefinedStyleError(TermStyleError, LookupError):
    """A named text or table style was requested but never registered."""


class NestingError(TermStyleError, ValueError):
    """A closing tag does not match any open style."""


class InvalidRowError(TermStyleError, TypeError):
    """A table row is neither a sequence of cells nor a separator."""


class LayoutError(TermStyleError, ValueError):
    """Table layout could not be computed for a spanning cell."""


class PlaceholderUnavailableError(TermStyleError, RuntimeError):
    """A progress placeholder needs a maximum step count that is not set."""


class ProgressNotStartedError(TermStyleError, RuntimeError):
    """The progress bar was operated before it was started."""


class OutputWriteError(TermStyleError, OSError):
    """The underlying stream refused a write."""
