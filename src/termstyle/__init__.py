"""termstyle: styled terminal output from inline markup."""

# Components (re-exported from components package)
from termstyle.components import (
    BlockFormatter,
    ProgressBar,
    Questionnaire,
    Table,
    TableCell,
    TableSeparator,
    TableStyle,
    TableStyleRegistry,
)

# High-level style
from termstyle.console_style import ConsoleStyle

# Errors
from termstyle.errors import (
    InvalidRowError,
    InvalidStyleError,
    LayoutError,
    NestingError,
    OutputWriteError,
    PlaceholderUnavailableError,
    ProgressNotStartedError,
    TermStyleError,
    UndefinedStyleError,
)

# Markup formatting
from termstyle.formatter import MarkupFormatter

# Input
from termstyle.input import ConsoleInput, InputInterface

# Output sinks
from termstyle.output import (
    BufferedOutput,
    ConsoleOutput,
    Output,
    OutputInterface,
    OutputType,
    StreamOutput,
    Verbosity,
)

# Settings
from termstyle.settings import ConsoleSettings, load_settings

# Styles
from termstyle.style import Style, StyleRegistry, parse_inline_style
from termstyle.style_stack import StyleStack

# Utilities
from termstyle.utils import PadType, strip_ansi, wordwrap

__all__ = [
    # Components
    "BlockFormatter",
    "ProgressBar",
    "Questionnaire",
    "Table",
    "TableCell",
    "TableSeparator",
    "TableStyle",
    "TableStyleRegistry",
    # High-level style
    "ConsoleStyle",
    # Errors
    "InvalidRowError",
    "InvalidStyleError",
    "LayoutError",
    "NestingError",
    "OutputWriteError",
    "PlaceholderUnavailableError",
    "ProgressNotStartedError",
    "TermStyleError",
    "UndefinedStyleError",
    # Markup formatting
    "MarkupFormatter",
    # Input
    "ConsoleInput",
    "InputInterface",
    # Output sinks
    "BufferedOutput",
    "ConsoleOutput",
    "Output",
    "OutputInterface",
    "OutputType",
    "StreamOutput",
    "Verbosity",
    # Settings
    "ConsoleSettings",
    "load_settings",
    # Styles
    "Style",
    "StyleRegistry",
    "StyleStack",
    "parse_inline_style",
    # Utilities
    "PadType",
    "strip_ansi",
    "wordwrap",
]
