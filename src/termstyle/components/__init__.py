"""Renderers built on the markup formatter."""

from termstyle.components.block import BlockFormatter
from termstyle.components.progress_bar import ProgressBar
from termstyle.components.questionnaire import Questionnaire
from termstyle.components.table import Table, TableCell, TableSeparator
from termstyle.components.table_style import TableStyle, TableStyleRegistry

__all__ = [
    "BlockFormatter",
    "ProgressBar",
    "Questionnaire",
    "Table",
    "TableCell",
    "TableSeparator",
    "TableStyle",
    "TableStyleRegistry",
]
