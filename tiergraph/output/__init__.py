"""Output formatters for validation and ranking results."""

from .json_out import JSONOutput
from .markdown import MarkdownOutput
from .terminal import TerminalOutput

__all__ = ["TerminalOutput", "MarkdownOutput", "JSONOutput"]
