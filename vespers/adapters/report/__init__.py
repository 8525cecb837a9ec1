"""Report adapters (stdout, markdown)."""

from .markdown import MarkdownReportAdapter
from .stdout import StdoutReportAdapter

__all__ = ["MarkdownReportAdapter", "StdoutReportAdapter"]
