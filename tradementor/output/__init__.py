"""Output formatting and export utilities."""

from tradementor.output.exporters import JSONExporter
from tradementor.output.formatters import ResultFormatter

__all__ = [
    "JSONExporter",
    "ResultFormatter",
]
