"""Exporters for converting graphs and query results to output formats."""

from .mermaid_exporter import to_mermaid
from .ascii_exporter import to_ascii, relationships_to_ascii, summary_to_ascii
from .json_exporter import to_json, result_to_json

__all__ = [
    "to_mermaid",
    "to_ascii",
    "relationships_to_ascii",
    "summary_to_ascii",
    "to_json",
    "result_to_json",
]
