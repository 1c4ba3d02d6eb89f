"""
Output formatters for the GS1 syntax engine.

The JSON summary lives in gs1_syntax.formatters.json_formatter; it depends on
the parser, which itself uses the HRI formatter exported here.
"""

from .hri import hri_line, hri_lines

__all__ = [
    "hri_line",
    "hri_lines",
]
