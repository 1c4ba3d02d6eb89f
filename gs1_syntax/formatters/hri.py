"""
Human-readable interpretation (HRI) of GS1 data.
"""

from __future__ import annotations

from typing import List

from ..core.element_rules import ElementData


def hri_line(element: ElementData, include_title: bool = False) -> str:
    """'(AI) value' or 'TITLE (AI) value'."""
    line = f"({element.ai}) {element.value}"
    if include_title and element.title:
        line = f"{element.title} {line}"
    return line


def hri_lines(elements: List[ElementData], include_titles: bool = False) -> List[str]:
    return [hri_line(e, include_titles) for e in elements]
