"""QA validation package for the KPI decks.

Validates generated PPTX output against deck schemas - checks slide
count, dimensions, titles, palette colours, pictures, speaker-note
sources, and element text.
"""

from .validator import (
    Issue,
    QAResult,
    QAValidator,
    slide_texts,
    validate_deck,
)

__all__ = [
    "Issue",
    "QAResult",
    "QAValidator",
    "slide_texts",
    "validate_deck",
]
