"""Deck schema package - typed models for the two KPI decks.

Provides the contract between the deck definitions, the PPTX builder,
and the QA validator:

- models.py: Core dataclasses (DeckSchema, SlideSchema, SlideElement, DeckTheme, etc.)
- design_system.py: Palette checks, corner radii, speaker-note source blocks
- elements.py: Shorthand constructors for slide elements
- references.py: External documentation links cited in speaker notes
- technical_deck.py: The 9-slide Technical Implementation deck
- business_deck.py: The 6-slide Business KPIs & Insights deck
- loader.py: YAML serialization/deserialization
"""

from .business_deck import build_business_deck_schema
from .design_system import (
    corner_adjustment,
    format_sources_note,
    is_palette_color,
    normalize_hex,
    palette_hexes,
    parse_sources_note,
)
from .loader import load_schema, load_theme, save_schema, save_theme
from .models import (
    CodeSnippet,
    DeckSchema,
    DeckTheme,
    ElementType,
    EntityStyle,
    FlowStep,
    Palette,
    Position,
    SlideElement,
    SlideSchema,
    SlideType,
    Source,
    Typography,
)
from .technical_deck import build_technical_deck_schema

__all__ = [
    # Models
    "CodeSnippet",
    "DeckSchema",
    "DeckTheme",
    "ElementType",
    "EntityStyle",
    "FlowStep",
    "Palette",
    "Position",
    "SlideElement",
    "SlideSchema",
    "SlideType",
    "Source",
    "Typography",
    # Deck builders
    "build_business_deck_schema",
    "build_technical_deck_schema",
    # Loader
    "load_schema",
    "load_theme",
    "save_schema",
    "save_theme",
    # Design system
    "corner_adjustment",
    "format_sources_note",
    "is_palette_color",
    "normalize_hex",
    "palette_hexes",
    "parse_sources_note",
]
