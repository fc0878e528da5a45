"""Presentation generator package - PPTX builder engine.

Consumes a DeckSchema and an image catalog to produce PowerPoint files.

Modules:
    deck_builder: Schema-driven deck assembly
    slide_builder: Primitive slide composers (header, bullets, cards, ...)
    assets: Image key resolution and missing-file checks
"""

from .assets import DEFAULT_IMAGE_FILES, AssetCatalog, MissingAssetError
from .deck_builder import DeckBuilder, build_deck
from .slide_builder import SlideBuilder

__all__ = [
    "DEFAULT_IMAGE_FILES",
    "AssetCatalog",
    "DeckBuilder",
    "MissingAssetError",
    "SlideBuilder",
    "build_deck",
]
