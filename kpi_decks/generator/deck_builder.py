"""Deck builder engine - renders a DeckSchema into a PowerPoint file.

Consumes a DeckSchema (theme plus ordered slide definitions) and an
AssetCatalog (image key -> file) to produce a fully rendered .pptx using
python-pptx. Every referenced image is checked before the first slide is
drawn, so a missing asset fails the build without producing any output.

Usage::

    from kpi_decks.generator import AssetCatalog, DeckBuilder
    from kpi_decks.schema import build_technical_deck_schema

    schema = build_technical_deck_schema()
    builder = DeckBuilder(schema, AssetCatalog("images"))
    pptx_bytes = builder.build()

    with open("docs/Technical_Implementation.pptx", "wb") as f:
        f.write(pptx_bytes)
"""

import io
from pathlib import Path

from pptx import Presentation
from pptx.util import Inches

from kpi_decks.generator.assets import AssetCatalog
from kpi_decks.generator.slide_builder import SlideBuilder
from kpi_decks.schema.models import (
    DeckSchema,
    ElementType,
    EntityStyle,
    SlideElement,
    SlideSchema,
    SlideType,
)


class DeckBuilder:
    """Builds a PowerPoint presentation from a deck schema.

    Parameters
    ----------
    schema : DeckSchema
        The full deck definition including theme and slides.
    assets : AssetCatalog
        Resolves the image keys referenced by image cards.
    """

    def __init__(self, schema: DeckSchema, assets: AssetCatalog) -> None:
        self.schema = schema
        self.theme = schema.theme
        self.assets = assets

    def build(self) -> bytes:
        """Build the PPTX and return it as bytes.

        Raises
        ------
        MissingAssetError
            If any image referenced by the schema does not exist.
        """
        prs = self.build_presentation()
        buf = io.BytesIO()
        prs.save(buf)
        return buf.getvalue()

    def build_presentation(self):
        """Build and return the python-pptx Presentation object."""
        self.assets.require(self.schema.image_keys())

        prs = Presentation()
        prs.slide_width = Inches(self.theme.width_inches)
        prs.slide_height = Inches(self.theme.height_inches)
        self._apply_metadata(prs)

        composer = SlideBuilder(prs, self.theme)
        for slide_schema in self.schema.slides:
            self._build_slide(composer, slide_schema)
        return prs

    def build_to_file(self, path: str | Path) -> None:
        """Build the PPTX and write it to a file path."""
        data = self.build()
        Path(path).write_bytes(data)

    def _apply_metadata(self, prs) -> None:
        props = prs.core_properties
        props.title = self.schema.title
        props.author = self.theme.author
        props.subject = self.theme.subject
        props.language = self.theme.language

    # ------------------------------------------------------------------
    # Slide builders
    # ------------------------------------------------------------------

    def _build_slide(self, composer: SlideBuilder,
                     slide_schema: SlideSchema) -> None:
        """Create a slide and render all its elements."""
        if slide_schema.slide_type == SlideType.TITLE:
            slide = composer.title_slide(
                slide_schema.title, slide_schema.subtitle or "",
            )
        else:
            slide = composer.new_slide()
            composer.header(slide, slide_schema.title, slide_schema.subtitle)

        for element in slide_schema.elements:
            self._render_element(composer, slide, element)

        composer.notes(slide, slide_schema.sources)

    # ------------------------------------------------------------------
    # Element renderers - dispatch by ElementType
    # ------------------------------------------------------------------

    def _render_element(self, composer: SlideBuilder, slide,
                        element: SlideElement) -> None:
        """Dispatch to the composer matching the element type."""
        renderers = {
            ElementType.BULLETS: self._render_bullets,
            ElementType.CALLOUT: self._render_callout,
            ElementType.IMAGE_CARD: self._render_image_card,
            ElementType.CODE_PANEL: self._render_code_panel,
            ElementType.FLOW_STEPS: self._render_flow_steps,
            ElementType.PANEL: self._render_panel,
            ElementType.ENTITY: self._render_entity,
            ElementType.CONNECTOR: self._render_connector,
            ElementType.BANNER: self._render_banner,
            ElementType.LABEL: self._render_label,
        }
        renderer = renderers.get(element.element_type)
        if renderer is None:
            raise ValueError(
                f"No renderer for element type {element.element_type!r}"
            )
        renderer(composer, slide, element)

    def _render_bullets(self, composer, slide, el: SlideElement) -> None:
        pos = el.position
        composer.bullets(slide, pos.left, pos.top, pos.width, el.title or "",
                         el.items, h=pos.height, name=el.name)

    def _render_callout(self, composer, slide, el: SlideElement) -> None:
        pos = el.position
        composer.callout(slide, pos.left, pos.top, pos.width, pos.height,
                         el.title or "", el.body or "", name=el.name)

    def _render_image_card(self, composer, slide, el: SlideElement) -> None:
        if not el.image_key:
            raise ValueError(f"Image card '{el.name}' has no image_key")
        pos = el.position
        composer.image_card(slide, self.assets.path(el.image_key),
                            pos.left, pos.top, pos.width, pos.height,
                            caption=el.caption, name=el.name)

    def _render_code_panel(self, composer, slide, el: SlideElement) -> None:
        pos = el.position
        composer.code_panel(slide, pos.left, pos.top, pos.width, pos.height,
                            el.snippets, name=el.name)

    def _render_flow_steps(self, composer, slide, el: SlideElement) -> None:
        pos = el.position
        composer.flow_steps(slide, pos.left, pos.top, pos.width, pos.height,
                            el.gap, el.steps, name=el.name)

    def _render_panel(self, composer, slide, el: SlideElement) -> None:
        pos = el.position
        composer.panel(slide, pos.left, pos.top, pos.width, pos.height,
                       el.title or "", el.items, name=el.name)

    def _render_entity(self, composer, slide, el: SlideElement) -> None:
        pos = el.position
        composer.entity(slide, pos.left, pos.top, pos.width, pos.height,
                        el.title or "", el.body or "",
                        fact=el.style == EntityStyle.FACT, name=el.name)

    def _render_connector(self, composer, slide, el: SlideElement) -> None:
        pos = el.position
        composer.connector(slide, pos.left, pos.top, pos.width, pos.height,
                           name=el.name)

    def _render_banner(self, composer, slide, el: SlideElement) -> None:
        pos = el.position
        composer.banner(slide, pos.left, pos.top, pos.width, pos.height,
                        el.body or "", name=el.name)

    def _render_label(self, composer, slide, el: SlideElement) -> None:
        pos = el.position
        composer.label(slide, pos.left, pos.top, pos.width, pos.height,
                       el.title or "", name=el.name)


# ---------------------------------------------------------------------------
# Convenience function
# ---------------------------------------------------------------------------

def build_deck(schema: DeckSchema, assets: AssetCatalog) -> bytes:
    """One-shot convenience: build a PPTX from schema + assets."""
    return DeckBuilder(schema, assets).build()
