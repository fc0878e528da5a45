"""Slide composition primitives - header bars, cards, bullets, images.

Each composer takes a target slide, a position in inches and content
strings, and appends python-pptx shapes to the slide. Colours come from the
theme palette and fonts from the theme typography; nothing here hardcodes a
colour or font face.

Every shape is named ``<element>/<part>`` so the QA validator can find it
again when reading a deck back.

Usage::

    from pptx import Presentation
    from kpi_decks.generator.slide_builder import SlideBuilder
    from kpi_decks.schema import DeckTheme

    prs = Presentation()
    sb = SlideBuilder(prs, DeckTheme())
    slide = sb.new_slide()
    sb.header(slide, "System overview", "High-level data flow")
    sb.callout(slide, 0.85, 1.25, 6.2, 2.05, "Restore steps", "1) Upload")
"""

from pathlib import Path

from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_CONNECTOR, MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR
from pptx.oxml.ns import qn
from pptx.util import Inches, Pt

from kpi_decks.generator.assets import MissingAssetError
from kpi_decks.schema.design_system import corner_adjustment, format_sources_note
from kpi_decks.schema.models import CodeSnippet, DeckTheme, FlowStep, Source


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BLANK_LAYOUT = 6

TITLE_SHAPE = "Slide Title"
SUBTITLE_SHAPE = "Slide Subtitle"
HEADER_BAR_SHAPE = "Header Bar"
HERO_PANEL_SHAPE = "Hero Panel"
FOOTER_SHAPE = "Footer"

# Card geometry (inches / points)
_CARD_INSET = 0.25
_IMAGE_INSET = 0.18
_CARD_RADIUS_PT = 10.0
_HERO_RADIUS_PT = 14.0
_PANEL_RADIUS_PT = 12.0
_ACCENT_BAR_WIDTH = 0.08
_BULLET_INDENT_PT = 18.0
_BULLET_LINE_SPACING = 1.15
_CONNECTOR_WIDTH_PT = 2.0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _hex_to_rgb(hex_color: str) -> RGBColor:
    """Convert 'RRGGBB' (with or without '#') to an RGBColor."""
    return RGBColor.from_string(hex_color.lstrip("#").upper())


def _set_shadow(shape, color: str, opacity: float, angle: float,
                blur_pt: float, offset_pt: float) -> None:
    """Give a shape an explicit outer drop shadow."""
    sp_pr = shape._element.spPr
    for existing in sp_pr.findall(qn("a:effectLst")):
        sp_pr.remove(existing)
    effect_lst = sp_pr.makeelement(qn("a:effectLst"), {})
    shadow = effect_lst.makeelement(qn("a:outerShdw"), {
        "blurRad": str(int(Pt(blur_pt))),
        "dist": str(int(Pt(offset_pt))),
        "dir": str(int(angle * 60000)),
        "algn": "bl",
        "rotWithShape": "0",
    })
    clr = shadow.makeelement(qn("a:srgbClr"), {"val": color})
    alpha = clr.makeelement(qn("a:alpha"), {"val": str(int(opacity * 100000))})
    clr.append(alpha)
    shadow.append(clr)
    effect_lst.append(shadow)
    sp_pr.append(effect_lst)


class SlideBuilder:
    """Draws the shared slide primitives onto a python-pptx Presentation.

    Parameters
    ----------
    prs : pptx.presentation.Presentation
        The presentation slides are added to.
    theme : DeckTheme
        Palette, typography and canvas geometry.
    """

    def __init__(self, prs, theme: DeckTheme) -> None:
        self.prs = prs
        self.theme = theme
        self.typo = theme.typography

    # ------------------------------------------------------------------
    # Low-level drawing
    # ------------------------------------------------------------------

    def _rgb(self, token: str) -> RGBColor:
        return _hex_to_rgb(self.theme.color(token))

    def _box(self, slide, name: str, x: float, y: float, w: float, h: float,
             fill: str, line: str, radius_pt: float | None = None,
             shadow_opacity: float | None = None, shadow_blur: float = 3.0):
        """Filled rectangle, optionally rounded and shadowed."""
        shape_type = (MSO_SHAPE.ROUNDED_RECTANGLE if radius_pt
                      else MSO_SHAPE.RECTANGLE)
        shape = slide.shapes.add_shape(
            shape_type, Inches(x), Inches(y), Inches(w), Inches(h),
        )
        shape.name = name
        shape.fill.solid()
        shape.fill.fore_color.rgb = self._rgb(fill)
        shape.line.color.rgb = self._rgb(line)
        if radius_pt:
            shape.adjustments[0] = corner_adjustment(radius_pt, w, h)
        if shadow_opacity is not None:
            _set_shadow(shape, self.theme.color("shadow"), shadow_opacity,
                        45, shadow_blur, 2)
        else:
            shape.shadow.inherit = False
        return shape

    def _text(self, slide, name: str, x: float, y: float, w: float, h: float,
              text: str, size_pt: float, color: str, bold: bool = False,
              font: str | None = None, anchor=None):
        """Text box; each newline starts a new paragraph."""
        txbox = slide.shapes.add_textbox(
            Inches(x), Inches(y), Inches(w), Inches(h),
        )
        txbox.name = name
        tf = txbox.text_frame
        tf.word_wrap = True
        if anchor is not None:
            tf.vertical_anchor = anchor
        for i, line in enumerate(text.split("\n")):
            p = tf.paragraphs[0] if i == 0 else tf.add_paragraph()
            self._add_run(p, line, size_pt, color, bold, font)
        return txbox

    def _add_run(self, paragraph, text: str, size_pt: float, color: str,
                 bold: bool = False, font: str | None = None):
        run = paragraph.add_run()
        run.text = text
        run.font.name = font or self.typo.body_font
        run.font.size = Pt(size_pt)
        run.font.bold = bold
        run.font.color.rgb = self._rgb(color)
        run._r.get_or_add_rPr().set("lang", self.theme.language)
        return run

    def _bullet_list(self, slide, name: str, x: float, y: float, w: float,
                     h: float, items: list[str], size_pt: float):
        """Text box with one bulleted paragraph per item."""
        txbox = slide.shapes.add_textbox(
            Inches(x), Inches(y), Inches(w), Inches(h),
        )
        txbox.name = name
        tf = txbox.text_frame
        tf.word_wrap = True
        tf.vertical_anchor = MSO_ANCHOR.TOP
        for i, item in enumerate(items):
            p = tf.paragraphs[0] if i == 0 else tf.add_paragraph()
            p.line_spacing = _BULLET_LINE_SPACING
            p_pr = p._p.get_or_add_pPr()
            p_pr.set("marL", str(int(Pt(_BULLET_INDENT_PT))))
            p_pr.set("indent", str(-int(Pt(_BULLET_INDENT_PT))))
            p_pr.append(p_pr.makeelement(qn("a:buChar"), {"char": "•"}))
            self._add_run(p, item, size_pt, "gray2")
        return txbox

    def _background(self, slide) -> None:
        fill = slide.background.fill
        fill.solid()
        fill.fore_color.rgb = self._rgb("bg")

    # ------------------------------------------------------------------
    # Slides
    # ------------------------------------------------------------------

    def new_slide(self):
        """Add a blank slide."""
        return self.prs.slides.add_slide(self.prs.slide_layouts[BLANK_LAYOUT])

    def title_slide(self, title: str, subtitle: str,
                    footer: str | None = None):
        """Add the deck's opening slide: hero panel, title, subtitle, footer."""
        slide = self.new_slide()
        self._background(slide)
        width = self.theme.width_inches

        self._box(slide, HERO_PANEL_SHAPE, 0.85, 1.45, width - 1.7, 4.15,
                  "white", "gray4", radius_pt=_HERO_RADIUS_PT,
                  shadow_opacity=0.18)
        self._text(slide, TITLE_SHAPE, 1.35, 2.05, width - 2.7, 0.9, title,
                   self.typo.deck_title_size_pt, "navy", bold=True,
                   font=self.typo.heading_font)
        self._text(slide, SUBTITLE_SHAPE, 1.35, 3.1, width - 2.7, 0.6,
                   subtitle, self.typo.deck_subtitle_size_pt, "gray2")
        footer = self.theme.as_of_footer if footer is None else footer
        if footer:
            self._text(slide, FOOTER_SHAPE, 1.35, 5.15, width - 2.7, 0.3,
                       footer, self.typo.footer_size_pt, "gray3")
        return slide

    def header(self, slide, title: str, subtitle: str | None = None) -> None:
        """Background plus the white top bar with title and subtitle."""
        self._background(slide)
        self._box(slide, HEADER_BAR_SHAPE, 0, 0, self.theme.width_inches,
                  self.theme.header_height_inches, "white", "gray4")
        self._text(slide, TITLE_SHAPE, 0.6, 0.16, 9.5, 0.4, title,
                   self.typo.header_title_size_pt, "navy", bold=True,
                   font=self.typo.heading_font)
        if subtitle:
            self._text(slide, SUBTITLE_SHAPE, 0.6, 0.46, 10.5, 0.22, subtitle,
                       self.typo.header_subtitle_size_pt, "gray3")

    def notes(self, slide, sources: list[Source]) -> None:
        """Write the sources block into the slide's speaker notes."""
        if not sources:
            return
        slide.notes_slide.notes_text_frame.text = format_sources_note(sources)

    # ------------------------------------------------------------------
    # Content blocks
    # ------------------------------------------------------------------

    def bullets(self, slide, x: float, y: float, w: float, title: str,
                items: list[str], h: float | None = None,
                name: str = "bullets") -> None:
        """Heading with a bulleted list 0.42" below it."""
        self._text(slide, f"{name}/title", x, y, w, 0.3, title,
                   self.typo.section_size_pt, "navy", bold=True,
                   font=self.typo.heading_font)
        list_h = 2.1 if h is None else h - 0.42
        self._bullet_list(slide, f"{name}/items", x, y + 0.42, w, list_h,
                          items, self.typo.bullet_size_pt)

    def callout(self, slide, x: float, y: float, w: float, h: float,
                title: str, body: str, name: str = "callout") -> None:
        """Shadowed card with a bold title and body text."""
        self._box(slide, f"{name}/card", x, y, w, h, "white", "gray4",
                  radius_pt=_CARD_RADIUS_PT, shadow_opacity=0.14,
                  shadow_blur=2.5)
        self._text(slide, f"{name}/title", x + _CARD_INSET, y + 0.18,
                   w - 2 * _CARD_INSET, 0.3, title,
                   self.typo.card_title_size_pt, "navy", bold=True,
                   font=self.typo.heading_font)
        self._text(slide, f"{name}/body", x + _CARD_INSET, y + 0.55,
                   w - 2 * _CARD_INSET, h - 0.7, body,
                   self.typo.body_size_pt, "gray2", anchor=MSO_ANCHOR.TOP)

    def image_card(self, slide, image_path: str | Path, x: float, y: float,
                   w: float, h: float, caption: str | None = None,
                   name: str = "image") -> None:
        """Shadowed card holding a picture and an optional caption."""
        image_path = Path(image_path)
        if not image_path.is_file():
            raise MissingAssetError([image_path])

        self._box(slide, f"{name}/card", x, y, w, h, "white", "gray4",
                  radius_pt=_CARD_RADIUS_PT, shadow_opacity=0.18)
        picture = slide.shapes.add_picture(
            str(image_path),
            Inches(x + _IMAGE_INSET), Inches(y + _IMAGE_INSET),
            Inches(w - 2 * _IMAGE_INSET), Inches(h - 0.6),
        )
        picture.name = f"{name}/picture"
        if caption:
            self._text(slide, f"{name}/caption", x + _IMAGE_INSET,
                       y + h - 0.35, w - 2 * _IMAGE_INSET, 0.25, caption,
                       self.typo.caption_size_pt, "gray3")

    def code_panel(self, slide, x: float, y: float, w: float, h: float,
                   snippets: list[CodeSnippet], name: str = "code") -> None:
        """Dark panel with monospace snippets, each optionally labelled."""
        self._box(slide, f"{name}/panel", x, y, w, h, "code_bg", "code_bg",
                  radius_pt=_CARD_RADIUS_PT)
        for i, snip in enumerate(snippets):
            pos = snip.position
            if snip.label:
                self._text(slide, f"{name}/label{i}", pos.left,
                           pos.top - 0.38, pos.width, 0.3, snip.label,
                           self.typo.small_title_size_pt, "white", bold=True,
                           font=self.typo.heading_font)
            size = snip.size_pt or self.typo.code_size_pt
            self._text(slide, f"{name}/code{i}", pos.left, pos.top,
                       pos.width, pos.height, snip.code, size, "code_text",
                       font=self.typo.mono_font, anchor=MSO_ANCHOR.TOP)

    def flow_steps(self, slide, x: float, y: float, box_w: float,
                   box_h: float, gap: float, steps: list[FlowStep],
                   name: str = "flow") -> None:
        """Row of step boxes, each with a coloured accent bar."""
        for i, step in enumerate(steps):
            bx = x + i * (box_w + gap)
            self._box(slide, f"{name}/step{i}", bx, y, box_w, box_h,
                      "white", "gray4", radius_pt=_CARD_RADIUS_PT,
                      shadow_opacity=0.12, shadow_blur=2.5)
            self._box(slide, f"{name}/accent{i}", bx, y, _ACCENT_BAR_WIDTH,
                      box_h, step.accent, step.accent)
            self._text(slide, f"{name}/title{i}", bx + 0.2, y + 0.12,
                       box_w - 0.35, 0.28, step.title,
                       self.typo.step_title_size_pt, "navy", bold=True,
                       font=self.typo.heading_font)
            self._text(slide, f"{name}/body{i}", bx + 0.2, y + 0.45,
                       box_w - 0.35, 0.6, step.body, self.typo.body_size_pt,
                       "gray2")

    def panel(self, slide, x: float, y: float, w: float, h: float,
              title: str, items: list[str] | None = None,
              name: str = "panel") -> None:
        """Plain white card with a heading and an optional bullet list."""
        self._box(slide, f"{name}/card", x, y, w, h, "white", "gray4",
                  radius_pt=_PANEL_RADIUS_PT)
        self._text(slide, f"{name}/title", x + _CARD_INSET, y + 0.18,
                   w - 2 * _CARD_INSET, 0.3, title,
                   self.typo.card_title_size_pt, "navy", bold=True,
                   font=self.typo.heading_font)
        if items:
            self._bullet_list(slide, f"{name}/items", x + _CARD_INSET,
                              y + 0.6, w - 2 * _CARD_INSET, h - 0.8, items,
                              self.typo.small_title_size_pt)

    def entity(self, slide, x: float, y: float, w: float, h: float,
               title: str, body: str, fact: bool = False,
               name: str = "entity") -> None:
        """Star-schema table box; fact tables and dimensions differ in tint."""
        fill, line = ("fact_fill", "fact_line") if fact else ("dim_fill",
                                                               "dim_line")
        self._box(slide, f"{name}/box", x, y, w, h, fill, line,
                  radius_pt=_CARD_RADIUS_PT)
        self._text(slide, f"{name}/title", x + 0.15, y + 0.11, w - 0.3, 0.3,
                   title, self.typo.small_title_size_pt, "navy", bold=True,
                   font=self.typo.heading_font)
        self._text(slide, f"{name}/body", x + 0.15, y + 0.4, w - 0.3,
                   h - 0.45, body, self.typo.caption_size_pt, "gray2",
                   anchor=MSO_ANCHOR.TOP)

    def connector(self, slide, x: float, y: float, w: float, h: float,
                  name: str = "connector"):
        """Straight arrow from (x, y) to (x + w, y + h)."""
        line = slide.shapes.add_connector(
            MSO_CONNECTOR.STRAIGHT,
            Inches(x), Inches(y), Inches(x + w), Inches(y + h),
        )
        line.name = name
        line.line.color.rgb = self._rgb("gray3")
        line.line.width = Pt(_CONNECTOR_WIDTH_PT)
        ln = line.line._get_or_add_ln()
        ln.append(ln.makeelement(qn("a:tailEnd"), {"type": "triangle"}))
        return line

    def banner(self, slide, x: float, y: float, w: float, h: float,
               text: str, name: str = "banner") -> None:
        """Slim rounded strip carrying one line of text."""
        self._box(slide, f"{name}/strip", x, y, w, h, "white", "gray4",
                  radius_pt=_CARD_RADIUS_PT)
        self._text(slide, f"{name}/text", x + 0.2, y + 0.1, w - 0.4, 0.28,
                   text, self.typo.small_title_size_pt, "gray2")

    def label(self, slide, x: float, y: float, w: float, h: float,
              text: str, name: str = "label") -> None:
        """Standalone bold heading."""
        self._text(slide, f"{name}/title", x, y, w, h, text,
                   self.typo.card_title_size_pt, "navy", bold=True,
                   font=self.typo.heading_font)
