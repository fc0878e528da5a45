"""QA validator - inspects generated PPTX output against a DeckSchema.

Validates that a built deck matches its schema contract: correct slide
count and canvas size, slide titles and element text rendered, one picture
per image card, source notes present, every colour drawn from the theme
palette, and elements kept inside the canvas. Uses python-pptx to read back
the generated file.

Usage::

    from kpi_decks.qa.validator import QAValidator

    validator = QAValidator(schema)
    result = validator.validate(pptx_bytes)
    assert result.passed, result.summary()
"""

import io
from dataclasses import dataclass, field

from pptx import Presentation
from pptx.enum.shapes import MSO_SHAPE_TYPE
from pptx.oxml.ns import qn
from pptx.util import Inches

from kpi_decks.generator.slide_builder import SUBTITLE_SHAPE, TITLE_SHAPE
from kpi_decks.schema.design_system import palette_hexes, parse_sources_note
from kpi_decks.schema.models import (
    DeckSchema,
    ElementType,
    SlideElement,
    SlideSchema,
)

# Tolerance for canvas bounds checks, inches
_BOUNDS_SLACK = 0.01


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class Issue:
    """A single QA issue found during validation."""
    severity: str       # "error" or "warning"
    slide_index: int    # -1 for deck-level issues
    slide_name: str
    element_name: str   # "" for slide-level issues
    category: str       # e.g. "slide_count", "title", "palette"
    message: str

    def __str__(self) -> str:
        loc = f"slide {self.slide_index}"
        if self.slide_name:
            loc += f" ({self.slide_name})"
        if self.element_name:
            loc += f" / {self.element_name}"
        return f"[{self.severity.upper()}] {loc}: {self.message}"


@dataclass
class QAResult:
    """Aggregated result of QA validation."""
    issues: list[Issue] = field(default_factory=list)

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def passed(self) -> bool:
        return len(self.errors) == 0

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def summary(self) -> str:
        """One-line summary string."""
        status = "PASS" if self.passed else "FAIL"
        return (
            f"QA {status}: {self.error_count} error(s), "
            f"{self.warning_count} warning(s)"
        )

    def report(self) -> str:
        """Multi-line report of all issues."""
        lines = [self.summary()]
        for issue in self.issues:
            lines.append(f"  {issue}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _all_text_on_slide(slide) -> str:
    """Concatenate all text on a slide for content searches."""
    parts: list[str] = []
    for shape in slide.shapes:
        if shape.has_text_frame:
            parts.append(shape.text_frame.text)
    return "\n".join(parts)


def _shape_named(slide, name: str):
    """First shape on the slide with the given name, or None."""
    for shape in slide.shapes:
        if shape.name == name:
            return shape
    return None


def _picture_shapes(slide) -> list:
    """Return all picture shapes on a slide."""
    return [s for s in slide.shapes if s.shape_type == MSO_SHAPE_TYPE.PICTURE]


def _slide_colors(slide) -> set[str]:
    """Every explicit RGB colour in the slide XML (fills, lines, text,
    shadows and the background)."""
    return {el.get("val").upper() for el in slide._element.iter(qn("a:srgbClr"))}


def _element_extent(element: SlideElement) -> tuple[float, float, float, float]:
    """Bounding box (left, top, right, bottom) of everything an element draws."""
    pos = element.position
    left = min(pos.left, pos.right)
    right = max(pos.left, pos.right)
    top = min(pos.top, pos.bottom)
    bottom = max(pos.top, pos.bottom)
    if element.element_type == ElementType.FLOW_STEPS and element.steps:
        count = len(element.steps)
        right = pos.left + count * pos.width + (count - 1) * element.gap
    for snip in element.snippets:
        top = min(top, snip.position.top - 0.38 if snip.label
                  else snip.position.top)
        right = max(right, snip.position.right)
        bottom = max(bottom, snip.position.bottom)
    return left, top, right, bottom


def slide_texts(pptx_bytes: bytes) -> list[str]:
    """All text on each slide of a PPTX, one string per slide."""
    prs = Presentation(io.BytesIO(pptx_bytes))
    return [_all_text_on_slide(slide) for slide in prs.slides]


# ---------------------------------------------------------------------------
# QAValidator
# ---------------------------------------------------------------------------

class QAValidator:
    """Validates generated PPTX output against a DeckSchema.

    Parameters
    ----------
    schema : DeckSchema
        The schema that was used to generate the deck.
    """

    def __init__(self, schema: DeckSchema) -> None:
        self.schema = schema
        self.allowed_colors = palette_hexes(schema.theme.palette)

    def validate(self, pptx_bytes: bytes) -> QAResult:
        """Run all validation checks on a built PPTX.

        Parameters
        ----------
        pptx_bytes : bytes
            The raw PPTX file content (from DeckBuilder.build()).

        Returns
        -------
        QAResult
            Aggregated validation result.
        """
        prs = Presentation(io.BytesIO(pptx_bytes))
        result = self.validate_schema()

        self._check_slide_count(prs, result)
        self._check_dimensions(prs, result)

        # Per-slide checks (only if count matches); paired by position
        # since a loaded schema may carry bad indices
        if len(prs.slides) == len(self.schema.slides):
            for slide_schema, slide in zip(self.schema.slides, prs.slides):
                self._check_slide(slide, slide_schema, result)

        return result

    def validate_schema(self) -> QAResult:
        """Validate the schema alone, without a PPTX.

        Checks slide indices are sequential and that every element stays
        inside the canvas.
        """
        result = QAResult()
        for expected, slide_schema in enumerate(self.schema.slides):
            if slide_schema.index != expected:
                result.issues.append(Issue(
                    severity="error",
                    slide_index=slide_schema.index,
                    slide_name=slide_schema.name,
                    element_name="",
                    category="slide_index",
                    message=(
                        f"Slide index {slide_schema.index} at position "
                        f"{expected}"
                    ),
                ))
            for element in slide_schema.elements:
                self._check_bounds(element, slide_schema, result)
        return result

    # ------------------------------------------------------------------
    # Deck-level checks
    # ------------------------------------------------------------------

    def _check_slide_count(self, prs, result: QAResult) -> None:
        """Verify slide count matches schema."""
        expected = len(self.schema.slides)
        actual = len(prs.slides)
        if actual != expected:
            result.issues.append(Issue(
                severity="error",
                slide_index=-1,
                slide_name="",
                element_name="",
                category="slide_count",
                message=f"Expected {expected} slides, got {actual}",
            ))

    def _check_dimensions(self, prs, result: QAResult) -> None:
        """Verify canvas dimensions match the theme."""
        expected_w = Inches(self.schema.theme.width_inches)
        expected_h = Inches(self.schema.theme.height_inches)
        for label, actual, expected in (
            ("width", prs.slide_width, expected_w),
            ("height", prs.slide_height, expected_h),
        ):
            if actual != expected:
                result.issues.append(Issue(
                    severity="error",
                    slide_index=-1,
                    slide_name="",
                    element_name="",
                    category="dimensions",
                    message=f"Slide {label} {actual} != expected {expected}",
                ))

    def _check_bounds(self, element: SlideElement, slide_schema: SlideSchema,
                      result: QAResult) -> None:
        """Warn when an element extends past the canvas edges."""
        left, top, right, bottom = _element_extent(element)
        width = self.schema.theme.width_inches + _BOUNDS_SLACK
        height = self.schema.theme.height_inches + _BOUNDS_SLACK
        if left < -_BOUNDS_SLACK or top < -_BOUNDS_SLACK \
                or right > width or bottom > height:
            result.issues.append(Issue(
                severity="warning",
                slide_index=slide_schema.index,
                slide_name=slide_schema.name,
                element_name=element.name,
                category="out_of_bounds",
                message=(
                    f"Extent ({left:.2f}, {top:.2f})-({right:.2f}, "
                    f"{bottom:.2f}) exceeds canvas"
                ),
            ))

    # ------------------------------------------------------------------
    # Per-slide checks
    # ------------------------------------------------------------------

    def _check_slide(self, slide, slide_schema: SlideSchema,
                     result: QAResult) -> None:
        """Run all checks for a single slide."""
        self._check_title(slide, slide_schema, result)
        self._check_palette(slide, slide_schema, result)
        self._check_pictures(slide, slide_schema, result)
        self._check_notes(slide, slide_schema, result)

        all_text = _all_text_on_slide(slide)
        for element in slide_schema.elements:
            self._check_element_text(all_text, element, slide_schema, result)

    def _check_title(self, slide, slide_schema: SlideSchema,
                     result: QAResult) -> None:
        """Verify the title (and subtitle) shapes carry the schema text."""
        title_shape = _shape_named(slide, TITLE_SHAPE)
        actual = title_shape.text_frame.text if title_shape else None
        if actual != slide_schema.title:
            result.issues.append(Issue(
                severity="error",
                slide_index=slide_schema.index,
                slide_name=slide_schema.name,
                element_name="",
                category="title",
                message=(
                    f"Title {actual!r} != expected {slide_schema.title!r}"
                ),
            ))

        if slide_schema.subtitle:
            sub_shape = _shape_named(slide, SUBTITLE_SHAPE)
            sub = sub_shape.text_frame.text if sub_shape else None
            if sub != slide_schema.subtitle:
                result.issues.append(Issue(
                    severity="warning",
                    slide_index=slide_schema.index,
                    slide_name=slide_schema.name,
                    element_name="",
                    category="subtitle",
                    message=(
                        f"Subtitle {sub!r} != expected "
                        f"{slide_schema.subtitle!r}"
                    ),
                ))

    def _check_palette(self, slide, slide_schema: SlideSchema,
                       result: QAResult) -> None:
        """Verify every explicit colour on the slide is a palette token."""
        stray = _slide_colors(slide) - self.allowed_colors
        if stray:
            result.issues.append(Issue(
                severity="error",
                slide_index=slide_schema.index,
                slide_name=slide_schema.name,
                element_name="",
                category="palette",
                message=f"Colours outside palette: {sorted(stray)}",
            ))

    def _check_pictures(self, slide, slide_schema: SlideSchema,
                        result: QAResult) -> None:
        """One picture per image card."""
        expected = len(slide_schema.image_keys())
        actual = len(_picture_shapes(slide))
        if actual != expected:
            result.issues.append(Issue(
                severity="error",
                slide_index=slide_schema.index,
                slide_name=slide_schema.name,
                element_name="",
                category="picture_count",
                message=f"Expected {expected} picture(s), got {actual}",
            ))

    def _check_notes(self, slide, slide_schema: SlideSchema,
                     result: QAResult) -> None:
        """Verify the speaker notes cite every source."""
        if not slide_schema.sources:
            return
        notes = ""
        if slide.has_notes_slide:
            notes = slide.notes_slide.notes_text_frame.text
        found = {s.url for s in parse_sources_note(notes)}
        for source in slide_schema.sources:
            if source.url not in found:
                result.issues.append(Issue(
                    severity="warning",
                    slide_index=slide_schema.index,
                    slide_name=slide_schema.name,
                    element_name="",
                    category="notes",
                    message=f"Source {source.url} not in speaker notes",
                ))

    def _check_element_text(self, all_text: str, element: SlideElement,
                            slide_schema: SlideSchema,
                            result: QAResult) -> None:
        """Verify each string the element carries appears on the slide."""
        for text in element.texts():
            if text not in all_text:
                result.issues.append(Issue(
                    severity="error",
                    slide_index=slide_schema.index,
                    slide_name=slide_schema.name,
                    element_name=element.name,
                    category="element_text",
                    message=f"Text {text[:60]!r} not found on slide",
                ))


# ---------------------------------------------------------------------------
# Convenience function
# ---------------------------------------------------------------------------

def validate_deck(schema: DeckSchema, pptx_bytes: bytes) -> QAResult:
    """One-shot convenience: validate a PPTX against its schema."""
    return QAValidator(schema).validate(pptx_bytes)
