"""Tests for the slide composers and the schema-driven deck builder."""

import io

import pytest
from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_SHAPE_TYPE
from pptx.oxml.ns import qn
from pptx.util import Inches, Pt

from kpi_decks.generator.assets import (
    DEFAULT_IMAGE_FILES,
    AssetCatalog,
    MissingAssetError,
)
from kpi_decks.generator.deck_builder import DeckBuilder, build_deck
from kpi_decks.generator.slide_builder import (
    FOOTER_SHAPE,
    HEADER_BAR_SHAPE,
    HERO_PANEL_SHAPE,
    SUBTITLE_SHAPE,
    TITLE_SHAPE,
    SlideBuilder,
    _hex_to_rgb,
)
from kpi_decks.qa.validator import slide_texts
from kpi_decks.schema.business_deck import build_business_deck_schema
from kpi_decks.schema.elements import callout, image_card
from kpi_decks.schema.models import (
    CodeSnippet,
    DeckSchema,
    DeckTheme,
    FlowStep,
    Position,
    SlideSchema,
    SlideType,
    Source,
    Typography,
)
from kpi_decks.schema.technical_deck import build_technical_deck_schema


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def theme():
    return DeckTheme()


@pytest.fixture
def composer(theme):
    prs = Presentation()
    prs.slide_width = Inches(theme.width_inches)
    prs.slide_height = Inches(theme.height_inches)
    return SlideBuilder(prs, theme)


@pytest.fixture
def slide(composer):
    return composer.new_slide()


@pytest.fixture
def minimal_schema(theme):
    """A two-slide schema for focused testing."""
    return DeckSchema(
        name="Test Deck",
        deck_type="technical",
        theme=theme,
        output_filename="test.pptx",
        slides=[
            SlideSchema(index=0, name="title", title="Test Deck",
                        subtitle="Subtitle", slide_type=SlideType.TITLE),
            SlideSchema(
                index=1, name="body", title="Body", subtitle="Details",
                elements=[
                    callout("note", 0.85, 1.25, 6.0, 2.0, "Note", "Text"),
                    image_card("shot", "ytd", 7.35, 1.25, 5.15, 4.0, "YTD"),
                ],
                sources=[Source("Docs", "https://example.com/docs")],
            ),
        ],
    )


def _bytes_to_prs(pptx_bytes: bytes) -> Presentation:
    return Presentation(io.BytesIO(pptx_bytes))


def _named(slide, name):
    for shape in slide.shapes:
        if shape.name == name:
            return shape
    raise AssertionError(f"No shape named {name!r}")


def _rgb(hex_color):
    return RGBColor.from_string(hex_color)


def _first_run(shape):
    return shape.text_frame.paragraphs[0].runs[0]


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------

class TestAssetCatalog:
    def test_default_filenames(self, tmp_path):
        catalog = AssetCatalog(tmp_path)
        assert catalog.path("custom") == tmp_path / "custome.png"
        assert catalog.path("ytd") == tmp_path / "YTD.png"

    def test_unknown_key(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown image key"):
            AssetCatalog(tmp_path).path("logo")

    def test_require_passes(self, assets):
        assets.require(set(DEFAULT_IMAGE_FILES))

    def test_require_lists_every_missing_file(self, images_dir):
        (images_dir / "YTD.png").unlink()
        (images_dir / "custome.png").unlink()
        with pytest.raises(MissingAssetError) as exc_info:
            AssetCatalog(images_dir).require({"ytd", "defined", "custom"})
        assert exc_info.value.missing == [images_dir / "custome.png",
                                          images_dir / "YTD.png"]

    def test_missing_asset_is_file_not_found(self):
        assert issubclass(MissingAssetError, FileNotFoundError)


# ---------------------------------------------------------------------------
# Composers
# ---------------------------------------------------------------------------

class TestHelpers:
    def test_hex_to_rgb(self):
        assert _hex_to_rgb("#0b1b3a") == RGBColor(0x0B, 0x1B, 0x3A)


class TestHeader:
    def test_bar_and_title(self, composer, slide, theme):
        composer.header(slide, "System overview", "Data flow")
        bar = _named(slide, HEADER_BAR_SHAPE)
        assert bar.fill.fore_color.rgb == _rgb(theme.palette.white)
        assert bar.line.color.rgb == _rgb(theme.palette.gray4)
        assert bar.width == Inches(theme.width_inches)
        assert bar.height == Inches(theme.header_height_inches)

        title = _named(slide, TITLE_SHAPE)
        assert title.text_frame.text == "System overview"
        run = _first_run(title)
        assert run.font.bold is True
        assert run.font.size == Pt(20)
        assert run.font.color.rgb == _rgb(theme.palette.navy)

        assert _named(slide, SUBTITLE_SHAPE).text_frame.text == "Data flow"
        assert slide.background.fill.fore_color.rgb == _rgb(theme.palette.bg)

    def test_subtitle_omitted(self, composer, slide):
        composer.header(slide, "Only a title")
        names = [s.name for s in slide.shapes]
        assert SUBTITLE_SHAPE not in names


class TestTitleSlide:
    def test_shapes(self, composer, theme):
        slide = composer.title_slide("Deck", "Sub")
        assert _named(slide, TITLE_SHAPE).text_frame.text == "Deck"
        assert _named(slide, SUBTITLE_SHAPE).text_frame.text == "Sub"
        assert _named(slide, FOOTER_SHAPE).text_frame.text == theme.as_of_footer
        hero = _named(slide, HERO_PANEL_SHAPE)
        assert hero._element.spPr.find(qn("a:effectLst")) is not None
        assert _first_run(_named(slide, TITLE_SHAPE)).font.size == Pt(40)

    def test_footer_suppressed(self, composer):
        slide = composer.title_slide("Deck", "Sub", footer="")
        assert FOOTER_SHAPE not in [s.name for s in slide.shapes]


class TestContentBlocks:
    def test_bullets(self, composer, slide, theme):
        composer.bullets(slide, 0.85, 1.15, 6.0, "Key changes",
                         ["one", "two", "three"], name="changes")
        heading = _named(slide, "changes/title")
        assert heading.text_frame.text == "Key changes"
        items = _named(slide, "changes/items")
        assert items.top == Inches(1.15 + 0.42)
        assert items.height == Inches(2.1)
        paragraphs = items.text_frame.paragraphs
        assert [p.text for p in paragraphs] == ["one", "two", "three"]
        for p in paragraphs:
            assert p._p.pPr.find(qn("a:buChar")) is not None
            assert p.line_spacing == pytest.approx(1.15)
            assert p.runs[0].font.size == Pt(theme.typography.bullet_size_pt)

    def test_bullets_custom_height(self, composer, slide):
        composer.bullets(slide, 1.0, 5.0, 4.0, "Notes", ["a"], h=1.75,
                         name="notes")
        assert _named(slide, "notes/items").height == Inches(1.75 - 0.42)

    def test_callout(self, composer, slide):
        composer.callout(slide, 0.85, 1.25, 6.2, 2.05, "Restore steps",
                         "1) Upload\n2) Import", name="restore")
        card = _named(slide, "restore/card")
        shadow = card._element.spPr.find(qn("a:effectLst")).find(qn("a:outerShdw"))
        assert shadow is not None
        assert shadow.find(qn("a:srgbClr")).get("val") == "000000"
        body = _named(slide, "restore/body")
        assert body.text_frame.text == "1) Upload\n2) Import"
        assert len(body.text_frame.paragraphs) == 2

    def test_image_card(self, composer, slide, images_dir):
        composer.image_card(slide, images_dir / "YTD.png", 7.35, 1.6, 5.15,
                            1.85, caption="YTD", name="ytd")
        pictures = [s for s in slide.shapes
                    if s.shape_type == MSO_SHAPE_TYPE.PICTURE]
        assert len(pictures) == 1
        assert pictures[0].left == Inches(7.35 + 0.18)
        assert pictures[0].height == Inches(1.85 - 0.6)
        assert _named(slide, "ytd/caption").text_frame.text == "YTD"

    def test_image_card_missing_file(self, composer, slide, tmp_path):
        with pytest.raises(MissingAssetError):
            composer.image_card(slide, tmp_path / "nope.png", 0, 0, 2, 2)
        assert len(slide.shapes) == 0

    def test_code_panel(self, composer, slide, theme):
        composer.code_panel(slide, 7.35, 1.25, 5.15, 2.05, [
            CodeSnippet("gcloud sql import bak", Position(7.6, 1.8, 4.8, 1.4),
                        label="Example CLI"),
            CodeSnippet("RETURN 1", Position(7.6, 3.0, 4.8, 0.5), size_pt=10),
        ], name="cli")
        panel = _named(slide, "cli/panel")
        assert panel.fill.fore_color.rgb == _rgb(theme.palette.code_bg)
        label = _named(slide, "cli/label0")
        assert label.top == Inches(1.8 - 0.38)
        code = _first_run(_named(slide, "cli/code0"))
        assert code.font.name == "Consolas"
        assert code.font.color.rgb == _rgb(theme.palette.code_text)
        assert code.font.size == Pt(12)
        assert _first_run(_named(slide, "cli/code1")).font.size == Pt(10)
        assert "cli/label1" not in [s.name for s in slide.shapes]

    def test_flow_steps(self, composer, slide, theme):
        composer.flow_steps(slide, 0.85, 1.25, 3.55, 1.05, 0.45, [
            FlowStep("SQL", "restore"),
            FlowStep("Model", "relationships", accent="teal"),
            FlowStep("Report", "pages", accent="blue"),
        ], name="flow")
        assert abs(_named(slide, "flow/step2").left - Inches(8.85)) <= 1
        accent = _named(slide, "flow/accent1")
        assert accent.fill.fore_color.rgb == _rgb(theme.palette.teal)
        assert _named(slide, "flow/title1").text_frame.text == "Model"

    def test_panel_without_items(self, composer, slide):
        composer.panel(slide, 0.85, 2.75, 11.6, 4.35, "Star schema",
                       name="star")
        names = [s.name for s in slide.shapes]
        assert names == ["star/card", "star/title"]

    def test_entity_styles(self, composer, slide, theme):
        composer.entity(slide, 5.3, 3.45, 2.75, 1.05, "Fact", "keys",
                        fact=True, name="fact")
        composer.entity(slide, 2.0, 3.25, 2.4, 0.9, "Dim", "attrs",
                        name="dim")
        assert _named(slide, "fact/box").fill.fore_color.rgb == \
            _rgb(theme.palette.fact_fill)
        assert _named(slide, "dim/box").line.color.rgb == \
            _rgb(theme.palette.dim_line)

    def test_connector_arrowhead(self, composer, slide, theme):
        line = composer.connector(slide, 4.45, 4.8, 0.85, -0.8, name="arrow")
        ln = line.line._get_or_add_ln()
        assert ln.find(qn("a:tailEnd")).get("type") == "triangle"
        assert line.line.color.rgb == _rgb(theme.palette.gray3)
        assert line.line.width == Pt(2)

    def test_banner_and_label(self, composer, slide):
        composer.banner(slide, 0.95, 6.9, 11.4, 0.45, "Question?", name="q")
        composer.label(slide, 7.35, 1.25, 5.15, 0.3, "Pages", name="pages")
        assert _named(slide, "q/text").text_frame.text == "Question?"
        assert _named(slide, "pages/title").text_frame.text == "Pages"

    def test_notes(self, composer, slide):
        composer.notes(slide, [Source("Docs", "https://example.com")])
        text = slide.notes_slide.notes_text_frame.text
        assert text == "[Sources]\n- Docs: https://example.com\n[/Sources]"

    def test_no_notes_without_sources(self, composer, slide):
        composer.notes(slide, [])
        assert not slide.has_notes_slide


class TestFonts:
    def test_configured_fonts_used(self):
        theme = DeckTheme(typography=Typography(
            heading_font="Aptos Display", body_font="Aptos",
            mono_font="Cascadia Mono",
        ))
        composer = SlideBuilder(Presentation(), theme)
        slide = composer.new_slide()
        composer.callout(slide, 1, 1, 4, 2, "Title", "Body", name="c")
        composer.code_panel(slide, 1, 3.5, 4, 2, [
            CodeSnippet("x = 1", Position(1.2, 4, 3.6, 1)),
        ], name="code")
        assert _first_run(_named(slide, "c/title")).font.name == "Aptos Display"
        assert _first_run(_named(slide, "c/body")).font.name == "Aptos"
        assert _first_run(_named(slide, "code/code0")).font.name == \
            "Cascadia Mono"


# ---------------------------------------------------------------------------
# DeckBuilder
# ---------------------------------------------------------------------------

class TestDeckBuilder:
    def test_minimal_deck(self, minimal_schema, assets):
        prs = _bytes_to_prs(DeckBuilder(minimal_schema, assets).build())
        assert len(prs.slides) == 2
        assert prs.slide_width == Inches(13.333)
        assert prs.slide_height == Inches(7.5)
        body = prs.slides[1]
        assert _named(body, TITLE_SHAPE).text_frame.text == "Body"
        assert _named(body, "note/body").text_frame.text == "Text"
        assert "example.com/docs" in body.notes_slide.notes_text_frame.text

    def test_core_properties(self, minimal_schema, assets):
        prs = _bytes_to_prs(build_deck(minimal_schema, assets))
        props = prs.core_properties
        assert props.title == "Test Deck"
        assert props.author == "Activity KPI Dashboard"
        assert props.subject == "Power BI + SQL Server"
        assert props.language == "en-US"

    def test_missing_image_fails_before_drawing(self, minimal_schema,
                                                images_dir):
        (images_dir / "YTD.png").unlink()
        builder = DeckBuilder(minimal_schema, AssetCatalog(images_dir))
        with pytest.raises(MissingAssetError) as exc_info:
            builder.build()
        assert exc_info.value.missing == [images_dir / "YTD.png"]

    def test_unknown_image_key(self, minimal_schema, assets):
        minimal_schema.slides[1].elements[1].image_key = "logo"
        with pytest.raises(ValueError, match="logo"):
            DeckBuilder(minimal_schema, assets).build()

    def test_build_to_file(self, minimal_schema, assets, tmp_path):
        out = tmp_path / "deck.pptx"
        DeckBuilder(minimal_schema, assets).build_to_file(out)
        assert len(_bytes_to_prs(out.read_bytes()).slides) == 2

    def test_technical_deck(self, assets):
        prs = _bytes_to_prs(build_deck(build_technical_deck_schema(), assets))
        assert len(prs.slides) == 9
        first = prs.slides[0]
        assert _named(first, TITLE_SHAPE).text_frame.text == \
            "Technical Implementation"
        assert prs.core_properties.title == "Technical Implementation"

    def test_business_deck(self, assets):
        prs = _bytes_to_prs(build_deck(build_business_deck_schema(), assets))
        assert len(prs.slides) == 6
        first = prs.slides[0]
        assert _named(first, TITLE_SHAPE).text_frame.text == \
            "Business KPIs & Insights"

    def test_picture_per_image_card(self, assets):
        schema = build_technical_deck_schema()
        prs = _bytes_to_prs(build_deck(schema, assets))
        for slide_schema, slide in zip(schema.slides, prs.slides):
            pictures = [s for s in slide.shapes
                        if s.shape_type == MSO_SHAPE_TYPE.PICTURE]
            assert len(pictures) == len(slide_schema.image_keys())

    def test_text_is_deterministic(self, assets):
        first = slide_texts(build_deck(build_business_deck_schema(), assets))
        second = slide_texts(build_deck(build_business_deck_schema(), assets))
        assert first == second
        assert len(first) == 6
