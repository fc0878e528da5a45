"""Tests for the deck schema: models, design system, loader and the two decks."""

import pytest

from kpi_decks.schema.business_deck import build_business_deck_schema
from kpi_decks.schema.design_system import (
    SOURCES_CLOSE,
    SOURCES_OPEN,
    corner_adjustment,
    format_sources_note,
    is_palette_color,
    normalize_hex,
    palette_hexes,
    parse_sources_note,
)
from kpi_decks.schema.elements import (
    BULLETS_HEIGHT,
    bullets,
    code_panel,
    flow_steps,
    snippet,
)
from kpi_decks.schema.loader import (
    load_schema,
    load_theme,
    save_schema,
    save_theme,
)
from kpi_decks.schema.models import (
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
from kpi_decks.schema.references import DATE_TABLES, relabel
from kpi_decks.schema.technical_deck import build_technical_deck_schema


@pytest.fixture
def technical():
    return build_technical_deck_schema()


@pytest.fixture
def business():
    return build_business_deck_schema()


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class TestPosition:
    def test_right_and_bottom(self):
        pos = Position(1.0, 2.0, 3.0, 0.5)
        assert pos.right == 4.0
        assert pos.bottom == 2.5

    def test_negative_height_points_up(self):
        pos = Position(4.45, 4.8, 0.85, -0.8)
        assert pos.bottom == pytest.approx(4.0)


class TestPalette:
    def test_default_tokens(self):
        tokens = Palette().tokens()
        assert tokens["navy"] == "0B1B3A"
        assert tokens["bg"] == "F8FAFC"
        assert tokens["code_bg"] == "0B1220"
        assert len(tokens) == 18

    def test_from_dict_normalises_hex(self):
        palette = Palette.from_dict({"navy": "#0a0a0a"})
        assert palette.navy == "0A0A0A"
        assert palette.blue == "1F6FEB"

    def test_from_dict_rejects_unknown_token(self):
        with pytest.raises(ValueError, match="purple"):
            Palette.from_dict({"purple": "800080"})

    @pytest.mark.parametrize("value", [0, "0B1B3", "ZZZZZZ"])
    def test_from_dict_rejects_bad_hex(self, value):
        with pytest.raises(ValueError, match="6-digit hex"):
            Palette.from_dict({"shadow": value})


class TestDeckTheme:
    def test_defaults(self):
        theme = DeckTheme()
        assert theme.width_inches == 13.333
        assert theme.height_inches == 7.5
        assert theme.typography.heading_font == "Calibri"
        assert theme.typography.mono_font == "Consolas"
        assert theme.as_of_footer.startswith("As-of:")

    def test_color_lookup(self):
        assert DeckTheme().color("teal") == "0EA5A8"

    def test_unknown_color_raises(self):
        with pytest.raises(ValueError, match="magenta"):
            DeckTheme().color("magenta")

    def test_dict_round_trip(self):
        theme = DeckTheme(author="Ops", typography=Typography(body_font="Arial"))
        restored = DeckTheme.from_dict(theme.to_dict())
        assert restored == theme

    def test_partial_dict_keeps_defaults(self):
        theme = DeckTheme.from_dict({"typography": {"heading_font": "Aptos"}})
        assert theme.typography.heading_font == "Aptos"
        assert theme.typography.body_font == "Calibri"
        assert theme.palette == Palette()
        assert theme.width_inches == 13.333


class TestSlideElement:
    def test_texts_cover_every_field(self):
        el = code_panel("code", 0, 0, 5, 3, [
            snippet("SELECT 1", 0.2, 0.5, 4, 1, label="Query"),
            snippet("SELECT 2", 0.2, 1.8, 4, 1),
        ])
        assert el.texts() == ["Query", "SELECT 1", "SELECT 2"]

    def test_flow_step_texts(self):
        el = flow_steps("flow", 0, 0, 3, 1, 0.5, [
            FlowStep("One", "first"),
            FlowStep("Two", "second", accent="teal"),
        ])
        assert el.texts() == ["One", "first", "Two", "second"]

    def test_dict_round_trip(self):
        el = SlideElement(
            name="fact",
            element_type=ElementType.ENTITY,
            position=Position(1, 2, 3, 1),
            title="Fact",
            body="keys",
            style=EntityStyle.FACT,
        )
        assert SlideElement.from_dict(el.to_dict()) == el

    def test_to_dict_omits_empty_fields(self):
        d = bullets("b", 0, 0, 4, "Heading", ["a"]).to_dict()
        assert "body" not in d
        assert "snippets" not in d
        assert d["position"]["height"] == BULLETS_HEIGHT


class TestDeckSchema:
    def test_title_is_first_slide_title(self, technical):
        assert technical.title == "Technical Implementation"

    def test_get_slide(self, technical):
        assert technical.get_slide("report_ux").index == 6
        assert technical.get_slide("nonexistent") is None

    def test_image_keys(self, technical, business):
        assert technical.image_keys() == {"ytd", "defined", "custom"}
        assert business.image_keys() == {"ytd", "defined", "custom"}

    def test_dict_round_trip(self, business):
        restored = DeckSchema.from_dict(business.to_dict())
        assert restored == business


# ---------------------------------------------------------------------------
# Design system
# ---------------------------------------------------------------------------

class TestHexHelpers:
    def test_normalize(self):
        assert normalize_hex("#1f6feb") == "1F6FEB"
        assert normalize_hex(" 0b1b3a ") == "0B1B3A"

    @pytest.mark.parametrize("value", ["FFF", "GGGGGG", "#12345"])
    def test_normalize_rejects_bad_values(self, value):
        with pytest.raises(ValueError):
            normalize_hex(value)

    def test_palette_membership(self):
        palette = Palette()
        assert is_palette_color("#16a34a", palette)
        assert not is_palette_color("123456", palette)
        assert "000000" in palette_hexes(palette)


class TestCornerAdjustment:
    def test_fraction_of_shorter_side(self):
        # 1" shorter side is 72pt
        assert corner_adjustment(18, 4.0, 1.0) == pytest.approx(0.25)

    def test_capped_at_half(self):
        assert corner_adjustment(100, 1.0, 0.5) == 0.5

    def test_zero_size(self):
        assert corner_adjustment(10, 0, 1.0) == 0.0


class TestSourcesNote:
    def test_format(self):
        text = format_sources_note([Source("Docs", "https://example.com/a")])
        assert text.splitlines() == [
            SOURCES_OPEN, "- Docs: https://example.com/a", SOURCES_CLOSE,
        ]

    def test_parse_round_trip(self):
        sources = [Source("A: detail", "https://example.com/a"),
                   Source("B", "http://example.com/b")]
        assert parse_sources_note(format_sources_note(sources)) == sources

    def test_parse_ignores_lines_outside_block(self):
        text = "- Stray: https://x.test\n[Sources]\n- In: https://y.test\n[/Sources]"
        assert parse_sources_note(text) == [Source("In", "https://y.test")]

    def test_relabel_keeps_url(self):
        src = relabel(DATE_TABLES, "Other label")
        assert src.url == DATE_TABLES.url
        assert src.label == "Other label"


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

class TestLoader:
    def test_schema_round_trip(self, technical, tmp_path):
        path = tmp_path / "nested" / "technical.yaml"
        save_schema(technical, path)
        assert load_schema(path) == technical

    def test_theme_round_trip(self, tmp_path):
        theme = DeckTheme(typography=Typography(heading_font="Segoe UI"))
        path = tmp_path / "theme.yaml"
        save_theme(theme, path)
        assert load_theme(path) == theme

    def test_unicode_preserved(self, technical, tmp_path):
        path = tmp_path / "technical.yaml"
        save_schema(technical, path)
        assert "“today”" in path.read_text(encoding="utf-8")

    def test_unquoted_zero_hex_rejected(self, tmp_path):
        # YAML reads an unquoted 000000 as the integer 0
        path = tmp_path / "theme.yaml"
        path.write_text("palette:\n  shadow: 000000\n", encoding="utf-8")
        with pytest.raises(ValueError, match="6-digit hex"):
            load_theme(path)

    def test_malformed_yaml_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("name: [unclosed\n", encoding="utf-8")
        with pytest.raises(ValueError, match="invalid YAML"):
            load_schema(path)

    def test_missing_schema_key_rejected(self, tmp_path):
        path = tmp_path / "deck.yaml"
        path.write_text("deck_type: business\nslides: []\n", encoding="utf-8")
        with pytest.raises(ValueError, match="missing required key .name."):
            load_schema(path)

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_theme(path)


# ---------------------------------------------------------------------------
# Deck definitions
# ---------------------------------------------------------------------------

TECHNICAL_TITLES = [
    "Technical Implementation",
    "System overview",
    "Database restore (Cloud SQL for SQL Server)",
    "Data preparation (SQL)",
    "Power BI model",
    "KPI calculations (DAX)",
    "Report UX",
    "Refresh & “today” filtering",
    "QA, validation & handoff",
]

BUSINESS_TITLES = [
    "Business KPIs & Insights",
    "What this dashboard answers",
    "KPI definitions",
    "Defined period (Last 365 / 180 days)",
    "Custom periods (Period 1 vs Period 2)",
    "Business impact & next steps",
]


class TestDeckDefinitions:
    def test_technical_slides(self, technical):
        assert [s.title for s in technical.slides] == TECHNICAL_TITLES
        assert technical.output_filename == "Technical_Implementation.pptx"

    def test_business_slides(self, business):
        assert [s.title for s in business.slides] == BUSINESS_TITLES
        assert business.output_filename == "Business_KPIs.pptx"

    @pytest.mark.parametrize("builder", [build_technical_deck_schema,
                                         build_business_deck_schema])
    def test_structure(self, builder):
        schema = builder()
        assert [s.index for s in schema.slides] == list(range(len(schema.slides)))
        assert schema.slides[0].slide_type == SlideType.TITLE
        assert all(s.slide_type == SlideType.CONTENT for s in schema.slides[1:])
        assert all(s.sources for s in schema.slides)
        for slide in schema.slides:
            names = [e.name for e in slide.elements]
            assert len(names) == len(set(names)), slide.name

    @pytest.mark.parametrize("builder", [build_technical_deck_schema,
                                         build_business_deck_schema])
    def test_accents_are_palette_tokens(self, builder):
        tokens = Palette().tokens()
        for slide in builder().slides:
            for element in slide.elements:
                for step in element.steps:
                    assert step.accent in tokens

    def test_system_overview_flow(self, technical):
        slide = technical.get_slide("system_overview")
        flow = [e for e in slide.elements
                if e.element_type == ElementType.FLOW_STEPS]
        assert len(flow) == 1
        assert len(flow[0].steps) == 3

    def test_full_width_elements_follow_theme(self):
        theme = DeckTheme(width_inches=16.0)
        schema = build_business_deck_schema(theme)
        custom = schema.get_slide("custom_periods").elements[0]
        assert custom.position.width == pytest.approx(16.0 - 1.7)
        assert schema.theme is theme

    def test_schemas_are_rebuilt_each_call(self):
        assert build_technical_deck_schema() == build_technical_deck_schema()
        assert build_technical_deck_schema() is not build_technical_deck_schema()

    def test_slide_schema_image_keys(self, technical):
        slide = technical.get_slide("power_bi_model")
        assert slide.image_keys() == ["ytd", "defined", "custom"]
        assert SlideSchema(index=0, name="x", title="X").image_keys() == []
