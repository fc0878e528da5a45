"""Deck schema models - the contract between deck definitions and the generator.

Defines the typed structure of a deck: which slides exist, which elements
each slide carries, where they sit on the canvas, and the theme (palette,
typography, canvas geometry) every slide shares.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ElementType(Enum):
    """What kind of visual block an element draws."""
    BULLETS = "bullets"          # Heading + bulleted list
    CALLOUT = "callout"          # Shadowed card with title and body
    IMAGE_CARD = "image_card"    # Shadowed card around a picture
    CODE_PANEL = "code_panel"    # Dark panel with monospace snippets
    FLOW_STEPS = "flow_steps"    # Row of numbered step boxes
    PANEL = "panel"              # Plain card with heading and optional list
    ENTITY = "entity"            # Star-schema table box
    CONNECTOR = "connector"      # Arrow between entities
    BANNER = "banner"            # Slim one-line strip
    LABEL = "label"              # Standalone heading text


class SlideType(Enum):
    """Categorises a slide's role in the deck."""
    TITLE = "title"
    CONTENT = "content"


class EntityStyle(Enum):
    """Colouring of a star-schema entity box."""
    FACT = "fact"
    DIMENSION = "dimension"


# ---------------------------------------------------------------------------
# Position
# ---------------------------------------------------------------------------

@dataclass
class Position:
    """Shape position and dimensions in inches.

    Connectors may carry a negative height to point upwards.
    """
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def to_dict(self) -> dict:
        return {"left": self.left, "top": self.top,
                "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, d: dict) -> "Position":
        return cls(left=d["left"], top=d["top"],
                   width=d["width"], height=d["height"])


# ---------------------------------------------------------------------------
# Theme: palette, typography, canvas
# ---------------------------------------------------------------------------

def normalize_hex(value: str) -> str:
    """Normalise '#rrggbb' / 'rrggbb' to 'RRGGBB'."""
    h = value.strip().lstrip("#").upper()
    if len(h) != 6:
        raise ValueError(f"Not a 6-digit hex colour: {value!r}")
    try:
        int(h, 16)
    except ValueError:
        raise ValueError(f"Not a 6-digit hex colour: {value!r}") from None
    return h


@dataclass
class Palette:
    """Colour tokens, hex without '#'."""
    navy: str = "0B1B3A"
    blue: str = "1F6FEB"
    teal: str = "0EA5A8"
    gray1: str = "111827"
    gray2: str = "374151"
    gray3: str = "6B7280"
    gray4: str = "E5E7EB"
    white: str = "FFFFFF"
    bg: str = "F8FAFC"
    good: str = "16A34A"
    bad: str = "DC2626"
    code_bg: str = "0B1220"
    code_text: str = "D1D5DB"
    fact_fill: str = "EEF2FF"
    fact_line: str = "C7D2FE"
    dim_fill: str = "ECFEFF"
    dim_line: str = "A5F3FC"
    shadow: str = "000000"

    def tokens(self) -> dict[str, str]:
        """Return the token -> hex mapping."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_dict(self) -> dict:
        return self.tokens()

    @classmethod
    def from_dict(cls, d: dict) -> "Palette":
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ValueError(f"Unknown palette token(s): {sorted(unknown)}")
        return cls(**{k: normalize_hex(str(v)) for k, v in d.items()})


@dataclass
class Typography:
    """Font faces and sizes (points) used by the composers."""
    heading_font: str = "Calibri"
    body_font: str = "Calibri"
    mono_font: str = "Consolas"
    deck_title_size_pt: float = 40.0
    deck_subtitle_size_pt: float = 16.0
    header_title_size_pt: float = 20.0
    header_subtitle_size_pt: float = 11.0
    section_size_pt: float = 16.0
    step_title_size_pt: float = 15.0
    card_title_size_pt: float = 14.0
    small_title_size_pt: float = 12.0
    body_size_pt: float = 11.5
    bullet_size_pt: float = 12.5
    caption_size_pt: float = 10.5
    code_size_pt: float = 12.0
    footer_size_pt: float = 11.0

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, d: dict) -> "Typography":
        defaults = cls()
        return cls(**{
            f.name: d.get(f.name, getattr(defaults, f.name))
            for f in fields(cls)
        })


@dataclass
class DeckTheme:
    """Canvas geometry, palette, typography and deck metadata."""
    width_inches: float = 13.333
    height_inches: float = 7.5
    header_height_inches: float = 0.68
    palette: Palette = field(default_factory=Palette)
    typography: Typography = field(default_factory=Typography)
    author: str = "Activity KPI Dashboard"
    subject: str = "Power BI + SQL Server"
    language: str = "en-US"
    as_of_footer: str = "As-of: Jan 20, 2026 (project context)"

    def color(self, token: str) -> str:
        """Resolve a palette token to its hex value."""
        tokens = self.palette.tokens()
        if token not in tokens:
            raise ValueError(f"Unknown colour token: {token!r}")
        return tokens[token]

    def to_dict(self) -> dict:
        return {
            "canvas": {
                "width_inches": self.width_inches,
                "height_inches": self.height_inches,
                "header_height_inches": self.header_height_inches,
            },
            "palette": self.palette.to_dict(),
            "typography": self.typography.to_dict(),
            "metadata": {
                "author": self.author,
                "subject": self.subject,
                "language": self.language,
                "as_of_footer": self.as_of_footer,
            },
        }

    @classmethod
    def from_dict(cls, d: dict) -> "DeckTheme":
        canvas = d.get("canvas", {})
        meta = d.get("metadata", {})
        defaults = cls()
        return cls(
            width_inches=canvas.get("width_inches", defaults.width_inches),
            height_inches=canvas.get("height_inches", defaults.height_inches),
            header_height_inches=canvas.get(
                "header_height_inches", defaults.header_height_inches),
            palette=Palette.from_dict(d.get("palette", {})),
            typography=Typography.from_dict(d.get("typography", {})),
            author=meta.get("author", defaults.author),
            subject=meta.get("subject", defaults.subject),
            language=meta.get("language", defaults.language),
            as_of_footer=meta.get("as_of_footer", defaults.as_of_footer),
        )


# ---------------------------------------------------------------------------
# Element sub-structures
# ---------------------------------------------------------------------------

@dataclass
class CodeSnippet:
    """One labelled block of monospace text inside a code panel."""
    code: str
    position: Position
    label: str | None = None
    size_pt: float | None = None         # Falls back to typography.code_size_pt

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"code": self.code,
                             "position": self.position.to_dict()}
        if self.label:
            d["label"] = self.label
        if self.size_pt is not None:
            d["size_pt"] = self.size_pt
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "CodeSnippet":
        return cls(
            code=d["code"],
            position=Position.from_dict(d["position"]),
            label=d.get("label"),
            size_pt=d.get("size_pt"),
        )


@dataclass
class FlowStep:
    """A single box in a flow row."""
    title: str
    body: str
    accent: str = "navy"                 # Palette token for the accent bar

    def to_dict(self) -> dict:
        return {"title": self.title, "body": self.body, "accent": self.accent}

    @classmethod
    def from_dict(cls, d: dict) -> "FlowStep":
        return cls(title=d["title"], body=d["body"],
                   accent=d.get("accent", "navy"))


@dataclass
class Source:
    """A reference rendered into the speaker notes."""
    label: str
    url: str

    def to_dict(self) -> dict:
        return {"label": self.label, "url": self.url}

    @classmethod
    def from_dict(cls, d: dict) -> "Source":
        return cls(label=d["label"], url=d["url"])


# ---------------------------------------------------------------------------
# SlideElement - one positioned block on a slide
# ---------------------------------------------------------------------------

@dataclass
class SlideElement:
    """A single positioned visual block on a slide.

    Which optional fields are meaningful depends on ``element_type``; the
    generator ignores the rest.
    """
    name: str                            # Unique within slide
    element_type: ElementType
    position: Position

    # Text content
    title: str | None = None
    body: str | None = None
    items: list[str] = field(default_factory=list)

    # Image card
    image_key: str | None = None         # Key into the AssetCatalog
    caption: str | None = None

    # Entity
    style: EntityStyle | None = None

    # Code panel
    snippets: list[CodeSnippet] = field(default_factory=list)

    # Flow steps
    steps: list[FlowStep] = field(default_factory=list)
    gap: float = 0.0                     # Horizontal gap between steps

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "name": self.name,
            "element_type": self.element_type.value,
            "position": self.position.to_dict(),
        }
        if self.title:
            d["title"] = self.title
        if self.body:
            d["body"] = self.body
        if self.items:
            d["items"] = list(self.items)
        if self.image_key:
            d["image_key"] = self.image_key
        if self.caption:
            d["caption"] = self.caption
        if self.style:
            d["style"] = self.style.value
        if self.snippets:
            d["snippets"] = [s.to_dict() for s in self.snippets]
        if self.steps:
            d["steps"] = [s.to_dict() for s in self.steps]
        if self.gap:
            d["gap"] = self.gap
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "SlideElement":
        return cls(
            name=d["name"],
            element_type=ElementType(d["element_type"]),
            position=Position.from_dict(d["position"]),
            title=d.get("title"),
            body=d.get("body"),
            items=list(d.get("items", [])),
            image_key=d.get("image_key"),
            caption=d.get("caption"),
            style=EntityStyle(d["style"]) if d.get("style") else None,
            snippets=[CodeSnippet.from_dict(s) for s in d.get("snippets", [])],
            steps=[FlowStep.from_dict(s) for s in d.get("steps", [])],
            gap=d.get("gap", 0.0),
        )

    def texts(self) -> list[str]:
        """Every string this element puts on the slide, in draw order."""
        out: list[str] = []
        if self.title:
            out.append(self.title)
        if self.body:
            out.append(self.body)
        out.extend(self.items)
        if self.caption:
            out.append(self.caption)
        for snippet in self.snippets:
            if snippet.label:
                out.append(snippet.label)
            out.append(snippet.code)
        for step in self.steps:
            out.extend([step.title, step.body])
        return out


# ---------------------------------------------------------------------------
# SlideSchema - one slide in the deck
# ---------------------------------------------------------------------------

@dataclass
class SlideSchema:
    """Schema for a single slide."""
    index: int                           # 0-based slide position
    name: str                            # Machine name, e.g. "system_overview"
    title: str
    slide_type: SlideType = SlideType.CONTENT
    subtitle: str | None = None
    elements: list[SlideElement] = field(default_factory=list)
    sources: list[Source] = field(default_factory=list)

    def image_keys(self) -> list[str]:
        return [e.image_key for e in self.elements if e.image_key]

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "index": self.index,
            "name": self.name,
            "title": self.title,
            "slide_type": self.slide_type.value,
        }
        if self.subtitle:
            d["subtitle"] = self.subtitle
        if self.elements:
            d["elements"] = [e.to_dict() for e in self.elements]
        if self.sources:
            d["sources"] = [s.to_dict() for s in self.sources]
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "SlideSchema":
        return cls(
            index=d["index"],
            name=d["name"],
            title=d["title"],
            slide_type=SlideType(d.get("slide_type", "content")),
            subtitle=d.get("subtitle"),
            elements=[SlideElement.from_dict(e) for e in d.get("elements", [])],
            sources=[Source.from_dict(s) for s in d.get("sources", [])],
        )


# ---------------------------------------------------------------------------
# DeckSchema - top-level container
# ---------------------------------------------------------------------------

@dataclass
class DeckSchema:
    """Complete description of one deck.

    Ties together the theme and the ordered slide schemas. The generator
    consumes this along with an asset catalog to produce the PPTX.
    """
    name: str
    deck_type: str                       # "technical" or "business"
    theme: DeckTheme
    slides: list[SlideSchema]
    output_filename: str = ""

    @property
    def title(self) -> str:
        return self.slides[0].title if self.slides else self.name

    def get_slide(self, name: str) -> SlideSchema | None:
        """Look up a slide by its machine name."""
        for s in self.slides:
            if s.name == name:
                return s
        return None

    def image_keys(self) -> set[str]:
        """Collect every image key referenced across all slides."""
        keys: set[str] = set()
        for slide in self.slides:
            keys.update(slide.image_keys())
        return keys

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "deck_type": self.deck_type,
            "output_filename": self.output_filename,
            "theme": self.theme.to_dict(),
            "slides": [s.to_dict() for s in self.slides],
        }

    @classmethod
    def from_dict(cls, d: dict) -> "DeckSchema":
        return cls(
            name=d["name"],
            deck_type=d["deck_type"],
            theme=DeckTheme.from_dict(d.get("theme", {})),
            slides=[SlideSchema.from_dict(s) for s in d.get("slides", [])],
            output_filename=d.get("output_filename", ""),
        )
