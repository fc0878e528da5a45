"""Design system utilities - colour, geometry and notes helpers.

Implements the shared rules every slide follows:
- Colours: 6-digit upper-case hex tokens from the palette
- Rounded corners: radius in points, converted to a shape adjustment
- Speaker notes: a [Sources] ... [/Sources] block, one "- label: url" per line
"""

from .models import Palette, Source, normalize_hex

SOURCES_OPEN = "[Sources]"
SOURCES_CLOSE = "[/Sources]"

_POINTS_PER_INCH = 72.0


def palette_hexes(palette: Palette) -> set[str]:
    """Every hex value the palette defines."""
    return {normalize_hex(v) for v in palette.tokens().values()}


def is_palette_color(value: str, palette: Palette) -> bool:
    """True if the hex colour is one of the palette's tokens."""
    return normalize_hex(value) in palette_hexes(palette)


def corner_adjustment(radius_pt: float, width_in: float,
                      height_in: float) -> float:
    """Convert a corner radius in points to a rounded-rectangle adjustment.

    The adjustment is a fraction of the shorter side, capped at 0.5
    (a full pill shape).
    """
    shorter = min(abs(width_in), abs(height_in)) * _POINTS_PER_INCH
    if shorter <= 0:
        return 0.0
    return min(radius_pt / shorter, 0.5)


def format_sources_note(sources: list[Source]) -> str:
    """Render sources as the speaker-notes block."""
    lines = [SOURCES_OPEN]
    lines.extend(f"- {s.label}: {s.url}" for s in sources)
    lines.append(SOURCES_CLOSE)
    return "\n".join(lines)


def parse_sources_note(text: str) -> list[Source]:
    """Parse a speaker-notes block back into sources.

    Lines outside the [Sources] block, and lines without a ``: http``
    separator, are ignored.
    """
    sources: list[Source] = []
    inside = False
    for raw in text.splitlines():
        line = raw.strip()
        if line == SOURCES_OPEN:
            inside = True
            continue
        if line == SOURCES_CLOSE:
            inside = False
            continue
        if not inside or not line.startswith("- "):
            continue
        label, sep, rest = line[2:].partition(": http")
        if sep:
            sources.append(Source(label=label, url="http" + rest))
    return sources
