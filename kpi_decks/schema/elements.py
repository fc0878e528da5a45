"""Shorthand constructors for slide elements.

Keeps the deck definitions readable as content lists: each call reads
``kind(name, x, y, w, h, content...)`` with coordinates in inches.
"""

from .models import (
    CodeSnippet,
    ElementType,
    EntityStyle,
    FlowStep,
    Position,
    SlideElement,
)

# Height of a bullets block: 0.42" heading + 2.1" list
BULLETS_HEIGHT = 2.52


def bullets(name: str, x: float, y: float, w: float, title: str,
            items: list[str], h: float = BULLETS_HEIGHT) -> SlideElement:
    return SlideElement(
        name=name,
        element_type=ElementType.BULLETS,
        position=Position(x, y, w, h),
        title=title,
        items=items,
    )


def callout(name: str, x: float, y: float, w: float, h: float,
            title: str, body: str) -> SlideElement:
    return SlideElement(
        name=name,
        element_type=ElementType.CALLOUT,
        position=Position(x, y, w, h),
        title=title,
        body=body,
    )


def image_card(name: str, image_key: str, x: float, y: float, w: float,
               h: float, caption: str | None = None) -> SlideElement:
    return SlideElement(
        name=name,
        element_type=ElementType.IMAGE_CARD,
        position=Position(x, y, w, h),
        image_key=image_key,
        caption=caption,
    )


def snippet(code: str, x: float, y: float, w: float, h: float,
            label: str | None = None,
            size_pt: float | None = None) -> CodeSnippet:
    """Code text box; its label, if any, sits just above it."""
    return CodeSnippet(code=code, position=Position(x, y, w, h),
                       label=label, size_pt=size_pt)


def code_panel(name: str, x: float, y: float, w: float, h: float,
               snippets: list[CodeSnippet]) -> SlideElement:
    return SlideElement(
        name=name,
        element_type=ElementType.CODE_PANEL,
        position=Position(x, y, w, h),
        snippets=snippets,
    )


def flow_steps(name: str, x: float, y: float, box_w: float, box_h: float,
               gap: float, steps: list[FlowStep]) -> SlideElement:
    """A row of step boxes; ``position`` describes the first box."""
    return SlideElement(
        name=name,
        element_type=ElementType.FLOW_STEPS,
        position=Position(x, y, box_w, box_h),
        steps=steps,
        gap=gap,
    )


def panel(name: str, x: float, y: float, w: float, h: float, title: str,
          items: list[str] | None = None) -> SlideElement:
    return SlideElement(
        name=name,
        element_type=ElementType.PANEL,
        position=Position(x, y, w, h),
        title=title,
        items=items or [],
    )


def entity(name: str, x: float, y: float, w: float, h: float, title: str,
           body: str, style: EntityStyle) -> SlideElement:
    return SlideElement(
        name=name,
        element_type=ElementType.ENTITY,
        position=Position(x, y, w, h),
        title=title,
        body=body,
        style=style,
    )


def connector(name: str, x: float, y: float, w: float,
              h: float) -> SlideElement:
    """Arrow from (x, y) to (x + w, y + h)."""
    return SlideElement(
        name=name,
        element_type=ElementType.CONNECTOR,
        position=Position(x, y, w, h),
    )


def banner(name: str, x: float, y: float, w: float, h: float,
           text: str) -> SlideElement:
    return SlideElement(
        name=name,
        element_type=ElementType.BANNER,
        position=Position(x, y, w, h),
        body=text,
    )


def label(name: str, x: float, y: float, w: float, h: float,
          text: str) -> SlideElement:
    return SlideElement(
        name=name,
        element_type=ElementType.LABEL,
        position=Position(x, y, w, h),
        title=text,
    )
