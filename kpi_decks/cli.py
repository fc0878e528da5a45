"""CLI entry point for the KPI deck builder.

Builds the Technical Implementation and Business KPIs decks, runs QA
validation on each, and writes them out. Running with no arguments is the
same as ``build`` with every default.

Usage::

    # Build both decks: images/ -> docs/
    python -m kpi_decks.cli

    # Build one deck with a custom theme (fonts, palette) into another folder
    python -m kpi_decks.cli build \\
        --deck business \\
        --theme config/theme.yaml \\
        --images-dir screenshots \\
        --output-dir out

    # Validate an existing PPTX against its deck schema
    python -m kpi_decks.cli validate \\
        --deck technical \\
        --pptx docs/Technical_Implementation.pptx

    # Inspect a deck (slide count, elements)
    python -m kpi_decks.cli inspect --deck technical -v

    # Export a deck schema or the default theme to YAML for editing
    python -m kpi_decks.cli export --deck business -o business.yaml
    python -m kpi_decks.cli export-theme -o theme.yaml
"""

import argparse
import os
import sys
import tempfile
from pathlib import Path

from kpi_decks.generator.assets import AssetCatalog, MissingAssetError
from kpi_decks.generator.deck_builder import DeckBuilder
from kpi_decks.qa.validator import QAValidator
from kpi_decks.schema.business_deck import build_business_deck_schema
from kpi_decks.schema.loader import (
    load_schema,
    load_theme,
    save_schema,
    save_theme,
)
from kpi_decks.schema.models import DeckTheme
from kpi_decks.schema.technical_deck import build_technical_deck_schema

DEFAULT_IMAGES_DIR = "images"
DEFAULT_OUTPUT_DIR = "docs"

_DECK_BUILDERS = {
    "technical": build_technical_deck_schema,
    "business": build_business_deck_schema,
}


# ---------------------------------------------------------------------------
# Theme and schema loading
# ---------------------------------------------------------------------------

def _load_theme(args):
    """Load a DeckTheme from --theme, or return None for the default."""
    path = getattr(args, "theme", None)
    if not path:
        return None
    path = Path(path)
    if not path.exists():
        _error(f"Theme file not found: {path}")
    try:
        return load_theme(path)
    except ValueError as exc:
        _error(f"Invalid theme: {exc}")


def _load_schemas(args):
    """Load the DeckSchemas selected by --schema or --deck."""
    theme = _load_theme(args)

    schema_paths = getattr(args, "schema", None) or []
    if isinstance(schema_paths, str):
        schema_paths = [schema_paths]
    if schema_paths:
        schemas = []
        for raw in schema_paths:
            path = Path(raw)
            if not path.exists():
                _error(f"Schema file not found: {path}")
            schema = load_schema(path)
            if theme is not None:
                schema.theme = theme
            schemas.append(schema)
        return schemas

    deck = getattr(args, "deck", "all")
    names = list(_DECK_BUILDERS) if deck == "all" else [deck]
    schemas = []
    for name in names:
        builder = _DECK_BUILDERS.get(name)
        if builder is None:
            _error(f"Unknown deck: {name!r}. Use 'technical' or 'business'.")
        schemas.append(builder(theme or DeckTheme()))
    return schemas


def _load_schema(args):
    """Load exactly one DeckSchema (validate / inspect / export)."""
    return _load_schemas(args)[0]


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

def _write_outputs(outputs: dict[Path, bytes]) -> list[Path]:
    """Write each payload without leaving a half-written file.

    Each payload goes to a temporary file beside its destination first;
    only when all temporaries are written are they moved into place, so a
    failure while writing leaves every destination untouched. A failure
    during the moves can leave earlier destinations already replaced.
    """
    staged: list[tuple[Path, Path]] = []
    try:
        for dest, data in outputs.items():
            dest.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=dest.parent, prefix=f".{dest.name}.", suffix=".tmp",
            )
            tmp = Path(tmp_name)
            staged.append((tmp, dest))
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        for tmp, dest in staged:
            os.replace(tmp, dest)
    finally:
        for tmp, _ in staged:
            if tmp.exists():
                tmp.unlink()
    return [dest for _, dest in staged]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_build(args):
    """Build the selected decks and write them to the output directory."""
    schemas = _load_schemas(args)
    assets = AssetCatalog(args.images_dir)
    output_dir = Path(args.output_dir)

    outputs: dict[Path, bytes] = {}
    for schema in schemas:
        _info(f"Deck: {schema.name} ({len(schema.slides)} slides)")
        try:
            pptx_bytes = DeckBuilder(schema, assets).build()
        except MissingAssetError as exc:
            _error(str(exc))

        if not args.skip_qa:
            _info("Running QA validation...")
            qa_result = QAValidator(schema).validate(pptx_bytes)
            if qa_result.passed:
                _info(qa_result.summary())
            else:
                _warn(qa_result.summary())
                if args.verbose:
                    print(qa_result.report(), file=sys.stderr)
                if not args.force:
                    _error("QA validation failed. Use --force to write "
                           "anyway, or --skip-qa to skip validation.")
        else:
            _info("QA validation skipped (--skip-qa)")

        filename = schema.output_filename or f"{schema.deck_type}.pptx"
        outputs[output_dir / filename] = pptx_bytes

    try:
        written = _write_outputs(outputs)
    except OSError as exc:
        _error(f"Could not write output: {exc}")

    for path in written:
        _info(f"{path} ({len(outputs[path]):,} bytes)")
        print(f"Wrote: {path.resolve()}")


def cmd_validate(args):
    """Validate an existing PPTX against its deck schema."""
    schema = _load_schema(args)
    pptx_path = Path(args.pptx)
    if not pptx_path.exists():
        _error(f"PPTX file not found: {pptx_path}")

    pptx_bytes = pptx_path.read_bytes()
    _info(f"Validating {pptx_path} against {schema.name}")

    qa_result = QAValidator(schema).validate(pptx_bytes)
    print(qa_result.report())
    sys.exit(0 if qa_result.passed else 1)


def cmd_inspect(args):
    """Show deck schema information."""
    schema = _load_schema(args)
    theme = schema.theme

    print(f"Deck:        {schema.name}")
    print(f"Deck type:   {schema.deck_type}")
    print(f"Output:      {schema.output_filename}")
    print(f"Dimensions:  {theme.width_inches}\" x {theme.height_inches}\"")
    print(f"Fonts:       {theme.typography.heading_font} / "
          f"{theme.typography.body_font} / {theme.typography.mono_font}")
    print(f"Slides:      {len(schema.slides)}")
    print(f"Images:      {', '.join(sorted(schema.image_keys())) or '-'}")

    if args.verbose:
        print()
        for slide in schema.slides:
            print(f"  [{slide.index:2d}] {slide.title}"
                  f" ({slide.slide_type.value})"
                  f" - {len(slide.elements)} element(s)")
            for element in slide.elements:
                print(f"       {element.name}"
                      f" ({element.element_type.value})")


def cmd_export(args):
    """Write a deck schema to YAML."""
    schema = _load_schema(args)
    save_schema(schema, args.output)
    _info(f"Written: {args.output}")


def cmd_export_theme(args):
    """Write the theme (default, or --theme) to YAML."""
    theme = _load_theme(args) or DeckTheme()
    save_theme(theme, args.output)
    _info(f"Written: {args.output}")


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _info(msg):
    print(f"  {msg}", file=sys.stderr)


def _warn(msg):
    print(f"  WARNING: {msg}", file=sys.stderr)


def _error(msg):
    print(f"  ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="kpi-decks",
        description="Generate the Activity KPI Dashboard slide decks.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # ---- build ----
    build = subparsers.add_parser(
        "build",
        help="Build decks and write them as PPTX (the default command).",
    )
    _add_deck_args(build, allow_all=True)
    build.add_argument(
        "--images-dir",
        default=DEFAULT_IMAGES_DIR,
        help=f"Directory holding the screenshots (default: "
             f"{DEFAULT_IMAGES_DIR}).",
    )
    build.add_argument(
        "--output-dir",
        default=DEFAULT_OUTPUT_DIR,
        help=f"Directory the decks are written to (default: "
             f"{DEFAULT_OUTPUT_DIR}).",
    )
    build.add_argument(
        "--skip-qa",
        action="store_true",
        default=False,
        help="Skip QA validation after generation.",
    )
    build.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Write output even if QA validation fails.",
    )
    build.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Show detailed output (full QA report on failure).",
    )
    build.set_defaults(func=cmd_build)

    # ---- validate ----
    val = subparsers.add_parser(
        "validate",
        help="Validate an existing PPTX against its deck schema.",
    )
    _add_deck_args(val)
    val.add_argument(
        "--pptx",
        required=True,
        help="Path to the PPTX file to validate.",
    )
    val.set_defaults(func=cmd_validate)

    # ---- inspect ----
    insp = subparsers.add_parser(
        "inspect",
        help="Show deck structure.",
    )
    _add_deck_args(insp)
    insp.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Show per-slide detail.",
    )
    insp.set_defaults(func=cmd_inspect)

    # ---- export ----
    exp = subparsers.add_parser(
        "export",
        help="Write a deck schema to YAML.",
    )
    _add_deck_args(exp)
    exp.add_argument(
        "-o", "--output",
        required=True,
        help="Output YAML file path.",
    )
    exp.set_defaults(func=cmd_export)

    # ---- export-theme ----
    exp_theme = subparsers.add_parser(
        "export-theme",
        help="Write the theme (palette, fonts, canvas) to YAML.",
    )
    exp_theme.add_argument(
        "--theme",
        help="Theme YAML to start from (default: built-in theme).",
    )
    exp_theme.add_argument(
        "-o", "--output",
        required=True,
        help="Output YAML file path.",
    )
    exp_theme.set_defaults(func=cmd_export_theme)

    return parser


def _add_deck_args(parser, allow_all=False):
    """Add --deck / --schema and --theme args to a subparser."""
    group = parser.add_mutually_exclusive_group()
    choices = list(_DECK_BUILDERS) + (["all"] if allow_all else [])
    default = "all" if allow_all else "technical"
    group.add_argument(
        "--deck",
        choices=choices,
        default=default,
        help=f"Built-in deck (default: {default}).",
    )
    group.add_argument(
        "--schema",
        action="append" if allow_all else "store",
        help="Path to a deck schema YAML file"
             + (" (repeatable)." if allow_all else "."),
    )
    parser.add_argument(
        "--theme",
        help="Path to a theme YAML file overriding fonts, palette or canvas.",
    )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv=None):
    """CLI entry point."""
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else list(argv)
    if not argv or argv[0].startswith("-") and argv[0] not in ("-h", "--help"):
        argv = ["build", *argv]
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except (ValueError, OSError) as exc:
        _error(str(exc))


if __name__ == "__main__":
    main()
