"""Schema loader - YAML serialization and deserialization for decks and themes.

Provides round-trip save/load so decks and themes can be reviewed,
version-controlled, and edited as human-readable YAML configuration files.
Malformed files raise ValueError naming the file.
"""

from pathlib import Path

import yaml

from .models import DeckSchema, DeckTheme


def _dump(data: dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False,
                  allow_unicode=True, width=120)


def _load(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValueError(f"{path}: invalid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a YAML mapping at top level")
    return data


def save_schema(schema: DeckSchema, path: str | Path) -> None:
    """Serialize a DeckSchema to a YAML file."""
    _dump(schema.to_dict(), Path(path))


def load_schema(path: str | Path) -> DeckSchema:
    """Deserialize a DeckSchema from a YAML file."""
    path = Path(path)
    data = _load(path)
    try:
        return DeckSchema.from_dict(data)
    except KeyError as exc:
        raise ValueError(f"{path}: missing required key {exc}") from exc
    except (TypeError, AttributeError) as exc:
        raise ValueError(f"{path}: malformed deck schema: {exc}") from exc


def save_theme(theme: DeckTheme, path: str | Path) -> None:
    """Serialize a DeckTheme to a YAML file."""
    _dump(theme.to_dict(), Path(path))


def load_theme(path: str | Path) -> DeckTheme:
    """Deserialize a DeckTheme from a YAML file.

    Missing keys fall back to the defaults, so a theme file may override
    only the fonts, say, and inherit everything else.
    """
    path = Path(path)
    data = _load(path)
    try:
        return DeckTheme.from_dict(data)
    except (TypeError, AttributeError) as exc:
        raise ValueError(f"{path}: malformed theme: {exc}") from exc
