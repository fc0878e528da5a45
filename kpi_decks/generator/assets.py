"""Image asset catalog - maps the image keys used in deck schemas to files.

Usage::

    from kpi_decks.generator.assets import AssetCatalog

    assets = AssetCatalog("images")
    assets.require({"ytd", "defined"})   # raises MissingAssetError
    path = assets.path("ytd")
"""

from pathlib import Path

# Dashboard screenshots, keyed as referenced by the deck schemas
DEFAULT_IMAGE_FILES = {
    "ytd": "YTD.png",
    "defined": "defined.png",
    "custom": "custome.png",
}


class MissingAssetError(FileNotFoundError):
    """One or more referenced image files do not exist."""

    def __init__(self, missing: list[Path]) -> None:
        self.missing = list(missing)
        listing = ", ".join(str(p) for p in self.missing)
        super().__init__(f"Missing image asset(s): {listing}")


class AssetCatalog:
    """Resolves image keys to paths under a root directory.

    Parameters
    ----------
    root : str | Path
        Directory holding the image files.
    files : dict[str, str] | None
        Key -> filename mapping; defaults to ``DEFAULT_IMAGE_FILES``.
    """

    def __init__(self, root: str | Path,
                 files: dict[str, str] | None = None) -> None:
        self.root = Path(root)
        self.files = dict(DEFAULT_IMAGE_FILES if files is None else files)

    def path(self, key: str) -> Path:
        """Return the path for an image key (existence not checked)."""
        if key not in self.files:
            raise ValueError(
                f"Unknown image key {key!r}; known keys: {sorted(self.files)}"
            )
        return self.root / self.files[key]

    def missing(self, keys: set[str]) -> list[Path]:
        """Paths for the given keys that do not exist, in key order."""
        return [p for p in (self.path(k) for k in sorted(keys))
                if not p.is_file()]

    def require(self, keys: set[str]) -> None:
        """Raise MissingAssetError unless every key resolves to a file."""
        missing = self.missing(keys)
        if missing:
            raise MissingAssetError(missing)
