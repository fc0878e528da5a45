"""Shared fixtures: dashboard screenshots written as small PNGs."""

import pytest
from PIL import Image

from kpi_decks.generator.assets import DEFAULT_IMAGE_FILES, AssetCatalog


def write_png(path, size=(160, 90), color=(200, 210, 225)):
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path, format="PNG")
    return path


@pytest.fixture
def images_dir(tmp_path):
    """A directory holding every image the decks reference."""
    root = tmp_path / "images"
    for filename in DEFAULT_IMAGE_FILES.values():
        write_png(root / filename)
    return root


@pytest.fixture
def assets(images_dir):
    return AssetCatalog(images_dir)
