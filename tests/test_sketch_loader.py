"""
Tests for sketch loader.
"""

import base64
from io import BytesIO

import pytest
from PIL import Image

from sketch2site.io.sketch_loader import SketchLoader


@pytest.fixture
def sample_sketches(tmp_path):
    """Create sample sketch images for testing."""
    sizes = {
        "small": (375, 687),
        "wide": (4000, 1000),
    }

    paths = {}
    for name, size in sizes.items():
        image = Image.new("RGBA", size, color="white")
        file_path = tmp_path / f"{name}.png"
        image.save(file_path)
        paths[name] = file_path

    return paths


def test_load_image(sample_sketches):
    loader = SketchLoader()

    image = loader.load_image(sample_sketches["small"])

    assert image.mode == "RGB"
    assert image.size == (375, 687)


def test_load_missing_image(tmp_path):
    loader = SketchLoader()

    with pytest.raises(FileNotFoundError):
        loader.load_image(tmp_path / "missing.png")


def test_normalize_downscales_large_sketch(sample_sketches):
    loader = SketchLoader(max_edge=2000)

    image = loader.normalize_sketch(loader.load_image(sample_sketches["wide"]))

    assert image.size == (2000, 500)


def test_normalize_keeps_small_sketch(sample_sketches):
    loader = SketchLoader(max_edge=2000)

    image = loader.normalize_sketch(loader.load_image(sample_sketches["small"]))

    assert image.size == (375, 687)


def test_load_base64(sample_sketches):
    loader = SketchLoader(max_edge=1000)

    encoded = loader.load_base64(sample_sketches["wide"])

    # Ensure the payload decodes to the normalized image
    image = Image.open(BytesIO(base64.b64decode(encoded)))
    assert image.size == (1000, 250)
    assert image.format == "PNG"


def test_strip_data_url():
    assert SketchLoader.strip_data_url("data:image/png;base64,QUJD") == "QUJD"
    assert SketchLoader.strip_data_url("  QUJD\n") == "QUJD"


def test_data_url_round_trip():
    data_url = SketchLoader.to_data_url("QUJD", "jpeg")

    assert data_url == "data:image/jpeg;base64,QUJD"
    assert SketchLoader.strip_data_url(data_url) == "QUJD"
