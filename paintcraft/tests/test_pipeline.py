from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from paintcraft.src.color_engine.extract import PaletteExtractor
from paintcraft.src.color_engine.models import Material
from paintcraft.src.color_engine.pipeline import ColorPaletteService


def _write_image(path, array):
    Image.fromarray(array.astype(np.uint8)).save(path)


def test_solid_image_produces_single_color_palette(tmp_path):
    image = np.zeros((120, 120, 3), dtype=np.uint8)
    image[:, :] = [180, 50, 40]
    image_path = tmp_path / "solid.png"
    _write_image(image_path, image)

    service = ColorPaletteService(random_state=7)
    response = service.run(str(image_path), material="acrylic", max_colors=4)
    payload = response.to_dict()

    assert payload["extractionMethod"] == "kmeans"
    assert payload["material"] == "acrylic"
    assert payload["palette"]["dominantColor"]["hex"] == "#B43228"
    assert {c["hex"] for c in payload["palette"]["colors"]} == {"#B43228"}


def test_bicolor_returns_stable_proportions(tmp_path):
    image = np.zeros((100, 100, 3), dtype=np.uint8)
    image[:, :70] = [200, 30, 30]
    image[:, 70:] = [30, 60, 200]
    image_path = tmp_path / "bicolor.png"
    _write_image(image_path, image)

    service = ColorPaletteService(random_state=7)
    palette = service.run(image_path, material=Material.WATERCOLOR, max_colors=3).palette

    assert abs(palette.dominant_color.frequency - 0.7) < 0.10
    assert palette.dominant_color.rgb[0] > palette.dominant_color.rgb[2]
    assert palette.to_dict()["temperature"] in {"warm", "neutral"}


def test_repeated_runs_are_deterministic(tmp_path):
    rng = np.random.default_rng(0)
    image_path = tmp_path / "noise.png"
    _write_image(image_path, rng.integers(0, 256, size=(64, 64, 3)))

    service = ColorPaletteService(extractor=PaletteExtractor(random_state=123))
    first = service.run(image_path, max_colors=6).to_dict()
    second = service.run(image_path, max_colors=6).to_dict()

    assert first == second
    assert first["material"] is None


def test_missing_image_propagates_loading_error(tmp_path):
    service = ColorPaletteService()

    with pytest.raises(FileNotFoundError):
        service.run(tmp_path / "missing.png")
