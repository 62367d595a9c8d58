from __future__ import annotations

import numpy as np

from paintcraft.src.color_engine.models import PixelBuffer
from paintcraft.src.color_engine.quick import extract_image_colors, fallback_image_colors


def _framed_square(size: int = 60, square: int = 20) -> np.ndarray:
    image = np.full((size, size, 3), 255, dtype=np.uint8)
    start = (size - square) // 2
    image[start : start + square, start : start + square] = [255, 0, 0]
    return image


def test_edge_colors_are_reported_as_background_first():
    colors = extract_image_colors(PixelBuffer.from_array(_framed_square()))

    assert [(c.hex, c.name, c.percentage) for c in colors] == [
        ("#F8F8F8", "白（背景）", 89),
        ("#F80000", "赤", 11),
    ]


def test_color_count_and_percentages_are_bounded():
    rng = np.random.default_rng(4)
    image = rng.integers(0, 256, size=(200, 300, 3), dtype=np.uint8)

    colors = extract_image_colors(PixelBuffer.from_array(image))

    assert 1 <= len(colors) <= 8
    assert len({c.hex for c in colors}) == len(colors)
    assert all(1 <= c.percentage <= 100 for c in colors)
    assert sum(c.name.endswith("（背景）") for c in colors) <= 3


def test_unreadable_buffer_uses_static_colors():
    buffer = PixelBuffer(data=b"", width=0, height=0, channels=3)

    colors = extract_image_colors(buffer)

    assert colors == fallback_image_colors()
    assert colors[0].hex == "#8B4513"
    assert colors[0].percentage == 25
