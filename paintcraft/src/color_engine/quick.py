from __future__ import annotations

import logging

import numpy as np
from PIL import Image

from .colorspace import rgb_to_hex, round_half_up
from .models import ImageColor, PixelBuffer
from .naming import color_name
from .palette import STATIC_FALLBACK_COLORS

logger = logging.getLogger(__name__)

WORK_SIDE = 120
QUANT_STEP = 8
EDGE_RATIO = 0.2
MAX_BACKGROUND = 3
MAX_COLORS = 8
BACKGROUND_SUFFIX = "（背景）"


def extract_image_colors(buffer: PixelBuffer) -> list[ImageColor]:
    """Fast histogram-based color listing that reports edge colors as background.

    The image is shrunk to fit ``WORK_SIDE`` and quantized to multiples of
    ``QUANT_STEP``. Up to ``MAX_BACKGROUND`` of the most common colors in the
    outer ``EDGE_RATIO`` band come first, followed by the most common colors
    of the whole image, ``MAX_COLORS`` in total.
    """
    try:
        work = _resize_inside(buffer.to_rgb_array(), WORK_SIDE)
    except (ValueError, OSError) as exc:
        logger.warning("quick color extraction failed, using fallback: %s", exc)
        return fallback_image_colors()

    height, width = work.shape[:2]
    quantized = (work // QUANT_STEP) * QUANT_STEP

    all_keys, all_counts = _ranked_colors(quantized.reshape(-1, 3))
    total = float(height * width)
    counts_by_key = {key: int(count) for key, count in zip(all_keys, all_counts)}

    edge = _edge_mask(height, width)
    background_keys, _ = _ranked_colors(quantized[edge].reshape(-1, 3))

    colors: list[ImageColor] = []
    seen: set[tuple[int, int, int]] = set()

    for key in background_keys[:MAX_BACKGROUND]:
        colors.append(_image_color(key, counts_by_key.get(key, 0), total, background=True))
        seen.add(key)

    for key, count in zip(all_keys[:MAX_COLORS], all_counts[:MAX_COLORS]):
        if key in seen or len(colors) >= MAX_COLORS:
            continue
        colors.append(_image_color(key, int(count), total))
        seen.add(key)

    return colors


def fallback_image_colors() -> list[ImageColor]:
    return [
        ImageColor(hex=hex_value, name=name, percentage=int(round_half_up(frequency * 100)))
        for hex_value, name, frequency in STATIC_FALLBACK_COLORS
    ]


def _ranked_colors(
    pixels: np.ndarray,
) -> tuple[list[tuple[int, int, int]], list[int]]:
    if pixels.shape[0] == 0:
        return [], []
    keys, counts = np.unique(pixels, axis=0, return_counts=True)
    order = np.argsort(-counts, kind="stable")
    ranked_keys = [
        (int(keys[i][0]), int(keys[i][1]), int(keys[i][2])) for i in order
    ]
    return ranked_keys, [int(counts[i]) for i in order]


def _edge_mask(height: int, width: int) -> np.ndarray:
    threshold = min(width, height) * EDGE_RATIO
    ys, xs = np.mgrid[0:height, 0:width]
    return (
        (xs < threshold)
        | (xs > width - threshold)
        | (ys < threshold)
        | (ys > height - threshold)
    )


def _image_color(
    key: tuple[int, int, int], count: int, total: float, background: bool = False
) -> ImageColor:
    name = color_name(key)
    if background:
        name += BACKGROUND_SUFFIX
    percentage = int(round_half_up(count / total * 100.0)) if total else 0
    return ImageColor(hex=rgb_to_hex(key), name=name, percentage=max(1, percentage))


def _resize_inside(image_rgb: np.ndarray, side: int) -> np.ndarray:
    image = Image.fromarray(np.ascontiguousarray(image_rgb, dtype=np.uint8))
    if max(image.size) > side:
        image.thumbnail((side, side), Image.Resampling.BILINEAR)
    return np.asarray(image.convert("RGB"), dtype=np.uint8)
