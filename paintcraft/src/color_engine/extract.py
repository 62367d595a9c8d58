from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Callable

import numpy as np
from PIL import Image, ImageOps
from sklearn.cluster import KMeans
from sklearn.exceptions import ConvergenceWarning

from .colorspace import (
    hex_to_rgb,
    hsv_to_rgb,
    rgb_to_hex,
    rgb_to_hsv,
    round_half_up,
    round_half_up_array,
)
from .models import RGB, ColorAnalysis, ColorPalette, PixelBuffer
from .naming import color_name
from .palette import STATIC_FALLBACK_COLORS

logger = logging.getLogger(__name__)

METHOD_KMEANS = "kmeans"
METHOD_DOMINANT = "dominant"
METHOD_FALLBACK = "fallback"

COMPLEMENTARY_FREQUENCY = 0.1
WARM_HUE_BANDS = ((0, 60), (300, 360))
COOL_HUE_BANDS = ((120, 240),)
TEMPERATURE_RATIO = 1.5


class ExtractionTierError(RuntimeError):
    """A single extraction strategy could not produce colors."""


@dataclass(frozen=True)
class ColorPaletteResult:
    palette: ColorPalette
    extraction_method: str


@dataclass
class PaletteExtractor:
    work_size: int = 200
    max_iterations: int = 20
    convergence_threshold: float = 1.0
    random_state: int | None = None
    min_colors: int = 3
    max_colors: int = 12
    dominant_bin_size: int = 8

    def extract(self, buffer: PixelBuffer, max_colors: int = 8) -> ColorPaletteResult:
        k = self._clamp_color_count(max_colors)

        strategies: list[tuple[str, Callable[[PixelBuffer, int], list[ColorAnalysis]]]] = [
            (METHOD_KMEANS, self._extract_kmeans),
            (METHOD_DOMINANT, self._extract_dominant),
        ]
        for method, strategy in strategies:
            try:
                colors = strategy(buffer, k)
            except ExtractionTierError as exc:
                logger.warning("%s extraction failed, falling back: %s", method, exc)
                continue
            return ColorPaletteResult(build_palette(colors), method)

        return ColorPaletteResult(build_palette(fallback_colors()), METHOD_FALLBACK)

    def _clamp_color_count(self, requested: int) -> int:
        try:
            value = int(requested)
        except (TypeError, ValueError):
            value = self.max_colors
        return max(self.min_colors, min(self.max_colors, value))

    def _extract_kmeans(self, buffer: PixelBuffer, k: int) -> list[ColorAnalysis]:
        try:
            work = _resize_cover(buffer.to_rgb_array(), self.work_size)
        except (ValueError, OSError) as exc:
            raise ExtractionTierError(f"could not prepare pixels: {exc}") from exc

        points = work.reshape(-1, 3).astype(np.float64)
        try:
            centers, counts = self._cluster(points, k)
        except (ValueError, FloatingPointError) as exc:
            raise ExtractionTierError(f"clustering failed: {exc}") from exc

        total = float(points.shape[0])
        colors: list[ColorAnalysis] = []
        for center, count in zip(centers, counts):
            # Clusters left empty after the final assignment are dropped.
            if count == 0:
                continue
            rgb = _to_rgb(center)
            colors.append(analyze_color(rgb, float(count) / total))

        if not colors:
            raise ExtractionTierError("clustering produced no populated clusters")
        return colors

    def _cluster(self, points: np.ndarray, k: int) -> tuple[np.ndarray, np.ndarray]:
        if not np.all(np.isfinite(points)):
            raise ValueError("pixel samples contain non-finite values")

        # sklearn scales ``tol`` by the mean per-feature variance and compares it
        # with the summed squared centroid shift.
        variance = float(np.mean(np.var(points, axis=0)))
        tol = (self.convergence_threshold**2) / variance if variance > 0 else 0.0

        model = KMeans(
            n_clusters=k,
            init="random",
            n_init=1,
            max_iter=self.max_iterations,
            tol=tol,
            algorithm="lloyd",
            random_state=self.random_state,
        )
        with warnings.catch_warnings():
            # Flat images have fewer distinct colors than clusters.
            warnings.simplefilter("ignore", ConvergenceWarning)
            labels = model.fit_predict(points)

        counts = np.bincount(labels, minlength=k)
        logger.debug(
            "kmeans k=%d iterations=%d populated=%d",
            k,
            int(model.n_iter_),
            int(np.count_nonzero(counts)),
        )
        return model.cluster_centers_, counts

    def _extract_dominant(self, buffer: PixelBuffer, k: int) -> list[ColorAnalysis]:
        try:
            pixels = buffer.to_rgb_array().reshape(-1, 3)
        except ValueError as exc:
            raise ExtractionTierError(f"no pixel statistics available: {exc}") from exc
        if pixels.shape[0] == 0:
            raise ExtractionTierError("no pixel statistics available: empty image")

        dominant = dominant_color(pixels, bin_size=self.dominant_bin_size)
        colors = [analyze_color(dominant, 0.4)]

        rng = np.random.default_rng(self.random_state)
        base = np.asarray(dominant, dtype=np.float64)
        for i in range(1, k):
            factor = i * 0.2
            offsets = (rng.random(3) - 0.5) * 100.0 * factor
            variation = _to_rgb(base + offsets)
            colors.append(analyze_color(variation, max(0.1, 0.4 - i * 0.05)))
        return colors


def dominant_color(pixels: np.ndarray, bin_size: int = 8) -> RGB:
    """Mean color of the most populated quantization bin."""
    pixels = np.asarray(pixels, dtype=np.uint8).reshape(-1, 3)
    bins = pixels // max(1, int(bin_size))
    _, inverse, counts = np.unique(
        bins, axis=0, return_inverse=True, return_counts=True
    )
    winner = int(np.argmax(counts))
    members = pixels[inverse.reshape(-1) == winner]
    return _to_rgb(members.mean(axis=0))


def fallback_colors() -> list[ColorAnalysis]:
    return [
        analyze_color(hex_to_rgb(hex_value), frequency, name=name)
        for hex_value, name, frequency in STATIC_FALLBACK_COLORS
    ]


def analyze_color(rgb: RGB, frequency: float, name: str | None = None) -> ColorAnalysis:
    return ColorAnalysis(
        rgb=rgb,
        hsv=rgb_to_hsv(rgb),
        hex=rgb_to_hex(rgb),
        color_name=name if name is not None else color_name(rgb),
        frequency=float(frequency),
    )


def build_palette(colors: list[ColorAnalysis]) -> ColorPalette:
    if not colors:
        raise ValueError("cannot build a palette without colors")

    ordered = sorted(colors, key=lambda color: color.frequency, reverse=True)
    dominant = ordered[0]
    return ColorPalette(
        colors=ordered,
        dominant_color=dominant,
        complementary_colors=complementary_colors(dominant),
        temperature=determine_temperature(ordered),
        complexity=calculate_complexity(ordered),
    )


def complementary_colors(dominant: ColorAnalysis) -> list[ColorAnalysis]:
    h, s, v = dominant.hsv
    hsv = ((h + 180) % 360, s, v)
    rgb = hsv_to_rgb(hsv)
    return [
        ColorAnalysis(
            rgb=rgb,
            hsv=hsv,
            hex=rgb_to_hex(rgb),
            color_name=color_name(rgb),
            frequency=COMPLEMENTARY_FREQUENCY,
        )
    ]


def determine_temperature(colors: list[ColorAnalysis]) -> str:
    warm = 0.0
    cool = 0.0
    for color in colors:
        hue = color.hsv[0]
        if _in_bands(hue, WARM_HUE_BANDS):
            warm += color.frequency
        elif _in_bands(hue, COOL_HUE_BANDS):
            cool += color.frequency

    if warm > cool * TEMPERATURE_RATIO:
        return "warm"
    if cool > warm * TEMPERATURE_RATIO:
        return "cool"
    return "neutral"


def calculate_complexity(colors: list[ColorAnalysis]) -> int:
    saturations = np.asarray([color.hsv[1] for color in colors], dtype=np.float64)
    spread = float(np.std(saturations)) / 100.0 if saturations.size else 0.0
    score = round_half_up(len(colors) * 0.8 + spread * 2.0)
    return int(max(1, min(10, score)))


def _in_bands(hue: int, bands: tuple[tuple[int, int], ...]) -> bool:
    return any(lo <= hue <= hi for lo, hi in bands)


def _resize_cover(image_rgb: np.ndarray, size: int) -> np.ndarray:
    image = Image.fromarray(np.ascontiguousarray(image_rgb, dtype=np.uint8))
    fitted = ImageOps.fit(image, (size, size), Image.Resampling.BILINEAR)
    return np.asarray(fitted.convert("RGB"), dtype=np.uint8)


def _to_rgb(values: np.ndarray) -> RGB:
    clipped = np.clip(round_half_up_array(values), 0, 255).astype(np.uint8)
    return int(clipped[0]), int(clipped[1]), int(clipped[2])
