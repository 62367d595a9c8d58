from __future__ import annotations

import math
import re

import numpy as np
from skimage import color as skcolor

from .models import HSV, LAB, RGB

_HEX_PATTERN = re.compile(r"^#?([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})$")


class ColorValidationError(ValueError):
    pass


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like JavaScript's ``Math.round``: halves go towards +infinity."""
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def round_half_up_array(values: np.ndarray) -> np.ndarray:
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def hex_to_rgb(value: str) -> RGB:
    if not isinstance(value, str):
        raise ColorValidationError(f"hex color must be a string, got {type(value).__name__}")
    match = _HEX_PATTERN.match(value.strip())
    if match is None:
        raise ColorValidationError(f"invalid hex color '{value}'")
    return (
        int(match.group(1), 16),
        int(match.group(2), 16),
        int(match.group(3), 16),
    )


def rgb_to_hex(rgb: tuple[float, float, float]) -> str:
    channels = [int(min(255, max(0, round_half_up(float(c))))) for c in rgb[:3]]
    return f"#{channels[0]:02X}{channels[1]:02X}{channels[2]:02X}"


def rgb_to_hsv(rgb: RGB) -> HSV:
    rgb_arr = np.asarray(rgb[:3], dtype=np.float64).reshape(1, 1, 3) / 255.0
    h, s, v = skcolor.rgb2hsv(rgb_arr).reshape(3)
    hue = int(round_half_up(float(h) * 360.0)) % 360
    return (
        hue,
        int(round_half_up(float(s) * 100.0)),
        int(round_half_up(float(v) * 100.0)),
    )


def hsv_to_rgb(hsv: HSV) -> RGB:
    h, s, v = hsv
    hsv_arr = np.array(
        [(float(h) % 360.0) / 360.0, float(s) / 100.0, float(v) / 100.0],
        dtype=np.float64,
    ).reshape(1, 1, 3)
    rgb = skcolor.hsv2rgb(hsv_arr).reshape(3)
    clipped = np.clip(round_half_up_array(rgb * 255.0), 0, 255).astype(np.uint8)
    return int(clipped[0]), int(clipped[1]), int(clipped[2])


def rgb_to_lab(rgb: RGB) -> LAB:
    lab = rgb_array_to_lab(np.asarray(rgb[:3], dtype=np.float64).reshape(1, 3))
    return float(lab[0, 0]), float(lab[0, 1]), float(lab[0, 2])


def rgb_array_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert an ``(N, 3)`` array of 0-255 RGB rows to CIE L*a*b* (D65)."""
    rgb_arr = np.asarray(rgb, dtype=np.float64).reshape(-1, 1, 3) / 255.0
    return skcolor.rgb2lab(np.clip(rgb_arr, 0.0, 1.0)).reshape(-1, 3)


def lab_distance(a: LAB | np.ndarray, b: LAB | np.ndarray) -> float | np.ndarray:
    # deltaE_cie76 is the plain Euclidean distance in L*a*b*.
    distance = skcolor.deltaE_cie76(
        np.asarray(a, dtype=np.float64), np.asarray(b, dtype=np.float64)
    )
    if np.ndim(distance) == 0:
        return float(distance)
    return distance
