from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .colorspace import rgb_to_hsv
from .models import RGB

BLACK_MAX_CHANNEL = 30
BLACK_MAX_VALUE = 15
WHITE_MIN_CHANNEL = 240
GRAY_MAX_SPREAD = 30
LIGHT_GRAY_MIN = 180
MID_GRAY_MIN = 100
BROWN_MAX_VALUE = 65
BROWN_MIN_RED_BLUE_RATIO = 0.2
BROWN_HUE_RANGE = (15, 45)
PINK_MAX_SATURATION = 50
PINK_MIN_VALUE = 70
GREEN_MIN_DOMINANCE = 20
GREEN_NEIGHBOUR_RATIO = 0.8
GREEN_MINOR_RATIO = 0.6

FALLBACK_NAME = "混合色"


@dataclass(frozen=True)
class _Sample:
    r: int
    g: int
    b: int
    h: int
    s: int
    v: int

    @property
    def high(self) -> int:
        return max(self.r, self.g, self.b)

    @property
    def low(self) -> int:
        return min(self.r, self.g, self.b)

    @property
    def spread(self) -> int:
        return self.high - self.low

    @property
    def green_dominance(self) -> int:
        return self.g - max(self.r, self.b)


def _is_brown(c: _Sample) -> bool:
    if not (c.r >= c.g > c.b) or c.r == 0:
        return False
    lo, hi = BROWN_HUE_RANGE
    return (
        c.v <= BROWN_MAX_VALUE
        and lo <= c.h < hi
        and (c.r - c.b) / c.r > BROWN_MIN_RED_BLUE_RATIO
    )


def _is_light_red(c: _Sample) -> bool:
    return (
        (c.h < 15 or c.h >= 345)
        and c.s < PINK_MAX_SATURATION
        and c.v > PINK_MIN_VALUE
    )


def _green_leans(c: _Sample, towards: str) -> bool:
    if c.green_dominance <= GREEN_MIN_DOMINANCE:
        return False
    near, far = (c.r, c.b) if towards == "yellow" else (c.b, c.r)
    return near > c.g * GREEN_NEIGHBOUR_RATIO and far < c.g * GREEN_MINOR_RATIO


Rule = tuple[Callable[[_Sample], bool], str]

# Evaluated in order, first match wins.
NAMING_RULES: tuple[Rule, ...] = (
    (lambda c: c.high < BLACK_MAX_CHANNEL or c.v < BLACK_MAX_VALUE, "黒"),
    (lambda c: c.low > WHITE_MIN_CHANNEL, "白"),
    (lambda c: c.spread < GRAY_MAX_SPREAD and c.high > LIGHT_GRAY_MIN, "薄いグレー"),
    (lambda c: c.spread < GRAY_MAX_SPREAD and c.high > MID_GRAY_MIN, "グレー"),
    (lambda c: c.spread < GRAY_MAX_SPREAD, "濃いグレー"),
    (_is_brown, "茶色"),
    (_is_light_red, "ピンク"),
    (lambda c: c.h < 15 or c.h >= 345, "赤"),
    (lambda c: c.h < 40, "オレンジ"),
    (lambda c: c.h < 70, "黄"),
    (lambda c: _green_leans(c, "yellow"), "黄緑"),
    (lambda c: _green_leans(c, "blue"), "青緑"),
    (lambda c: c.h < 165, "緑"),
    (lambda c: c.h < 195, "水色"),
    (lambda c: c.h < 255, "青"),
    (lambda c: c.h < 320, "紫"),
    (lambda c: c.h < 345, "ピンク"),
)


def color_name(rgb: RGB) -> str:
    r, g, b = (int(v) for v in rgb[:3])
    h, s, v = rgb_to_hsv((r, g, b))
    sample = _Sample(r=r, g=g, b=b, h=h, s=s, v=v)
    for predicate, label in NAMING_RULES:
        if predicate(sample):
            return label
    return FALLBACK_NAME
