from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import combinations
from typing import Iterable, Sequence

import numpy as np

from .colorspace import (
    hex_to_rgb,
    lab_distance,
    rgb_array_to_lab,
    rgb_to_hex,
    rgb_to_lab,
    round_half_up,
    round_half_up_array,
)
from .models import (
    ColorError,
    ColorRecipe,
    ColorRecipeResponse,
    MixColor,
    PaintColor,
)
from .palette import FIXED_PAINT_PALETTE, THREE_COLOR_PRIMARIES

logger = logging.getLogger(__name__)

ERROR_METHOD = "delta_e_approx"
TWO_COLOR_RATIOS: tuple[int, ...] = tuple(range(10, 100, 10))
THREE_COLOR_PATTERNS: tuple[tuple[int, int, int], ...] = (
    (50, 30, 20),
    (40, 40, 20),
    (60, 25, 15),
    (45, 35, 20),
)
MAX_RECIPES = 2


@dataclass(frozen=True)
class _Candidate:
    paints: tuple[PaintColor, ...]
    ratios: tuple[int, ...]


@dataclass(frozen=True)
class _SearchResult:
    candidate: _Candidate
    mixed_rgb: tuple[int, int, int]
    distance: float


class MixRecipeSolver:
    """Brute-force search for paint mixtures closest to a target color.

    Mixtures are modelled as a linear blend of the paints' RGB values weighted
    by integer percentages, and ranked by Euclidean distance in CIE L*a*b*.
    The search space is fixed, so results are deterministic; on equal
    distances the candidate enumerated first wins.
    """

    def __init__(
        self,
        palette: Sequence[PaintColor] = FIXED_PAINT_PALETTE,
        primaries: Sequence[PaintColor] = THREE_COLOR_PRIMARIES,
        two_color_ratios: Sequence[int] = TWO_COLOR_RATIOS,
        three_color_patterns: Sequence[tuple[int, int, int]] = THREE_COLOR_PATTERNS,
    ) -> None:
        self.palette = tuple(palette)
        self.primaries = tuple(primaries)
        self.two_color_ratios = tuple(two_color_ratios)
        self.three_color_patterns = tuple(three_color_patterns)

    def solve(self, target_hex: str) -> ColorRecipeResponse:
        target_rgb = hex_to_rgb(target_hex)
        target_lab = np.asarray(rgb_to_lab(target_rgb), dtype=np.float64)

        recipes: list[ColorRecipe] = []

        best_two = _search(self._two_color_candidates(), target_lab)
        if best_two is not None:
            recipes.append(_build_recipe("best", best_two))

        best_three = _search(self._three_color_candidates(), target_lab)
        if best_three is not None:
            recipes.append(_build_recipe("alt", best_three))

        logger.debug("solved %s with %d recipe(s)", target_hex, len(recipes))
        return ColorRecipeResponse(target=target_hex, recipes=recipes[:MAX_RECIPES])

    def solve_many(
        self, target_hexes: Iterable[str]
    ) -> list[tuple[str, ColorRecipeResponse]]:
        return [(target, self.solve(target)) for target in target_hexes]

    def _two_color_candidates(self) -> list[_Candidate]:
        return [
            _Candidate(paints=(first, second), ratios=(ratio, 100 - ratio))
            for first, second in combinations(self.palette, 2)
            for ratio in self.two_color_ratios
        ]

    def _three_color_candidates(self) -> list[_Candidate]:
        return [
            _Candidate(paints=triple, ratios=tuple(pattern))
            for triple in combinations(self.primaries, 3)
            for pattern in self.three_color_patterns
        ]


def _search(candidates: list[_Candidate], target_lab: np.ndarray) -> _SearchResult | None:
    if not candidates:
        return None

    blends = round_half_up_array(
        np.asarray(
            [_blend_components(candidate) for candidate in candidates],
            dtype=np.float64,
        )
    )
    distances = lab_distance(rgb_array_to_lab(blends), target_lab)
    # argmin keeps the first of equal minima, i.e. enumeration order.
    best = int(np.argmin(distances))
    mixed = blends[best]
    return _SearchResult(
        candidate=candidates[best],
        mixed_rgb=(int(mixed[0]), int(mixed[1]), int(mixed[2])),
        distance=float(distances[best]),
    )


def _blend_components(candidate: _Candidate) -> np.ndarray:
    weighted = np.zeros(3, dtype=np.float64)
    for paint, ratio in zip(candidate.paints, candidate.ratios):
        weighted += np.asarray(paint.rgb, dtype=np.float64) * ratio
    return weighted / 100.0


def _build_recipe(name: str, result: _SearchResult) -> ColorRecipe:
    mix = [
        MixColor(name=paint.name, hex=paint.hex, ratio=int(ratio))
        for paint, ratio in zip(result.candidate.paints, result.candidate.ratios)
    ]
    return ColorRecipe(
        name=name,
        mix=mix,
        order=[color.name for color in _by_ratio(mix)],
        estimated_result_hex=rgb_to_hex(result.mixed_rgb),
        estimated_error=ColorError(
            method=ERROR_METHOD, value=round_half_up(result.distance, 1)
        ),
        sentence_ja=mixing_instruction(mix),
    )


def _by_ratio(mix: Sequence[MixColor]) -> list[MixColor]:
    return sorted(mix, key=lambda color: color.ratio, reverse=True)


def mixing_instruction(mix: Sequence[MixColor]) -> str:
    if len(mix) == 2:
        first, second = mix
        # On an even split the second paint is the base.
        base, other = (first, second) if first.ratio > second.ratio else (second, first)
        return f"{base.name}をベースに{other.name}を{other.ratio}%加えて混ぜます。"
    if len(mix) == 3:
        base, second, third = _by_ratio(mix)
        return (
            f"{base.name}をベースに、{second.name}を{second.ratio}%、"
            f"{third.name}を{third.ratio}%加えて混ぜます。"
        )
    return "指定の比率で混色してください。"


_DEFAULT_SOLVER = MixRecipeSolver()


def calculate_color_recipe(target_hex: str) -> ColorRecipeResponse:
    return _DEFAULT_SOLVER.solve(target_hex)
