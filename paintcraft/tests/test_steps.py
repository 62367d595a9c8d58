from __future__ import annotations

import pytest

from paintcraft.src.color_engine.models import ImageColor, StepType
from paintcraft.src.color_engine.steps import (
    categorize_color,
    colors_for_step,
    step_label,
)

BACKGROUND = ImageColor(hex="#F8F8F8", name="白（背景）", percentage=89)
RED = ImageColor(hex="#F80000", name="赤", percentage=11)
HAIR = ImageColor(hex="#5A3A20", name="茶色", percentage=12)
SMALL_GOLD = ImageColor(hex="#C8A028", name="金", percentage=4)


def test_categorize_uses_names_and_coverage():
    assert "background" in categorize_color(BACKGROUND)
    assert "details" in categorize_color(BACKGROUND)
    assert categorize_color(RED) == ["skin", "clothing"]
    assert "hair" in categorize_color(HAIR)
    assert "accessories" in categorize_color(SMALL_GOLD)


def test_uncategorized_colors_fall_into_other():
    plain = ImageColor(hex="#808080", name="混合色", percentage=12)
    assert categorize_color(plain) == ["other"]


def test_lineart_has_no_colors():
    assert colors_for_step("lineart", [BACKGROUND, RED]) == []


def test_main_part_excludes_background():
    assert colors_for_step(StepType.MAIN_PART, [BACKGROUND, RED]) == [RED]


def test_selected_colors_sorted_by_coverage():
    selected = colors_for_step("hair", [SMALL_GOLD, RED, HAIR])
    assert selected == [HAIR, SMALL_GOLD]


def test_empty_selection_falls_back_to_non_background_colors():
    assert colors_for_step("hair", [BACKGROUND, RED]) == [RED]


def test_unknown_step_is_rejected():
    with pytest.raises(ValueError):
        colors_for_step("sky", [RED])


def test_step_labels():
    assert step_label("skin") == "肌塗り"
    assert step_label(StepType.MAIN_PART) == "主要部分塗り"
    assert step_label("unknown") == "unknown"
