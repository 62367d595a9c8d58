from __future__ import annotations

import pytest

from paintcraft.src.color_engine.extract import analyze_color
from paintcraft.src.color_engine.models import Material
from paintcraft.src.color_engine.recipes import basic_color_mixture, generate_mixing_recipe


def test_pure_red_is_mostly_red():
    shares = basic_color_mixture((255, 0, 0))

    assert [(share.name, share.ratio) for share in shares] == [
        ("赤", 45),
        ("青", 8),
        ("黄", 19),
        ("白", 8),
    ]
    assert shares[0].hex == "#FF0000"


def test_mid_gray_spreads_evenly():
    shares = basic_color_mixture((128, 128, 128))

    assert [share.ratio for share in shares] == [20, 20, 20, 20]


def test_single_dominant_share_becomes_the_base():
    recipe = generate_mixing_recipe((255, 0, 0), "watercolor")

    assert recipe.material is Material.WATERCOLOR
    assert recipe.steps == ["赤をベースとして使用", "少量の水で薄めながら透明感を調整"]


def test_several_dominant_shares_are_mixed_first():
    recipe = generate_mixing_recipe(analyze_color((128, 128, 128), 1.0), Material.ACRYLIC)

    assert recipe.steps == [
        "まず赤（20%）と青（20%）を混合",
        "少しずつ黄を加えて調整",
        "よく混ぜて均一な色味を作る",
    ]


def test_recipe_payload_is_keyed_by_material():
    payload = generate_mixing_recipe((255, 0, 0), "watercolor").to_dict()

    assert set(payload) == {"basicColors", "steps", "materialSpecific"}
    technique = payload["materialSpecific"]["watercolor"]
    assert technique["technique"] == "透明水彩での混色"
    assert len(technique["tips"]) == 3
    assert technique["warnings"] == ["一度濃くすると薄くできないので注意"]


def test_pencil_technique_has_no_warnings():
    payload = generate_mixing_recipe((40, 40, 40), "pencil").to_dict()

    assert "warnings" not in payload["materialSpecific"]["pencil"]
    assert payload["steps"][-1] == "筆圧で濃淡を調整"


def test_unknown_material_is_rejected():
    with pytest.raises(ValueError):
        generate_mixing_recipe((255, 0, 0), "oil")
