from __future__ import annotations

import math

import numpy as np

from .colorspace import rgb_to_hex, round_half_up
from .models import (
    RGB,
    BasicColorShare,
    ColorAnalysis,
    Material,
    MaterialTechnique,
    MixingRecipe,
)

BASIC_COLORS: tuple[tuple[str, RGB], ...] = (
    ("赤", (255, 0, 0)),
    ("青", (0, 0, 255)),
    ("黄", (255, 255, 0)),
    ("白", (255, 255, 255)),
    ("黒", (0, 0, 0)),
)
MIN_SHARE = 5
MAX_SHARES = 4
DOMINANT_SHARE = 20
_MAX_RGB_DISTANCE = math.sqrt(3 * 255 * 255)

MATERIAL_STEPS: dict[Material, str] = {
    Material.WATERCOLOR: "少量の水で薄めながら透明感を調整",
    Material.ACRYLIC: "よく混ぜて均一な色味を作る",
    Material.COLORED_PENCIL: "薄い色から重ね塗りで濃度を調整",
    Material.PENCIL: "筆圧で濃淡を調整",
}

MATERIAL_TECHNIQUES: dict[Material, MaterialTechnique] = {
    Material.WATERCOLOR: MaterialTechnique(
        technique="透明水彩での混色",
        tips=[
            "水を多めに使って透明感を保つ",
            "紙が乾く前に色を重ねてにじみ効果を活用",
            "明るい色から暗い色へ順番に重ねる",
        ],
        warnings=["一度濃くすると薄くできないので注意"],
    ),
    Material.ACRYLIC: MaterialTechnique(
        technique="アクリル絵の具での混色",
        tips=[
            "パレット上で十分に混ぜ合わせる",
            "乾燥が早いので手早く作業",
            "白を加えて明度を調整",
        ],
        warnings=["乾燥後は色が少し濃くなることがある"],
    ),
    Material.COLORED_PENCIL: MaterialTechnique(
        technique="色鉛筆での色作り",
        tips=[
            "薄い圧力で重ね塗りして色を作る",
            "円を描くように塗って均一に",
            "異なる色を重ねて新しい色を作る",
        ],
        warnings=["濃く塗りすぎると修正が困難"],
    ),
    Material.PENCIL: MaterialTechnique(
        technique="鉛筆での階調表現",
        tips=[
            "筆圧でグラデーションを作る",
            "ティッシュでぼかして柔らかい印象に",
            "消しゴムでハイライトを作る",
        ],
    ),
}


def generate_mixing_recipe(
    color: ColorAnalysis | RGB, material: Material | str
) -> MixingRecipe:
    """Describe how to approach ``color`` with basic paints for one material."""
    material = Material(material)
    rgb = color.rgb if isinstance(color, ColorAnalysis) else tuple(color[:3])

    shares = basic_color_mixture(rgb)
    return MixingRecipe(
        basic_colors=shares,
        steps=mixing_steps(shares, material),
        material=material,
        technique=MATERIAL_TECHNIQUES[material],
    )


def basic_color_mixture(rgb: RGB) -> list[BasicColorShare]:
    source = np.asarray(rgb, dtype=np.float64)
    raw: list[int] = []
    for _, basic in BASIC_COLORS:
        distance = float(np.linalg.norm(source - np.asarray(basic, dtype=np.float64)))
        similarity = 1.0 - distance / _MAX_RGB_DISTANCE
        raw.append(max(0, int(round_half_up(similarity * 100.0))))

    total = sum(raw)
    if total > 0:
        raw = [int(round_half_up(value / total * 100.0)) for value in raw]

    shares = [
        BasicColorShare(name=name, ratio=ratio, hex=rgb_to_hex(basic))
        for (name, basic), ratio in zip(BASIC_COLORS, raw)
    ]
    return [share for share in shares if share.ratio > MIN_SHARE][:MAX_SHARES]


def mixing_steps(shares: list[BasicColorShare], material: Material) -> list[str]:
    dominant = [share for share in shares if share.ratio >= DOMINANT_SHARE]
    steps: list[str] = []

    if len(dominant) == 1:
        steps.append(f"{dominant[0].name}をベースとして使用")
    elif len(dominant) >= 2:
        first, second = dominant[0], dominant[1]
        steps.append(
            f"まず{first.name}（{first.ratio}%）と{second.name}（{second.ratio}%）を混合"
        )
        if len(dominant) > 2:
            steps.append(f"少しずつ{dominant[2].name}を加えて調整")

    steps.append(MATERIAL_STEPS[material])
    return steps
