from __future__ import annotations

from .models import ImageColor, StepType

CATEGORY_BACKGROUND = "background"
CATEGORY_SKIN = "skin"
CATEGORY_HAIR = "hair"
CATEGORY_CLOTHING = "clothing"
CATEGORY_ACCESSORIES = "accessories"
CATEGORY_DETAILS = "details"
CATEGORY_OTHER = "other"

STEP_COLOR_MAPPING: dict[StepType, tuple[str, ...]] = {
    StepType.LINEART: (),
    StepType.BACKGROUND: (CATEGORY_BACKGROUND,),
    StepType.SKIN: (CATEGORY_SKIN,),
    StepType.CLOTHING: (CATEGORY_CLOTHING,),
    StepType.HAIR: (CATEGORY_HAIR,),
    StepType.ACCESSORIES: (CATEGORY_ACCESSORIES,),
    StepType.DETAILS: (CATEGORY_DETAILS, CATEGORY_OTHER),
    StepType.MAIN_PART: (CATEGORY_SKIN, CATEGORY_CLOTHING, CATEGORY_HAIR),
    StepType.OTHER: (CATEGORY_OTHER,),
}

STEP_LABELS: dict[StepType, str] = {
    StepType.LINEART: "線画・下書き",
    StepType.BACKGROUND: "背景塗り",
    StepType.SKIN: "肌塗り",
    StepType.CLOTHING: "服・衣装塗り",
    StepType.HAIR: "髪塗り",
    StepType.ACCESSORIES: "小物・アクセサリー塗り",
    StepType.DETAILS: "細部・仕上げ",
    StepType.MAIN_PART: "主要部分塗り",
    StepType.OTHER: "その他",
}


def categorize_color(color: ImageColor) -> list[str]:
    name = color.name.lower()
    hex_value = color.hex.lower()

    def has_any(*keywords: str) -> bool:
        return any(keyword in name for keyword in keywords)

    categories: list[str] = []

    if has_any("背景", "空", "青", "緑", "茶", "灰") or color.percentage > 30:
        categories.append(CATEGORY_BACKGROUND)

    # Bright colors (#Fxxxxx) are skin candidates.
    if has_any("肌", "ベージュ", "薄い", "ピンク") or (
        hex_value.startswith("#f") and len(hex_value) == 7
    ):
        categories.append(CATEGORY_SKIN)

    if has_any("髪", "茶色", "黒", "金", "銀"):
        categories.append(CATEGORY_HAIR)

    if (
        has_any("服", "衣装", "青", "赤", "緑", "紫", "黄")
        or color.percentage > 15
    ):
        categories.append(CATEGORY_CLOTHING)

    if has_any("アクセサリー", "小物", "金", "銀", "白") or color.percentage < 10:
        categories.append(CATEGORY_ACCESSORIES)

    if (
        has_any("黒", "白", "濃い", "薄い")
        or hex_value in ("#000000", "#ffffff")
    ):
        categories.append(CATEGORY_DETAILS)

    if not categories:
        categories.append(CATEGORY_OTHER)
    return categories


def colors_for_step(
    step_type: StepType | str, colors: list[ImageColor]
) -> list[ImageColor]:
    step_type = StepType(step_type)
    if step_type is StepType.LINEART:
        return []

    targets = STEP_COLOR_MAPPING.get(step_type, (CATEGORY_OTHER,))
    selected: list[ImageColor] = []
    for color in colors:
        categories = categorize_color(color)
        if step_type is StepType.MAIN_PART and CATEGORY_BACKGROUND in categories:
            continue
        if any(target in categories for target in targets):
            selected.append(color)

    if not selected:
        non_background = [
            color
            for color in colors
            if CATEGORY_BACKGROUND not in categorize_color(color)
        ]
        return non_background[:3]

    return sorted(selected, key=lambda color: color.percentage, reverse=True)


def step_label(step_type: StepType | str) -> str:
    try:
        return STEP_LABELS[StepType(step_type)]
    except ValueError:
        return str(step_type)
