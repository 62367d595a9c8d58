from __future__ import annotations

from collections.abc import Iterable, Mapping

from .colorspace import ColorValidationError, hex_to_rgb, rgb_to_hex
from .models import PaintColor


def build_paint_palette(
    records: Iterable[Mapping[str, object]], source: str = "palette"
) -> tuple[PaintColor, ...]:
    entries: list[PaintColor] = []
    for idx, record in enumerate(records, start=1):
        entries.append(_parse_entry(record, f"{source}:{idx}"))
    return tuple(entries)


def _parse_entry(raw_entry: Mapping[str, object], location: str) -> PaintColor:
    normalized: dict[str, object] = {
        str(key).strip().lower(): value
        for key, value in raw_entry.items()
        if key is not None
    }

    name = _as_clean_str(normalized.get("name"))
    if not name:
        raise ColorValidationError(f"{location}: missing required field 'name'")

    hex_value = _as_clean_str(normalized.get("hex"))
    if not hex_value:
        raise ColorValidationError(f"{location}: missing required field 'hex'")

    try:
        rgb = hex_to_rgb(hex_value)
    except ColorValidationError as exc:
        raise ColorValidationError(f"{location}: {exc}") from exc
    return PaintColor(name=name, hex=rgb_to_hex(rgb), rgb=rgb)


def _as_clean_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


FIXED_PAINT_PALETTE: tuple[PaintColor, ...] = build_paint_palette(
    [
        {"name": "ホワイト", "hex": "#FFFFFF"},
        {"name": "パーマネントレッド", "hex": "#AD0036"},
        {"name": "コバルトブルー", "hex": "#005EAD"},
        {"name": "ジェットブラック", "hex": "#001400"},
        {"name": "バーナントシェナー", "hex": "#864028"},
        {"name": "バイオレット", "hex": "#7F1084"},
        {"name": "パーマネントイエロー", "hex": "#FFF100"},
        {"name": "パーマネントグリーンライト", "hex": "#00A95F"},
        {"name": "パーマネントグリーンミドル", "hex": "#00703B"},
        {"name": "パーマネントイエローディープ", "hex": "#FBCE28"},
        {"name": "パーマネントスカーレット", "hex": "#C8002E"},
        {"name": "スカイブルー", "hex": "#007FC9"},
    ],
    source="fixed_paint_palette",
)


def find_paint(
    name: str, palette: Iterable[PaintColor] = FIXED_PAINT_PALETTE
) -> PaintColor:
    for paint in palette:
        if paint.name == name:
            return paint
    raise KeyError(f"paint '{name}' is not in the palette")


THREE_COLOR_PRIMARIES: tuple[PaintColor, ...] = tuple(
    find_paint(name)
    for name in (
        "ホワイト",
        "ジェットブラック",
        "パーマネントレッド",
        "コバルトブルー",
        "パーマネントイエロー",
    )
)

# (hex, name, frequency) used when every extraction strategy fails.
STATIC_FALLBACK_COLORS: tuple[tuple[str, str, float], ...] = (
    ("#8B4513", "茶色", 0.25),
    ("#228B22", "緑", 0.20),
    ("#4169E1", "青", 0.15),
    ("#FFFFFF", "白", 0.12),
    ("#000000", "黒", 0.10),
    ("#FF6347", "オレンジ", 0.08),
    ("#FFD700", "黄色", 0.06),
    ("#9370DB", "紫", 0.04),
)
